"""Отправка объявлений в канал. Ошибки доставки логируются и не пробрасываются."""
import logging

from telegram import Bot

logger = logging.getLogger(__name__)


class TelegramNotifier:
    def __init__(self, bot: Bot, chat_id: int | None):
        self._bot = bot
        self._chat_id = chat_id

    async def send(self, text: str) -> None:
        if self._chat_id is None:
            logger.warning("CHANNEL_ID не задан, объявление пропущено: %s", text)
            return
        try:
            await self._bot.send_message(chat_id=self._chat_id, text=text)
        except Exception as e:
            logger.error(f"Не удалось отправить в {self._chat_id}: {e}", exc_info=True)
