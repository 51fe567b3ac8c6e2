#!/usr/bin/env python3
"""
Telegram-бот для отслеживания окон респауна боссов.
Убийства пишутся в чат, бот объявляет открытие и закрытие окна.
Настройки из .env файла (BOT_TOKEN, CHANNEL_ID, DATABASE_URL, BOT_TIMEZONE).
"""
import logging
import signal
from datetime import datetime
from functools import partial

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    ContextTypes,
    filters,
)

from respawn_timer.config import ConfigError, Settings, load_settings
from respawn_timer.db import ensure_db_exists, make_engine, make_session_factory
from respawn_timer.dispatcher import HELP_TEXT, CommandDispatcher
from respawn_timer.notifier import TelegramNotifier
from respawn_timer.scheduler import WindowScheduler
from respawn_timer.seed import BOSSES
from respawn_timer.services import Summary, format_summary_text
from respawn_timer.store import BossStore

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    try:
        await update.message.reply_text(HELP_TEXT)
    except Exception as e:
        logger.error(f"Ошибка в cmd_help: {e}", exc_info=True)


async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if message is None or not message.text:
        return
    if update.effective_user and update.effective_user.is_bot:
        return

    settings: Settings = context.bot_data["settings"]
    if settings.channel_id is not None and update.effective_chat.id != settings.channel_id:
        return

    dispatcher: CommandDispatcher = context.bot_data["dispatcher"]
    try:
        reply = await dispatcher.handle(message.text)
    except Exception as e:
        logger.error(f"Ошибка при обработке «{message.text}»: {e}", exc_info=True)
        await message.reply_text(f"❌ Ошибка: {str(e)}")
        return

    if reply is None:
        return
    if isinstance(reply, Summary):
        reply = format_summary_text(reply)
    await message.reply_text(reply)


async def post_init(app: Application, store: BossStore, settings: Settings) -> None:
    """Собирает планировщик и поднимает таймеры из БД."""
    clock = partial(datetime.now, settings.tz)
    notifier = TelegramNotifier(app.bot, settings.channel_id)
    scheduler = WindowScheduler(app.job_queue, notifier, clock)
    app.bot_data["settings"] = settings
    app.bot_data["scheduler"] = scheduler
    app.bot_data["dispatcher"] = CommandDispatcher(
        store, scheduler, clock, implicit_kill=settings.implicit_kill
    )
    scheduler.restore(store.list())


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        raise SystemExit(f"❌ {e}")
    if not settings.bot_token:
        raise SystemExit("❌ Задайте BOT_TOKEN в файле .env")
    logging.getLogger().setLevel(settings.log_level)

    # Ошибка БД на старте — фатальна
    engine = make_engine(settings.database_url)
    ensure_db_exists(engine)
    store = BossStore(make_session_factory(engine), settings.tz)
    store.seed(BOSSES)

    app = (
        Application.builder()
        .token(settings.bot_token)
        .post_init(partial(post_init, store=store, settings=settings))
        .build()
    )
    if app.job_queue is None:
        raise SystemExit("❌ Нужен python-telegram-bot[job-queue]")

    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("start", cmd_help))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, on_message))

    logger.info("✅ Бот запущен")

    try:
        # остановка по Ctrl+C и SIGTERM — штатная, через PTB
        app.run_polling(
            allowed_updates=Update.ALL_TYPES,
            drop_pending_updates=True,
            stop_signals=(signal.SIGINT, signal.SIGTERM),
        )
    except KeyboardInterrupt:
        logger.info("⚠️ Остановка бота по Ctrl+C...")
    except Exception as e:
        logger.error(f"❌ Критическая ошибка: {e}", exc_info=True)
        raise
    finally:
        logger.info("👋 Бот остановлен")


if __name__ == "__main__":
    main()
