"""Разбор текстовых команд чата: timers, kill <имя>, addboss, убийство по имени."""
import logging
from datetime import datetime
from typing import Callable

from .scheduler import WindowScheduler, format_time_short
from .services import Summary, build_summary, normalize_name
from .store import BossStore

logger = logging.getLogger(__name__)

USAGE_ADDBOSS = "Использование: addboss <имя> <мин_начало> <мин_конец>\nПример: addboss gorgona 60 120"

HELP_TEXT = """
🤖 Команды бота

timers — таймеры всех боссов (сначала те, что в окне)
kill <имя> — зафиксировать убийство «сейчас»
<имя> — то же самое, просто имя босса сообщением
addboss <имя> <мин_начало> <мин_конец> — добавить или перенастроить босса

Окно считается от последнего убийства: через мин_начало минут босс может
появиться, через мин_конец — должен был появиться точно.
"""


class CommandDispatcher:
    def __init__(
        self,
        store: BossStore,
        scheduler: WindowScheduler,
        clock: Callable[[], datetime],
        implicit_kill: bool = True,
    ):
        self._store = store
        self._scheduler = scheduler
        self._clock = clock
        self._implicit_kill = implicit_kill

    async def handle(self, text: str | None) -> str | Summary | None:
        """Ответ на сообщение или None, если сообщение не команда."""
        lower = (text or "").strip().lower()
        if not lower:
            return None

        if lower == "timers":
            return build_summary(self._store.list(), self._clock())

        if lower.startswith("kill "):
            return await self.register_kill(lower[5:])

        if lower.startswith("addboss "):
            return await self.configure(lower.split())

        if self._implicit_kill:
            boss = self._store.get(lower)
            if boss is not None:
                return await self.register_kill(boss.name)
        return None

    async def register_kill(self, raw_name: str) -> str:
        name = normalize_name(raw_name)
        # замок заводим только на известных боссов, иначе _locks растёт от любого текста
        if self._store.get(name) is None:
            return f"Босс {name} не найден."
        async with self._scheduler.lock(name):
            now = self._clock()
            updated = self._store.record_kill(name, now)
            if updated is None:
                return f"Босс {name} не найден."
            self._scheduler.reschedule(updated, now)

        start_at, end_at = updated.window()
        logger.info("Убийство %s зарегистрировано: %s", name, now.isoformat())
        return (
            f"✅ Убийство {name} зарегистрировано.\n"
            f"Окно: {format_time_short(start_at)} – {format_time_short(end_at)}"
        )

    async def configure(self, parts: list[str]) -> str:
        if len(parts) != 4:
            return USAGE_ADDBOSS
        name = normalize_name(parts[1])
        try:
            min_start = int(parts[2])
            min_end = int(parts[3])
        except ValueError:
            return f"❌ Минуты должны быть целыми числами.\n{USAGE_ADDBOSS}"
        if min_start < 0 or min_end < min_start:
            return f"❌ Нужно 0 ≤ мин_начало ≤ мин_конец.\n{USAGE_ADDBOSS}"

        async with self._scheduler.lock(name):
            boss = self._store.upsert(name, min_start, min_end)
            if boss.last_kill_at is not None:
                self._scheduler.reschedule(boss)

        logger.info("Босс %s настроен [%s-%s]", name, min_start, min_end)
        return f"✅ Босс {name} настроен [{min_start}-{min_end}]"
