"""
Планировщик объявлений об окне респауна.

На каждого босса — не больше двух разовых задач в JobQueue: открытие окна
и закрытие окна. Таблица задач живёт только в памяти и целиком
восстанавливается из БД при старте (restore).
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from telegram.ext import ContextTypes

from .services import BossConfig

logger = logging.getLogger(__name__)


class Edge(Enum):
    OPEN = "window_open"
    CLOSE = "window_close"


@dataclass(frozen=True)
class PendingNotification:
    boss_name: str
    edge: Edge
    fire_at: datetime
    last_kill_at: datetime
    window_end: datetime
    job: object  # telegram.ext.Job


def format_time_short(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def render_announcement(entry: PendingNotification) -> str:
    killed = format_time_short(entry.last_kill_at)
    if entry.edge is Edge.OPEN:
        text = f"⚡ {entry.boss_name} входит в окно респауна! (убит в {killed})"
        return text + f"\nОкно закроется в {format_time_short(entry.window_end)}"
    return f"⏳ Окно {entry.boss_name} закрыто! (убит в {killed})"


class WindowScheduler:
    def __init__(self, job_queue, notifier, clock: Callable[[], datetime]):
        self._job_queue = job_queue
        self._notifier = notifier
        self._clock = clock
        self._pending: dict[tuple[str, Edge], PendingNotification] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, boss_name: str) -> asyncio.Lock:
        """Общий замок на босса: регистрация убийства и срабатывание таймера не пересекаются."""
        lock = self._locks.get(boss_name)
        if lock is None:
            lock = self._locks[boss_name] = asyncio.Lock()
        return lock

    def pending(self, boss_name: str, edge: Edge) -> PendingNotification | None:
        return self._pending.get((boss_name, edge))

    def pending_count(self) -> int:
        return len(self._pending)

    def cancel(self, boss_name: str) -> None:
        """Снять оба таймера босса. Если таймеров нет — ничего не делает."""
        for edge in Edge:
            entry = self._pending.pop((boss_name, edge), None)
            if entry is None:
                continue
            try:
                entry.job.schedule_removal()
            except JobLookupError:
                # задача уже ушла на выполнение; _fire увидит, что записи нет
                logger.debug("Таймер %s/%s уже сработал", boss_name, edge.value)

    def reschedule(self, boss: BossConfig, now: datetime | None = None) -> None:
        """
        Перевзвести таймеры босса по снимку из БД.

        Старые таймеры снимаются всегда. Новые ставятся только на границы окна,
        которые строго в будущем; прошедшие границы пропускаются без объявления.
        Повторный вызов с тем же снимком оставляет ровно те же таймеры.
        """
        self.cancel(boss.name)
        window = boss.window()
        if window is None:
            return

        now = now or self._clock()
        start_at, end_at = window
        armed = []
        for edge, fire_at in ((Edge.OPEN, start_at), (Edge.CLOSE, end_at)):
            if fire_at.timestamp() <= now.timestamp():
                logger.debug("%s: граница %s уже прошла (%s)", boss.name, edge.value, fire_at)
                continue
            self._arm(boss, edge, fire_at, end_at)
            armed.append(f"{edge.value}@{format_time_short(fire_at)}")
        if armed:
            logger.info("Таймеры %s: %s", boss.name, ", ".join(armed))

    def _arm(self, boss: BossConfig, edge: Edge, fire_at: datetime, window_end: datetime) -> None:
        job = self._job_queue.run_once(
            self._fire,
            when=fire_at,
            data=(boss.name, edge),
            name=f"{boss.name}:{edge.value}",
        )
        self._pending[(boss.name, edge)] = PendingNotification(
            boss_name=boss.name,
            edge=edge,
            fire_at=fire_at,
            last_kill_at=boss.last_kill_at,
            window_end=window_end,
            job=job,
        )

    async def _fire(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        job = context.job
        boss_name, edge = job.data
        async with self.lock(boss_name):
            entry = self._pending.get((boss_name, edge))
            if entry is None or entry.job is not job:
                # таймер от предыдущего убийства — молчим
                logger.debug("Устаревший таймер %s/%s пропущен", boss_name, edge.value)
                return
            del self._pending[(boss_name, edge)]

        logger.info("Сработал таймер %s/%s", boss_name, edge.value)
        try:
            await self._notifier.send(render_announcement(entry))
        except Exception as e:
            logger.error(f"Ошибка отправки объявления {boss_name}/{edge.value}: {e}", exc_info=True)

    def restore(self, bosses: list[BossConfig]) -> int:
        """Поднять таймеры после рестарта процесса. Возвращает число взведённых таймеров."""
        now = self._clock()
        for boss in bosses:
            if boss.last_kill_at is not None:
                self.reschedule(boss, now)
        count = self.pending_count()
        logger.info("Восстановлено таймеров: %s", count)
        return count
