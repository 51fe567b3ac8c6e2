"""Логика окна респауна: статус босса, формат длительностей, сводка /timers.

Всё здесь — чистые функции: время «сейчас» передаётся параметром.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


@dataclass(frozen=True)
class BossConfig:
    """Снимок записи босса. last_kill_at — timezone-aware или None."""
    name: str
    min_start: int
    min_end: int
    last_kill_at: datetime | None = None

    def window(self) -> tuple[datetime, datetime] | None:
        """
        Абсолютные границы окна (открытие, закрытие) или None без убийства.

        Считаем в UTC: сложение в поясе с переходом на летнее время дало бы
        сдвиг на час. Результат — в поясе last_kill_at, для вывода.
        """
        if self.last_kill_at is None:
            return None
        tz = self.last_kill_at.tzinfo
        kill_utc = self.last_kill_at.astimezone(timezone.utc)
        return (
            (kill_utc + timedelta(minutes=self.min_start)).astimezone(tz),
            (kill_utc + timedelta(minutes=self.min_end)).astimezone(tz),
        )


class WindowState(Enum):
    # (приоритет в сводке, подпись, цвет, маркер)
    IN_WINDOW = (1, "В окне", 0xFFCC00, "🟡")
    EXPIRED = (2, "Окно прошло", 0x33CC66, "🟢")
    WAITING = (3, "Ожидание окна", 0x3399FF, "🔵")
    NO_DATA = (4, "Нет данных", 0x777777, "⚪")

    @property
    def priority(self) -> int:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]

    @property
    def color(self) -> int:
        return self.value[2]

    @property
    def marker(self) -> str:
        return self.value[3]


@dataclass(frozen=True)
class BossStatus:
    name: str
    state: WindowState
    detail: str


@dataclass(frozen=True)
class Summary:
    entries: list[BossStatus]
    color: int | None  # цвет первой (самой приоритетной) записи


def normalize_name(s: str) -> str:
    return s.strip().lower()


def elapsed_minutes(last_kill_at: datetime, now: datetime) -> float:
    return (now.timestamp() - last_kill_at.timestamp()) / 60


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def format_minutes(m: float) -> str:
    """Длительность в минутах: < 1 мин — секунды (24s), иначе 1h 30m / 6m. Отрицательное → 0."""
    if m < 1:
        return f"{_round_half_up(max(0.0, m * 60))}s"
    total = _round_half_up(m)
    h, mm = divmod(total, 60)
    return f"{mm}m" if h == 0 else f"{h}h {mm}m"


def compute_status(boss: BossConfig, now: datetime) -> BossStatus:
    """
    Статус босса на момент now.

    Границы: elapsed == min_start — уже в окне, elapsed == min_end — ещё в окне,
    строго больше min_end — окно прошло.
    """
    if boss.last_kill_at is None:
        return BossStatus(boss.name, WindowState.NO_DATA, "Никогда не регистрировался")

    elapsed = elapsed_minutes(boss.last_kill_at, now)
    if elapsed < boss.min_start:
        return BossStatus(
            boss.name,
            WindowState.WAITING,
            f"Может появиться через: {format_minutes(boss.min_start - elapsed)}",
        )
    if elapsed <= boss.min_end:
        return BossStatus(
            boss.name,
            WindowState.IN_WINDOW,
            f"Появится максимум через: {format_minutes(boss.min_end - elapsed)}",
        )
    return BossStatus(
        boss.name,
        WindowState.EXPIRED,
        "Уже должен был появиться. Если его нет — его убил кто-то другой.",
    )


def build_summary(bosses: list[BossConfig], now: datetime) -> Summary:
    # sorted() стабилен: при равном приоритете сохраняется порядок из хранилища
    entries = sorted(
        (compute_status(b, now) for b in bosses),
        key=lambda s: s.state.priority,
    )
    return Summary(entries=entries, color=entries[0].state.color if entries else None)


def format_summary_text(summary: Summary) -> str:
    if not summary.entries:
        return "Нет боссов."
    header = f"{summary.entries[0].state.marker} ⏳ Таймеры респауна"
    lines = [header, ""]
    for s in summary.entries:
        lines.append(f"{s.state.marker} {s.name} | {s.state.label} — {s.detail}")
    return "\n".join(lines)
