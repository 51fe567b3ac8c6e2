"""Настройки бота из окружения (.env)."""
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .db import DB_URL

DEFAULT_TZ = "Europe/Simferopol"  # UTC+3

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Некорректное значение в окружении."""


@dataclass(frozen=True)
class Settings:
    bot_token: str | None
    channel_id: int | None
    database_url: str
    tz: ZoneInfo
    implicit_kill: bool = True
    log_level: str = "INFO"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name}: ожидается 1/0 или true/false, получено {raw!r}")


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Собирает Settings. Без env читает os.environ (после load_dotenv)."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    channel_raw = (env.get("CHANNEL_ID") or "").strip()
    try:
        channel_id = int(channel_raw) if channel_raw else None
    except ValueError:
        raise ConfigError(f"CHANNEL_ID должен быть числом, получено {channel_raw!r}") from None

    tz_name = (env.get("BOT_TIMEZONE") or DEFAULT_TZ).strip()
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Неизвестный часовой пояс: {tz_name!r}") from None

    implicit_raw = env.get("IMPLICIT_KILL")
    implicit_kill = _parse_bool("IMPLICIT_KILL", implicit_raw) if implicit_raw else True

    return Settings(
        bot_token=env.get("BOT_TOKEN") or None,
        channel_id=channel_id,
        database_url=(env.get("DATABASE_URL") or DB_URL).strip(),
        tz=tz,
        implicit_kill=implicit_kill,
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
    )
