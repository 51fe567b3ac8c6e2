from zoneinfo import ZoneInfo

import pytest

from respawn_timer.config import DEFAULT_TZ, ConfigError, load_settings
from respawn_timer.db import DB_URL


def test_defaults():
    settings = load_settings({"BOT_TOKEN": "123:abc"})
    assert settings.bot_token == "123:abc"
    assert settings.channel_id is None
    assert settings.database_url == DB_URL
    assert settings.tz == ZoneInfo(DEFAULT_TZ)
    assert settings.implicit_kill is True
    assert settings.log_level == "INFO"


def test_full_env():
    settings = load_settings({
        "BOT_TOKEN": "t",
        "CHANNEL_ID": "-1001234567890",
        "DATABASE_URL": "postgresql://bot@db/bosses",
        "BOT_TIMEZONE": "Europe/Madrid",
        "IMPLICIT_KILL": "off",
        "LOG_LEVEL": "debug",
    })
    assert settings.channel_id == -1001234567890
    assert settings.database_url == "postgresql://bot@db/bosses"
    assert settings.tz == ZoneInfo("Europe/Madrid")
    assert settings.implicit_kill is False
    assert settings.log_level == "DEBUG"


def test_missing_token_is_none():
    assert load_settings({}).bot_token is None


@pytest.mark.parametrize(
    "env",
    [
        {"CHANNEL_ID": "general"},
        {"BOT_TIMEZONE": "Mars/Olympus"},
        {"IMPLICIT_KILL": "maybe"},
    ],
)
def test_bad_values(env):
    with pytest.raises(ConfigError):
        load_settings(env)
