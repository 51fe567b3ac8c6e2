#!/usr/bin/env python3
"""Создаёт таблицы и загружает боссов по умолчанию. Запуск: python create_db.py [--reset]"""
import sys

from respawn_timer.config import load_settings
from respawn_timer.db import make_engine, make_session_factory
from respawn_timer.seed import run
from respawn_timer.store import BossStore

if __name__ == "__main__":
    settings = load_settings()
    reset = "--reset" in sys.argv or "-r" in sys.argv
    engine = make_engine(settings.database_url)
    store = BossStore(make_session_factory(engine), settings.tz)
    added = run(engine, store, reset=reset)
    print(f"Готово. БД: {settings.database_url}")
    print(f"Добавлено боссов: {added}, всего в БД: {len(store.list())}")
