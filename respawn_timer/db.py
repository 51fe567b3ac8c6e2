import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

# Файл SQLite в корне проекта (рядом с bot.py)
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DB_PATH = os.path.join(_project_root, "app.db")
DB_URL = f"sqlite:///{DB_PATH}"


class Base(DeclarativeBase):
    pass


def make_engine(url: str = DB_URL) -> Engine:
    """Движок для URL. Для SQLite в памяти — одно общее соединение."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def ensure_db_exists(engine: Engine):
    """Создаёт файл БД и таблицы, если их ещё нет."""
    from . import models  # noqa: F401 — регистрируем таблицы
    Base.metadata.create_all(bind=engine)
