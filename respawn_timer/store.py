"""Хранилище боссов поверх SQLAlchemy. Наружу отдаёт только снимки BossConfig."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .models import Boss
from .services import BossConfig, normalize_name

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Ошибка чтения/записи в БД."""


class BossStore:
    def __init__(self, session_factory: sessionmaker, tz: ZoneInfo):
        self._session_factory = session_factory
        self._tz = tz

    def _naive_utc(self, dt: datetime) -> datetime:
        """Сохранить в БД: без tz, в UTC (местное время неоднозначно при переводе часов)."""
        return dt.astimezone(timezone.utc).replace(tzinfo=None)

    def _aware_tz(self, dt: datetime | None) -> datetime | None:
        if dt is None:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(self._tz)

    def _snapshot(self, boss: Boss) -> BossConfig:
        return BossConfig(
            name=boss.name,
            min_start=boss.min_start,
            min_end=boss.min_end,
            last_kill_at=self._aware_tz(boss.last_kill_at),
        )

    @contextmanager
    def _session(self):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(str(e)) from e
        finally:
            db.close()

    def get(self, name: str) -> BossConfig | None:
        with self._session() as db:
            boss = db.get(Boss, normalize_name(name))
            return self._snapshot(boss) if boss else None

    def list(self) -> list[BossConfig]:
        with self._session() as db:
            return [self._snapshot(b) for b in db.query(Boss).order_by(Boss.name).all()]

    def upsert(self, name: str, min_start: int, min_end: int) -> BossConfig:
        """Создать или перенастроить босса. last_kill_at не трогается."""
        if min_start < 0 or min_end < min_start:
            raise ValueError(f"Некорректное окно [{min_start}-{min_end}]")
        key = normalize_name(name)
        if not key:
            raise ValueError("Пустое имя босса")
        with self._session() as db:
            boss = db.get(Boss, key)
            if boss is None:
                boss = Boss(name=key, min_start=min_start, min_end=min_end, last_kill_at=None)
                db.add(boss)
            else:
                boss.min_start = min_start
                boss.min_end = min_end
            db.commit()
            return self._snapshot(boss)

    def record_kill(self, name: str, when: datetime) -> BossConfig | None:
        """Перезаписывает last_kill_at. None — босс неизвестен."""
        with self._session() as db:
            boss = db.get(Boss, normalize_name(name))
            if boss is None:
                return None
            boss.last_kill_at = self._naive_utc(when)
            db.commit()
            return self._snapshot(boss)

    def seed(self, rows) -> int:
        """Добавляет отсутствующих боссов (name, min_start, min_end). Существующих не трогает."""
        with self._session() as db:
            existing = {name for (name,) in db.query(Boss.name).all()}
            added = 0
            for name, min_start, min_end in rows:
                key = normalize_name(name)
                if key in existing:
                    continue
                db.add(Boss(name=key, min_start=min_start, min_end=min_end, last_kill_at=None))
                existing.add(key)
                added += 1
            db.commit()
            logger.info("Боссов добавлено: %s", added)
            return added
