from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from .db import Base


class Boss(Base):
    __tablename__ = "bosses"

    name: Mapped[str] = mapped_column(String, primary_key=True)  # нормализованное имя (trim + lower)
    min_start: Mapped[int] = mapped_column(Integer)  # открытие окна после убийства (мин)
    min_end: Mapped[int] = mapped_column(Integer)  # закрытие окна после убийства (мин)
    last_kill_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)  # naive, UTC
