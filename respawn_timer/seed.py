"""Боссы по умолчанию. Запуск вручную: python create_db.py [--reset]"""
from .db import Base
from .store import BossStore

# (имя, открытие окна, закрытие окна) в минутах после убийства
BOSSES = [
    ("testing", 1, 3),
    ("golemplatadf", 33, 46),
    ("golemplatadz", 33, 46),
    ("golemorodf", 36, 61),
    ("golemorodz", 36, 61),
    ("goleminferdf", 42, 70),
    ("goleminferdz", 42, 70),
    ("goleminferabismo", 42, 70),
    ("gorgona", 60, 120),
    ("abbysaria", 210, 540),
    ("garveloth", 30, 45),
    ("djinn", 420, 900),
    ("lilith", 120, 210),
    ("eishner", 540, 1080),
    ("archimago", 540, 1080),
]


def run(engine, store: BossStore, reset: bool = False) -> int:
    from . import models  # noqa: F401 — регистрируем таблицы
    if reset:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return store.seed(BOSSES)
