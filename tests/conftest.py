import asyncio
from datetime import datetime, timedelta
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest
from apscheduler.jobstores.base import JobLookupError

from respawn_timer.db import ensure_db_exists, make_engine, make_session_factory
from respawn_timer.scheduler import WindowScheduler
from respawn_timer.store import BossStore

TZ = ZoneInfo("Europe/Simferopol")
T0 = datetime(2026, 2, 4, 12, 0, tzinfo=TZ)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += timedelta(minutes=minutes)


class FakeJob:
    def __init__(self, callback, when, data, name):
        self.callback = callback
        self.when = when
        self.data = data
        self.name = name
        self.removed = False
        self.fired = False

    def schedule_removal(self):
        if self.fired:
            raise JobLookupError(self.name)
        self.removed = True

    async def run(self):
        self.fired = True
        await self.callback(SimpleNamespace(job=self))


class FakeJobQueue:
    """То же, что нужно от telegram.ext.JobQueue: run_once + Job.schedule_removal."""

    def __init__(self):
        self.jobs: list[FakeJob] = []

    def run_once(self, callback, when, data=None, name=None):
        job = FakeJob(callback, when, data, name)
        self.jobs.append(job)
        return job

    def active(self) -> list[FakeJob]:
        return [j for j in self.jobs if not j.removed and not j.fired]

    def due(self, now: datetime) -> list[FakeJob]:
        return sorted((j for j in self.active() if j.when.timestamp() <= now.timestamp()), key=lambda j: j.when)

    async def run_due(self, now: datetime) -> None:
        for job in self.due(now):
            await job.run()


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.sent: list[str] = []
        self.fail = fail

    async def send(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("channel unavailable")
        self.sent.append(text)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def job_queue():
    return FakeJobQueue()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def scheduler(job_queue, notifier, clock):
    return WindowScheduler(job_queue, notifier, clock)


@pytest.fixture
def store():
    engine = make_engine("sqlite://")
    ensure_db_exists(engine)
    return BossStore(make_session_factory(engine), TZ)


def run(coro):
    return asyncio.run(coro)
