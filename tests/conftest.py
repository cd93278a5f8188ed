import os

os.environ["ENV"] = "test"

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
import pytz  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from fleet.services.engine import FleetEngine, get_engine  # noqa: E402

T = pytz.utc.localize(datetime(2026, 10, 18, 9, 0))


def at(hours: float) -> datetime:
    """T shifted by hours"""
    return T + timedelta(hours=hours)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(T)


@pytest.fixture
def engine(clock):
    return FleetEngine(clock=clock, timezone_id="Asia/Kolkata")


@pytest.fixture
def truck(engine):
    return engine.add_vehicle("Tata Ace", 1000, 4)


@pytest.fixture
def client(engine):
    from main import app

    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
