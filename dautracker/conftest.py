# dautracker/conftest.py
from datetime import date

import pytest

from dautracker.core.metrics import METRICS
from dautracker.features.activity.service import ActivityTracker, get_tracker, reset_tracker
from dautracker.features.activity.store import ActivityKeyStore
from dautracker.tests.mocks import FakeRedis, FixedClock

TODAY = date(2026, 2, 7)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis):
    return ActivityKeyStore(fake_redis)


@pytest.fixture
def tracker(store):
    return ActivityTracker(store, today=FixedClock(TODAY))


@pytest.fixture
def client(tracker):
    """
    TestClient whose DAU endpoints run against the fake store.

    The app is imported lazily so that importing conftest never builds it.
    """
    from fastapi.testclient import TestClient
    from dautracker.main import app

    app.dependency_overrides[get_tracker] = lambda: tracker
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_state():
    METRICS.reset()
    reset_tracker()
    yield
    reset_tracker()
