from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.database.memory_store import MemoryStore
from app.main import create_app
from app.modules.groups.service import GroupService
from app.modules.locations.service import LocationService


class FakeClock:
    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def group_service(store):
    return GroupService(store)


@pytest.fixture
def location_service(store):
    return LocationService(store)


@pytest.fixture
def test_settings():
    return Settings(rate_limit_enabled=False, scheduler_enabled=False)


@pytest.fixture
def client(test_settings, store):
    return TestClient(create_app(test_settings, store))
