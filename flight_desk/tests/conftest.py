import datetime as dt

import pytest

from flight_desk.app import build_app
from flight_desk.config import Settings
from flight_desk.providers import SimulatedFlightProvider
from flight_desk.search_client import FlightSearchClient


class DictStore:
    """In-memory key-value store that counts writes."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = 0

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes += 1
        self.data[key] = value

    def remove(self, key):
        self.writes += 1
        self.data.pop(key, None)


@pytest.fixture
def store():
    return DictStore()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        flight_api_url="",
        airport_api_key="",
        db_path=str(tmp_path / "desk.db"),
        simulate=False,
    )


@pytest.fixture
def desk(settings):
    return build_app(settings)


@pytest.fixture
def simulated_client():
    return FlightSearchClient(SimulatedFlightProvider(today=dt.date(2025, 1, 1)))
