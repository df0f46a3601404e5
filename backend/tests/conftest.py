"""
Shared fixtures for the flight seeder test suite.
"""

import pytest
from datetime import datetime, timedelta
from valkey.exceptions import ValkeyError

from flightseed.database import DatabaseConfig
from flightseed.models import (
    AirportModel,
    AirlineModel,
    AircraftType,
    BasePriceModel,
    FlightModel,
    SeatClass,
    SeatModel,
)
from flightseed.cache import ValkeyConfig
from flightseed.store import SqlFlightStore, ValkeyFlightStore


@pytest.fixture
def airports():
    """Two distinct reference airports."""
    return [
        AirportModel(code="FCO", name="Rome Fiumicino", city="Rome",
                     country="Italy", timezone="Europe/Rome"),
        AirportModel(code="MXP", name="Milan Malpensa", city="Milan",
                     country="Italy", timezone="Europe/Rome"),
    ]


@pytest.fixture
def airlines():
    """A single reference airline."""
    return [AirlineModel(code="AZ", name="ITA Airways", country="Italy")]


@pytest.fixture
def db_url(tmp_path):
    """File-backed SQLite URL that survives reconnects within a test."""
    return f"sqlite:///{tmp_path / 'flightseed_test.db'}"


@pytest.fixture
def sql_store(db_url):
    """Unconnected SQL flight store on a fresh SQLite file."""
    return SqlFlightStore(DatabaseConfig(database_url=db_url))


@pytest.fixture
def seeded_sql_store(sql_store, airports, airlines):
    """SQL store holding the reference airports and airline, disconnected."""
    with sql_store:
        for airport in airports:
            sql_store.save_airport(airport)
        for airline in airlines:
            sql_store.save_airline(airline)
    return sql_store


def make_flight(flight_number="AZ1000", departure=None, origin="FCO",
                destination="MXP", duration=90, airline_code="AZ"):
    """Build a small valid flight record for store tests."""
    departure = departure or datetime(2025, 9, 1, 8, 0)
    return FlightModel(
        flight_number=flight_number,
        airline_code=airline_code,
        departure_airport_code=origin,
        arrival_airport_code=destination,
        departure_time=departure,
        arrival_time=departure + timedelta(minutes=duration),
        duration=duration,
        aircraft=AircraftType(model="Airbus A320", capacity=180),
        seats=[
            SeatModel(seat_number="1A", seat_class=SeatClass.ECONOMY, is_available=True, price=120),
            SeatModel(seat_number="1B", seat_class=SeatClass.ECONOMY, is_available=False, price=130),
            SeatModel(seat_number="1C", seat_class=SeatClass.BUSINESS, is_available=True, price=400),
        ],
        base_price=BasePriceModel(economy=125, business=410, first=900),
    )


@pytest.fixture
def flight_factory():
    return make_flight


class MockPipeline:
    """Mock transactional pipeline replaying queued commands on execute."""

    def __init__(self, client):
        self.client = client
        self.commands = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.commands.append((name, args, kwargs))
            return self
        return queue

    def execute(self):
        if self.client.fail_next_execute:
            self.client.fail_next_execute = False
            self.commands.clear()
            raise ValkeyError("EXECABORT Transaction discarded")
        results = [getattr(self.client, name)(*args, **kwargs) for name, args, kwargs in self.commands]
        self.commands.clear()
        return results


class MockValkeyClient:
    """Mock Valkey client with decoded string responses."""

    def __init__(self):
        self.data = {}
        self.hashes = {}
        self.sorted_sets = {}
        self.sets = {}
        self.closed = False
        self.fail_next_execute = False

    def ping(self):
        return True

    def close(self):
        self.closed = True

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    def incr(self, key, amount=1):
        self.data[key] = str(int(self.data.get(key, 0)) + amount)
        return int(self.data[key])

    def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = value
        return 1

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def hvals(self, key):
        return list(self.hashes.get(key, {}).values())

    def hlen(self, key):
        return len(self.hashes.get(key, {}))

    def zadd(self, key, mapping):
        self.sorted_sets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def zrangebyscore(self, key, min_score, max_score):
        members = self.sorted_sets.get(key, {})
        in_range = [(score, m) for m, score in members.items() if min_score <= score <= max_score]
        return [m for score, m in sorted(in_range)]

    def zrem(self, key, *members):
        zset = self.sorted_sets.get(key, {})
        return sum(1 for m in members if zset.pop(m, None) is not None)

    def zcard(self, key):
        return len(self.sorted_sets.get(key, {}))

    def sadd(self, key, *members):
        self.sets.setdefault(key, set()).update(members)
        return len(members)

    def srem(self, key, *members):
        members_set = self.sets.get(key, set())
        removed = len(members_set & set(members))
        members_set.difference_update(members)
        return removed

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def pipeline(self, transaction=True):
        return MockPipeline(self)


@pytest.fixture
def mock_valkey():
    return MockValkeyClient()


@pytest.fixture
def valkey_store(mock_valkey):
    """Valkey flight store over the mock client."""
    return ValkeyFlightStore(ValkeyConfig(key_prefix="test"), client=mock_valkey)


@pytest.fixture
def seeded_valkey_store_factory(mock_valkey, airports, airlines):
    """Build Valkey stores holding FCO, MXP and AZ, each on a fresh mock client."""
    def factory():
        client = mock_valkey if not mock_valkey.hashes else MockValkeyClient()
        store = ValkeyFlightStore(ValkeyConfig(key_prefix="test"), client=client)
        with store:
            for airport in airports:
                store.save_airport(airport)
            for airline in airlines:
                store.save_airline(airline)
        return store
    return factory
