"""
Tests for the seeding pipeline against real store backends.
"""

import pytest
from datetime import date, datetime

from flightseed.exceptions import BatchInsertError, FlightNotFoundError, MissingPrerequisiteError
from flightseed.models import AirlineModel, SeatClass
from flightseed.services.random_source import RandomSource
from flightseed.services.reference_catalog import REFERENCE_AIRLINES, REFERENCE_AIRPORTS
from flightseed.services.schedule import MAX_FLIGHTS_PER_DAY, MIN_FLIGHTS_PER_DAY
from flightseed.services.seed_runner import SeedRunner
from flightseed.store import FlightScope, ValkeyFlightStore
from flightseed.utils.config import SeederConfig


class RecordingRandomSource(RandomSource):
    """Random source that remembers the per-day flight counts it drew."""

    def __init__(self, seed):
        super().__init__(seed)
        self.daily_counts = []

    def randint(self, low, high):
        value = super().randint(low, high)
        if (low, high) == (MIN_FLIGHTS_PER_DAY, MAX_FLIGHTS_PER_DAY):
            self.daily_counts.append(value)
        return value


class SpyValkeyStore(ValkeyFlightStore):
    """Valkey store that records the mutating calls made on it."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.events = []

    def delete_flights(self, scope):
        self.events.append("delete")
        return super().delete_flights(scope)

    def insert_flights(self, flights):
        self.events.append("insert")
        return super().insert_flights(flights)

    def disconnect(self):
        self.events.append("disconnect")
        super().disconnect()


@pytest.fixture
def config():
    return SeederConfig(batch_size=10)


@pytest.fixture
def window():
    return date(2025, 9, 1), date(2025, 9, 2)


@pytest.fixture
def window_scope():
    return FlightScope.window(datetime(2025, 9, 1), datetime(2025, 9, 2, 23, 59, 59))


class TestRunWindow:
    """Replace-then-insert runs over a date window."""

    def test_rerun_replaces_window(self, seeded_sql_store, config, window, window_scope):
        first = SeedRunner(seeded_sql_store, config, rng=RandomSource(1)).run_window(*window)

        rng = RecordingRandomSource(2)
        second = SeedRunner(seeded_sql_store, config, rng=rng).run_window(*window)

        assert len(rng.daily_counts) == 2
        assert second.generated == sum(rng.daily_counts)
        assert second.inserted == second.generated
        assert second.deleted == first.inserted
        with seeded_sql_store as store:
            assert store.count_flights(window_scope) == second.inserted
            assert store.count_flights() == second.inserted

    def test_flights_outside_window_untouched(self, seeded_sql_store, config, window, flight_factory):
        outside = flight_factory("AZ101", datetime(2025, 9, 3, 0, 0, 0))
        with seeded_sql_store as store:
            store.insert_flights([outside])

        report = SeedRunner(seeded_sql_store, config, rng=RandomSource(3)).run_window(*window)

        with seeded_sql_store as store:
            assert store.find_flights(FlightScope.numbers(["AZ101"])) == [outside]
            assert store.count_flights() == report.inserted + 1

    def test_generated_flights_stored(self, seeded_sql_store, config, window, window_scope):
        report = SeedRunner(seeded_sql_store, config, rng=RandomSource(4)).run_window(*window)

        with seeded_sql_store as store:
            flights = store.find_flights(window_scope)
        assert len(flights) == report.inserted
        assert 2 * MIN_FLIGHTS_PER_DAY <= len(flights) <= 2 * MAX_FLIGHTS_PER_DAY
        for flight in flights:
            assert flight.departure_airport_code != flight.arrival_airport_code
            assert len(flight.seats) == 50
        assert report.batches == -(-report.inserted // config.batch_size)

    def test_seeded_config_is_reproducible(self, seeded_valkey_store_factory, window, window_scope):
        config = SeederConfig(seed=42)
        runs = []
        for _ in range(2):
            store = seeded_valkey_store_factory()
            SeedRunner(store, config).run_window(*window)
            with store:
                runs.append(store.find_flights(window_scope))
        assert runs[0] == runs[1]

    def test_single_airport_leaves_store_untouched(self, mock_valkey, airports, airlines,
                                                   flight_factory, config, window, window_scope):
        store = SpyValkeyStore(client=mock_valkey)
        existing = flight_factory(departure=datetime(2025, 9, 1, 10, 0))
        with store:
            store.save_airport(airports[0])
            store.save_airline(airlines[0])
            store.insert_flights([existing])
        store.events.clear()

        with pytest.raises(MissingPrerequisiteError):
            SeedRunner(store, config, rng=RandomSource(5)).run_window(*window)

        assert store.events == ["disconnect"]
        with store:
            assert store.find_flights(window_scope) == [existing]

    def test_failed_batch_reports_partial_load(self, seeded_valkey_store_factory, mock_valkey,
                                               config, window):
        store = seeded_valkey_store_factory()
        mock_valkey.fail_next_execute = True

        with pytest.raises(BatchInsertError) as exc_info:
            SeedRunner(store, config, rng=RandomSource(6)).run_window(*window)

        assert exc_info.value.chunk_index == 0
        assert exc_info.value.inserted == 0

    def test_lowercase_airline_code_saved_normalized(self, sql_store, airports, config, window):
        with sql_store as store:
            for airport in airports:
                store.save_airport(airport)
            store.save_airline(AirlineModel(code="az", name="ITA Airways", country="Italy"))

        report = SeedRunner(sql_store, config, rng=RandomSource(8)).run_window(*window)

        with sql_store as store:
            flights = store.find_flights(FlightScope.numbers(
                {f"AZ{(1000 + i) % 9000 + 100}" for i in range(report.inserted)}
            ))
        assert len(flights) == report.inserted
        assert {flight.airline_code for flight in flights} == {"AZ"}


class TestRunFixed:
    """The fixed AZ101/AZ102 test flights."""

    def test_creates_two_flights(self, seeded_sql_store):
        report = SeedRunner(seeded_sql_store).run_fixed(date(2024, 12, 25))

        assert report.inserted == 2
        assert report.batches == 2
        with seeded_sql_store as store:
            flights = store.find_flights(FlightScope.numbers(["AZ101", "AZ102"]))
        assert [(f.flight_number, f.departure_airport_code, f.arrival_airport_code) for f in flights] == [
            ("AZ101", "FCO", "MXP"),
            ("AZ102", "MXP", "FCO"),
        ]
        assert flights[0].departure_time == datetime(2024, 12, 25, 8, 0)
        assert flights[0].arrival_time == datetime(2024, 12, 25, 9, 30)
        assert flights[1].base_price.economy == 160
        assert len(flights[0].seats) == 7

    def test_rerun_replaces(self, seeded_sql_store):
        SeedRunner(seeded_sql_store).run_fixed(date(2024, 12, 25))
        report = SeedRunner(seeded_sql_store).run_fixed(date(2024, 12, 26))

        assert report.deleted == 2
        with seeded_sql_store as store:
            assert store.count_flights() == 2

    def test_missing_references(self, sql_store):
        with pytest.raises(MissingPrerequisiteError, match="FCO, MXP, AZ"):
            SeedRunner(sql_store).run_fixed(date(2024, 12, 25))


class TestSeedReferences:

    def test_bootstrap_then_seed(self, sql_store, window):
        result = SeedRunner(sql_store).seed_references()

        assert result.airports_created == len(REFERENCE_AIRPORTS)
        assert result.airlines_created == len(REFERENCE_AIRLINES)

        report = SeedRunner(sql_store, SeederConfig(seed=7)).run_window(*window)
        assert report.airports == min(len(REFERENCE_AIRPORTS), SeederConfig().airport_limit)
        assert report.airlines == len(REFERENCE_AIRLINES)

    def test_idempotent(self, seeded_sql_store):
        result = SeedRunner(seeded_sql_store).seed_references()

        assert result.airports_existing == 2
        assert result.airlines_existing == 1
        assert result.airports_created == len(REFERENCE_AIRPORTS) - 2
        assert result.airlines_created == len(REFERENCE_AIRLINES) - 1

        again = SeedRunner(seeded_sql_store).seed_references()
        assert again.airports_created == 0
        assert again.airlines_created == 0

    def test_stats(self, seeded_sql_store):
        SeedRunner(seeded_sql_store).run_fixed(date(2024, 12, 25))
        counts = SeedRunner(seeded_sql_store).stats()

        assert (counts.airports, counts.airlines, counts.flights) == (2, 1, 2)


@pytest.fixture
def catalog_sql_store(sql_store):
    """SQL store holding the whole reference catalog."""
    SeedRunner(sql_store).seed_references()
    return sql_store


class TestRunRoutes:
    """Popular-route runs over a date window."""

    def test_creates_flights_on_every_route(self, catalog_sql_store):
        report = SeedRunner(catalog_sql_store, SeederConfig(seed=9, batch_size=100)).run_routes(
            date(2025, 1, 1), date(2025, 1, 31), flights_per_route=2
        )

        assert report.generated == 160
        assert report.inserted == 160
        assert report.batches == 2
        assert report.airports == 12
        with catalog_sql_store as store:
            flights = store.find_flights(report.scope)
        assert len(flights) == 160
        assert all(flight.gate and flight.terminal for flight in flights)

    def test_rerun_replaces_window(self, catalog_sql_store):
        runner = SeedRunner(catalog_sql_store, SeederConfig(seed=10))
        first = runner.run_routes(date(2025, 1, 1), date(2025, 1, 31), flights_per_route=1)
        second = runner.run_routes(date(2025, 1, 1), date(2025, 1, 31), flights_per_route=1)

        assert second.deleted == first.inserted
        with catalog_sql_store as store:
            assert store.count_flights() == second.inserted

    def test_no_routes_leaves_store_untouched(self, mock_valkey, airports, airlines,
                                              flight_factory, config):
        store = SpyValkeyStore(client=mock_valkey)
        with store:
            for airport in airports:
                store.save_airport(airport)
            store.save_airline(airlines[0])
            store.insert_flights([flight_factory(departure=datetime(2025, 1, 10, 9, 0))])
        store.events.clear()

        with pytest.raises(MissingPrerequisiteError, match="popular routes"):
            SeedRunner(store, config).run_routes(date(2025, 1, 1), date(2025, 1, 31))

        assert store.events == ["disconnect"]
        with store:
            assert store.count_flights() == 1


class TestRegenerateSeats:
    """Seat maps rebuilt with the cabin layout."""

    def test_rebuilds_fixed_flight(self, seeded_sql_store):
        SeedRunner(seeded_sql_store).run_fixed(date(2024, 12, 25))

        report = SeedRunner(seeded_sql_store, SeederConfig(seed=1)).regenerate_seats("AZ101")

        assert report.updated == 1
        assert report.seat_counts == {SeatClass.ECONOMY: 0, SeatClass.BUSINESS: 32, SeatClass.FIRST: 18}
        with seeded_sql_store as store:
            az101, = store.find_flights(FlightScope.numbers(["AZ101"]))
            az102, = store.find_flights(FlightScope.numbers(["AZ102"]))
        assert len(az101.seats) == 50
        assert az101.seats[0].seat_number == "1A"
        assert az101.seats[0].seat_class == SeatClass.FIRST
        assert all(seat.is_available for seat in az101.seats)
        assert len(az102.seats) == 7

    def test_only_matching_day(self, seeded_valkey_store_factory, flight_factory):
        store = seeded_valkey_store_factory()
        with store:
            store.insert_flights([
                flight_factory("AZ101", datetime(2025, 9, 1, 8, 0)),
                flight_factory("AZ101", datetime(2025, 9, 2, 8, 0)),
            ])

        report = SeedRunner(store, SeederConfig(seed=2)).regenerate_seats("AZ101", date(2025, 9, 2))

        assert report.updated == 1
        with store:
            first_day, second_day = store.find_flights(FlightScope.numbers(["AZ101"]))
        assert len(first_day.seats) == 3
        assert len(second_day.seats) == 50

    def test_unknown_flight(self, seeded_sql_store):
        with pytest.raises(FlightNotFoundError, match="AZ999"):
            SeedRunner(seeded_sql_store).regenerate_seats("AZ999")

    def test_wrong_day(self, seeded_sql_store):
        SeedRunner(seeded_sql_store).run_fixed(date(2024, 12, 25))

        with pytest.raises(FlightNotFoundError, match="2024-12-26"):
            SeedRunner(seeded_sql_store).regenerate_seats("AZ101", date(2024, 12, 26))
