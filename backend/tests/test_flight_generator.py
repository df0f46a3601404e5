"""
Tests for flight instance generation.
"""

import re
import pytest
from datetime import datetime, timedelta

from flightseed.exceptions import (
    InvalidRecordError,
    MissingPrerequisiteError,
    RouteSelectionError,
    SeederError,
)
from flightseed.models import AIRCRAFT_CATALOG, AirlineModel, AirportModel, FLIGHT_NUMBER_PATTERN
from flightseed.services.flight_generator import (
    FlightGenerator,
    FlightNumberSequence,
    validate_reference_data,
)
from flightseed.services.random_source import RandomSource


@pytest.fixture
def generator(airports, airlines):
    return FlightGenerator(airports, airlines, rng=RandomSource(2025))


@pytest.fixture
def departures():
    start = datetime(2025, 9, 1, 6, 0)
    return [start + timedelta(minutes=15 * i) for i in range(300)]


class TestFlightNumberSequence:
    """Test per-run flight numbering."""

    def test_starts_at_1100(self):
        sequence = FlightNumberSequence()
        assert sequence.next_number("AZ") == "AZ1100"
        assert sequence.next_number("LH") == "LH1101"

    def test_folds_into_range(self):
        sequence = FlightNumberSequence(counter=8999)
        assert sequence.next_number("AZ") == "AZ9099"
        assert sequence.next_number("AZ") == "AZ100"

    def test_uses_two_character_prefix(self):
        assert FlightNumberSequence().next_number("ABC") == "AB1100"

    def test_unique_within_run(self):
        sequence = FlightNumberSequence()
        numbers = [sequence.next_number("AZ") for _ in range(9000)]
        assert len(set(numbers)) == 9000


class TestValidateReferenceData:

    def test_valid(self, airports, airlines):
        validate_reference_data(airports, airlines)

    def test_single_airport(self, airports, airlines):
        with pytest.raises(MissingPrerequisiteError, match="at least 2 airports"):
            validate_reference_data(airports[:1], airlines)

    def test_duplicate_codes(self, airports, airlines):
        with pytest.raises(MissingPrerequisiteError, match="distinct"):
            validate_reference_data([airports[0], airports[0]], airlines)

    def test_no_airlines(self, airports):
        with pytest.raises(MissingPrerequisiteError, match="airline"):
            validate_reference_data(airports, [])

    def test_generator_checks_on_construction(self, airports):
        with pytest.raises(MissingPrerequisiteError):
            FlightGenerator(airports, [], rng=RandomSource(1))


class TestFlightGenerator:
    """Test generated flight records."""

    def test_route_endpoints_differ(self, generator, departures):
        for flight in generator.generate_many(departures):
            assert flight.departure_airport_code != flight.arrival_airport_code
            assert {flight.departure_airport_code, flight.arrival_airport_code} == {"FCO", "MXP"}

    def test_arrival_is_departure_plus_duration(self, generator, departures):
        for flight in generator.generate_many(departures):
            assert flight.arrival_time == flight.departure_time + timedelta(minutes=flight.duration)
            assert 60 <= flight.duration <= 465
            assert flight.duration % 15 == 0

    def test_flight_numbers(self, generator, departures):
        flights = generator.generate_many(departures)
        numbers = [flight.flight_number for flight in flights]

        assert numbers[0] == "AZ1100"
        assert len(set(numbers)) == len(numbers)
        for number in numbers:
            assert re.match(FLIGHT_NUMBER_PATTERN, number)
            assert number.startswith("AZ")
            assert 100 <= int(number[2:]) <= 9099

    def test_fares_and_seats(self, generator, departures):
        for flight in generator.generate_many(departures):
            price = flight.base_price
            assert price.economy < price.business < price.first
            assert 1 <= len(flight.seats) <= 50
            assert flight.aircraft in AIRCRAFT_CATALOG

    def test_fixed_attributes(self, generator, departures):
        for flight in generator.generate_many(departures[:20]):
            assert flight.status.value == "scheduled"
            assert flight.is_active is True
            assert flight.baggage.carry_on.max_weight == 8
            assert flight.baggage.checked.max_weight == 23
            assert 30 <= flight.baggage.checked.extra_bag_price < 60

    def test_all_aircraft_used(self, generator, departures):
        models = {flight.aircraft.model for flight in generator.generate_many(departures)}
        assert models == {aircraft.model for aircraft in AIRCRAFT_CATALOG}

    def test_reproducible(self, airports, airlines, departures):
        first = FlightGenerator(airports, airlines, rng=RandomSource(5)).generate_many(departures[:10])
        second = FlightGenerator(airports, airlines, rng=RandomSource(5)).generate_many(departures[:10])
        assert first == second

    def test_route_retries_are_bounded(self, airports, airlines):
        generator = FlightGenerator(airports, airlines, rng=RandomSource(1), max_route_attempts=5)
        generator.airports = [airports[0], airports[0]]

        with pytest.raises(RouteSelectionError, match="5 attempts"):
            generator.pick_route()

    def test_many_airports(self, airlines):
        codes = ["FCO", "MXP", "LIN", "NAP", "VCE", "FLR"]
        airports = [
            AirportModel(code=code, name=code, city=code, country="Italy", timezone="Europe/Rome")
            for code in codes
        ]
        generator = FlightGenerator(airports, airlines, rng=RandomSource(8))
        pairs = [generator.pick_route() for _ in range(500)]
        for departure, arrival in pairs:
            assert departure.code != arrival.code

    def test_invalid_record_wrapped(self, airports):
        """An airline code that cannot prefix a flight number fails as a seeding error."""
        bad_airline = AirlineModel.model_construct(code="a-", name="Unchecked", country="Nowhere",
                                                   is_active=True)
        generator = FlightGenerator(airports, [bad_airline], rng=RandomSource(3))

        with pytest.raises(InvalidRecordError, match="a-1100") as exc_info:
            generator.generate(datetime(2025, 9, 1, 8, 0))
        assert isinstance(exc_info.value, SeederError)
