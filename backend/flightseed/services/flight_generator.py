"""
Flight instance generation.

Turns a departure time and the reference data into one complete flight
record: route, timing, aircraft, fares, seat map and flight number.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..exceptions import InvalidRecordError, MissingPrerequisiteError, RouteSelectionError
from ..models import (
    AIRCRAFT_CATALOG,
    AircraftType,
    AirlineModel,
    AirportModel,
    BaggagePolicyModel,
    CarryOnPolicyModel,
    CheckedBaggagePolicyModel,
    FlightModel,
    FlightStatus,
    ServicesModel,
)
from .pricing import derive_base_price
from .random_source import RandomSource
from .schedule import QUARTER_HOURS
from .seat_map import MAX_SEATS, synthesize_seat_map

logger = logging.getLogger(__name__)

MAX_ROUTE_ATTEMPTS = 1000

# Probability that each on-board service is offered
SERVICE_RATES = {
    "meal": 0.7,
    "wifi": 0.6,
    "entertainment": 0.8,
    "extra_legroom": 0.3,
}


@dataclass
class FlightNumberSequence:
    """
    Per-run flight number counter.

    Numbers are folded into [100, 9099], so they are unique within a run
    of up to 9000 flights per airline prefix, and not across runs.
    """

    counter: int = 1000

    def next_number(self, airline_code: str) -> str:
        number = (self.counter % 9000) + 100
        self.counter += 1
        return f"{airline_code[:2]}{number}"


def validate_reference_data(airports: Sequence[AirportModel],
                            airlines: Sequence[AirlineModel]) -> None:
    """
    Check that generation can pick distinct route endpoints and an airline.

    Raises:
        MissingPrerequisiteError: Fewer than 2 airports, fewer than 2
            distinct airport codes, or no airline
    """
    if len(airports) < 2:
        raise MissingPrerequisiteError(
            f"Need at least 2 airports, found {len(airports)}. Run seed-references first."
        )
    distinct_codes = {airport.code for airport in airports}
    if len(distinct_codes) < 2:
        raise MissingPrerequisiteError(
            f"Need at least 2 distinct airport codes, found {sorted(distinct_codes)}"
        )
    if len(airlines) < 1:
        raise MissingPrerequisiteError("Need at least 1 airline, found 0")


class FlightGenerator:
    """Generate complete flight records from reference data."""

    def __init__(self, airports: Sequence[AirportModel], airlines: Sequence[AirlineModel],
                 rng: RandomSource, sequence: Optional[FlightNumberSequence] = None,
                 aircraft_types: Sequence[AircraftType] = AIRCRAFT_CATALOG,
                 max_seats: int = MAX_SEATS, max_route_attempts: int = MAX_ROUTE_ATTEMPTS):
        validate_reference_data(airports, airlines)
        self.airports = list(airports)
        self.airlines = list(airlines)
        self.aircraft_types = list(aircraft_types)
        self.rng = rng
        self.sequence = sequence or FlightNumberSequence()
        self.max_seats = max_seats
        self.max_route_attempts = max_route_attempts

    def draw_duration(self) -> int:
        """Flight duration in minutes: 1-7 whole hours plus a quarter-hour step."""
        return self.rng.randint(1, 7) * 60 + self.rng.choice(QUARTER_HOURS)

    def pick_route(self) -> Tuple[AirportModel, AirportModel]:
        """
        Draw departure and arrival airports with different codes.

        Raises:
            RouteSelectionError: No distinct arrival airport within the retry budget
        """
        departure = self.rng.choice(self.airports)
        for _ in range(self.max_route_attempts):
            arrival = self.rng.choice(self.airports)
            if arrival.code != departure.code:
                return departure, arrival
        raise RouteSelectionError(
            f"No arrival airport different from {departure.code} "
            f"after {self.max_route_attempts} attempts"
        )

    def draw_services(self) -> ServicesModel:
        return ServicesModel(**{
            service: self.rng.chance(rate) for service, rate in SERVICE_RATES.items()
        })

    def draw_baggage(self) -> BaggagePolicyModel:
        return BaggagePolicyModel(
            carry_on=CarryOnPolicyModel(max_weight=8, max_dimensions="55x40x20 cm"),
            checked=CheckedBaggagePolicyModel(
                included=1,
                max_weight=23,
                extra_bag_price=int(self.rng.uniform(30, 60)),
            ),
        )

    def generate(self, departure_time: datetime) -> FlightModel:
        """
        Generate one flight departing at `departure_time`.

        Raises:
            InvalidRecordError: The assembled flight fails model validation,
                e.g. an airline code that cannot prefix a flight number
        """
        duration = self.draw_duration()
        arrival_time = departure_time + timedelta(minutes=duration)

        departure_airport, arrival_airport = self.pick_route()
        airline = self.rng.choice(self.airlines)
        aircraft = self.rng.choice(self.aircraft_types)

        flight_number = self.sequence.next_number(airline.code)

        base_price = derive_base_price(self.rng)
        seats = synthesize_seat_map(aircraft.capacity, base_price, self.rng, self.max_seats)

        try:
            return FlightModel(
                flight_number=flight_number,
                airline_code=airline.code,
                departure_airport_code=departure_airport.code,
                arrival_airport_code=arrival_airport.code,
                departure_time=departure_time,
                arrival_time=arrival_time,
                duration=duration,
                aircraft=aircraft,
                seats=seats,
                base_price=base_price,
                baggage=self.draw_baggage(),
                services=self.draw_services(),
                status=FlightStatus.SCHEDULED,
                is_active=True,
            )
        except ValidationError as e:
            raise InvalidRecordError(f"Generated flight {flight_number} is invalid: {e}") from e

    def generate_many(self, departure_times) -> List[FlightModel]:
        return [self.generate(departure_time) for departure_time in departure_times]
