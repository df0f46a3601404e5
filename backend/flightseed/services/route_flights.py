"""
Popular-route flight generation.

Instead of drawing a random airport pair per flight, this mode walks a
fixed table of busy European routes and produces a block of flights per
route, each on a random day of the window. Routes whose endpoints are not
in the store (or are inactive) are skipped.

Unlike the window schedule these flights carry a gate and terminal, an
all-economy seat map, and fares in a 1 : 3.5 : 6 ratio.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Sequence, Tuple

from pydantic import ValidationError

from ..exceptions import InvalidRecordError, MissingPrerequisiteError
from ..models import (
    AircraftType,
    AirlineModel,
    AirportModel,
    BaggagePolicyModel,
    BasePriceModel,
    CarryOnPolicyModel,
    CheckedBaggagePolicyModel,
    FlightModel,
    FlightStatus,
)
from ..store import FlightStore
from .flight_generator import FlightGenerator
from .random_source import RandomSource
from .schedule import iter_days
from .seat_map import MAX_SEATS, economy_seat_map

logger = logging.getLogger(__name__)

FLIGHTS_PER_ROUTE = 50

_EU_HUBS = ["MUC", "ZUR", "VIE"]

# Origin -> destinations
POPULAR_ROUTES: Dict[str, List[str]] = {
    "FCO": ["CDG", "LHR", "FRA", "MAD", "BCN", "AMS"] + _EU_HUBS + ["BRU"],
    "MXP": ["CDG", "LHR", "FRA", "MAD", "BCN", "AMS"] + _EU_HUBS + ["BRU"],
    "CDG": ["FCO", "MXP", "LHR", "FRA", "MAD", "BCN", "AMS"] + _EU_HUBS,
    "LHR": ["FCO", "MXP", "CDG", "FRA", "MAD", "BCN", "AMS"] + _EU_HUBS,
    "FRA": ["FCO", "MXP", "CDG", "LHR", "MAD", "BCN", "AMS"] + _EU_HUBS,
    "MAD": ["FCO", "MXP", "CDG", "LHR", "FRA", "BCN", "AMS"] + _EU_HUBS,
    "BCN": ["FCO", "MXP", "CDG", "LHR", "FRA", "MAD", "AMS"] + _EU_HUBS,
    "AMS": ["FCO", "MXP", "CDG", "LHR", "FRA", "MAD", "BCN"] + _EU_HUBS,
}

ROUTE_AIRCRAFT: List[AircraftType] = [
    AircraftType(model="Airbus A320", capacity=180),
    AircraftType(model="Airbus A321", capacity=220),
    AircraftType(model="Airbus A330", capacity=290),
    AircraftType(model="Airbus A350-900", capacity=325),
    AircraftType(model="Boeing 737-800", capacity=189),
    AircraftType(model="Boeing 777-200", capacity=314),
    AircraftType(model="Boeing 787-8", capacity=242),
    AircraftType(model="Embraer E190", capacity=114),
]

GATE_LETTERS = ["A", "B", "C", "D"]

Route = Tuple[AirportModel, AirportModel]


def resolve_routes(store: FlightStore,
                   routes: Dict[str, List[str]] = POPULAR_ROUTES) -> List[Route]:
    """
    Look up the endpoints of every route in a connected store.

    Routes with an endpoint that is missing or inactive are dropped;
    table order is kept.
    """
    codes = sorted(set(routes) | {code for targets in routes.values() for code in targets})
    airports = {}
    for code in codes:
        airport = store.find_airport_by_code(code)
        if airport is not None and airport.is_active:
            airports[code] = airport
        else:
            logger.debug(f"Airport {code} not available, skipping its routes")

    resolved = [
        (airports[origin], airports[destination])
        for origin, destinations in routes.items() if origin in airports
        for destination in destinations if destination in airports
    ]
    logger.info(f"Resolved {len(resolved)} of "
                f"{sum(len(d) for d in routes.values())} popular routes")
    return resolved


class RouteFlightGenerator(FlightGenerator):
    """Generate blocks of flights over a fixed set of routes."""

    def __init__(self, routes: Sequence[Route], airlines: Sequence[AirlineModel],
                 rng: RandomSource, aircraft_types: Sequence[AircraftType] = ROUTE_AIRCRAFT,
                 max_seats: int = MAX_SEATS):
        if not routes:
            raise MissingPrerequisiteError(
                "None of the popular routes has both airports in the store. "
                "Run seed-references first."
            )
        airports = {airport.code: airport for route in routes for airport in route}
        super().__init__(list(airports.values()), airlines, rng,
                         aircraft_types=aircraft_types, max_seats=max_seats)
        self.routes = list(routes)

    def draw_departure(self, days: Sequence[date]) -> datetime:
        """A random day of the window at a random minute between 06:00 and 22:59."""
        day = self.rng.choice(days)
        return datetime.combine(day, time(self.rng.randint(6, 22), self.rng.randint(0, 59)))

    def draw_flight_number(self, airline: AirlineModel) -> str:
        # Random suffix, so numbers can repeat within a run
        return f"{airline.code[:2]}{self.rng.randint(1000, 9999)}"

    def draw_baggage(self) -> BaggagePolicyModel:
        return BaggagePolicyModel(
            carry_on=CarryOnPolicyModel(max_weight=8, max_dimensions="55x40x20 cm"),
            checked=CheckedBaggagePolicyModel(
                included=1,
                max_weight=23,
                extra_bag_price=self.rng.randint(25, 60),
            ),
        )

    def generate_on_route(self, route: Route, departure_time: datetime) -> FlightModel:
        """
        Generate one flight on a fixed route.

        Raises:
            InvalidRecordError: The assembled flight fails model validation
        """
        departure_airport, arrival_airport = route
        airline = self.rng.choice(self.airlines)
        aircraft = self.rng.choice(self.aircraft_types)

        duration = self.rng.randint(90, 300)
        economy = self.rng.randint(80, 400)
        base_price = BasePriceModel(
            economy=economy,
            business=round(economy * 3.5),
            first=economy * 6,
        )
        flight_number = self.draw_flight_number(airline)
        seats = economy_seat_map(aircraft.capacity, economy, self.rng, self.max_seats)

        try:
            return FlightModel(
                flight_number=flight_number,
                airline_code=airline.code,
                departure_airport_code=departure_airport.code,
                arrival_airport_code=arrival_airport.code,
                departure_time=departure_time,
                arrival_time=departure_time + timedelta(minutes=duration),
                duration=duration,
                aircraft=aircraft,
                seats=seats,
                base_price=base_price,
                baggage=self.draw_baggage(),
                services=self.draw_services(),
                status=FlightStatus.SCHEDULED,
                gate=f"{self.rng.choice(GATE_LETTERS)}{self.rng.randint(1, 30)}",
                terminal=str(self.rng.randint(1, 3)),
                is_active=True,
            )
        except ValidationError as e:
            raise InvalidRecordError(f"Generated flight {flight_number} is invalid: {e}") from e

    def generate_routes(self, start: date, end: date,
                        flights_per_route: int = FLIGHTS_PER_ROUTE) -> List[FlightModel]:
        """`flights_per_route` flights on every route, route by route."""
        days = list(iter_days(start, end))
        flights = []
        for route in self.routes:
            for _ in range(flights_per_route):
                flights.append(self.generate_on_route(route, self.draw_departure(days)))
        return flights
