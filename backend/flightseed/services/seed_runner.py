"""
Seeding pipeline.

A run is an ordered sequence of store interactions:

    connect -> read reference data -> check prerequisites -> generate
            -> delete flights in scope -> insert chunks -> disconnect

The store is entered as a context manager, so it is disconnected on
success and on every failure. Prerequisites are checked before anything
is deleted, so a run without enough reference data leaves the store
untouched.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from ..exceptions import FlightNotFoundError, MissingPrerequisiteError, SeederError
from ..models import SeatClass
from ..store import FlightScope, FlightStore
from ..utils.config import SeederConfig
from .batch_loader import BatchCallback, BatchLoader
from .fixed_flights import (
    FIXED_AIRLINE_CODE,
    FIXED_AIRPORT_CODES,
    FIXED_FLIGHT_NUMBERS,
    build_fixed_flights,
)
from .flight_generator import FlightGenerator, FlightNumberSequence
from .random_source import RandomSource
from .reference_catalog import ReferenceSeedResult, seed_reference_data
from .route_flights import FLIGHTS_PER_ROUTE, RouteFlightGenerator, resolve_routes
from .schedule import plan_schedule, window_bounds
from .seat_map import cabin_layout_seat_map

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    """Outcome of a seeding run."""
    scope: FlightScope
    generated: int
    deleted: int
    inserted: int
    batches: int
    airports: int = 0
    airlines: int = 0


@dataclass
class SeatRegenerationReport:
    """Outcome of rebuilding the seat map of one flight number."""
    flight_number: str
    updated: int
    seat_counts: Dict[SeatClass, int]


@dataclass
class StoreStats:
    airports: int
    airlines: int
    flights: int


class SeedRunner:
    """Drive generation and loading against one flight store."""

    def __init__(self, store: FlightStore, config: Optional[SeederConfig] = None,
                 rng: Optional[RandomSource] = None,
                 on_batch: Optional[BatchCallback] = None):
        self.store = store
        self.config = config or SeederConfig()
        self.rng = rng or RandomSource(self.config.seed)
        self.on_batch = on_batch

    def _loader(self) -> BatchLoader:
        return BatchLoader(self.store, batch_size=self.config.batch_size, on_batch=self.on_batch)

    def run_window(self, start: date, end: date) -> SeedReport:
        """
        Replace all flights departing between start and end (inclusive days).

        Raises:
            MissingPrerequisiteError: Not enough airports or airlines; nothing is deleted
            StoreError: The store failed; chunks inserted before a failure remain
        """
        scope = FlightScope.window(*window_bounds(start, end))
        logger.info(f"Seeding flights from {start.isoformat()} to {end.isoformat()}")

        try:
            with self.store:
                airports = self.store.find_airports(limit=self.config.airport_limit)
                airlines = self.store.find_airlines(limit=self.config.airline_limit)
                logger.info(f"Found {len(airports)} airports and {len(airlines)} airlines")

                generator = FlightGenerator(
                    airports,
                    airlines,
                    rng=self.rng,
                    sequence=FlightNumberSequence(),
                    max_seats=self.config.max_seats,
                )
                flights = generator.generate_many(
                    slot.departure_time for slot in plan_schedule(start, end, self.rng)
                )
                logger.info(f"Generated {len(flights):,} flights")

                result = self._loader().load(flights, scope)
        except SeederError as e:
            logger.error(f"Seeding run failed: {e}")
            raise

        logger.info(f"Successfully created {result.inserted:,} flights ({scope})")
        return SeedReport(
            scope=scope,
            generated=len(flights),
            deleted=result.deleted,
            inserted=result.inserted,
            batches=result.batches,
            airports=len(airports),
            airlines=len(airlines),
        )

    def run_fixed(self, on: date) -> SeedReport:
        """
        Replace the fixed AZ101/AZ102 test flights, inserting them one by one.

        Raises:
            MissingPrerequisiteError: FCO, MXP or AZ is not in the store
        """
        scope = FlightScope.numbers(FIXED_FLIGHT_NUMBERS)

        try:
            with self.store:
                missing = [code for code in FIXED_AIRPORT_CODES
                           if self.store.find_airport_by_code(code) is None]
                if self.store.find_airline_by_code(FIXED_AIRLINE_CODE) is None:
                    missing.append(FIXED_AIRLINE_CODE)
                if missing:
                    raise MissingPrerequisiteError(
                        f"Reference data not found: {', '.join(missing)}. Run seed-references first."
                    )

                flights = build_fixed_flights(on)
                deleted = self._loader().replace(scope)
                for flight in flights:
                    self.store.insert_one_flight(flight)
                    logger.info(f"Created flight {flight.flight_number}")
        except SeederError as e:
            logger.error(f"Fixed flight seeding failed: {e}")
            raise

        return SeedReport(
            scope=scope,
            generated=len(flights),
            deleted=deleted,
            inserted=len(flights),
            batches=len(flights),
            airports=len(FIXED_AIRPORT_CODES),
            airlines=1,
        )

    def run_routes(self, start: date, end: date,
                   flights_per_route: int = FLIGHTS_PER_ROUTE) -> SeedReport:
        """
        Replace all flights in the window with blocks of popular-route flights.

        Raises:
            MissingPrerequisiteError: No route has both airports in the store,
                or there is no airline; nothing is deleted
        """
        scope = FlightScope.window(*window_bounds(start, end))
        logger.info(f"Seeding popular routes from {start.isoformat()} to {end.isoformat()}")

        try:
            with self.store:
                routes = resolve_routes(self.store)
                airlines = self.store.find_airlines(limit=self.config.airline_limit)
                generator = RouteFlightGenerator(
                    routes, airlines, rng=self.rng, max_seats=self.config.max_seats
                )
                flights = generator.generate_routes(start, end, flights_per_route)
                logger.info(f"Generated {len(flights):,} flights on {len(routes)} routes")

                result = self._loader().load(flights, scope)
        except SeederError as e:
            logger.error(f"Route seeding failed: {e}")
            raise

        logger.info(f"Successfully created {result.inserted:,} flights ({scope})")
        return SeedReport(
            scope=scope,
            generated=len(flights),
            deleted=result.deleted,
            inserted=result.inserted,
            batches=result.batches,
            airports=len(generator.airports),
            airlines=len(airlines),
        )

    def regenerate_seats(self, flight_number: str,
                         on: Optional[date] = None) -> SeatRegenerationReport:
        """
        Rebuild the seat map of a stored flight with the cabin layout.

        Every stored flight with this number is rebuilt, or only the one
        departing on `on` when a day is given. All seats become available.

        Raises:
            FlightNotFoundError: No stored flight matches
        """
        try:
            with self.store:
                flights = self.store.find_flights(FlightScope.numbers([flight_number]))
                if on is not None:
                    flights = [f for f in flights if f.departure_time.date() == on]
                if not flights:
                    when = f" on {on.isoformat()}" if on else ""
                    raise FlightNotFoundError(f"No flight {flight_number}{when} in the store")

                updated = 0
                counts: Dict[SeatClass, int] = {}
                # One rebuild per departure; update_flight_seats covers duplicates
                by_departure = {flight.departure_time: flight for flight in flights}
                for flight in by_departure.values():
                    seats = cabin_layout_seat_map(
                        flight.aircraft.capacity, flight.base_price, self.rng, self.config.max_seats
                    )
                    updated += self.store.update_flight_seats(flight, seats)
                    counts = {
                        seat_class: sum(1 for seat in seats if seat.seat_class == seat_class)
                        for seat_class in SeatClass
                    }
                    logger.info(
                        f"Regenerated {len(seats)} seats for {flight.flight_number} "
                        f"departing {flight.departure_time.isoformat()}"
                    )
        except SeederError as e:
            logger.error(f"Seat regeneration failed: {e}")
            raise

        return SeatRegenerationReport(flight_number=flight_number, updated=updated,
                                      seat_counts=counts)

    def seed_references(self) -> ReferenceSeedResult:
        """Create the catalog airports and airlines that are missing."""
        try:
            with self.store:
                return seed_reference_data(self.store)
        except SeederError as e:
            logger.error(f"Reference seeding failed: {e}")
            raise

    def stats(self) -> StoreStats:
        with self.store:
            return StoreStats(
                airports=self.store.count_airports(),
                airlines=self.store.count_airlines(),
                flights=self.store.count_flights(),
            )
