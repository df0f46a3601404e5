"""
SQLAlchemy-backed flight store.

Flights are stored in the `flight` table with their seat maps in
`flight_seat`. Each bulk insert runs in its own transaction, so a failing
chunk leaves previously committed chunks in place.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError

from ..database import DatabaseConfig, Airport, Airline, Flight, FlightSeat
from ..exceptions import StoreError
from ..models import (
    AirportModel,
    AirlineModel,
    AircraftType,
    CoordinatesModel,
    FlightModel,
    SeatModel,
    SeatClass,
    BasePriceModel,
    BaggagePolicyModel,
    CarryOnPolicyModel,
    CheckedBaggagePolicyModel,
    ServicesModel,
    FlightStatus,
)
from .base import FlightStore, FlightScope

logger = logging.getLogger(__name__)


def airport_to_model(row: Airport) -> AirportModel:
    coordinates = None
    if row.latitude is not None and row.longitude is not None:
        coordinates = CoordinatesModel(latitude=row.latitude, longitude=row.longitude)
    return AirportModel(
        code=row.code,
        name=row.name,
        city=row.city,
        country=row.country,
        timezone=row.timezone,
        coordinates=coordinates,
        is_active=row.is_active,
    )


def seat_to_row(position: int, seat: SeatModel) -> FlightSeat:
    return FlightSeat(
        position=position,
        seat_number=seat.seat_number,
        seat_class=seat.seat_class.value,
        is_available=seat.is_available,
        price=seat.price,
    )


def flight_to_row(flight: FlightModel) -> Flight:
    """Map a flight record onto a new Flight row with its seats."""
    return Flight(
        flightno=flight.flight_number,
        airline_code=flight.airline_code,
        from_airport_code=flight.departure_airport_code,
        to_airport_code=flight.arrival_airport_code,
        departure=flight.departure_time,
        arrival=flight.arrival_time,
        duration=flight.duration,
        aircraft_model=flight.aircraft.model,
        aircraft_capacity=flight.aircraft.capacity,
        price_economy=flight.base_price.economy,
        price_business=flight.base_price.business,
        price_first=flight.base_price.first,
        carry_on_max_weight=flight.baggage.carry_on.max_weight,
        carry_on_max_dimensions=flight.baggage.carry_on.max_dimensions,
        checked_included=flight.baggage.checked.included,
        checked_max_weight=flight.baggage.checked.max_weight,
        checked_extra_bag_price=flight.baggage.checked.extra_bag_price,
        meal=flight.services.meal,
        wifi=flight.services.wifi,
        entertainment=flight.services.entertainment,
        extra_legroom=flight.services.extra_legroom,
        status=flight.status.value,
        gate=flight.gate,
        terminal=flight.terminal,
        is_active=flight.is_active,
        seats=[seat_to_row(position, seat) for position, seat in enumerate(flight.seats)],
    )


def flight_to_model(row: Flight) -> FlightModel:
    """Map a Flight row (seats loaded) back to a flight record."""
    return FlightModel(
        flight_number=row.flightno,
        airline_code=row.airline_code,
        departure_airport_code=row.from_airport_code,
        arrival_airport_code=row.to_airport_code,
        departure_time=row.departure,
        arrival_time=row.arrival,
        duration=row.duration,
        aircraft=AircraftType(model=row.aircraft_model, capacity=row.aircraft_capacity),
        seats=[
            SeatModel(
                seat_number=seat.seat_number,
                seat_class=SeatClass(seat.seat_class),
                is_available=seat.is_available,
                price=seat.price,
            )
            for seat in row.seats
        ],
        base_price=BasePriceModel(
            economy=row.price_economy,
            business=row.price_business,
            first=row.price_first,
        ),
        baggage=BaggagePolicyModel(
            carry_on=CarryOnPolicyModel(
                max_weight=row.carry_on_max_weight,
                max_dimensions=row.carry_on_max_dimensions,
            ),
            checked=CheckedBaggagePolicyModel(
                included=row.checked_included,
                max_weight=row.checked_max_weight,
                extra_bag_price=row.checked_extra_bag_price,
            ),
        ),
        services=ServicesModel(
            meal=row.meal,
            wifi=row.wifi,
            entertainment=row.entertainment,
            extra_legroom=row.extra_legroom,
        ),
        status=FlightStatus(row.status),
        gate=row.gate,
        terminal=row.terminal,
        is_active=row.is_active,
    )


def _scope_clause(scope: FlightScope):
    if scope.is_window:
        return Flight.departure.between(scope.start, scope.end)
    return Flight.flightno.in_(sorted(scope.flight_numbers))


class SqlFlightStore(FlightStore):
    """Flight store on top of a SQLAlchemy engine (SQLite, MySQL or PostgreSQL)."""

    def __init__(self, db_config: Optional[DatabaseConfig] = None):
        self.db_config = db_config or DatabaseConfig()

    def connect(self) -> None:
        try:
            self.db_config.initialize()
            self.db_config.create_tables()
        except SQLAlchemyError as e:
            self.db_config.close()
            raise StoreError(f"Could not connect to {self.db_config.db_type} database: {e}") from e
        logger.info(f"Connected to {self.db_config.db_type} flight store")

    def disconnect(self) -> None:
        self.db_config.close()

    def find_airports(self, limit: int) -> List[AirportModel]:
        query = (
            select(Airport)
            .where(Airport.is_active.is_(True))
            .order_by(Airport.airport_id)
            .limit(limit)
        )
        try:
            with self.db_config.get_session_context() as session:
                return [airport_to_model(row) for row in session.scalars(query).all()]
        except (SQLAlchemyError, ValidationError) as e:
            raise StoreError(f"Failed to read airports: {e}") from e

    def find_airlines(self, limit: int) -> List[AirlineModel]:
        query = (
            select(Airline)
            .where(Airline.is_active.is_(True))
            .order_by(Airline.airline_id)
            .limit(limit)
        )
        try:
            with self.db_config.get_session_context() as session:
                return [AirlineModel.model_validate(row) for row in session.scalars(query).all()]
        except (SQLAlchemyError, ValidationError) as e:
            raise StoreError(f"Failed to read airlines: {e}") from e

    def find_airport_by_code(self, code: str) -> Optional[AirportModel]:
        try:
            with self.db_config.get_session_context() as session:
                row = session.scalars(select(Airport).where(Airport.code == code)).first()
                return airport_to_model(row) if row else None
        except (SQLAlchemyError, ValidationError) as e:
            raise StoreError(f"Failed to read airport {code}: {e}") from e

    def find_airline_by_code(self, code: str) -> Optional[AirlineModel]:
        try:
            with self.db_config.get_session_context() as session:
                row = session.scalars(select(Airline).where(Airline.code == code)).first()
                return AirlineModel.model_validate(row) if row else None
        except (SQLAlchemyError, ValidationError) as e:
            raise StoreError(f"Failed to read airline {code}: {e}") from e

    def save_airport(self, airport: AirportModel) -> None:
        coordinates = airport.coordinates
        row = Airport(
            code=airport.code,
            name=airport.name,
            city=airport.city,
            country=airport.country,
            timezone=airport.timezone,
            latitude=coordinates.latitude if coordinates else None,
            longitude=coordinates.longitude if coordinates else None,
            is_active=airport.is_active,
        )
        try:
            with self.db_config.get_session_context() as session:
                session.add(row)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save airport {airport.code}: {e}") from e

    def save_airline(self, airline: AirlineModel) -> None:
        try:
            with self.db_config.get_session_context() as session:
                session.add(Airline(**airline.model_dump()))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save airline {airline.code}: {e}") from e

    def delete_flights(self, scope: FlightScope) -> int:
        """Delete flights in scope together with their seats."""
        try:
            with self.db_config.get_session_context() as session:
                flight_ids = session.scalars(
                    select(Flight.flight_id).where(_scope_clause(scope))
                ).all()
                if not flight_ids:
                    return 0
                session.execute(delete(FlightSeat).where(FlightSeat.flight_id.in_(flight_ids)))
                session.execute(delete(Flight).where(Flight.flight_id.in_(flight_ids)))
                return len(flight_ids)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete flights ({scope}): {e}") from e

    def insert_flights(self, flights: List[FlightModel]) -> int:
        try:
            with self.db_config.get_session_context() as session:
                session.add_all([flight_to_row(flight) for flight in flights])
            return len(flights)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to insert {len(flights)} flights: {e}") from e

    def insert_one_flight(self, flight: FlightModel) -> None:
        self.insert_flights([flight])

    def update_flight_seats(self, flight: FlightModel, seats: List[SeatModel]) -> int:
        """Swap the seat map of every row matching the flight's number and departure."""
        query = select(Flight).where(
            Flight.flightno == flight.flight_number,
            Flight.departure == flight.departure_time,
        )
        try:
            with self.db_config.get_session_context() as session:
                rows = session.scalars(query).all()
                for row in rows:
                    row.seats = [seat_to_row(position, seat) for position, seat in enumerate(seats)]
                return len(rows)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update seats of {flight.flight_number}: {e}") from e

    def find_flights(self, scope: FlightScope) -> List[FlightModel]:
        """Return flights in scope ordered by departure, seats included."""
        query = (
            select(Flight)
            .where(_scope_clause(scope))
            .order_by(Flight.departure, Flight.flight_id)
        )
        try:
            with self.db_config.get_session_context() as session:
                return [flight_to_model(row) for row in session.scalars(query).all()]
        except (SQLAlchemyError, ValidationError) as e:
            raise StoreError(f"Failed to read flights ({scope}): {e}") from e

    def count_flights(self, scope: Optional[FlightScope] = None) -> int:
        query = select(func.count(Flight.flight_id))
        if scope is not None:
            query = query.where(_scope_clause(scope))
        return self._count(query, "flights")

    def count_airports(self) -> int:
        return self._count(select(func.count(Airport.airport_id)), "airports")

    def count_airlines(self) -> int:
        return self._count(select(func.count(Airline.airline_id)), "airlines")

    def _count(self, query, what: str) -> int:
        try:
            with self.db_config.get_session_context() as session:
                return session.scalar(query) or 0
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count {what}: {e}") from e
