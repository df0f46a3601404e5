"""
SQLAlchemy database models for the flight seeding system.

This module defines the tables the SQL flight store reads and writes:
- Airport: reference airports keyed by IATA code
- Airline: reference airlines keyed by code
- Flight: generated flight schedules with fares, baggage and services
- FlightSeat: the ordered seat map of a flight
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean, Float, Index
)
from sqlalchemy.orm import declarative_base, relationship

# Create the declarative base for all models
Base = declarative_base()


class Airport(Base):
    """
    Airport model representing airport reference data.

    Read by the generator to pick departure and arrival airports.
    """
    __tablename__ = 'airport'

    airport_id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(4), unique=True, nullable=False, index=True)  # IATA code (e.g., 'FCO')
    name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False)
    timezone = Column(String(50), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Airport(id={self.airport_id}, code='{self.code}', name='{self.name}')>"


class Airline(Base):
    """Airline model representing airline reference data."""
    __tablename__ = 'airline'

    airline_id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(3), unique=True, nullable=False, index=True)  # e.g. 'AZ'
    name = Column(String(200), nullable=False)
    country = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Airline(id={self.airline_id}, code='{self.code}', name='{self.name}')>"


class Flight(Base):
    """
    Flight model representing a generated flight.

    The aircraft is stored as a snapshot (model + capacity), and the
    baggage policy and services are flattened into columns.
    """
    __tablename__ = 'flight'

    flight_id = Column(Integer, primary_key=True, autoincrement=True)

    # Identification and route
    flightno = Column(String(8), nullable=False, index=True)  # e.g. 'AZ1000'
    airline_code = Column(String(3), ForeignKey('airline.code'), nullable=False, index=True)
    from_airport_code = Column(String(4), ForeignKey('airport.code'), nullable=False, index=True)
    to_airport_code = Column(String(4), ForeignKey('airport.code'), nullable=False, index=True)

    # Schedule
    departure = Column(DateTime, nullable=False, index=True)
    arrival = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes

    # Aircraft snapshot
    aircraft_model = Column(String(50), nullable=False)
    aircraft_capacity = Column(Integer, nullable=False)

    # Base fares
    price_economy = Column(Integer, nullable=False)
    price_business = Column(Integer, nullable=False)
    price_first = Column(Integer, nullable=False)

    # Baggage policy
    carry_on_max_weight = Column(Integer, nullable=False, default=8)
    carry_on_max_dimensions = Column(String(20), nullable=False, default="55x40x20 cm")
    checked_included = Column(Integer, nullable=False, default=1)
    checked_max_weight = Column(Integer, nullable=False, default=23)
    checked_extra_bag_price = Column(Integer, nullable=False, default=50)

    # Services
    meal = Column(Boolean, nullable=False, default=False)
    wifi = Column(Boolean, nullable=False, default=False)
    entertainment = Column(Boolean, nullable=False, default=False)
    extra_legroom = Column(Boolean, nullable=False, default=False)

    status = Column(String(20), nullable=False, default="scheduled", index=True)
    gate = Column(String(10), nullable=True)
    terminal = Column(String(10), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False,
                        default=lambda: datetime.now(timezone.utc))

    seats = relationship(
        "FlightSeat",
        back_populates="flight",
        order_by="FlightSeat.position",
        cascade="all, delete-orphan",
        lazy="select"
    )

    __table_args__ = (
        Index('ix_flight_flightno_departure', 'flightno', 'departure'),
    )

    def __repr__(self):
        return (f"<Flight(id={self.flight_id}, flightno='{self.flightno}', "
                f"from='{self.from_airport_code}', to='{self.to_airport_code}')>")


class FlightSeat(Base):
    """One seat of a flight's seat map, ordered by position."""
    __tablename__ = 'flight_seat'

    seat_id = Column(Integer, primary_key=True, autoincrement=True)
    flight_id = Column(Integer, ForeignKey('flight.flight_id', ondelete='CASCADE'),
                       nullable=False, index=True)
    position = Column(Integer, nullable=False)  # 0-based order within the seat map
    seat_number = Column(String(5), nullable=False)
    seat_class = Column(String(10), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    price = Column(Integer, nullable=False)

    flight = relationship("Flight", back_populates="seats", lazy="select")

    def __repr__(self):
        return f"<FlightSeat(flight_id={self.flight_id}, seat='{self.seat_number}', class='{self.seat_class}')>"


def create_all_tables(engine) -> None:
    """Create all tables defined on Base."""
    Base.metadata.create_all(engine)
