"""
Abstract flight store and replacement scopes.

A store is the only external collaborator of the seeding pipeline. It is
used as a context manager so the connection is released on every exit
path:

    with store:
        airports = store.find_airports(limit=10)
        ...
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional

from ..models import AirportModel, AirlineModel, FlightModel, SeatModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlightScope:
    """
    Selection of existing flights that a load replaces.

    Exactly one of the departure window (inclusive on both ends) or the
    flight-number set is set.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    flight_numbers: Optional[FrozenSet[str]] = None

    @classmethod
    def window(cls, start: datetime, end: datetime) -> "FlightScope":
        if start > end:
            raise ValueError(f"Scope start {start} is after end {end}")
        return cls(start=start, end=end)

    @classmethod
    def numbers(cls, flight_numbers: Iterable[str]) -> "FlightScope":
        return cls(flight_numbers=frozenset(flight_numbers))

    @property
    def is_window(self) -> bool:
        return self.flight_numbers is None

    def matches(self, flight: FlightModel) -> bool:
        """Whether a flight record falls inside this scope."""
        if self.is_window:
            return self.start <= flight.departure_time <= self.end
        return flight.flight_number in self.flight_numbers

    def __str__(self) -> str:
        if self.is_window:
            return f"departures {self.start.isoformat()} .. {self.end.isoformat()}"
        return f"flight numbers {', '.join(sorted(self.flight_numbers))}"


class FlightStore(ABC):
    """Collection store holding reference entities and flight records."""

    def __enter__(self) -> "FlightStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    @abstractmethod
    def connect(self) -> None:
        """Open the connection. Raises StoreError on failure."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release the connection. Safe to call when not connected."""

    @abstractmethod
    def find_airports(self, limit: int) -> List[AirportModel]:
        """Return up to `limit` active airports."""

    @abstractmethod
    def find_airlines(self, limit: int) -> List[AirlineModel]:
        """Return up to `limit` active airlines."""

    @abstractmethod
    def find_airport_by_code(self, code: str) -> Optional[AirportModel]:
        ...

    @abstractmethod
    def find_airline_by_code(self, code: str) -> Optional[AirlineModel]:
        ...

    @abstractmethod
    def save_airport(self, airport: AirportModel) -> None:
        ...

    @abstractmethod
    def save_airline(self, airline: AirlineModel) -> None:
        ...

    @abstractmethod
    def delete_flights(self, scope: FlightScope) -> int:
        """Delete every flight in scope and return how many were removed."""

    @abstractmethod
    def insert_flights(self, flights: List[FlightModel]) -> int:
        """Insert flights as one bulk operation and return the count inserted."""

    @abstractmethod
    def insert_one_flight(self, flight: FlightModel) -> None:
        ...

    @abstractmethod
    def find_flights(self, scope: FlightScope) -> List[FlightModel]:
        """Return the flights in scope ordered by departure."""

    @abstractmethod
    def update_flight_seats(self, flight: FlightModel, seats: List[SeatModel]) -> int:
        """Replace the seat map of the stored flight(s) matching number and departure."""

    @abstractmethod
    def count_flights(self, scope: Optional[FlightScope] = None) -> int:
        """Count flights, optionally restricted to a scope."""

    @abstractmethod
    def count_airports(self) -> int:
        ...

    @abstractmethod
    def count_airlines(self) -> int:
        ...
