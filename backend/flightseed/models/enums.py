"""
Enums for the flight seeding application.

Values match the strings stored by the booking application.
"""

from enum import Enum


class FlightStatus(str, Enum):
    """Flight status enumeration for tracking flight states."""
    SCHEDULED = "scheduled"
    BOARDING = "boarding"
    DEPARTED = "departed"
    ARRIVED = "arrived"
    CANCELLED = "cancelled"
    DELAYED = "delayed"


class SeatClass(str, Enum):
    """Aircraft seat class categories, cheapest first."""
    ECONOMY = "economy"
    BUSINESS = "business"
    FIRST = "first"


class StoreBackend(str, Enum):
    """Datastore backends a seeding run can target."""
    SQL = "sql"
    VALKEY = "valkey"
