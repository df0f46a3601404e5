"""
Flight seeding Pydantic models package.

Reference entities, the aircraft catalog and the flight records produced
by the generator.
"""

# Enums
from .enums import (
    FlightStatus,
    SeatClass,
    StoreBackend,
)

# Reference data
from .reference import (
    CoordinatesModel,
    AirportModel,
    AirlineModel,
    AircraftType,
    AIRCRAFT_CATALOG,
)

# Flight records
from .flight import (
    FLIGHT_NUMBER_PATTERN,
    SeatModel,
    BasePriceModel,
    CarryOnPolicyModel,
    CheckedBaggagePolicyModel,
    BaggagePolicyModel,
    ServicesModel,
    FlightModel,
)

__all__ = [
    # Enums
    "FlightStatus",
    "SeatClass",
    "StoreBackend",

    # Reference models
    "CoordinatesModel",
    "AirportModel",
    "AirlineModel",
    "AircraftType",
    "AIRCRAFT_CATALOG",

    # Flight models
    "FLIGHT_NUMBER_PATTERN",
    "SeatModel",
    "BasePriceModel",
    "CarryOnPolicyModel",
    "CheckedBaggagePolicyModel",
    "BaggagePolicyModel",
    "ServicesModel",
    "FlightModel",
]
