"""
Reference entity models: airports, airlines and the aircraft catalog.

Airports and airlines are read from the store and never modified by the
generator. Aircraft types are a fixed in-code catalog.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator


def clean_code(value):
    """Codes are stored trimmed and upper-case."""
    return value.strip().upper() if isinstance(value, str) else value


class CoordinatesModel(BaseModel):
    """Geographic position of an airport."""
    model_config = ConfigDict(from_attributes=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class AirportModel(BaseModel):
    """Airport reference data."""
    model_config = ConfigDict(from_attributes=True)

    code: str = Field(..., pattern=r"^[A-Z]{3,4}$", description="IATA airport code")
    name: str = Field(..., max_length=200, description="Airport name")
    city: str = Field(..., max_length=100, description="City served")
    country: str = Field(..., max_length=100, description="Country")
    timezone: str = Field(..., max_length=50, description="IANA timezone name")
    coordinates: Optional[CoordinatesModel] = None
    is_active: bool = Field(default=True)

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v):
        return clean_code(v)


class AirlineModel(BaseModel):
    """Airline reference data."""
    model_config = ConfigDict(from_attributes=True)

    code: str = Field(..., pattern=r"^[A-Z0-9]{2,3}$", description="Airline code")
    name: str = Field(..., max_length=200, description="Airline name")
    country: str = Field(..., max_length=100, description="Country of registration")
    is_active: bool = Field(default=True)

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v):
        return clean_code(v)


class AircraftType(BaseModel):
    """Aircraft model and its seating capacity."""
    model_config = ConfigDict(frozen=True)

    model: str
    capacity: int = Field(..., ge=1)


AIRCRAFT_CATALOG: List[AircraftType] = [
    AircraftType(model="Airbus A320", capacity=180),
    AircraftType(model="Boeing 737-800", capacity=189),
    AircraftType(model="Airbus A321", capacity=220),
    AircraftType(model="Boeing 777-300ER", capacity=396),
    AircraftType(model="Airbus A350-900", capacity=325),
]
