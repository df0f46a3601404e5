"""
Flight record models for the flight seeding application.

These are the documents the generator produces and the stores persist.
Field constraints follow what the booking application accepts.
"""

from datetime import datetime, timedelta
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .enums import FlightStatus, SeatClass
from .reference import AircraftType

FLIGHT_NUMBER_PATTERN = r"^[A-Z0-9]{2}\d{3,4}$"


class SeatModel(BaseModel):
    """
    Individual seat on a flight.

    The label combines the row number and a letter A-F (e.g. '12C').
    """
    model_config = ConfigDict(from_attributes=True)

    seat_number: str = Field(..., max_length=5, description="Seat label (e.g., '12A')")
    seat_class: SeatClass = Field(..., description="Fare class of the seat")
    is_available: bool = Field(default=True, description="Whether the seat can be booked")
    price: int = Field(..., ge=0, description="Seat price")


class BasePriceModel(BaseModel):
    """Three-tier base fare of a flight."""
    model_config = ConfigDict(from_attributes=True)

    economy: int = Field(..., ge=0)
    business: int = Field(..., ge=0)
    first: int = Field(..., ge=0)

    def for_class(self, seat_class: SeatClass) -> int:
        """Base price of the given fare class."""
        return getattr(self, seat_class.value)


class CarryOnPolicyModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    max_weight: int = Field(default=8, ge=0, description="Maximum weight in kg")
    max_dimensions: str = Field(default="55x40x20 cm")


class CheckedBaggagePolicyModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    included: int = Field(default=1, ge=0, description="Free checked bags")
    max_weight: int = Field(default=23, ge=0, description="Maximum weight per bag in kg")
    extra_bag_price: int = Field(default=50, ge=0, description="Price of each additional bag")


class BaggagePolicyModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    carry_on: CarryOnPolicyModel = Field(default_factory=CarryOnPolicyModel)
    checked: CheckedBaggagePolicyModel = Field(default_factory=CheckedBaggagePolicyModel)


class ServicesModel(BaseModel):
    """On-board services offered on a flight."""
    model_config = ConfigDict(from_attributes=True)

    meal: bool = False
    wifi: bool = False
    entertainment: bool = False
    extra_legroom: bool = False


class FlightModel(BaseModel):
    """
    Complete flight record as stored for the booking application.

    References to airports and airlines are by code. The aircraft is a
    snapshot of the catalog entry, not a reference.
    """
    model_config = ConfigDict(from_attributes=True)

    flight_number: str = Field(..., pattern=FLIGHT_NUMBER_PATTERN, description="Flight number")
    airline_code: str = Field(..., description="Operating airline code")
    departure_airport_code: str = Field(..., description="Departure airport code")
    arrival_airport_code: str = Field(..., description="Arrival airport code")
    departure_time: datetime = Field(..., description="Scheduled departure time")
    arrival_time: datetime = Field(..., description="Scheduled arrival time")
    duration: int = Field(..., ge=1, description="Flight duration in minutes")
    aircraft: AircraftType
    seats: List[SeatModel] = Field(default_factory=list)
    base_price: BasePriceModel
    baggage: BaggagePolicyModel = Field(default_factory=BaggagePolicyModel)
    services: ServicesModel = Field(default_factory=ServicesModel)
    status: FlightStatus = Field(default=FlightStatus.SCHEDULED)
    gate: Optional[str] = Field(None, max_length=10)
    terminal: Optional[str] = Field(None, max_length=10)
    is_active: bool = Field(default=True)

    @model_validator(mode="after")
    def check_route_and_timing(self) -> "FlightModel":
        """Reject self-loops and arrival times that disagree with the duration."""
        if self.departure_airport_code == self.arrival_airport_code:
            raise ValueError("Departure and arrival airports must differ")
        if self.arrival_time != self.departure_time + timedelta(minutes=self.duration):
            raise ValueError("Arrival time must equal departure time plus duration")
        return self
