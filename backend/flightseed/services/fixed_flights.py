"""
Fixed outbound/return test flights between Rome Fiumicino and Milan Malpensa.

Used to seed a small, predictable pair of flights the booking UI can be
exercised against. The flights are replaced by flight number, not by date.
"""

from datetime import date, datetime, time, timedelta
from typing import List

from ..models import (
    AircraftType,
    BasePriceModel,
    BaggagePolicyModel,
    CheckedBaggagePolicyModel,
    FlightModel,
    SeatClass,
    SeatModel,
    ServicesModel,
)

FIXED_AIRLINE_CODE = "AZ"
FIXED_AIRPORT_CODES = ("FCO", "MXP")
FIXED_FLIGHT_NUMBERS = ("AZ101", "AZ102")
FIXED_AIRCRAFT = AircraftType(model="Airbus A320", capacity=180)
FLIGHT_DURATION = 90


def _seat_map(economy_price: int) -> List[SeatModel]:
    layout = [
        ("1A", SeatClass.FIRST, 800),
        ("1B", SeatClass.FIRST, 800),
        ("2A", SeatClass.BUSINESS, 450),
        ("2B", SeatClass.BUSINESS, 450),
        ("10A", SeatClass.ECONOMY, economy_price),
        ("10B", SeatClass.ECONOMY, economy_price),
        ("10C", SeatClass.ECONOMY, economy_price),
    ]
    return [
        SeatModel(seat_number=label, seat_class=seat_class, is_available=True, price=price)
        for label, seat_class, price in layout
    ]


def _fixed_flight(flight_number: str, origin: str, destination: str,
                  departure_time: datetime, economy_price: int) -> FlightModel:
    return FlightModel(
        flight_number=flight_number,
        airline_code=FIXED_AIRLINE_CODE,
        departure_airport_code=origin,
        arrival_airport_code=destination,
        departure_time=departure_time,
        arrival_time=departure_time + timedelta(minutes=FLIGHT_DURATION),
        duration=FLIGHT_DURATION,
        aircraft=FIXED_AIRCRAFT,
        seats=_seat_map(economy_price),
        base_price=BasePriceModel(economy=economy_price, business=450, first=800),
        baggage=BaggagePolicyModel(checked=CheckedBaggagePolicyModel(extra_bag_price=50)),
        services=ServicesModel(meal=True, wifi=True, entertainment=True, extra_legroom=False),
    )


def build_fixed_flights(on: date) -> List[FlightModel]:
    """The AZ101 morning outbound and AZ102 evening return on the given day."""
    outbound_code, return_code = FIXED_FLIGHT_NUMBERS
    rome, milan = FIXED_AIRPORT_CODES
    return [
        _fixed_flight(outbound_code, rome, milan, datetime.combine(on, time(8, 0)), 150),
        _fixed_flight(return_code, milan, rome, datetime.combine(on, time(18, 0)), 160),
    ]
