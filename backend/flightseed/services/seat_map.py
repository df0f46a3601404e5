"""
Seat map synthesis.

Capacity is split 80/15/5 into economy, business and first. Seats are laid
out six abreast in one global sequence (economy block first, then business,
then first) and the map is cut to a payload cap, so large aircraft keep
only the front of the economy block.

Two further layouts exist: an all-economy map for popular-route flights
and a front-to-back cabin layout used when a flight's seats are
regenerated. Both obey the same cap.
"""

import math
import logging
from typing import Dict, List

from ..models import BasePriceModel, SeatClass, SeatModel
from .random_source import RandomSource

logger = logging.getLogger(__name__)

SEATS_PER_ROW = 6
SEAT_LETTERS = "ABCDEF"
MAX_SEATS = 50
AVAILABILITY_RATE = 0.7
PRICE_JITTER = 25

CLASS_SHARES = [
    (SeatClass.ECONOMY, 0.80),
    (SeatClass.BUSINESS, 0.15),
    (SeatClass.FIRST, 0.05),
]


def class_counts(capacity: int) -> Dict[SeatClass, int]:
    """
    Seats per fare class for a full aircraft.

    Rounding remainders are dropped, so the counts may sum to less than
    the capacity.
    """
    return {seat_class: math.floor(capacity * share) for seat_class, share in CLASS_SHARES}


def seat_label(index: int) -> str:
    """Label of the 1-based global seat index, e.g. 1 -> '1A', 8 -> '2B'."""
    row = math.ceil(index / SEATS_PER_ROW)
    letter = SEAT_LETTERS[(index - 1) % SEATS_PER_ROW]
    return f"{row}{letter}"


def synthesize_seat_map(capacity: int, base_price: BasePriceModel, rng: RandomSource,
                        max_seats: int = MAX_SEATS) -> List[SeatModel]:
    """
    Build the ordered seat list of one flight.

    Args:
        capacity: Aircraft seating capacity
        base_price: Fare of each class, seat prices vary +-25 around it
        rng: Random source for availability and price jitter
        max_seats: Cap on the number of seats returned

    Returns:
        At most min(max_seats, capacity) seats in generation order
    """
    seats: List[SeatModel] = []
    index = 1
    for seat_class, count in class_counts(capacity).items():
        class_price = base_price.for_class(seat_class)
        for _ in range(count):
            seats.append(SeatModel(
                seat_number=seat_label(index),
                seat_class=seat_class,
                is_available=rng.chance(AVAILABILITY_RATE),
                price=class_price + rng.randint(-PRICE_JITTER, PRICE_JITTER),
            ))
            index += 1

    return seats[:max_seats]


def economy_seat_map(capacity: int, economy_price: int, rng: RandomSource,
                     max_seats: int = MAX_SEATS) -> List[SeatModel]:
    """
    Single-class layout used for popular-route flights.

    Every seat is economy, six abreast, priced within +-10% of the
    economy fare and available with probability 0.7.
    """
    count = min(capacity, max_seats)
    return [
        SeatModel(
            seat_number=seat_label(index),
            seat_class=SeatClass.ECONOMY,
            is_available=rng.chance(AVAILABILITY_RATE),
            price=round(economy_price * (1 + (rng.uniform(0, 1) - 0.5) * 0.2)),
        )
        for index in range(1, count + 1)
    ]


# Cabins front to back with the seat letters of each row
CABIN_LAYOUT = [
    (SeatClass.FIRST, "AF"),
    (SeatClass.BUSINESS, "ACDF"),
    (SeatClass.ECONOMY, SEAT_LETTERS),
]


def cabin_counts(capacity: int) -> Dict[SeatClass, int]:
    """First 10% and business 20% of capacity (floored), economy takes the rest."""
    first = math.floor(capacity * 0.10)
    business = math.floor(capacity * 0.20)
    return {
        SeatClass.FIRST: first,
        SeatClass.BUSINESS: business,
        SeatClass.ECONOMY: capacity - first - business,
    }


def cabin_layout_seat_map(capacity: int, base_price: BasePriceModel, rng: RandomSource,
                          max_seats: int = MAX_SEATS) -> List[SeatModel]:
    """
    Rebuild a full seat map with a front-to-back cabin layout.

    First class sits two per row (A, F), business four per row (A, C, D, F)
    and economy six per row. Row numbers continue across cabins, a
    partially filled last row ends its cabin, and every seat starts
    available at the class fare +-10% (floored). The list is cut to
    max_seats like every other seat map.
    """
    counts = cabin_counts(capacity)
    seats: List[SeatModel] = []
    row = 1
    for seat_class, letters in CABIN_LAYOUT:
        count = counts[seat_class]
        class_price = base_price.for_class(seat_class)
        rows = math.ceil(count / len(letters))
        for position in range(count):
            seats.append(SeatModel(
                seat_number=f"{row + position // len(letters)}{letters[position % len(letters)]}",
                seat_class=seat_class,
                is_available=True,
                price=math.floor(class_price * (0.9 + rng.uniform(0, 0.2))),
            ))
        row += rows

    logger.debug(f"Cabin layout for capacity {capacity}: "
                 + ", ".join(f"{c.value}={n}" for c, n in counts.items()))
    return seats[:max_seats]
