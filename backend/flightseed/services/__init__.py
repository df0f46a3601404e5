"""
Flight generation and loading services.

Leaf-first: random source, pricing, seat maps, flight instances, schedule
planning, popular routes, batch loading, and the seeding pipeline that
ties them together.
"""

from .random_source import RandomSource
from .pricing import derive_base_price
from .seat_map import (
    synthesize_seat_map,
    economy_seat_map,
    cabin_layout_seat_map,
    class_counts,
    cabin_counts,
    seat_label,
    MAX_SEATS,
)
from .flight_generator import (
    FlightGenerator,
    FlightNumberSequence,
    validate_reference_data,
)
from .schedule import ScheduleSlot, plan_schedule, window_bounds
from .batch_loader import BatchLoader, LoadResult, chunked, DEFAULT_BATCH_SIZE
from .fixed_flights import build_fixed_flights, FIXED_FLIGHT_NUMBERS
from .reference_catalog import (
    REFERENCE_AIRPORTS,
    REFERENCE_AIRLINES,
    ReferenceSeedResult,
    seed_reference_data,
)
from .route_flights import (
    POPULAR_ROUTES,
    ROUTE_AIRCRAFT,
    RouteFlightGenerator,
    resolve_routes,
)
from .seed_runner import SeedRunner, SeedReport, SeatRegenerationReport, StoreStats

__all__ = [
    'RandomSource',
    'derive_base_price',
    'synthesize_seat_map',
    'economy_seat_map',
    'cabin_layout_seat_map',
    'class_counts',
    'cabin_counts',
    'seat_label',
    'MAX_SEATS',
    'FlightGenerator',
    'FlightNumberSequence',
    'validate_reference_data',
    'ScheduleSlot',
    'plan_schedule',
    'window_bounds',
    'BatchLoader',
    'LoadResult',
    'chunked',
    'DEFAULT_BATCH_SIZE',
    'build_fixed_flights',
    'FIXED_FLIGHT_NUMBERS',
    'REFERENCE_AIRPORTS',
    'REFERENCE_AIRLINES',
    'ReferenceSeedResult',
    'seed_reference_data',
    'SeedRunner',
    'POPULAR_ROUTES',
    'ROUTE_AIRCRAFT',
    'RouteFlightGenerator',
    'resolve_routes',
    'SeedReport',
    'SeatRegenerationReport',
    'StoreStats',
]
