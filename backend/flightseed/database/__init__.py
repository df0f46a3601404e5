"""
Database package for the flight seeder.

SQLAlchemy models and engine/session configuration used by the SQL
flight store.
"""

from .models import (
    Base,
    Airport,
    Airline,
    Flight,
    FlightSeat,
    create_all_tables,
)

from .config import (
    DatabaseConfig,
    DEFAULT_SQLITE_NAME,
    build_database_url,
)

__all__ = [
    # Models
    'Base',
    'Airport',
    'Airline',
    'Flight',
    'FlightSeat',
    'create_all_tables',

    # Configuration
    'DatabaseConfig',
    'DEFAULT_SQLITE_NAME',
    'build_database_url',
]
