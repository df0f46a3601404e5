"""
Flight stores: the datastore seam of the seeding pipeline.

`create_store` picks the backend named in the configuration.
"""

from typing import TYPE_CHECKING

from ..cache import ValkeyConfig
from ..database import DatabaseConfig
from ..models import StoreBackend
from .base import FlightStore, FlightScope
from .sql import SqlFlightStore
from .valkey import ValkeyFlightStore

if TYPE_CHECKING:
    from ..utils.config import SeederConfig


def create_store(config: "SeederConfig") -> FlightStore:
    """Build the flight store selected by `config.store_backend`."""
    if config.store_backend == StoreBackend.VALKEY:
        return ValkeyFlightStore(ValkeyConfig.from_env())
    return SqlFlightStore(DatabaseConfig(database_url=config.database_url, echo=config.sql_echo))


__all__ = [
    'FlightStore',
    'FlightScope',
    'SqlFlightStore',
    'ValkeyFlightStore',
    'create_store',
]
