"""
Environment configuration loader with validation for the flight seeder.
"""

import os
import logging
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from ..database import DEFAULT_SQLITE_NAME, build_database_url
from ..models import StoreBackend

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class SeederConfig(BaseModel):
    """Configuration model for a seeding run."""

    # Datastore
    database_url: str = Field(
        default=f"sqlite:///{DEFAULT_SQLITE_NAME}", description="Database connection URL"
    )
    store_backend: StoreBackend = Field(
        default=StoreBackend.SQL, description="Datastore backend (sql or valkey)"
    )
    sql_echo: bool = Field(default=False, description="Log SQL statements")

    # Generation
    batch_size: int = Field(default=100, ge=1, description="Flights per bulk insert")
    max_seats: int = Field(default=50, ge=1, description="Seat map size cap per flight")
    airport_limit: int = Field(default=10, ge=1, description="Reference airports to read")
    airline_limit: int = Field(default=5, ge=1, description="Reference airlines to read")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible runs")

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes", "on")


def load_config(env_file: Optional[str] = None) -> SeederConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        SeederConfig: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    seed = os.getenv("SEEDER_SEED")

    try:
        config_data: Dict[str, Any] = {
            "database_url": build_database_url(),
            "store_backend": os.getenv("SEEDER_STORE", "sql").lower(),
            "sql_echo": _env_flag("SEEDER_SQL_ECHO"),
            "batch_size": int(os.getenv("SEEDER_BATCH_SIZE", "100")),
            "max_seats": int(os.getenv("SEEDER_MAX_SEATS", "50")),
            "airport_limit": int(os.getenv("SEEDER_AIRPORT_LIMIT", "10")),
            "airline_limit": int(os.getenv("SEEDER_AIRLINE_LIMIT", "5")),
            "seed": int(seed) if seed else None,
            "log_level": os.getenv("SEEDER_LOG_LEVEL", "INFO"),
        }
        return SeederConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for command-line runs."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)
