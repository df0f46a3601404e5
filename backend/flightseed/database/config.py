"""
Database engine and session management for the SQL flight store.

Supported backends:
- SQLite (default, a local file in the working directory)
- MySQL/MariaDB through PyMySQL
- PostgreSQL through psycopg2

The connection URL comes from DATABASE_URL, or is assembled from the
DB_TYPE / DB_HOST / DB_PORT / DB_NAME / DB_USER / DB_PASSWORD variables.
"""

import os
import logging
from typing import Optional, Dict, Any
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool
from sqlalchemy.exc import SQLAlchemyError

from .models import create_all_tables

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_NAME = 'flightseed.db'

# db_type -> (URL scheme, default port, default user, URL suffix)
SERVER_BACKENDS = {
    'mysql': ('mysql+pymysql', '3306', 'root', '?charset=utf8mb4'),
    'mariadb': ('mysql+pymysql', '3306', 'root', '?charset=utf8mb4'),
    'postgresql': ('postgresql', '5432', 'postgres', ''),
}


def build_database_url() -> str:
    """
    Assemble a database URL from the environment.

    Raises:
        ValueError: DB_TYPE names an unsupported backend
    """
    database_url = os.getenv('DATABASE_URL')
    if database_url:
        return database_url

    db_type = os.getenv('DB_TYPE', 'sqlite').lower()
    if db_type == 'sqlite':
        return f"sqlite:///{os.getenv('DB_NAME', DEFAULT_SQLITE_NAME)}"

    if db_type not in SERVER_BACKENDS:
        raise ValueError(f"Unsupported database type: {db_type}")

    scheme, default_port, default_user, suffix = SERVER_BACKENDS[db_type]
    host = os.getenv('DB_HOST', 'localhost')
    port = os.getenv('DB_PORT', default_port)
    database = os.getenv('DB_NAME', 'flightseed')
    username = os.getenv('DB_USER', default_user)
    password = os.getenv('DB_PASSWORD', '')
    return f"{scheme}://{username}:{password}@{host}:{port}/{database}{suffix}"


def detect_database_type(database_url: str) -> str:
    for db_type in ('sqlite', 'mysql', 'postgresql'):
        if database_url.startswith(db_type):
            return db_type
    return 'unknown'


class DatabaseConfig:
    """
    Engine and session factory for one database.

    The engine is built on initialize() and disposed on close(), after
    which the same instance can be initialized again.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        """
        Args:
            database_url: Explicit URL, otherwise taken from the environment
            echo: Log every SQL statement
        """
        self.database_url = database_url or build_database_url()
        self.echo = echo
        self.db_type = detect_database_type(self.database_url)
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    def engine_kwargs(self) -> Dict[str, Any]:
        """Pool and driver settings for the detected backend."""
        kwargs: Dict[str, Any] = {'echo': self.echo, 'pool_pre_ping': True}

        if self.db_type == 'sqlite':
            kwargs['poolclass'] = StaticPool
            kwargs['connect_args'] = {'check_same_thread': False, 'timeout': 30}
        elif self.db_type in ('mysql', 'postgresql'):
            kwargs.update({
                'poolclass': QueuePool,
                'pool_size': int(os.getenv('DB_POOL_SIZE', '5')),
                'max_overflow': int(os.getenv('DB_MAX_OVERFLOW', '10')),
                'pool_recycle': int(os.getenv('DB_POOL_RECYCLE', '3600')),
            })
            if self.db_type == 'mysql':
                kwargs['connect_args'] = {'charset': 'utf8mb4', 'connect_timeout': 30}

        return kwargs

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def initialize(self) -> None:
        """
        Build the engine, check connectivity and prepare the session factory.

        Raises:
            SQLAlchemyError: The database cannot be reached
        """
        if self.is_initialized:
            return

        engine = create_engine(self.database_url, **self.engine_kwargs())
        if self.db_type == 'sqlite':
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            engine.dispose()
            logger.error(f"Failed to connect to {self.db_type} database: {e}")
            raise

        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info(f"Database engine initialized ({self.db_type})")

    def create_tables(self) -> None:
        """Create missing tables. Raises SQLAlchemyError on failure."""
        self.initialize()
        create_all_tables(self.engine)
        logger.debug("Database tables ensured")

    def get_session(self) -> Session:
        self.initialize()
        return self.SessionLocal()

    @contextmanager
    def get_session_context(self):
        """
        Session that commits on success and rolls back on error.

        Usage:
            with db_config.get_session_context() as session:
                session.add(...)
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self.SessionLocal = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


__all__ = [
    'DatabaseConfig',
    'DEFAULT_SQLITE_NAME',
    'build_database_url',
]
