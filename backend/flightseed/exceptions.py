"""
Exception hierarchy for the seeding pipeline.

Every failure that should stop a run derives from SeederError so the CLI
can report it and exit non-zero after the store has been released.
"""

from typing import Optional


class SeederError(Exception):
    """Base class for all seeding failures."""
    pass


class MissingPrerequisiteError(SeederError):
    """Reference data required for generation is absent or insufficient."""
    pass


class RouteSelectionError(SeederError):
    """A distinct arrival airport could not be drawn within the retry budget."""
    pass


class InvalidRecordError(SeederError):
    """A generated or stored record failed model validation."""
    pass


class FlightNotFoundError(SeederError):
    """No stored flight matches the requested flight number and date."""
    pass


class StoreError(SeederError):
    """Connecting to, reading from or writing to the flight store failed."""
    pass


class BatchInsertError(StoreError):
    """
    A bulk insert chunk failed after zero or more chunks were committed.

    Chunks inserted before the failure stay in the store; no rollback is
    attempted.
    """

    def __init__(self, message: str, chunk_index: int, inserted: int,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.chunk_index = chunk_index
        self.inserted = inserted
        self.cause = cause
