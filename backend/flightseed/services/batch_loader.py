"""
Replace-then-insert loading of generated flights.

Deletes every existing flight in the target scope, then inserts the new
batch in fixed-size chunks, one bulk insert per chunk, in order. A failing
chunk stops the load; chunks already inserted stay committed.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from ..exceptions import BatchInsertError, SeederError
from ..models import FlightModel
from ..store import FlightScope, FlightStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

T = TypeVar("T")

BatchCallback = Callable[[int, int, int], None]


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Split items into consecutive lists of at most `size` elements."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for offset in range(0, len(items), size):
        yield list(items[offset:offset + size])


@dataclass
class LoadResult:
    deleted: int
    inserted: int
    batches: int


class BatchLoader:
    """Make the store's flights in a scope match a freshly generated batch."""

    def __init__(self, store: FlightStore, batch_size: int = DEFAULT_BATCH_SIZE,
                 on_batch: Optional[BatchCallback] = None):
        """
        Args:
            store: Connected flight store
            batch_size: Flights per bulk insert call
            on_batch: Called as on_batch(batch_number, total_batches, batch_len)
                after each committed chunk
        """
        if batch_size < 1:
            raise ValueError(f"Batch size must be positive, got {batch_size}")
        self.store = store
        self.batch_size = batch_size
        self.on_batch = on_batch

    def replace(self, scope: FlightScope) -> int:
        deleted = self.store.delete_flights(scope)
        logger.info(f"Deleted {deleted:,} existing flights ({scope})")
        return deleted

    def insert(self, flights: Sequence[FlightModel]) -> LoadResult:
        """
        Insert flights chunk by chunk.

        Raises:
            BatchInsertError: A chunk failed; `inserted` counts committed flights
        """
        batches = list(chunked(flights, self.batch_size))
        total = len(batches)
        inserted = 0

        for number, batch in enumerate(batches, start=1):
            try:
                self.store.insert_flights(batch)
            except SeederError as e:
                logger.error(f"Batch {number}/{total} failed after {inserted:,} flights inserted: {e}")
                raise BatchInsertError(
                    f"Insert of batch {number}/{total} failed: {e}",
                    chunk_index=number - 1,
                    inserted=inserted,
                    cause=e,
                ) from e
            inserted += len(batch)
            logger.info(f"Inserted batch {number}/{total} ({inserted:,}/{len(flights):,} flights)")
            if self.on_batch:
                self.on_batch(number, total, len(batch))

        return LoadResult(deleted=0, inserted=inserted, batches=total)

    def load(self, flights: Sequence[FlightModel], scope: FlightScope) -> LoadResult:
        """Delete everything in scope, then insert the new flights."""
        deleted = self.replace(scope)
        result = self.insert(flights)
        result.deleted = deleted
        return result
