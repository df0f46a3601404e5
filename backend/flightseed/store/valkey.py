"""
Valkey-backed flight store.

Key layout (all keys carry the configured prefix):
- {prefix}:airports                  hash, airport code -> JSON document
- {prefix}:airlines                  hash, airline code -> JSON document
- {prefix}:flight:{id}               string, JSON flight document
- {prefix}:flights:by_departure      sorted set, flight id scored by departure epoch
- {prefix}:flights:by_number:{no}    set of flight ids sharing a flight number
- {prefix}:flights:next_id           counter for flight ids

Each bulk insert reserves a block of ids with one INCRBY, then queues the
writes on a transactional pipeline, so a chunk is applied as a whole or
not at all. The ids of a failed chunk stay reserved and are never reused.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Set

import valkey
from valkey.exceptions import ValkeyError
from pydantic import ValidationError

from ..cache import ValkeyConfig
from ..exceptions import StoreError
from ..models import AirportModel, AirlineModel, FlightModel, SeatModel
from .base import FlightStore, FlightScope

logger = logging.getLogger(__name__)


def departure_score(moment: datetime) -> float:
    """Epoch seconds for a departure time; naive datetimes are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


class ValkeyFlightStore(FlightStore):
    """Flight store keeping JSON documents and index sets in Valkey."""

    def __init__(self, config: Optional[ValkeyConfig] = None, client=None):
        """
        Args:
            config: Connection settings, defaults to ValkeyConfig.from_env()
            client: Pre-built client (used as-is, never closed by the store)
        """
        self.config = config or ValkeyConfig.from_env()
        self._client = client
        self._owns_client = client is None
        self.prefix = self.config.key_prefix

    # Key helpers

    def _key(self, *parts: str) -> str:
        return ":".join((self.prefix,) + parts)

    @property
    def airports_key(self) -> str:
        return self._key("airports")

    @property
    def airlines_key(self) -> str:
        return self._key("airlines")

    @property
    def departure_index_key(self) -> str:
        return self._key("flights", "by_departure")

    def flight_key(self, flight_id) -> str:
        return self._key("flight", str(flight_id))

    def number_index_key(self, flight_number: str) -> str:
        return self._key("flights", "by_number", flight_number)

    @property
    def client(self):
        if self._client is None:
            raise StoreError("Valkey flight store is not connected")
        return self._client

    # Connection lifecycle

    def connect(self) -> None:
        try:
            if self._client is None:
                self._client = valkey.Valkey(**self.config.to_connection_kwargs())
            self._client.ping()
        except ValkeyError as e:
            if self._owns_client and self._client is not None:
                self._client.close()
                self._client = None
            raise StoreError(f"Could not connect to Valkey at {self.config.host}:{self.config.port}: {e}") from e
        logger.info(f"Connected to Valkey flight store: {self.config}")

    def disconnect(self) -> None:
        if self._client is not None and self._owns_client:
            try:
                self._client.close()
                logger.info("Disconnected from Valkey flight store")
            except ValkeyError as e:
                logger.warning(f"Error during Valkey disconnect: {e}")
            finally:
                self._client = None

    # Reference entities

    def find_airports(self, limit: int) -> List[AirportModel]:
        try:
            airports = [AirportModel.model_validate_json(doc) for doc in self.client.hvals(self.airports_key)]
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to read airports: {e}") from e
        active = sorted((a for a in airports if a.is_active), key=lambda a: a.code)
        return active[:limit]

    def find_airlines(self, limit: int) -> List[AirlineModel]:
        try:
            airlines = [AirlineModel.model_validate_json(doc) for doc in self.client.hvals(self.airlines_key)]
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to read airlines: {e}") from e
        active = sorted((a for a in airlines if a.is_active), key=lambda a: a.code)
        return active[:limit]

    def find_airport_by_code(self, code: str) -> Optional[AirportModel]:
        try:
            document = self.client.hget(self.airports_key, code)
            return AirportModel.model_validate_json(document) if document else None
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to read airport {code}: {e}") from e

    def find_airline_by_code(self, code: str) -> Optional[AirlineModel]:
        try:
            document = self.client.hget(self.airlines_key, code)
            return AirlineModel.model_validate_json(document) if document else None
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to read airline {code}: {e}") from e

    def save_airport(self, airport: AirportModel) -> None:
        try:
            self.client.hset(self.airports_key, airport.code, airport.model_dump_json())
        except ValkeyError as e:
            raise StoreError(f"Failed to save airport {airport.code}: {e}") from e

    def save_airline(self, airline: AirlineModel) -> None:
        try:
            self.client.hset(self.airlines_key, airline.code, airline.model_dump_json())
        except ValkeyError as e:
            raise StoreError(f"Failed to save airline {airline.code}: {e}") from e

    # Flights

    def _flight_ids(self, scope: FlightScope) -> Set[str]:
        if scope.is_window:
            return set(self.client.zrangebyscore(
                self.departure_index_key,
                departure_score(scope.start),
                departure_score(scope.end),
            ))
        ids: Set[str] = set()
        for flight_number in scope.flight_numbers:
            ids.update(self.client.smembers(self.number_index_key(flight_number)))
        return ids

    def delete_flights(self, scope: FlightScope) -> int:
        try:
            flight_ids = self._flight_ids(scope)
            deleted = 0
            for flight_id in sorted(flight_ids):
                document = self.client.get(self.flight_key(flight_id))
                if document is None:
                    self.client.zrem(self.departure_index_key, flight_id)
                    continue
                flight = FlightModel.model_validate_json(document)
                pipe = self.client.pipeline(transaction=True)
                pipe.delete(self.flight_key(flight_id))
                pipe.zrem(self.departure_index_key, flight_id)
                pipe.srem(self.number_index_key(flight.flight_number), flight_id)
                pipe.execute()
                deleted += 1
            return deleted
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to delete flights ({scope}): {e}") from e

    def insert_flights(self, flights: List[FlightModel]) -> int:
        if not flights:
            return 0
        try:
            last_id = self.client.incr(self._key("flights", "next_id"), len(flights))
            first_id = last_id - len(flights) + 1
            pipe = self.client.pipeline(transaction=True)
            for offset, flight in enumerate(flights):
                flight_id = str(first_id + offset)
                pipe.set(self.flight_key(flight_id), flight.model_dump_json())
                pipe.zadd(self.departure_index_key, {flight_id: departure_score(flight.departure_time)})
                pipe.sadd(self.number_index_key(flight.flight_number), flight_id)
            pipe.execute()
            return len(flights)
        except ValkeyError as e:
            raise StoreError(f"Failed to insert {len(flights)} flights: {e}") from e

    def insert_one_flight(self, flight: FlightModel) -> None:
        self.insert_flights([flight])

    def update_flight_seats(self, flight: FlightModel, seats: List[SeatModel]) -> int:
        """Swap the seat map of every document matching the flight's number and departure."""
        updated = 0
        try:
            for flight_id in sorted(self.client.smembers(self.number_index_key(flight.flight_number))):
                document = self.client.get(self.flight_key(flight_id))
                if document is None:
                    continue
                stored = FlightModel.model_validate_json(document)
                if stored.departure_time != flight.departure_time:
                    continue
                stored.seats = list(seats)
                self.client.set(self.flight_key(flight_id), stored.model_dump_json())
                updated += 1
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to update seats of {flight.flight_number}: {e}") from e
        return updated

    def find_flights(self, scope: FlightScope) -> List[FlightModel]:
        """Return flights in scope ordered by departure."""
        try:
            flights = []
            for flight_id in self._flight_ids(scope):
                document = self.client.get(self.flight_key(flight_id))
                if document is not None:
                    flights.append(FlightModel.model_validate_json(document))
        except (ValkeyError, ValidationError) as e:
            raise StoreError(f"Failed to read flights ({scope}): {e}") from e
        return sorted(flights, key=lambda f: (f.departure_time, f.flight_number))

    def count_flights(self, scope: Optional[FlightScope] = None) -> int:
        try:
            if scope is None:
                return self.client.zcard(self.departure_index_key)
            return len(self._flight_ids(scope))
        except ValkeyError as e:
            raise StoreError(f"Failed to count flights: {e}") from e

    def count_airports(self) -> int:
        try:
            return self.client.hlen(self.airports_key)
        except ValkeyError as e:
            raise StoreError(f"Failed to count airports: {e}") from e

    def count_airlines(self) -> int:
        try:
            return self.client.hlen(self.airlines_key)
        except ValkeyError as e:
            raise StoreError(f"Failed to count airlines: {e}") from e
