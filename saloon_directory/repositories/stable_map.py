from typing import Generic, Iterator, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError
from sqlalchemy.orm import Session

from saloon_directory.db.models.stable import StableEntry
from saloon_directory.errors import (
    StorageCapacityError,
    StorageCorruptionError,
    StorageEncodingError,
)

V = TypeVar("V", bound=BaseModel)

# Keys are stored in a signed 64-bit column
MAX_KEY = 2**63 - 1


class DurableMap(Generic[V]):
    """
    Durable mapping from an integer key to a pydantic model value.

    Every map owns one memory id; entries of different maps share the
    `stable_entries` table without colliding. Values are stored as JSON
    bytes and must not exceed `max_value_size` once encoded.

    Methods take the caller's session and only flush; the caller's
    transaction decides when a mutation becomes durable.
    """

    def __init__(self, memory_id: int, value_type: type[V], max_value_size: int):
        self.memory_id = memory_id
        self.value_type = value_type
        self.max_value_size = max_value_size

    def _serialize(self, key: int, value: V) -> bytes:
        try:
            return value.model_dump_json().encode("utf-8")
        except (PydanticSerializationError, UnicodeEncodeError) as e:
            raise StorageEncodingError(f"value for key {key} cannot be encoded") from e

    def _encode(self, key: int, value: V) -> bytes:
        data = self._serialize(key, value)
        if len(data) > self.max_value_size:
            raise StorageCapacityError(
                f"value for key {key} is {len(data)} bytes, "
                f"exceeds the maximum of {self.max_value_size}"
            )
        return data

    def fits(self, key: int, value: V) -> bool:
        """Whether value would be accepted by `insert` under the size bound."""
        return len(self._serialize(key, value)) <= self.max_value_size

    def _decode(self, key: int, data: bytes) -> V:
        try:
            return self.value_type.model_validate_json(data)
        except ValidationError as e:
            raise StorageCorruptionError(
                f"stored value for key {key} in memory {self.memory_id} cannot be decoded"
            ) from e

    def _entry(self, db: Session, key: int) -> StableEntry | None:
        if not 0 <= key <= MAX_KEY:
            return None
        return db.get(StableEntry, (self.memory_id, key))

    def get(self, db: Session, key: int) -> V | None:
        """Get the value stored under key."""
        entry = self._entry(db, key)
        if entry is None:
            return None
        return self._decode(key, entry.value)

    def insert(self, db: Session, key: int, value: V) -> V | None:
        """Store value under key, returning the value it replaced, if any."""
        if not 0 <= key <= MAX_KEY:
            raise StorageCapacityError(f"key {key} is outside the storable range")
        data = self._encode(key, value)

        entry = self._entry(db, key)
        previous = None
        if entry is None:
            db.add(StableEntry(memory_id=self.memory_id, key=key, value=data))
        else:
            previous = self._decode(key, entry.value)
            entry.value = data
        db.flush()
        return previous

    def remove(self, db: Session, key: int) -> V | None:
        """Remove key, returning the value it held, if any."""
        entry = self._entry(db, key)
        if entry is None:
            return None
        previous = self._decode(key, entry.value)
        db.delete(entry)
        db.flush()
        return previous

    def iterate(
        self, db: Session, offset: int = 0, limit: int | None = None
    ) -> Iterator[tuple[int, V]]:
        """Yield (key, value) pairs in ascending key order, optionally windowed."""
        if limit is not None and limit <= 0:
            return
        query = (
            db.query(StableEntry)
            .filter(StableEntry.memory_id == self.memory_id)
            .order_by(StableEntry.key)
        )
        if offset > 0:
            query = query.offset(min(offset, MAX_KEY))
        if limit is not None:
            query = query.limit(min(limit, MAX_KEY))
        for entry in query.all():
            yield entry.key, self._decode(entry.key, entry.value)
