"""Whole-collection repositories over a key-value namespace.

Each repository owns one fixed key holding a JSON array of records.
Every read loads and validates the whole array; every write serializes
and stores the whole array. There is no partial update and no index,
which is fine for the handful of records a small team tracks.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from pygear.exceptions import GearStorageError
from pygear.storage import KeyValueStore

_logger = logging.getLogger(__name__)

class StoredRecord(Protocol):
    """A record the repository can key by id and serialize."""

    id: str

    def to_storage(self) -> dict[str, Any]:
        ...


RecordT = TypeVar("RecordT", bound=StoredRecord)


class Repository(Protocol[RecordT]):
    """Capability set the services depend on."""

    def is_initialized(self) -> bool:
        ...

    def load(self) -> list[RecordT]:
        ...

    def save_all(self, records: Iterable[RecordT]) -> None:
        ...

    def upsert(self, record: RecordT) -> bool:
        ...

    def delete(self, record_id: str) -> bool:
        ...


class CollectionRepository(Generic[RecordT]):
    """Repository storing a list of ``model`` records under ``key``."""

    def __init__(self, store: KeyValueStore, key: str, model: type[RecordT]) -> None:
        self._store = store
        self._key = key
        self._model = model
        self._adapter: TypeAdapter[list[RecordT]] = TypeAdapter(list[model])  # type: ignore[valid-type]

    @property
    def key(self) -> str:
        return self._key

    def is_initialized(self) -> bool:
        """Whether anything has been persisted under the key yet."""
        return bool(self._store.get(self._key))

    def load(self) -> list[RecordT]:
        """Return every stored record, in stored order."""
        stored = self._store.get(self._key)
        if not stored:
            return []
        try:
            return self._adapter.validate_json(stored)
        except ValidationError as exc:
            _logger.warning("Stored %s collection under %r failed validation", self._model.__name__, self._key)
            raise GearStorageError(
                f"Stored {self._model.__name__} records under {self._key!r} are invalid: {exc}",
                key=self._key,
            ) from exc

    def save_all(self, records: Iterable[RecordT]) -> None:
        """Replace the whole collection."""
        payload = [record.to_storage() for record in records]
        self._store.set(self._key, json.dumps(payload, ensure_ascii=False))
        _logger.debug("Wrote %d %s records under %r", len(payload), self._model.__name__, self._key)

    def upsert(self, record: RecordT) -> bool:
        """Replace the record with the same id or append it.

        Returns ``True`` when an existing record was replaced.
        """
        records = self.load()
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                self.save_all(records)
                return True
        records.append(record)
        self.save_all(records)
        return False

    def delete(self, record_id: str) -> bool:
        """Remove the record with ``record_id``; returns whether one was removed."""
        records = self.load()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self.save_all(remaining)
        return True
