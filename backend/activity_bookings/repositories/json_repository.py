"""
JSON file-backed repository for one entity family.

STORAGE MODEL
=============

Each family (users, activities, bookings, payments) lives in a single JSON
array document. An optional seed document provides read-only baseline
records.

Load:
  seed records are inserted first, persisted records second. A persisted
  record with the same id replaces the seed record entirely (no field merge)
  but keeps the seed record's position in iteration order.

Write:
  every mutation rewrites the whole document through write-to-temp + rename.

Failure policy (availability over durability):
  - unreadable / corrupt documents load as empty, records that fail model
    validation are skipped
  - a failed write is logged, counted, and reported through `degraded`,
    `last_write_error` and the optional `on_write_error` callback; the
    in-memory state stays authoritative and the mutating call still succeeds

Concurrency:
  `lock` is a re-entrant lock guarding the in-memory mapping and the file.
  Services that need a wider critical section (capacity check -> charge ->
  insert) hold it across their own steps.
"""

import threading
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from pydantic import ValidationError

from activity_bookings.core.logging import get_logger
from activity_bookings.core.metrics import record_store_load, record_store_write
from activity_bookings.infrastructure.file_storage import read_json_file, write_json_file
from activity_bookings.models.base import Entity
from activity_bookings.repositories.id_allocator import IdAllocator

logger = get_logger(__name__)

T = TypeVar("T", bound=Entity)

WriteErrorCallback = Callable[[str, Exception], None]


class JsonRepository(Generic[T]):
    def __init__(
        self,
        model: type[T],
        family: str,
        entity_file_path: str,
        seed_file_path: Optional[str] = None,
        on_write_error: Optional[WriteErrorCallback] = None,
    ):
        self.model = model
        self.family = family
        self.entity_file_path = entity_file_path
        self.seed_file_path = seed_file_path
        self.on_write_error = on_write_error

        self.lock = threading.RLock()
        self.degraded = False
        self.last_write_error: Optional[Exception] = None

        self._entities: dict[str, T] = {}
        self._ids = IdAllocator(family)
        # attribute name for every accepted key (snake_case name or camelCase alias)
        self._field_names = {}
        for name, info in model.model_fields.items():
            self._field_names[name] = name
            if info.alias:
                self._field_names[info.alias] = name

    # ---------------------------------------------------------------- load/save

    def load(self) -> None:
        """Replace in-memory state with seed + persisted documents."""
        seed: list[T] = []
        if self.seed_file_path:
            seed = self._read_entities(self.seed_file_path)
            logger.info("store_seed_loaded", family=self.family, path=self.seed_file_path, count=len(seed))

        persisted = self._read_entities(self.entity_file_path)
        logger.info("store_persisted_loaded", family=self.family, path=self.entity_file_path, count=len(persisted))

        merged: dict[str, T] = {}
        for entity in seed:
            merged[entity.id] = entity
        for entity in persisted:
            merged[entity.id] = entity

        with self.lock:
            self._entities = merged
            self._ids.reset(merged.keys())

        record_store_load(self.family, len(merged))
        logger.info(
            "store_loaded",
            family=self.family,
            total=len(merged),
            next_id=self._ids.next_value,
        )

    def save(self) -> bool:
        """
        Persist the whole family. Returns False (and flags the store as
        degraded) when the write failed; never raises for I/O problems.
        """
        with self.lock:
            documents = [entity.to_document() for entity in self._entities.values()]
            try:
                write_json_file(self.entity_file_path, documents)
            except (OSError, TypeError, ValueError) as e:
                self.degraded = True
                self.last_write_error = e
                record_store_write(self.family, ok=False)
                logger.error(
                    "store_write_failed",
                    family=self.family,
                    path=self.entity_file_path,
                    error=str(e),
                )
                if self.on_write_error is not None:
                    self.on_write_error(self.entity_file_path, e)
                return False

            self.degraded = False
            self.last_write_error = None
            record_store_write(self.family, ok=True)
            logger.debug("store_saved", family=self.family, count=len(documents))
            return True

    # ------------------------------------------------------------------ reads

    def get_all(self) -> list[T]:
        with self.lock:
            return list(self._entities.values())

    def get_by_id(self, entity_id: str) -> Optional[T]:
        return self._entities.get(entity_id)

    def __len__(self) -> int:
        return len(self._entities)

    # -------------------------------------------------------------- mutations

    def next_id(self) -> str:
        """Allocate the next ``<family>-<n>`` id."""
        return self._ids.allocate()

    def create(self, entity: T) -> T:
        """Insert or overwrite by id, then persist."""
        with self.lock:
            self._entities[entity.id] = entity
            self._ids.observe(entity.id)
            self.save()
        return entity

    def update(self, entity_id: str, fields: Mapping[str, Any]) -> Optional[T]:
        """
        Apply only the keys present in `fields` onto the stored entity.
        Keys may be attribute names or their camelCase aliases. An explicit
        None is applied as None (and validated like any other value).
        """
        changes = {}
        for key, value in fields.items():
            name = self._field_names.get(key)
            if name is None:
                raise ValueError(f"Unknown field for {self.family}: {key}")
            if name == "id":
                raise ValueError("Entity id cannot be changed")
            changes[name] = value

        with self.lock:
            existing = self._entities.get(entity_id)
            if existing is None:
                return None

            data = existing.model_dump()
            data.update(changes)
            updated = self.model.model_validate(data)

            self._entities[entity_id] = updated
            self.save()
        return updated

    def delete(self, entity_id: str) -> bool:
        with self.lock:
            if entity_id not in self._entities:
                return False
            del self._entities[entity_id]
            self.save()
        return True

    # ---------------------------------------------------------------- helpers

    def _read_entities(self, path: str) -> list[T]:
        raw = read_json_file(path)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("store_document_not_a_list", family=self.family, path=path)
            return []
        return list(self._parse_records(raw, path))

    def _parse_records(self, records: Iterable[Any], path: str) -> Iterable[T]:
        for record in records:
            if not isinstance(record, dict) or not record.get("id"):
                continue
            try:
                yield self.model.model_validate(record)
            except ValidationError as e:
                logger.warning(
                    "store_record_skipped",
                    family=self.family,
                    path=path,
                    id=record.get("id"),
                    error_count=e.error_count(),
                )
