"""Saved calculation snapshots and the storage adapters behind them."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from rentpayout.models import (
    CalculationMode,
    ManagementInput,
    ModeInputs,
    SavedRecord,
    SublettingInput,
)

from .calculation_service import compute

_LOGGER = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "rental-calc-history"

_RECORD_ADAPTER: TypeAdapter[SavedRecord] = TypeAdapter(SavedRecord)
_RECORD_LIST_ADAPTER: TypeAdapter[list[SavedRecord]] = TypeAdapter(list[SavedRecord])


class RecordValidationError(ValueError):
    """Raised when a snapshot cannot be saved in its current state."""


class RecordStorage(Protocol):
    """Key-value port holding one serialised blob per key."""

    def read(self, key: str) -> str | None:
        ...

    def write(self, key: str, blob: str) -> None:
        ...


class InMemoryRecordStorage:
    """Process-local storage, mainly for tests and previews."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        self._blobs[key] = blob


class JsonFileRecordStorage:
    """Stores each key as ``<key>.json`` inside ``directory``."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, blob: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        staging = path.with_suffix(".json.tmp")
        staging.write_text(blob, encoding="utf-8")
        staging.replace(path)


class SQLiteRecordStorage:
    """SQLite-backed key-value table."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = str(path)
        self._initialise()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._path)

    def _initialise(self) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def read(self, key: str) -> str | None:
        with self._connect() as connection:
            row = connection.execute(
                "SELECT value FROM kv WHERE key = ?",
                (key,),
            ).fetchone()
        return None if row is None else row[0]

    def write(self, key: str, blob: str) -> None:
        with self._connect() as connection:
            connection.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?)"
                " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, blob),
            )


def _decode_records(blob: str | None) -> list[SavedRecord]:
    if blob is None:
        return []
    try:
        raw = json.loads(blob)
    except json.JSONDecodeError as error:
        _LOGGER.warning("Discarding unreadable record history: %s", error)
        return []
    if not isinstance(raw, list):
        _LOGGER.warning("Discarding record history that is not a list")
        return []

    records: list[SavedRecord] = []
    for index, entry in enumerate(raw):
        try:
            records.append(_RECORD_ADAPTER.validate_python(entry))
        except ValidationError as error:
            _LOGGER.warning(
                "Skipping unreadable record at position %d: %s", index, error.error_count()
            )
    return records


def _encode_records(records: Sequence[SavedRecord]) -> str:
    return _RECORD_LIST_ADAPTER.dump_json(list(records), by_alias=True).decode("utf-8")


class RecordStore:
    """Most-recent-first list of saved snapshots, rewritten on every change."""

    def __init__(
        self,
        storage: RecordStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._records: list[SavedRecord] = _decode_records(storage.read(key))

    @property
    def records(self) -> tuple[SavedRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> SavedRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise KeyError(record_id)

    def _next_id(self, created_at: datetime) -> str:
        base = str(int(created_at.timestamp() * 1000))
        existing = {record.id for record in self._records}
        candidate = base
        suffix = 1
        while candidate in existing:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _persist(self, records: list[SavedRecord]) -> None:
        self._storage.write(self._key, _encode_records(records))
        self._records = records

    def save(self, label: str, mode: CalculationMode | str, inputs: ModeInputs) -> SavedRecord:
        """Snapshot ``inputs`` under ``label``.

        Raises :class:`RecordValidationError` for a blank label, for inputs of
        the other mode, or when the inputs do not currently produce a result.
        """

        address = (label or "").strip()
        if not address:
            raise RecordValidationError("A label is required to save a calculation")

        mode = CalculationMode(mode)
        expected = SublettingInput if mode is CalculationMode.SUBLETTING else ManagementInput
        if not isinstance(inputs, expected):
            raise RecordValidationError(
                f"{mode.value} records need {expected.__name__}, got {type(inputs).__name__}"
            )
        if compute(mode, inputs) is None:
            raise RecordValidationError("There is no result to save yet")

        created_at = self._clock()
        payload: dict[str, Any] = {
            "id": self._next_id(created_at),
            "timestamp": created_at,
            "address": address,
            "mode": mode,
        }
        if mode is CalculationMode.SUBLETTING:
            payload["sublet_data"] = inputs.model_copy(deep=True)
        else:
            payload["mgmt_data"] = inputs.model_copy(deep=True)
        record = SavedRecord.model_validate(payload)

        self._persist([record, *self._records])
        _LOGGER.info("Saved %s record %s", mode.value, record.id)
        return record

    @staticmethod
    def load(record: SavedRecord) -> tuple[CalculationMode, ModeInputs]:
        """Return the mode and a copy of the inputs to rehydrate from ``record``."""

        return record.mode, record.inputs.model_copy(deep=True)

    def delete(self, record_id: str, *, confirm: Callable[[], bool]) -> bool:
        """Remove ``record_id`` after ``confirm()`` agrees.

        Returns ``True`` when a record was removed. Declining or an unknown id
        leaves the store untouched.
        """

        if not any(record.id == record_id for record in self._records):
            return False
        if not confirm():
            return False

        remaining = [record for record in self._records if record.id != record_id]
        self._persist(remaining)
        _LOGGER.info("Deleted record %s", record_id)
        return True


__all__ = [
    "DEFAULT_STORAGE_KEY",
    "InMemoryRecordStorage",
    "JsonFileRecordStorage",
    "RecordStorage",
    "RecordStore",
    "RecordValidationError",
    "SQLiteRecordStorage",
]
