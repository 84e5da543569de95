"""Unit coverage for saved snapshots and their storage adapters."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest

from rentpayout.models import CalculationMode, ManagementInput, SublettingInput
from rentpayout.services.record_store import (
    DEFAULT_STORAGE_KEY,
    InMemoryRecordStorage,
    JsonFileRecordStorage,
    RecordStore,
    RecordValidationError,
    SQLiteRecordStorage,
)

SUBLET = SublettingInput(
    rent_cost="20000",
    total_revenue="45000",
    outsource_rate="10",
    amortization_items=[{"id": "furniture", "label": "Furniture", "amount": "1500"}],
)
MGMT = ManagementInput(rent_amount="30000", service_fee_rate="15", split_ratio="50")


def test_save_prepends_records(store: RecordStore, clock) -> None:
    first = store.save("12 Harbour Rd", CalculationMode.SUBLETTING, SUBLET)
    clock.advance(timedelta(minutes=5))
    second = store.save("Unit 4B", CalculationMode.MANAGEMENT, MGMT)

    assert [record.id for record in store.records] == [second.id, first.id]
    assert first.id == str(int(first.timestamp.timestamp() * 1000))
    assert second.mgmt_data == MGMT
    assert second.sublet_data is None


def test_ids_stay_unique_within_the_same_instant(store: RecordStore) -> None:
    first = store.save("A", CalculationMode.MANAGEMENT, MGMT)
    second = store.save("B", CalculationMode.MANAGEMENT, MGMT)

    assert second.id == f"{first.id}-1"


def test_label_is_trimmed(store: RecordStore) -> None:
    record = store.save("  12 Harbour Rd ", CalculationMode.SUBLETTING, SUBLET)

    assert record.address == "12 Harbour Rd"


@pytest.mark.parametrize("label", ["", "   ", None])
def test_blank_label_is_rejected(store: RecordStore, storage, label) -> None:
    with pytest.raises(RecordValidationError):
        store.save(label, CalculationMode.SUBLETTING, SUBLET)

    assert len(store) == 0
    assert storage.read(DEFAULT_STORAGE_KEY) is None


def test_incomplete_inputs_are_rejected(store: RecordStore, storage) -> None:
    with pytest.raises(RecordValidationError, match="no result"):
        store.save("Unit 4B", CalculationMode.MANAGEMENT, ManagementInput(rent_amount="30000"))

    assert storage.read(DEFAULT_STORAGE_KEY) is None


@pytest.mark.parametrize(
    ("mode", "inputs"),
    [(CalculationMode.SUBLETTING, MGMT), (CalculationMode.MANAGEMENT, SUBLET)],
)
def test_inputs_of_the_other_mode_are_rejected(store: RecordStore, storage, mode, inputs) -> None:
    with pytest.raises(RecordValidationError, match="records need"):
        store.save("Unit 4B", mode, inputs)

    assert storage.read(DEFAULT_STORAGE_KEY) is None


def test_every_mutation_rewrites_the_whole_list(store: RecordStore, storage) -> None:
    store.save("A", CalculationMode.SUBLETTING, SUBLET)
    store.save("B", CalculationMode.MANAGEMENT, MGMT)

    persisted = json.loads(storage.read(DEFAULT_STORAGE_KEY))

    assert [entry["address"] for entry in persisted] == ["B", "A"]
    assert persisted[1]["subletData"]["rentCost"] == "20000"
    assert persisted[1]["subletData"]["amortizationItems"][0]["id"] == "furniture"
    assert persisted[0]["mgmtData"]["splitRatio"] == "50"


def test_records_survive_restart(storage, clock) -> None:
    saved = RecordStore(storage, clock=clock).save("A", CalculationMode.SUBLETTING, SUBLET)

    reopened = RecordStore(storage, clock=clock)

    assert reopened.records == (saved,)
    mode, inputs = reopened.load(reopened.get(saved.id))
    assert mode is CalculationMode.SUBLETTING
    assert inputs == SUBLET


def test_load_returns_a_copy(store: RecordStore) -> None:
    record = store.save("A", CalculationMode.SUBLETTING, SUBLET)

    _, inputs = store.load(record)

    assert inputs == record.sublet_data
    assert inputs is not record.sublet_data


def test_legacy_records_default_missing_items() -> None:
    legacy = [
        {
            "id": "1700000000000",
            "timestamp": 1700000000000,
            "address": "Old flat",
            "mode": "subletting",
            "subletData": {"rentCost": "18000", "totalRevenue": "30000", "outsourceRate": "8"},
        }
    ]
    storage = InMemoryRecordStorage({DEFAULT_STORAGE_KEY: json.dumps(legacy)})

    store = RecordStore(storage)
    mode, inputs = store.load(store.records[0])

    assert mode is CalculationMode.SUBLETTING
    assert isinstance(inputs, SublettingInput)
    assert inputs.amortization_items == ()
    assert inputs.rent_cost == "18000"
    assert store.records[0].timestamp.year == 2023


@pytest.mark.parametrize("blob", ["not json", '{"records": []}', "42"])
def test_unreadable_history_starts_empty(blob: str) -> None:
    storage = InMemoryRecordStorage({DEFAULT_STORAGE_KEY: blob})

    assert RecordStore(storage).records == ()


def test_invalid_entries_are_skipped() -> None:
    blob = json.dumps(
        [
            {"id": "1", "timestamp": 1, "mode": "management"},
            {
                "id": "2",
                "timestamp": 2,
                "address": "Kept",
                "mode": "management",
                "mgmtData": {"rentAmount": "1000"},
            },
        ]
    )
    store = RecordStore(InMemoryRecordStorage({DEFAULT_STORAGE_KEY: blob}))

    assert [record.address for record in store.records] == ["Kept"]


def test_delete_requires_confirmation(store: RecordStore, storage) -> None:
    record = store.save("A", CalculationMode.SUBLETTING, SUBLET)
    before = storage.read(DEFAULT_STORAGE_KEY)

    assert store.delete(record.id, confirm=lambda: False) is False
    assert store.records == (record,)
    assert storage.read(DEFAULT_STORAGE_KEY) == before

    assert store.delete(record.id, confirm=lambda: True) is True
    assert store.records == ()
    assert json.loads(storage.read(DEFAULT_STORAGE_KEY)) == []


def test_delete_unknown_id_is_a_no_op(store: RecordStore) -> None:
    store.save("A", CalculationMode.SUBLETTING, SUBLET)
    asked: list[bool] = []

    def confirm() -> bool:
        asked.append(True)
        return True

    assert store.delete("missing", confirm=confirm) is False
    assert len(store) == 1
    assert asked == []


def test_get_unknown_id_raises(store: RecordStore) -> None:
    with pytest.raises(KeyError):
        store.get("missing")


def test_json_file_storage_round_trip(tmp_path: Path, clock) -> None:
    storage = JsonFileRecordStorage(tmp_path / "history")
    saved = RecordStore(storage, clock=clock).save("A", CalculationMode.MANAGEMENT, MGMT)

    assert (tmp_path / "history" / f"{DEFAULT_STORAGE_KEY}.json").exists()
    assert RecordStore(JsonFileRecordStorage(tmp_path / "history")).records == (saved,)


def test_json_file_storage_missing_file(tmp_path: Path) -> None:
    assert JsonFileRecordStorage(tmp_path).read("absent") is None


def test_sqlite_storage_round_trip(tmp_path: Path, clock) -> None:
    db_path = tmp_path / "history.db"
    store = RecordStore(SQLiteRecordStorage(db_path), clock=clock)
    first = store.save("A", CalculationMode.SUBLETTING, SUBLET)
    clock.advance(timedelta(seconds=1))
    second = store.save("B", CalculationMode.MANAGEMENT, MGMT)

    # A fresh storage instance should read the persisted list.
    fresh = RecordStore(SQLiteRecordStorage(db_path))
    assert fresh.records == (second, first)


def test_custom_storage_key_isolates_histories(storage, clock) -> None:
    RecordStore(storage, key="office-a", clock=clock).save(
        "A", CalculationMode.MANAGEMENT, MGMT
    )

    assert RecordStore(storage, key="office-b").records == ()
    assert len(RecordStore(storage, key="office-a")) == 1
