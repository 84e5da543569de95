"""Unit coverage for the working calculator session."""

from __future__ import annotations

from pathlib import Path

import pytest

from rentpayout.models import CalculationMode
from rentpayout.services.export_service import DirectoryDownloadTarget, ExportStatus
from rentpayout.services.record_store import RecordStore, RecordValidationError
from rentpayout.services.session import CalculatorSession


@pytest.fixture()
def session(store: RecordStore) -> CalculatorSession:
    return CalculatorSession(store)


def test_new_session_has_no_result(session: CalculatorSession) -> None:
    assert session.mode is CalculationMode.SUBLETTING
    assert session.result is None


def test_result_follows_every_input_change(session: CalculatorSession) -> None:
    session.update_subletting(rent_cost="20000", total_revenue="45000")
    assert session.result is None

    session.update_subletting(outsource_rate="10")
    assert session.result is not None
    assert session.result.profit == 18357

    item_id = session.add_amortization_item("Furniture", "1500")
    assert session.result.operational_cost == 21500

    session.update_amortization_item(item_id, amount="2000")
    assert session.result.operational_cost == 22000

    session.remove_amortization_item(item_id)
    assert session.result.operational_cost == 20000


def test_mode_buckets_are_independent(session: CalculatorSession) -> None:
    session.update_subletting(rent_cost="20000", total_revenue="45000", outsource_rate="10")
    session.set_mode("management")

    assert session.result is None

    session.update_management(rent_amount="30000", service_fee_rate="15", split_ratio="50")
    assert session.result.outsource_fee == 2250

    session.set_mode(CalculationMode.SUBLETTING)
    assert session.subletting.rent_cost == "20000"
    assert session.result.outsource_fee == 4500


def test_unknown_fields_are_rejected(session: CalculatorSession) -> None:
    with pytest.raises(TypeError):
        session.update_management(rent="30000")


def test_unknown_item_ids_are_rejected(session: CalculatorSession) -> None:
    with pytest.raises(KeyError):
        session.update_amortization_item("missing", amount="1")


def test_save_and_load_round_trip(session: CalculatorSession, store: RecordStore) -> None:
    session.update_subletting(rent_cost="20000", total_revenue="45000", outsource_rate="10")
    session.add_amortization_item("Cleaning", "800")
    record = session.save("12 Harbour Rd")
    saved_inputs = session.subletting

    session.update_subletting(rent_cost="1")
    session.set_mode("management")
    session.load(record)

    assert session.mode is CalculationMode.SUBLETTING
    assert session.address == "12 Harbour Rd"
    assert session.subletting == saved_inputs
    assert store.records == (record,)


def test_loading_one_mode_keeps_the_other_bucket(session: CalculatorSession) -> None:
    session.set_mode("management")
    session.update_management(rent_amount="30000", service_fee_rate="15", split_ratio="50")
    record = session.save("Unit 4B")

    session.set_mode("subletting")
    session.update_subletting(rent_cost="5")
    session.load(record)

    assert session.mode is CalculationMode.MANAGEMENT
    assert session.subletting.rent_cost == "5"


def test_save_without_result_is_rejected(session: CalculatorSession, store: RecordStore) -> None:
    with pytest.raises(RecordValidationError):
        session.save("Unit 4B")

    assert store.records == ()


def test_rejected_save_keeps_the_address(session: CalculatorSession) -> None:
    session.address = "12 Harbour Rd"

    with pytest.raises(RecordValidationError):
        session.save("Unit 4B")
    with pytest.raises(RecordValidationError):
        session.save("   ")

    assert session.address == "12 Harbour Rd"


def test_delete_delegates_to_store(session: CalculatorSession, store: RecordStore) -> None:
    session.update_management(rent_amount="30000", service_fee_rate="15", split_ratio="50")
    session.set_mode("management")
    record = session.save("Unit 4B")

    assert session.delete(record.id, confirm=lambda: True)
    assert store.records == ()


def test_share_requires_a_result(session: CalculatorSession) -> None:
    outcome = session.share()

    assert outcome.status is ExportStatus.FAILED
    assert outcome.notice


def test_share_falls_back_to_download(session: CalculatorSession, tmp_path: Path) -> None:
    session.update_subletting(rent_cost="20000", total_revenue="45000", outsource_rate="10")
    session.address = "12 Harbour Rd"

    outcome = session.share(fallback=DirectoryDownloadTarget(tmp_path))

    assert outcome.status is ExportStatus.COMPLETED
    assert outcome.value == tmp_path / "12-harbour-rd-payout.pdf"
    assert outcome.value.read_bytes().startswith(b"%PDF")
