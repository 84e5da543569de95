"""Working state for one calculator screen.

The session owns the current mode and one input bucket per mode. Switching
modes never clears or translates the other bucket. Results are not cached:
every read of :attr:`CalculatorSession.result` recomputes from the current
inputs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from rentpayout.config import PolicyConfiguration, load_policy
from rentpayout.models import (
    CalculationMode,
    CalculationResult,
    ManagementInput,
    ModeInputs,
    SavedRecord,
    SublettingInput,
)

from .calculation_service import compute
from .export_service import (
    DirectoryDownloadTarget,
    ExportCoordinator,
    ExportOutcome,
    ExportStatus,
    ShareTarget,
)
from .record_store import RecordStore

_LOGGER = logging.getLogger(__name__)


def _merge_fields(model: ModeInputs, fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(type(model).model_fields)
    if unknown:
        raise TypeError(f"Unknown input fields: {sorted(unknown)}")
    return {**model.model_dump(), **fields}


class CalculatorSession:
    def __init__(
        self,
        store: RecordStore,
        *,
        policy: PolicyConfiguration | None = None,
        exporter: ExportCoordinator | None = None,
        mode: CalculationMode | str = CalculationMode.SUBLETTING,
    ) -> None:
        self._store = store
        self._policy = policy or load_policy()
        self._exporter = exporter or ExportCoordinator()
        self.mode = CalculationMode(mode)
        self.subletting = SublettingInput()
        self.management = ManagementInput()
        self.address = ""

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def active_inputs(self) -> ModeInputs:
        if self.mode is CalculationMode.MANAGEMENT:
            return self.management
        return self.subletting

    @property
    def result(self) -> CalculationResult | None:
        return compute(self.mode, self.active_inputs, policy=self._policy)

    def set_mode(self, mode: CalculationMode | str) -> None:
        self.mode = CalculationMode(mode)

    def update_subletting(self, **fields: Any) -> SublettingInput:
        """Replace the given subletting fields, e.g. ``rent_cost="20000"``."""

        self.subletting = SublettingInput.model_validate(
            _merge_fields(self.subletting, fields)
        )
        return self.subletting

    def update_management(self, **fields: Any) -> ManagementInput:
        self.management = ManagementInput.model_validate(
            _merge_fields(self.management, fields)
        )
        return self.management

    def add_amortization_item(self, label: str = "", amount: Any = "") -> str:
        self.subletting, item_id = self.subletting.with_item(label, amount)
        return item_id

    def update_amortization_item(
        self,
        item_id: str,
        *,
        label: str | None = None,
        amount: Any = None,
    ) -> None:
        self.subletting = self.subletting.with_item_changed(
            item_id, label=label, amount=amount
        )

    def remove_amortization_item(self, item_id: str) -> None:
        self.subletting = self.subletting.without_item(item_id)

    def save(self, label: str | None = None) -> SavedRecord:
        """Snapshot the active mode's inputs under ``label`` (or the current address)."""

        address = self.address if label is None else label
        record = self._store.save(address, self.mode, self.active_inputs)
        self.address = record.address
        return record

    def load(self, record: SavedRecord) -> None:
        mode, inputs = self._store.load(record)
        self.mode = mode
        self.address = record.address
        if isinstance(inputs, SublettingInput):
            self.subletting = inputs
        else:
            self.management = inputs
        _LOGGER.debug("Loaded record %s into the session", record.id)

    def delete(self, record_id: str, *, confirm: Callable[[], bool]) -> bool:
        return self._store.delete(record_id, confirm=confirm)

    def share(
        self,
        *,
        share_target: ShareTarget | None = None,
        fallback: DirectoryDownloadTarget | None = None,
    ) -> ExportOutcome:
        """Export the current result; nothing happens while inputs are incomplete."""

        result = self.result
        if result is None:
            return ExportOutcome(
                ExportStatus.FAILED,
                notice="Enter the required amounts before exporting.",
            )
        return self._exporter.share_result(
            result,
            label=self.address,
            share_target=share_target,
            fallback=fallback,
        )


__all__ = ["CalculatorSession"]
