"""Pydantic models for user inputs, requests, and saved snapshots."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Union, cast
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

__all__ = [
    "AmortizationItem",
    "CalculationMode",
    "CalculationRequest",
    "ManagementInput",
    "ModeInputs",
    "SavedRecord",
    "SublettingInput",
    "format_validation_error",
    "new_item_id",
]


class CalculationMode(str, Enum):
    """Business arrangement the calculation describes."""

    SUBLETTING = "subletting"
    MANAGEMENT = "management"


def new_item_id() -> str:
    return uuid4().hex


def _coerce_raw(value: Any) -> str:
    """Store form values exactly as typed; numbers become their text form."""

    if value is None:
        return ""
    if isinstance(value, bool):
        raise ValueError("Boolean values are not valid amounts")
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return value
    raise ValueError(f"Unsupported input value of type {type(value).__name__}")


class _RawInputModel(BaseModel):
    """Frozen form bucket persisted with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AmortizationItem(_RawInputModel):
    """Named ad-hoc recurring cost added to the subletting operational cost."""

    id: str = Field(default_factory=new_item_id)
    label: str = ""
    amount: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _ensure_id(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return new_item_id()
        return str(value)

    @field_validator("label", "amount", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _coerce_raw(value)


class SublettingInput(_RawInputModel):
    """Inputs for the subletting arrangement (rent paid out, rent collected)."""

    rent_cost: str = ""
    total_revenue: str = ""
    outsource_rate: str = ""
    amortization_items: tuple[AmortizationItem, ...] = ()

    @field_validator("rent_cost", "total_revenue", "outsource_rate", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> str:
        return _coerce_raw(value)

    @field_validator("amortization_items", mode="before")
    @classmethod
    def _default_items(cls, value: Any) -> Any:
        # Snapshots written before itemised amortisation existed omit the list.
        if value is None:
            return ()
        return value

    def item_index(self, item_id: str) -> int:
        for index, item in enumerate(self.amortization_items):
            if item.id == item_id:
                return index
        raise KeyError(item_id)

    def with_item(self, label: str = "", amount: Any = "") -> tuple[SublettingInput, str]:
        """Return a copy with a new trailing item and that item's identifier."""

        existing = {item.id for item in self.amortization_items}
        item_id = new_item_id()
        while item_id in existing:  # pragma: no cover - uuid collision
            item_id = new_item_id()
        item = AmortizationItem(id=item_id, label=label, amount=amount)
        updated = self.model_copy(
            update={"amortization_items": (*self.amortization_items, item)}
        )
        return updated, item_id

    def with_item_changed(
        self,
        item_id: str,
        *,
        label: str | None = None,
        amount: Any = None,
    ) -> SublettingInput:
        index = self.item_index(item_id)
        current = self.amortization_items[index]
        changes: dict[str, str] = {}
        if label is not None:
            changes["label"] = _coerce_raw(label)
        if amount is not None:
            changes["amount"] = _coerce_raw(amount)
        items = list(self.amortization_items)
        items[index] = current.model_copy(update=changes)
        return self.model_copy(update={"amortization_items": tuple(items)})

    def without_item(self, item_id: str) -> SublettingInput:
        items = tuple(item for item in self.amortization_items if item.id != item_id)
        if len(items) == len(self.amortization_items):
            raise KeyError(item_id)
        return self.model_copy(update={"amortization_items": items})


class ManagementInput(_RawInputModel):
    """Inputs for the management arrangement (service fee split with the agent)."""

    rent_amount: str = ""
    service_fee_rate: str = ""
    split_ratio: str = ""

    @field_validator("rent_amount", "service_fee_rate", "split_ratio", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> str:
        return _coerce_raw(value)


ModeInputs = Union[SublettingInput, ManagementInput]


class CalculationRequest(BaseModel):
    """Plain-data request carrying the active mode and both input buckets."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    mode: CalculationMode = CalculationMode.SUBLETTING
    subletting: SublettingInput = Field(default_factory=SublettingInput)
    management: ManagementInput = Field(default_factory=ManagementInput)

    @field_validator("subletting", "management", mode="before")
    @classmethod
    def _default_bucket(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, (Mapping, BaseModel)):
            raise ValueError("Input sections must be objects")
        return value

    @property
    def active_inputs(self) -> ModeInputs:
        if self.mode is CalculationMode.MANAGEMENT:
            return self.management
        return self.subletting


class SavedRecord(BaseModel):
    """Immutable snapshot of a mode and its raw inputs, labelled by the user."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    timestamp: datetime
    address: str = ""
    mode: CalculationMode
    sublet_data: SublettingInput | None = None
    mgmt_data: ManagementInput | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        # Older histories stored epoch milliseconds.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return value

    @field_validator("timestamp", mode="after")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_payload_matches_mode(self) -> "SavedRecord":
        if self.mode is CalculationMode.SUBLETTING:
            if self.sublet_data is None or self.mgmt_data is not None:
                raise ValueError("subletting records must carry subletData only")
        elif self.mgmt_data is None or self.sublet_data is not None:
            raise ValueError("management records must carry mgmtData only")
        return self

    @property
    def inputs(self) -> ModeInputs:
        # The model validator guarantees the bucket matching ``mode`` is set.
        if self.mode is CalculationMode.SUBLETTING:
            return cast(SublettingInput, self.sublet_data)
        return cast(ManagementInput, self.mgmt_data)


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
