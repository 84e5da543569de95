"""Service-layer helpers for payout calculations."""

from .calculation_service import calculate_payout, compute, parse_request
from .export_service import (
    DirectoryDownloadTarget,
    ExportCancelled,
    ExportCoordinator,
    ExportOutcome,
    ExportStatus,
    ShareUnavailable,
    render_csv,
    render_pdf,
)
from .record_store import (
    InMemoryRecordStorage,
    JsonFileRecordStorage,
    RecordStore,
    RecordValidationError,
    SQLiteRecordStorage,
)
from .session import CalculatorSession

__all__ = [
    "CalculatorSession",
    "DirectoryDownloadTarget",
    "ExportCancelled",
    "ExportCoordinator",
    "ExportOutcome",
    "ExportStatus",
    "InMemoryRecordStorage",
    "JsonFileRecordStorage",
    "RecordStore",
    "RecordValidationError",
    "SQLiteRecordStorage",
    "ShareUnavailable",
    "calculate_payout",
    "compute",
    "parse_request",
    "render_csv",
    "render_pdf",
]
