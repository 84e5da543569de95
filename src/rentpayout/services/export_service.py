"""Render results as documents and coordinate export and share actions."""

from __future__ import annotations

import csv
import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from io import StringIO
from pathlib import Path
from typing import Any, Callable, Iterable, List, Protocol

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from rentpayout.config import PolicyConfiguration, TaxConstants, load_policy
from rentpayout.models import CalculationMode, CalculationResult
from rentpayout.version import generator_label

from .calculators import format_percentage
from .fonts import unicode_font_path

_LOGGER = logging.getLogger(__name__)

_HUNDRED = Decimal(100)
DOCUMENT_TITLE = "Outsourced leasing payout"
PDF_FONT_FAMILY = "DocumentSans"


def _format_currency(value: Any) -> str:
    number = float(value or 0)
    if number < 0:
        return f"-${-number:,.0f}"
    return f"${number:,.0f}"


def _rate_label(rate: Decimal) -> str:
    return format_percentage(rate * _HUNDRED)


def payout_rows(result: CalculationResult, constants: TaxConstants) -> List[tuple[str, str]]:
    """Cashier-facing rows: the agreed fee and what is actually remitted."""

    return [
        ("Agreed fee (before deductions)", _format_currency(result.outsource_fee)),
        (
            f"(-) Income tax withheld ({_rate_label(constants.tax_rate)})",
            _format_currency(result.tax),
        ),
        (
            f"(-) Supplementary health premium ({_rate_label(constants.health_rate)})",
            _format_currency(result.health),
        ),
        ("Net remittance", _format_currency(result.net_pay)),
    ]


def profit_rows(result: CalculationResult, constants: TaxConstants) -> List[tuple[str, str]]:
    """Owner-facing rows: revenue net of business tax down to the margin."""

    rows = [
        (
            f"Revenue (excl. {_rate_label(constants.vat_rate)} business tax)",
            _format_currency(result.real_revenue),
        )
    ]
    if result.mode is CalculationMode.SUBLETTING:
        rows.append(("(-) Rent paid out", _format_currency(result.rent_cost_only)))
        if result.amortization_total:
            rows.append(("(-) Amortised costs", _format_currency(result.amortization_total)))
    rows.extend(
        [
            ("(-) Outsource fee", _format_currency(result.outsource_fee)),
            ("Net profit", _format_currency(result.profit)),
            ("Margin", f"{result.margin_display}%"),
        ]
    )
    return rows


def result_notices(result: CalculationResult, constants: TaxConstants) -> List[str]:
    notices: List[str] = []
    if result.is_tax_threshold_reached:
        notices.append(
            "The payment reaches the withholding threshold "
            f"({_format_currency(constants.health_threshold)}); tax and health "
            "premium have been deducted."
        )
    if result.is_loss:
        notices.append("This arrangement runs at a loss.")
    elif result.is_low_margin:
        notices.append(
            f"Margin is below {format_percentage(constants.margin_warning_threshold)}; "
            "consider renegotiating the outsource fee."
        )
    return notices


def render_csv(
    result: CalculationResult,
    *,
    label: str = "",
    policy: PolicyConfiguration | None = None,
) -> str:
    constants = (policy or load_policy()).tax
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["Section", "Item", "Amount"])
    if label:
        writer.writerow(["Property", label, ""])
    for row_label, value in payout_rows(result, constants):
        writer.writerow(["Payout", row_label, value])
    for row_label, value in profit_rows(result, constants):
        writer.writerow(["Profitability", row_label, value])
    for notice in result_notices(result, constants):
        writer.writerow(["Notice", notice, ""])
    return buffer.getvalue()


@dataclass(frozen=True)
class _Typeface:
    family: str
    heading_style: str


def _register_typeface(pdf: FPDF) -> _Typeface:
    font_path = unicode_font_path()
    if font_path is not None:
        pdf.add_font(PDF_FONT_FAMILY, fname=str(font_path))
        return _Typeface(PDF_FONT_FAMILY, heading_style="")
    # Core fonts are Latin-1 only; non-Latin labels fail at the coordinator.
    return _Typeface("Helvetica", heading_style="B")


def _write_section(
    pdf: FPDF, typeface: _Typeface, heading: str, rows: Iterable[tuple[str, str]]
) -> None:
    pdf.set_font(typeface.family, style=typeface.heading_style, size=12)
    pdf.cell(0, 8, heading, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(typeface.family, size=11)
    label_width = pdf.epw * 0.7
    for row_label, value in rows:
        pdf.cell(label_width, 6, row_label)
        pdf.cell(0, 6, value, align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)


def render_pdf(
    result: CalculationResult,
    *,
    label: str = "",
    generated_at: datetime | None = None,
    policy: PolicyConfiguration | None = None,
) -> bytes:
    """Return a single-page PDF summarising ``result``."""

    constants = (policy or load_policy()).tax
    stamp = generated_at or datetime.now(timezone.utc)

    pdf = FPDF()
    pdf.set_auto_page_break(auto=False)
    pdf.add_page()
    typeface = _register_typeface(pdf)
    pdf.set_title(DOCUMENT_TITLE)
    pdf.set_text_color(33, 37, 41)

    pdf.set_font(typeface.family, style=typeface.heading_style, size=16)
    pdf.cell(0, 10, DOCUMENT_TITLE, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(typeface.family, size=10)
    subtitle = f"{result.mode.value.title()} mode - {stamp:%Y-%m-%d %H:%M}"
    if label:
        subtitle = f"{label} - {subtitle}"
    pdf.multi_cell(pdf.epw, 6, subtitle, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    _write_section(pdf, typeface, "1. Payout settlement", payout_rows(result, constants))
    _write_section(pdf, typeface, "2. Profitability", profit_rows(result, constants))

    pdf.set_font(typeface.family, size=10)
    for notice in result_notices(result, constants):
        pdf.multi_cell(pdf.epw, 6, f"* {notice}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.ln(6)
    pdf.set_font(typeface.family, size=8)
    pdf.multi_cell(pdf.epw, 5, generator_label(), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    output = pdf.output()
    if isinstance(output, (bytes, bytearray)):
        return bytes(output)
    return output.encode("latin1")


def export_filename(label: str, extension: str = "pdf") -> str:
    slug = re.sub(r"[^\w]+", "-", label.strip()).strip("-").lower()
    return f"{slug or 'calculation'}-payout.{extension}"


class ExportCancelled(Exception):
    """Raised by a collaborator when the user dismisses the export or share flow."""


class ShareUnavailable(Exception):
    """Raised when the platform offers no native share mechanism."""


class ShareTarget(Protocol):
    def share(self, *, blob: bytes, filename: str, title: str, text: str) -> None:
        ...


class DirectoryDownloadTarget:
    """Fallback that drops the file in a directory and explains where it went."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    def save(self, blob: bytes, filename: str) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / filename
        path.write_bytes(blob)
        return path

    @staticmethod
    def instructions(path: Path) -> str:
        return f"Sharing is not available here; the file was saved to {path}."


class ExportStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(frozen=True)
class ExportOutcome:
    """What happened to one export request, plus an optional user notice."""

    status: ExportStatus
    notice: str | None = None
    value: Any = None


class ExportCoordinator:
    """Runs export jobs one at a time and turns failures into notices."""

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def run(self, job: Callable[[], Any], *, description: str = "export") -> ExportOutcome:
        if self._busy:
            return ExportOutcome(ExportStatus.BUSY)

        self._busy = True
        try:
            value = job()
        except ExportCancelled:
            _LOGGER.debug("%s cancelled by the user", description)
            return ExportOutcome(ExportStatus.CANCELLED)
        except Exception as error:  # noqa: BLE001 - reported to the user as a notice
            _LOGGER.exception("%s failed", description)
            return ExportOutcome(
                ExportStatus.FAILED,
                notice=f"The {description} could not be completed: {error}",
            )
        finally:
            self._busy = False

        if isinstance(value, ExportOutcome):
            return value
        return ExportOutcome(ExportStatus.COMPLETED, value=value)

    def share_result(
        self,
        result: CalculationResult,
        *,
        label: str = "",
        share_target: ShareTarget | None = None,
        fallback: DirectoryDownloadTarget | None = None,
        renderer: Callable[..., bytes] = render_pdf,
    ) -> ExportOutcome:
        """Render ``result`` and hand it to ``share_target`` or ``fallback``."""

        def job() -> ExportOutcome:
            blob = renderer(result, label=label)
            filename = export_filename(label)
            if share_target is not None:
                try:
                    share_target.share(
                        blob=blob,
                        filename=filename,
                        title=DOCUMENT_TITLE,
                        text=label or DOCUMENT_TITLE,
                    )
                    return ExportOutcome(ExportStatus.COMPLETED, value=filename)
                except ShareUnavailable:
                    _LOGGER.info("Native sharing unavailable, falling back to download")
            if fallback is None:
                raise ShareUnavailable("No share target or download location configured")
            path = fallback.save(blob, filename)
            return ExportOutcome(
                ExportStatus.COMPLETED,
                notice=fallback.instructions(path),
                value=path,
            )

        return self.run(job, description="share")


__all__ = [
    "DOCUMENT_TITLE",
    "DirectoryDownloadTarget",
    "ExportCancelled",
    "ExportCoordinator",
    "ExportOutcome",
    "ExportStatus",
    "ShareTarget",
    "ShareUnavailable",
    "export_filename",
    "payout_rows",
    "profit_rows",
    "render_csv",
    "render_pdf",
    "result_notices",
]
