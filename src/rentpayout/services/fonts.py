"""Locate the TrueType font embedded in exported PDF documents.

The built-in PDF fonts only cover Latin-1, while property labels are
usually written in Chinese. Exports therefore embed IPAexGothic (JIS X 0213
kanji plus Latin), shipped as package data under its IPA Font License. A
different TTF can be supplied through ``RENTPAYOUT_PDF_FONT``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

FONT_DIRECTORY = Path(__file__).resolve().parent / "data" / "fonts"
BUNDLED_FONT = FONT_DIRECTORY / "ipaexg.ttf"
FONT_ENV_VAR = "RENTPAYOUT_PDF_FONT"


def unicode_font_path() -> Path | None:
    """Return the font file to embed, or ``None`` when none is available."""

    override = os.getenv(FONT_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        if path.is_file():
            return path
        _LOGGER.warning(
            "%s points to %s, which does not exist; using the bundled font",
            FONT_ENV_VAR,
            path,
        )

    if BUNDLED_FONT.is_file():
        return BUNDLED_FONT

    _LOGGER.warning("Bundled PDF font missing at %s", BUNDLED_FONT)
    return None


__all__ = ["BUNDLED_FONT", "FONT_ENV_VAR", "unicode_font_path"]
