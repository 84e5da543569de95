"""Project version lookup shared by the package, its CLI and its documents."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path

PACKAGE_NAME = "rentpayout"
PYPROJECT_PATH = Path(__file__).resolve().parents[2] / "pyproject.toml"

_TABLE_HEADER = re.compile(r"^\[(?P<name>[^\[\]]+)\]$")
_VERSION_KEY = re.compile(r"""^version\s*=\s*["'](?P<value>[^"']+)["']""")


def read_pyproject_version(path: Path = PYPROJECT_PATH) -> str:
    """Return ``[project].version`` from ``path``.

    Used by source checkouts that were never installed and therefore have no
    distribution metadata. Raises ``RuntimeError`` when the file or the key
    is missing.
    """

    if not path.is_file():
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    table: str | None = None
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        header = _TABLE_HEADER.match(line)
        if header:
            table = header.group("name").strip()
            continue
        if table != "project":
            continue
        version = _VERSION_KEY.match(line)
        if version:
            return version.group("value")

    raise RuntimeError(f"No [project] version declared in {path}")


@lru_cache(maxsize=1)
def get_project_version() -> str:
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version()


def generator_label() -> str:
    """Footer line naming the tool and version that produced a document."""

    return f"Generated with {PACKAGE_NAME} {get_project_version()}"


__all__ = [
    "PACKAGE_NAME",
    "generator_label",
    "get_project_version",
    "read_pyproject_version",
]
