"""Test configuration utilities and shared fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from rentpayout.config import MarginAssistantConfig, TaxConstants, load_policy  # noqa: E402
from rentpayout.services.record_store import (  # noqa: E402
    InMemoryRecordStorage,
    RecordStore,
)


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def advance(self, delta: timedelta) -> None:
        self.current += delta

    def __call__(self) -> datetime:
        return self.current


@pytest.fixture()
def constants() -> TaxConstants:
    """Statutory constants from the packaged policy file."""

    return load_policy().tax


@pytest.fixture()
def assistant_config() -> MarginAssistantConfig:
    return load_policy().assistant


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def storage() -> InMemoryRecordStorage:
    return InMemoryRecordStorage()


@pytest.fixture()
def store(storage: InMemoryRecordStorage, clock: FakeClock) -> RecordStore:
    return RecordStore(storage, clock=clock)
