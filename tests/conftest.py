"""Pytest configuration and fixtures."""

import pytest

from wastesort.constants import MS_PER_DAY
from wastesort.models import WasteCategory, WasteRecord
from wastesort.storage import MemoryStore

# Fixed "now" so TTL arithmetic in tests is exact.
NOW = 1_700_000_000_000


class FakeClock:
    """Callable clock returning a settable epoch-millisecond time."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, days: float = 0, ms: int = 0) -> None:
        self.now += int(days * MS_PER_DAY) + ms


class FailingStore(MemoryStore):
    """Store whose writes always fail."""

    def set_string(self, key: str, value: str) -> None:
        raise OSError("storage quota exceeded")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_db():
    """Small knowledge base used by the matcher scenarios."""
    return [
        WasteRecord(name="PET láhev", category=WasteCategory.PLAST),
        WasteRecord(name="PET flaška", category=WasteCategory.PLAST),
        WasteRecord(name="plastová láhev", category=WasteCategory.PLAST),
        WasteRecord(name="kelímek od jogurtu", category=WasteCategory.PLAST),
        WasteRecord(name="sklenice", category=WasteCategory.SKLO),
        WasteRecord(name="plechovka", category=WasteCategory.KOVY),
        WasteRecord(name="papírová krabice", category=WasteCategory.PAPIR),
        WasteRecord(name="karton od mléka", category=WasteCategory.PLAST),
    ]


@pytest.fixture
def failing_store():
    return FailingStore()
