import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from switchplus.daily.selector import DailyModifierSelector, DailyState  # noqa: E402
from switchplus.errors import StorageError  # noqa: E402
from switchplus.events import EventBus  # noqa: E402
from switchplus.progression.ledger import ProgressionLedger  # noqa: E402
from switchplus.progression.unlocks import UnlockRegistry  # noqa: E402
from switchplus.storage import MemoryStore  # noqa: E402

# 19998 is a multiple of the six-entry catalog, so BASE_DAY + i selects MODIFIER_CATALOG[i]
BASE_DAY = 19998
SECONDS_PER_DAY = 86400

FIXED_TODAY = date(2024, 10, 3)


def day_clock(index: int, offset_seconds: float = 3600.0):
    """Clock pinned to the day that selects catalog entry ``index``."""
    return lambda: (BASE_DAY + index) * SECONDS_PER_DAY + offset_seconds


class FailingStore:
    """Store whose every call fails, to exercise persistence fault handling."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def get(self, key: str) -> Optional[str]:
        self.calls.append("get")
        raise StorageError("store offline")

    def set(self, key: str, value: str) -> None:
        self.calls.append("set")
        raise StorageError("store offline")


class OSErrorStore:
    """Store that leaks raw OSError instead of wrapping it in StorageError."""

    def get(self, key: str) -> Optional[str]:
        raise PermissionError("read denied")

    def set(self, key: str, value: str) -> None:
        raise OSError("disk full")


class Recorder:
    def __init__(self) -> None:
        self.payloads: list = []

    def __call__(self, payload) -> None:
        self.payloads.append(payload)


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def ledger(store: MemoryStore, bus: EventBus) -> ProgressionLedger:
    return ProgressionLedger(store, bus, today=lambda: FIXED_TODAY)


@pytest.fixture()
def unlocks(ledger: ProgressionLedger) -> UnlockRegistry:
    return UnlockRegistry(ledger)


@pytest.fixture()
def make_selector():
    def _make(index: int = 0, active: bool = False, hard: bool = False) -> DailyModifierSelector:
        return DailyModifierSelector(DailyState(is_active=active, is_hard_mode=hard), clock=day_clock(index))

    return _make
