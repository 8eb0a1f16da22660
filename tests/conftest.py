from pathlib import Path

import pytest

from log_prettifier.config import Settings
from log_prettifier.handoff_store import HandoffStore


@pytest.fixture
def store_path(tmp_path: Path) -> str:
    return str(tmp_path / "handoff.json")


@pytest.fixture
def store(store_path: str) -> HandoffStore:
    return HandoffStore(store_path)


@pytest.fixture
def settings(store_path: str) -> Settings:
    return Settings(store_path=store_path, line_height=18, scroll_margin=40, scroll_tolerance=8)


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
