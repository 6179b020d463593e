"""Shared test helpers."""

from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc))
