"""Fake Time implementation for testing.

FakeTime returns a fixed instant, so timestamps written by tests are
predictable.
"""

from datetime import UTC, datetime

from dec.core.time.abc import Time

DEFAULT_FAKE_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


class FakeTime(Time):
    """In-memory fake that always reports the same time.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, now: datetime = DEFAULT_FAKE_NOW) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now
