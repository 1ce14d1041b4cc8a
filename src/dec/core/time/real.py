"""Real time implementation using the system clock."""

from datetime import UTC, datetime

from dec.core.time.abc import Time


class RealTime(Time):
    """Production implementation backed by datetime.now()."""

    def now(self) -> datetime:
        return datetime.now(UTC)
