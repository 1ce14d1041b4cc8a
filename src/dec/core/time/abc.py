"""Time operations abstraction for testing.

Registry timestamps and cache-busting parameters read the clock through this
interface so tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        ...

    def unix_seconds(self) -> int:
        """Current time as whole seconds since the epoch."""
        return int(self.now().timestamp())
