"""Clock abstraction for testing."""

from dec.core.time.abc import Time
from dec.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
