"""HTTP access abstraction."""

from dec.core.http.abc import HttpClient
from dec.core.http.real import RequestsHttpClient

__all__ = ["HttpClient", "RequestsHttpClient"]
