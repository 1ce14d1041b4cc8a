"""HTTP client abstraction.

Downloads and registry fetches go through this interface so tests can serve
bytes from memory and count requests.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

DEFAULT_CHUNK_SIZE = 64 * 1024


class HttpClient(ABC):
    """Abstract streaming GET."""

    @abstractmethod
    def stream(self, url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the response body of a GET request in chunks.

        Args:
            url: Absolute URL to fetch
            chunk_size: Maximum size of each yielded chunk

        Raises:
            NetworkError: On connection failure or a non-2xx status
        """
        ...
