"""HTTP client backed by requests."""

import logging
from collections.abc import Iterator

import requests

from dec.core.http.abc import DEFAULT_CHUNK_SIZE, HttpClient
from dec.errors import NetworkError
from dec.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class RequestsHttpClient(HttpClient):
    """Production implementation using a shared requests.Session."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": f"dec/{__version__}"})

    def stream(self, url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        logger.debug("GET %s", url)
        try:
            with self._session.get(url, stream=True, timeout=self._timeout) as response:
                if not 200 <= response.status_code < 300:
                    raise NetworkError(url, f"HTTP {response.status_code} {response.reason}")
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:
                        yield chunk
        except requests.RequestException as e:
            raise NetworkError(url, str(e)) from e
