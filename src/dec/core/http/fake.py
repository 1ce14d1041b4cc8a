"""Fake HttpClient implementation for testing.

FakeHttpClient serves response bodies from memory and records every URL it
was asked for, so tests can assert on request counts.
"""

from collections.abc import Iterator, Mapping

from dec.core.http.abc import DEFAULT_CHUNK_SIZE, HttpClient
from dec.errors import NetworkError


class FakeHttpClient(HttpClient):
    """In-memory fake keyed by exact URL.

    URLs listed in ``statuses`` fail with that HTTP status; unknown URLs fail
    with 404. Query strings are matched exactly unless ``ignore_query`` is set.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(
        self,
        responses: Mapping[str, bytes],
        statuses: Mapping[str, int] | None = None,
        ignore_query: bool = False,
    ) -> None:
        self._responses = dict(responses)
        self._statuses = dict(statuses or {})
        self._ignore_query = ignore_query
        self._requested_urls: list[str] = []

    @property
    def requested_urls(self) -> list[str]:
        """URLs passed to stream(), in call order. For test assertions only."""
        return self._requested_urls

    def stream(self, url: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        self._requested_urls.append(url)
        key = url.split("?", 1)[0] if self._ignore_query else url

        if key in self._statuses:
            raise NetworkError(url, f"HTTP {self._statuses[key]}")
        if key not in self._responses:
            raise NetworkError(url, "HTTP 404 Not Found")

        body = self._responses[key]
        for start in range(0, len(body), chunk_size):
            yield body[start : start + chunk_size]
