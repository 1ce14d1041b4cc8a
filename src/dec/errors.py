"""Exception hierarchy for dec operations.

Library code raises these; the CLI error boundary turns them into a single
``Error: ...`` line and exit code 1.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dec.operations.installer import BatchInstallResult


class DecError(Exception):
    """Base class for all dec failures."""


class PackNotFoundError(DecError):
    """Package is absent from every registry tier (or from the local tier for unlink)."""

    def __init__(self, name: str, remediation: str | None = None) -> None:
        self.name = name
        self.remediation = remediation or "run 'dec update' or check 'dec search'"
        super().__init__(f"Package '{name}' not found ({self.remediation})")


class ChecksumMismatchError(DecError):
    """Downloaded bytes do not hash to the declared SHA256."""

    def __init__(self, source: str, expected: str, actual: str) -> None:
        self.source = source
        self.expected = expected
        self.actual = actual
        shown_expected = expected if expected else "<none declared>"
        super().__init__(
            f"Checksum mismatch for {source}: expected {shown_expected}, got {actual}"
        )


class PathTraversalError(DecError):
    """A path taken from package content points outside its package directory.

    Covers archive entries and any relative path a package declares.
    """

    def __init__(self, entry: str, dest_dir: str) -> None:
        self.entry = entry
        self.dest_dir = dest_dir
        super().__init__(f"Path '{entry}' escapes package directory {dest_dir}")


class UnsupportedPlatformError(DecError):
    """Package ships no executable for the current OS/architecture."""

    def __init__(self, package: str, platform_key: str, supported: list[str]) -> None:
        self.package = package
        self.platform_key = platform_key
        self.supported = supported
        listed = ", ".join(supported) if supported else "none"
        super().__init__(
            f"Package '{package}' does not support platform {platform_key} (supported: {listed})"
        )


class NetworkError(DecError):
    """Fetch failed or returned a non-2xx status. Never retried internally."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class OperationError(DecError):
    """Unexpected OS-level failure, tagged with the operation that was running."""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class PartialBatchFailure(DecError):
    """Some packages in a batch failed; the rest were processed."""

    def __init__(self, result: "BatchInstallResult") -> None:
        self.result = result
        super().__init__(
            f"{len(result.failed)} of {result.total} package(s) failed: "
            + ", ".join(sorted(result.failed))
        )
