"""Application context with dependency injection.

The DecContext dataclass holds every dependency (paths, HTTP, clock, global
config) and is created once at the CLI entry point, then threaded through
the application via Click's context object.
"""

from dataclasses import dataclass
from pathlib import Path

from dec.core.downloader import Downloader
from dec.core.global_config import FilesystemGlobalConfigOps, GlobalConfig
from dec.core.http.abc import HttpClient
from dec.core.paths import PathLayout
from dec.core.time.abc import Time
from dec.operations.installer import Installer
from dec.registry.resolver import RegistryResolver


@dataclass(frozen=True)
class DecContext:
    """Immutable context holding all dependencies for dec operations.

    Attributes:
        paths: Layout of the per-user content area
        http: HTTP client for downloads and registry fetches
        time: Clock for timestamps
        global_config: Settings from config.toml (or defaults)
        cwd: Project directory commands operate on
        debug: Show debug logging and full tracebacks
    """

    paths: PathLayout
    http: HttpClient
    time: Time
    global_config: GlobalConfig
    cwd: Path
    debug: bool

    def downloader(self) -> Downloader:
        return Downloader(self.paths, self.http)

    def resolver(self) -> RegistryResolver:
        """A resolver with every registry tier already loaded."""
        resolver = RegistryResolver(
            paths=self.paths,
            downloader=self.downloader(),
            time=self.time,
            registry_url=self.global_config.registry_url,
        )
        resolver.load()
        return resolver

    def installer(self, resolver: RegistryResolver) -> Installer:
        return Installer(self.paths, self.downloader(), resolver)

    @staticmethod
    def for_test(
        root: Path,
        http: HttpClient | None = None,
        time: Time | None = None,
        global_config: GlobalConfig | None = None,
        cwd: Path | None = None,
        debug: bool = False,
    ) -> "DecContext":
        """Create test context rooted at a temporary directory.

        Uses fakes by default so no network access or real clock is involved.

        Args:
            root: dec home directory (usually under tmp_path)
            http: Optional HttpClient. If None, creates an empty FakeHttpClient.
            time: Optional Time. If None, creates FakeTime.
            global_config: Optional GlobalConfig. Defaults to GlobalConfig().
            cwd: Project directory (defaults to root.parent / "project")
            debug: Whether to enable debug mode

        Example:
            >>> from dec.core.http.fake import FakeHttpClient
            >>> ctx = DecContext.for_test(tmp_path / "home", http=FakeHttpClient({}))
        """
        from dec.core.http.fake import FakeHttpClient
        from dec.core.time.fake import FakeTime

        resolved_http: HttpClient = http if http is not None else FakeHttpClient({})
        resolved_time: Time = time if time is not None else FakeTime()
        resolved_config = global_config if global_config is not None else GlobalConfig()
        resolved_cwd = cwd if cwd is not None else root.parent / "project"

        return DecContext(
            paths=PathLayout(root=root),
            http=resolved_http,
            time=resolved_time,
            global_config=resolved_config,
            cwd=resolved_cwd,
            debug=debug,
        )


def create_context(*, debug: bool) -> DecContext:
    """Create production context with real implementations.

    Called once at the CLI entry point. Reads ``$DEC_HOME`` and the global
    config file, and makes sure the content area exists.

    Raises:
        ValueError: If config.toml is malformed
    """
    from dec.core.http.real import RequestsHttpClient
    from dec.core.time.real import RealTime

    paths = PathLayout.from_env()
    paths.ensure_dirs()
    global_config = FilesystemGlobalConfigOps(paths.global_config_path).load_or_default()

    return DecContext(
        paths=paths,
        http=RequestsHttpClient(timeout=global_config.request_timeout),
        time=RealTime(),
        global_config=global_config,
        cwd=Path.cwd(),
        debug=debug,
    )
