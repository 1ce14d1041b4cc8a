from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from dec.context import DecContext
from dec.core.global_config import GlobalConfig
from dec.core.http.fake import FakeHttpClient
from tests.test_utils.builders import REGISTRY_URL


@pytest.fixture
def dec_home(tmp_path: Path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def make_context(dec_home: Path, project_dir: Path) -> Callable[..., DecContext]:
    """Factory for a test context rooted at dec_home and serving the given URLs."""

    def factory(responses: Mapping[str, bytes] | None = None) -> DecContext:
        return DecContext.for_test(
            root=dec_home,
            http=FakeHttpClient(responses or {}),
            global_config=GlobalConfig(registry_url=REGISTRY_URL),
            cwd=project_dir,
        )

    return factory
