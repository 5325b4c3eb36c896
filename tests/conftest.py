import pytest

from arcpack import PackConfig
from logutils import reset_logging

from .helpers import SMALL_CHUNK, build_tree


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def small_config() -> PackConfig:
    return PackConfig(chunk_size=SMALL_CHUNK)


@pytest.fixture
def sample_tree(tmp_path) -> str:
    return build_tree(str(tmp_path / "src" / "tree"))


@pytest.fixture(params=["zip", "7z"])
def fmt(request) -> str:
    return request.param


@pytest.fixture
def out_dir(tmp_path) -> str:
    return str(tmp_path / "out")

