import random
from pathlib import Path

import pytest

from svgtile.config import Settings
from svgtile.fonts import FontDatabase
from svgtile.pipeline import Pipeline


@pytest.fixture
def fontdb() -> FontDatabase:
    return FontDatabase()


@pytest.fixture
def make_pipeline(fontdb: FontDatabase):
    def factory(seed: int = 0, settings: Settings | None = None) -> Pipeline:
        return Pipeline(settings or Settings(), random.Random(seed), fontdb)

    return factory


@pytest.fixture
def dirs(tmp_path: Path) -> tuple[Path, Path]:
    src = tmp_path / "in"
    dst = tmp_path / "out"
    src.mkdir()
    dst.mkdir()
    return src, dst
