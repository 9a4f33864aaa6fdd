from functools import partial
from pathlib import Path

import pytest

from facade import TaskWall
from storage import SnapshotStorage
from wallpaper_generator import RenderResult, generate_wallpaper


class FakeSetter:
    """Stands in for the OS wallpaper call and records what it was given."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.calls = []

    def __call__(self, image_path: str, mode: str) -> bool:
        self.calls.append((image_path, mode))
        return self.succeed


class RecordingRenderer:
    """Renderer that skips raster work; remembers the state it was asked to draw."""

    def __init__(self, warnings=None):
        self.warnings = list(warnings or [])
        self.calls = []

    def __call__(self, tasks, style, output_path):
        self.calls.append(([t.to_dict() for t in tasks], style.to_dict()))
        return RenderResult(image_path=str(output_path), warnings=list(self.warnings))


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "taskwall-data.json"


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    return tmp_path / "Documents" / "taskwall.png"


@pytest.fixture
def storage(data_file) -> SnapshotStorage:
    return SnapshotStorage(data_file)


@pytest.fixture
def fake_setter() -> FakeSetter:
    return FakeSetter()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def taskwall(storage, renderer, image_file) -> TaskWall:
    """Facade with real storage and a recording renderer."""
    return TaskWall.open(storage, render=renderer, output_path=image_file)


@pytest.fixture
def rendering_taskwall(storage, fake_setter, image_file) -> TaskWall:
    """Facade that really encodes PNGs, with the OS call faked."""
    render = partial(generate_wallpaper, setter=fake_setter)
    return TaskWall.open(storage, render=render, output_path=image_file)
