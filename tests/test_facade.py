"""Tests for the TaskWall mutation facade."""

import json
import threading

import pytest
from PIL import Image

from errors import NotFoundError, PersistenceError, RenderError, ValidationError
from facade import MutationResult, TaskWall
from models import Style, Task
from storage import SnapshotStorage
from wallpaper_generator import RenderResult

from conftest import RecordingRenderer


class TestOpen:
    def test_absent_file_starts_empty_and_saves(self, storage, renderer, image_file):
        app = TaskWall.open(storage, render=renderer, output_path=image_file)

        assert app.get_tasks() == {
            "tasks": [],
            "style": {"background": "#000000", "text": "#DDDDDD"},
        }
        assert storage.load().next_id == 0

    def test_loads_existing_state(self, storage, renderer, image_file):
        first = TaskWall.open(storage, render=renderer, output_path=image_file)
        first.add_task("Buy milk")
        first.add_task("Walk dog")
        first.toggle_task_status(1)
        first.update_colors(background="#202020")

        second = TaskWall.open(SnapshotStorage(storage.path), render=renderer, output_path=image_file)

        assert second.get_tasks() == first.get_tasks()
        assert second.store.next_id == 2

    def test_corrupt_file_is_surfaced(self, storage, renderer):
        storage.path.parent.mkdir(parents=True)
        storage.path.write_text("{{{", encoding="utf-8")

        with pytest.raises(PersistenceError):
            TaskWall.open(storage, render=renderer)
        assert storage.path.read_text(encoding="utf-8") == "{{{"


class TestMutations:
    def test_end_to_end_example(self, taskwall, image_file):
        first = taskwall.add_task("Buy milk")
        assert first.to_dict() == {
            "task": {"id": 0, "text": "Buy milk", "isComplete": False},
            "imagePath": str(image_file),
        }

        second = taskwall.add_task("Walk dog")
        assert second.task.id == 1

        toggled = taskwall.toggle_task_status(0)
        assert toggled.updated_task.is_complete is True

        deleted = taskwall.delete_task(1)
        assert deleted.to_dict() == {"imagePath": str(image_file)}

        assert taskwall.get_tasks()["tasks"] == [
            {"id": 0, "text": "Buy milk", "isComplete": True},
        ]

    def test_ids_strictly_increase_across_deletes(self, taskwall):
        ids = []
        for i in range(6):
            ids.append(taskwall.add_task(f"task {i}").task.id)
            if i % 2:
                taskwall.delete_task(ids[-1])

        assert ids == sorted(set(ids))
        assert ids == list(range(6))

    def test_toggle_twice_restores(self, taskwall):
        taskwall.add_task("a")
        taskwall.toggle_task_status(0)
        result = taskwall.toggle_task_status(0)
        assert result.updated_task.is_complete is False

    def test_every_mutation_renders_then_saves(self, taskwall, renderer, storage):
        taskwall.add_task("a")
        assert renderer.calls[-1][0] == [{"id": 0, "text": "a", "isComplete": False}]
        assert storage.load().tasks == [Task(id=0, text="a")]

        taskwall.update_colors(text="#00ff00")
        assert renderer.calls[-1][1] == {"background": "#000000", "text": "#00ff00"}
        assert storage.load().style.text == "#00ff00"

    def test_update_colors_partial(self, taskwall):
        taskwall.update_colors(background="#111111")
        taskwall.update_colors(text="#eeeeee")
        assert taskwall.get_tasks()["style"] == {"background": "#111111", "text": "#eeeeee"}

    def test_update_colors_result_shape(self, taskwall, image_file):
        assert taskwall.update_colors(background="#111111").to_dict() == {"imagePath": str(image_file)}


class TestFailedMutations:
    def test_validation_error_has_no_side_effects(self, taskwall, renderer, storage):
        saved = storage.path.read_text(encoding="utf-8")

        with pytest.raises(ValidationError):
            taskwall.add_task("   ")

        assert renderer.calls == []
        assert storage.path.read_text(encoding="utf-8") == saved
        assert taskwall.store.next_id == 0

    def test_delete_unknown_leaves_list_unchanged(self, taskwall, renderer):
        taskwall.add_task("a")
        taskwall.add_task("b")
        before = taskwall.get_tasks()
        calls = len(renderer.calls)

        with pytest.raises(NotFoundError):
            taskwall.delete_task(42)

        assert taskwall.get_tasks() == before
        assert len(renderer.calls) == calls

    def test_toggle_unknown(self, taskwall):
        with pytest.raises(NotFoundError):
            taskwall.toggle_task_status(0)

    def test_bad_color_type_rejected(self, taskwall, renderer):
        with pytest.raises(ValidationError):
            taskwall.update_colors(background=["#000"])
        assert renderer.calls == []


class TestBestEffort:
    def test_render_warnings_reported(self, storage, image_file):
        renderer = RecordingRenderer(warnings=["Could not set wallpaper"])
        app = TaskWall.open(storage, render=renderer, output_path=image_file)

        result = app.add_task("a")

        assert not result.ok
        assert result.warnings == ["Could not set wallpaper"]
        assert result.to_dict()["warnings"] == ["Could not set wallpaper"]
        assert storage.load().tasks == [Task(id=0, text="a")]

    def test_renderer_raising_render_error_still_saves(self, storage, image_file):
        def broken(tasks, style, output_path):
            raise RenderError("encoder crashed")

        app = TaskWall.open(storage, render=broken, output_path=image_file)
        result = app.add_task("a")

        assert result.task.id == 0
        assert result.image_path == str(image_file)
        assert result.warnings == ["encoder crashed"]
        assert storage.load().next_id == 1

    def test_save_failure_keeps_memory_state(self, taskwall, storage, monkeypatch):
        def fail(snapshot):
            raise PersistenceError("disk full", storage.path)

        monkeypatch.setattr(storage, "save", fail)
        result = taskwall.add_task("a")

        assert result.task.id == 0
        assert any("disk full" in w for w in result.warnings)
        assert [t.text for t in taskwall.tasks()] == ["a"]
        assert storage.load().tasks == []

    def test_oversized_text_still_saves(self, rendering_taskwall, storage, fake_setter):
        result = rendering_taskwall.add_task("W" * 200_000)

        assert result.task.id == 0
        assert not result.ok
        assert fake_setter.calls == []
        assert len(storage.load().tasks[0].text) == 200_000

    def test_renderer_raising_unexpected_error_still_saves(self, storage, image_file):
        def broken(tasks, style, output_path):
            raise RuntimeError("font cache exploded")

        app = TaskWall.open(storage, render=broken, output_path=image_file)
        result = app.add_task("a")

        assert result.image_path == str(image_file)
        assert any("font cache exploded" in w for w in result.warnings)
        assert storage.load().tasks == [Task(id=0, text="a")]

    def test_bad_color_fails_late_as_warning(self, rendering_taskwall, storage, fake_setter):
        result = rendering_taskwall.update_colors(background="not-a-color")

        assert not result.ok
        assert fake_setter.calls == []
        assert storage.load().style.background == "not-a-color"


class TestRendering:
    def test_mutation_writes_wallpaper(self, rendering_taskwall, image_file, fake_setter):
        result = rendering_taskwall.add_task("Buy milk")

        assert result.ok
        assert fake_setter.calls == [(str(image_file), "fill")]
        with Image.open(result.image_path) as img:
            assert img.size == (1920, 1080)

    def test_refresh_renders_without_saving(self, taskwall, renderer, storage):
        mtime = storage.path.stat().st_mtime_ns
        result = taskwall.refresh()

        assert isinstance(result, MutationResult)
        assert len(renderer.calls) == 1
        assert storage.path.stat().st_mtime_ns == mtime


class TestSerialization:
    def test_concurrent_adds_are_serialized(self, storage, image_file):
        seen = []

        def render(tasks, style, output_path):
            seen.append([t.id for t in tasks])
            return RenderResult(image_path=str(output_path))

        app = TaskWall.open(storage, render=render, output_path=image_file)

        def worker(n):
            for i in range(10):
                app.add_task(f"{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = [t.id for t in app.tasks()]
        assert sorted(ids) == list(range(40))
        # Each render saw exactly one more task than the previous one
        assert [len(s) for s in seen] == list(range(1, 41))

        with open(storage.path, encoding="utf-8") as f:
            assert json.load(f)["nextId"] == 40


def test_result_ok_property():
    assert MutationResult(image_path="x").ok
    assert not MutationResult(image_path="x", warnings=["w"]).ok


def test_style_snapshot_in_get_tasks(taskwall):
    taskwall.update_colors(background="#010101", text="#fefefe")
    assert Style(**taskwall.get_tasks()["style"]) == Style("#010101", "#fefefe")
