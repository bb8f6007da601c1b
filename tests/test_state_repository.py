"""Workspace repository tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from codestorm.agents import AgentResult, fallback_plan, fallback_proposal
from codestorm.files import FileRecord
from codestorm.orchestration import ProjectPlan, Task
from codestorm.state import (
    DEFAULT_STATE_DIRNAME,
    LOG_FILENAME,
    STATE_FILENAME,
    MissingStateError,
    StateError,
    WorkspaceRepository,
    WorkspaceState,
)


def _state(tmp_path: Path) -> WorkspaceState:
    """Return a workspace state holding one file, one task, a plan, and a design.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        WorkspaceState: Sample state for round-trip tests.
    """
    record = FileRecord(name="app.ts", path="src/app.ts", content="export {};\n", language="ts")
    task = Task(type="planner", instruction="Plan it")
    task.finish(True, AgentResult(success=True, data=fallback_plan()))
    return WorkspaceState(
        root=str(tmp_path),
        files=[record],
        tasks=[task],
        plan=ProjectPlan.from_plan_data(fallback_plan()),
        design=fallback_proposal("A site"),
    )


def test_initialize_creates_state_directory_and_log(tmp_path: Path) -> None:
    repo = WorkspaceRepository()

    directory = repo.initialize(tmp_path)

    assert directory == tmp_path / DEFAULT_STATE_DIRNAME
    assert (directory / LOG_FILENAME).exists()
    assert not repo.exists(tmp_path)


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    repo = WorkspaceRepository()
    state = _state(tmp_path)

    path = repo.save(tmp_path, state)
    loaded = repo.load(tmp_path)

    assert path == tmp_path / DEFAULT_STATE_DIRNAME / STATE_FILENAME
    assert repo.exists(tmp_path)
    assert loaded.files == state.files
    assert loaded.plan == state.plan
    assert loaded.design is not None and loaded.design.title == state.design.title
    assert loaded.tasks[0].status == "completed"
    assert loaded.tasks[0].result["success"] is True
    assert [record.path for record in loaded.files] == ["src/app.ts"]
    assert loaded.updated_at >= loaded.created_at


def test_load_missing_state_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingStateError):
        WorkspaceRepository().load(tmp_path)


def test_load_corrupt_state_raises(tmp_path: Path) -> None:
    repo = WorkspaceRepository()
    directory = repo.initialize(tmp_path)
    (directory / STATE_FILENAME).write_text("{not json", encoding="utf-8")

    with pytest.raises(StateError):
        repo.load(tmp_path)


def test_load_schema_mismatch_raises(tmp_path: Path) -> None:
    repo = WorkspaceRepository()
    directory = repo.initialize(tmp_path)
    (directory / STATE_FILENAME).write_text('{"files": "nope"}', encoding="utf-8")

    with pytest.raises(StateError):
        repo.load(tmp_path)


def test_export_files_writes_nested_paths(tmp_path: Path) -> None:
    records = [
        FileRecord(name="index.html", path="index.html", content="<html></html>"),
        FileRecord(name="app.ts", path="src/app.ts", content="export {};\n"),
    ]

    written = WorkspaceRepository().export_files(tmp_path, records)

    assert written == [(tmp_path / "index.html").resolve(), (tmp_path / "src/app.ts").resolve()]
    assert (tmp_path / "src" / "app.ts").read_text(encoding="utf-8") == "export {};\n"


def test_export_refuses_paths_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "workspace"
    root.mkdir()
    records = [
        FileRecord(name="ok.ts", path="ok.ts", content="fine"),
        FileRecord(name="evil.sh", path="../evil.sh", content="rm -rf"),
    ]

    with pytest.raises(StateError):
        WorkspaceRepository().export_files(root, records)

    assert not (tmp_path / "evil.sh").exists()
    assert not (root / "ok.ts").exists()
