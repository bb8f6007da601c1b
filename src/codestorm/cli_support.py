"""Logging setup and rendering helpers shared by Codestorm CLI commands."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Sequence

from rich.table import Table

from codestorm.analysis import FileAnalysis, FileChangeAnalysis
from codestorm.config import LoggingSettings
from codestorm.files import FileRecord
from codestorm.orchestration import ProjectPlan, Task

PACKAGE_LOGGER = "codestorm"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: LoggingSettings, log_path: Path) -> logging.Handler:
    """Attach a rotating file handler to the package logger.

    Handlers previously installed by this function are replaced so repeated
    invocations within one process do not duplicate log lines.

    Args:
        settings: Logging configuration supplying level and rotation limits.
        log_path: Destination log file.

    Returns:
        logging.Handler: The installed handler.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_codestorm_cli", False):
            logger.removeHandler(handler)
            handler.close()

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max(settings.max_size_mb, 0) * 1024 * 1024,
        backupCount=max(settings.backup_count, 0),
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._codestorm_cli = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    level = logging.getLevelName(settings.level.upper())
    logger.setLevel(level if isinstance(level, int) else logging.WARNING)
    return handler


def files_table(files: Sequence[FileRecord], *, title: str) -> Table:
    """Return a table listing file paths, languages, and sizes."""

    table = Table(title=title)
    table.add_column("Path")
    table.add_column("Language")
    table.add_column("Lines", justify="right")
    table.add_column("Bytes", justify="right")
    for record in files:
        table.add_row(
            record.path,
            record.language or "-",
            str(len(record.content.splitlines())),
            str(len(record.content.encode("utf-8"))),
        )
    return table


def tasks_table(tasks: Sequence[Task], *, title: str = "Tasks") -> Table:
    """Return a table summarizing the task log."""

    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Instruction")
    for task in tasks:
        color = {"completed": "green", "failed": "red"}.get(task.status, "yellow")
        table.add_row(task.type, f"[{color}]{task.status}[/{color}]", _truncate(task.instruction))
    return table


def plan_table(plan: ProjectPlan) -> Table:
    table = Table(title=f"Plan: {plan.title}")
    table.add_column("Step")
    table.add_column("Title")
    table.add_column("Status")
    for step in plan.steps:
        table.add_row(step.id, step.title, step.status)
    return table


def analysis_table(analysis: FileAnalysis) -> Table:
    """Return a table describing the sections of ``analysis``."""

    table = Table(title=f"Structure of {analysis.path}")
    table.add_column("Lines", justify="right")
    table.add_column("Kind")
    table.add_column("Description")
    table.add_column("Critical")
    for section in analysis.sections:
        table.add_row(
            f"{section.start_line}-{section.end_line}",
            section.kind,
            section.description,
            "yes" if section.is_critical else "",
        )
    return table


def impacts_table(change: FileChangeAnalysis) -> Table:
    table = Table(title=f"Change impacts for {change.original_file.path}")
    table.add_column("Level")
    table.add_column("Description")
    for impact in change.impacts:
        color = {"critical": "red", "important": "yellow"}.get(impact.level, "cyan")
        table.add_row(f"[{color}]{impact.level}[/{color}]", impact.description)
    return table


def count_task_statuses(tasks: Iterable[Task]) -> dict[str, int]:
    """Return task counts keyed by status, always including every status."""

    counts = {"idle": 0, "working": 0, "completed": 0, "failed": 0}
    for task in tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
    return counts


def file_payload(record: FileRecord, *, include_content: bool = True) -> dict[str, Any]:
    """Return the JSON representation of ``record`` used by CLI output."""

    payload = record.model_dump(mode="json")
    if not include_content:
        payload.pop("content", None)
    return payload


def task_payload(task: Task) -> dict[str, Any]:
    """Return a compact JSON representation of ``task`` without its raw result."""

    return task.model_dump(mode="json", exclude={"result"})


def _truncate(text: str, limit: int = 80) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else f"{text[: limit - 3]}..."


__all__ = [
    "LOG_FORMAT",
    "PACKAGE_LOGGER",
    "analysis_table",
    "configure_logging",
    "count_task_statuses",
    "file_payload",
    "files_table",
    "impacts_table",
    "plan_table",
    "task_payload",
    "tasks_table",
]
