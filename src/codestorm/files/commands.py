"""Conversions between shell-style commands and file-system commands."""

from __future__ import annotations

import re
import shlex
from typing import Iterable

from codestorm.segmentation.detectors import LanguageDetector

from .models import FileSystemCommand

_DETECTOR = LanguageDetector()

_ECHO_REDIRECT = re.compile(r"^echo\s+(?P<content>.*?)\s*>\s*(?P<path>\S+)\s*$", re.DOTALL)
_CREATED_MARKER = re.compile(r"File created: (.*)")


def language_from_path(path: str) -> str:
    """Return the language label implied by a path's extension (``text`` if unknown)."""
    return _DETECTOR.from_path(path)


def parse_terminal_command(command: str, output: str = "") -> list[FileSystemCommand]:
    """Detect file operations performed by a terminal command.

    Recognizes ``touch``, ``echo ... > file``, ``rm``/``del``, ``mv``/``rename``,
    ``mkdir``, and Python scripts reporting ``File created: <path>``.

    Args:
        command: Command line as typed.
        output: Captured output of the command.

    Returns:
        list[FileSystemCommand]: Zero or one command describing the operation.
    """

    command = command.strip()

    if command.startswith("touch "):
        path = command[len("touch ") :].strip()
        return [
            FileSystemCommand(
                type="create",
                path=path,
                content="",
                language=language_from_path(path),
            )
        ]

    echo = _ECHO_REDIRECT.match(command)
    if echo:
        path = echo.group("path")
        content = _strip_quotes(echo.group("content").strip())
        return [
            FileSystemCommand(
                type="create", path=path, content=content, language=language_from_path(path)
            )
        ]

    if command.startswith(("rm ", "del ")):
        path = command.split(" ", 1)[1].strip()
        return [FileSystemCommand(type="delete", path=path)]

    if command.startswith(("mv ", "rename ")):
        parts = shlex.split(command.split(" ", 1)[1])
        if len(parts) >= 2:
            return [FileSystemCommand(type="rename", path=parts[0], new_path=parts[1])]
        return []

    if command.startswith("mkdir "):
        path = command[len("mkdir ") :].strip()
        return [FileSystemCommand(type="create", path=path, content="", language="directory")]

    if "python" in command:
        created = _CREATED_MARKER.search(output)
        if created:
            return [
                FileSystemCommand(
                    type="create",
                    path=created.group(1).strip(),
                    content="# Generated by a Python script\n",
                    language="python",
                )
            ]

    return []


def describe_commands(commands: Iterable[FileSystemCommand]) -> list[str]:
    """Return one human-readable progress line per command."""
    lines = []
    for command in commands:
        if command.type == "create":
            lines.append(f"Creating file {command.path}...")
        elif command.type == "update":
            lines.append(f"Updating file {command.path}...")
        elif command.type == "delete":
            lines.append(f"Deleting file {command.path}...")
        else:
            lines.append(f"Renaming file {command.path} to {command.new_path}...")
    return lines


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


__all__ = ["describe_commands", "language_from_path", "parse_terminal_command"]
