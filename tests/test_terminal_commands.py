"""Tests for translating shell commands into file-system commands."""

from __future__ import annotations

import pytest

from codestorm.files import describe_commands, language_from_path, parse_terminal_command
from codestorm.segmentation import LanguageDetector


def test_touch_creates_empty_file() -> None:
    [command] = parse_terminal_command("touch src/app.ts")

    assert (command.type, command.path, command.content) == ("create", "src/app.ts", "")
    assert command.language == "typescript"


def test_echo_redirect_creates_file_with_unquoted_content() -> None:
    [command] = parse_terminal_command('echo "hello world" > notes.md')

    assert command.type == "create"
    assert command.path == "notes.md"
    assert command.content == "hello world"
    assert command.language == "markdown"


@pytest.mark.parametrize("line", ["rm old.js", "del old.js"])
def test_remove_commands_delete(line: str) -> None:
    [command] = parse_terminal_command(line)

    assert (command.type, command.path) == ("delete", "old.js")


def test_move_renames_with_quoted_paths() -> None:
    [command] = parse_terminal_command('mv "src/old name.ts" src/new.ts')

    assert command.type == "rename"
    assert command.path == "src/old name.ts"
    assert command.new_path == "src/new.ts"


def test_move_without_destination_yields_nothing() -> None:
    assert parse_terminal_command("mv lonely.ts") == []


def test_mkdir_creates_directory_marker() -> None:
    [command] = parse_terminal_command("mkdir src/components")

    assert command.language == "directory"


def test_python_script_output_is_detected() -> None:
    [command] = parse_terminal_command("python make.py", "File created: out/data.json\n")

    assert command.path == "out/data.json"
    assert command.language == "python"


def test_unrelated_commands_are_ignored() -> None:
    assert parse_terminal_command("ls -la") == []
    assert parse_terminal_command("python make.py", "nothing to report") == []


def test_language_from_path_defaults_to_text() -> None:
    assert language_from_path("index.html") == "html"
    assert language_from_path("Dockerfile") == "text"
    assert language_from_path("archive.zip") == "text"


def test_describe_commands_produces_progress_lines() -> None:
    commands = [
        *parse_terminal_command("touch a.ts"),
        *parse_terminal_command("mv a.ts b.ts"),
        *parse_terminal_command("rm b.ts"),
    ]

    assert describe_commands(commands) == [
        "Creating file a.ts...",
        "Renaming file a.ts to b.ts...",
        "Deleting file b.ts...",
    ]


def test_language_from_path_agrees_with_splitter_detection() -> None:
    detector = LanguageDetector()

    for path in ("theme.scss", "main.go", "src/App.tsx", "notes.md", "Makefile"):
        assert language_from_path(path) == detector.from_path(path)
    assert language_from_path("theme.scss") == "scss"
