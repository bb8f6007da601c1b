"""Tests for the generation, modification, and design agents."""

from __future__ import annotations

import json

import pytest
from conftest import ScriptedGenerator

from codestorm.agents import (
    GENERIC_CHANGE,
    CodeGeneratorAgent,
    CodeModifierAgent,
    DesignArchitectAgent,
    DesignProposal,
    FileDescription,
    GenerationResponse,
    ModificationData,
    TextGenerator,
    default_content,
    extract_json,
    first_code_block,
)
from codestorm.files import FileRecord


class _ExplodingGenerator(TextGenerator):
    def generate(self, prompt, model_hint=None):
        raise ConnectionError("socket closed")


def _source_file() -> FileRecord:
    return FileRecord(
        name="app.js",
        path="src/app.js",
        content="function start() {\n  return 1;\n}\n",
        language="javascript",
    )


# --------------------------------------------------------------------------- #
# Parsing helpers                                                              #
# --------------------------------------------------------------------------- #


def test_extract_json_prefers_fenced_block() -> None:
    text = 'Note {not json}\n```json\n{"a": 1}\n```'

    assert extract_json(text) == {"a": 1}


def test_extract_json_uses_brace_span_then_whole_text() -> None:
    assert extract_json('prefix {"a": {"b": 2}} suffix') == {"a": {"b": 2}}
    assert extract_json("[1, 2]") == [1, 2]
    with pytest.raises(ValueError):
        extract_json("no structured data")


def test_first_code_block_skips_requested_languages() -> None:
    text = '```json\n{"a": 1}\n```\n```js\nconsole.log(1);\n```'

    assert first_code_block(text) == '{"a": 1}'
    assert first_code_block(text, skip_languages=("json",)) == "console.log(1);"
    assert first_code_block("no fences") is None


# --------------------------------------------------------------------------- #
# Code generation                                                              #
# --------------------------------------------------------------------------- #


def test_generator_extracts_fenced_content() -> None:
    generator = ScriptedGenerator(files={"src/app.ts": "Sure!\n```ts\nexport const x = 1;\n```"})
    description = FileDescription(path="src/app.ts", description="App", dependencies=["a.ts"])

    result = CodeGeneratorAgent(generator, model_hint="fast-model").execute(description, "Ctx")

    assert result.success
    record = result.data
    assert isinstance(record, FileRecord)
    assert (record.name, record.path, record.language) == ("app.ts", "src/app.ts", "typescript")
    assert record.content == "export const x = 1;"
    assert record.is_new
    assert generator.model_hints == ["fast-model"]
    assert "Dependencies: a.ts" in generator.prompts[0]
    assert "Act as an expert typescript developer." in generator.prompts[0]


def test_generator_uses_trimmed_prose_without_fences() -> None:
    generator = ScriptedGenerator(files={"notes.md": "  # Notes\n\nPlain body.  "})

    record = CodeGeneratorAgent(generator).execute(FileDescription(path="notes.md"), "").data

    assert record.content == "# Notes\n\nPlain body."


def test_generator_falls_back_to_default_content() -> None:
    generator = ScriptedGenerator(files={"index.html": "   "})

    record = CodeGeneratorAgent(generator).execute(FileDescription(path="index.html"), "").data

    assert record.content == default_content("index.html")
    assert '<link rel="stylesheet" href="styles.css">' in record.content


def test_generator_reports_backend_failures() -> None:
    failing = CodeGeneratorAgent(ScriptedGenerator(failing_paths=["a.js"]))
    exploding = CodeGeneratorAgent(_ExplodingGenerator())

    failed = failing.execute(FileDescription(path="a.js"), "")
    raised = exploding.execute(FileDescription(path="a.js"), "")

    assert not failed.success and failed.error == "rate limited"
    assert not raised.success and raised.error == "socket closed"


@pytest.mark.parametrize(
    ("path", "marker"),
    [
        ("styles.scss", "font-family"),
        ("src/app.tsx", "DOMContentLoaded"),
        ("tool.py", "def main()"),
        ("README.md", "# README"),
        ("data.json", "{}"),
        ("Makefile", "Default content generated for Makefile"),
    ],
)
def test_default_content_by_extension(path: str, marker: str) -> None:
    assert marker in default_content(path)


# --------------------------------------------------------------------------- #
# Modification                                                                 #
# --------------------------------------------------------------------------- #


def test_modifier_returns_modified_copy_and_changes() -> None:
    changes = {"changes": [{"type": "add", "description": "Log start", "lineNumbers": [2]}]}
    generator = ScriptedGenerator(
        modification=(
            "```javascript\nfunction start() {\n  console.log('start');\n  return 1;\n}\n```\n"
            f"```json\n{json.dumps(changes)}\n```"
        )
    )
    original = _source_file()

    result = CodeModifierAgent(generator).execute("Log when starting", original)

    assert result.success
    data = result.data
    assert isinstance(data, ModificationData)
    assert data.original_file == original
    assert data.modified_file.id == original.id
    assert data.modified_file.path == original.path
    assert "console.log('start');" in data.modified_file.content
    assert [(c.type, c.description, c.line_numbers) for c in data.changes] == [
        ("add", "Log start", [2])
    ]
    assert "FILE: src/app.js" in generator.prompts[0]


def test_modifier_without_code_block_keeps_content_and_reports_generic_change() -> None:
    generator = ScriptedGenerator(modification="I cannot change this file.")
    original = _source_file()

    data = CodeModifierAgent(generator).execute("Rename start", original).data

    assert data.modified_file.content == original.content
    assert [change.description for change in data.changes] == [GENERIC_CHANGE]


def test_modifier_keeps_json_blocks_for_json_files() -> None:
    generator = ScriptedGenerator(modification='```json\n{"name": "demo", "private": true}\n```')
    original = FileRecord(name="package.json", path="package.json", content="{}", language="json")

    data = CodeModifierAgent(generator).execute("Make it private", original).data

    assert data.modified_file.content == '{"name": "demo", "private": true}'


def test_modifier_reports_generation_failure() -> None:
    result = CodeModifierAgent(ScriptedGenerator(offline=True)).execute("x", _source_file())

    assert not result.success
    assert result.error == "backend offline"


# --------------------------------------------------------------------------- #
# Design                                                                       #
# --------------------------------------------------------------------------- #


def test_designer_parses_camel_case_proposal() -> None:
    proposal = {
        "title": "Calm",
        "siteType": "portfolio",
        "colorPalette": {"primary": "#112233"},
        "components": [{"name": "Header", "type": "header", "htmlTemplate": "<header></header>"}],
    }
    generator = ScriptedGenerator(design=json.dumps({"proposal": proposal}))

    result = DesignArchitectAgent(generator).execute("A portfolio")

    assert result.success
    design = result.data
    assert isinstance(design, DesignProposal)
    assert design.title == "Calm"
    assert design.site_type == "portfolio"
    assert design.color_palette.primary == "#112233"
    assert design.color_palette.accent == "#ffb300"
    assert design.components[0].html_template == "<header></header>"


def test_designer_falls_back_to_default_proposal() -> None:
    generator = ScriptedGenerator(design="A calm blue palette would suit this.")

    design = DesignArchitectAgent(generator).execute("A bakery site").data

    assert design.title == "Default design proposal"
    assert "A bakery site" in design.description
    assert [component.name for component in design.components] == [
        "Header",
        "Hero",
        "Content",
        "Footer",
    ]


def test_generation_response_defaults() -> None:
    response = GenerationResponse(success=False, error="boom")

    assert response.content == ""
    assert response.latency == 0.0
