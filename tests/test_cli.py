"""CLI tests covering generation, modification, splitting, analysis, and status."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from conftest import FIXTURES, ScriptedGenerator, plan_payload

from codestorm.cli import cli
from codestorm.config import ConfigManager

FOO = """\
import { Bar } from "./bar";

export class Foo extends Bar {
  run() {
    return 1;
  }
}
"""


@pytest.fixture()
def generator(monkeypatch: pytest.MonkeyPatch) -> ScriptedGenerator:
    scripted = ScriptedGenerator(
        plan=plan_payload([("src/a.ts", "Module A"), ("src/b.ts", "Module B")]),
        design=json.dumps({"title": "Crisp", "components": []}),
        modification="```typescript\nexport const value = 2;\n```",
    )
    monkeypatch.setattr("codestorm.cli._build_generator", lambda config: scripted)
    return scripted


def _generate(runner: CliRunner, root: Path, *extra: str):
    return runner.invoke(cli, ["generate", "A two module app", "--root", str(root), *extra])


def test_cli_help_displays_commands() -> None:
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Codestorm plans, generates" in result.output
    for command in ("generate", "modify", "split", "analyze", "status", "config"):
        assert command in result.output


def test_config_view_and_set(home: Path) -> None:
    runner = CliRunner()

    viewed = runner.invoke(cli, ["config", "view"])
    updated = runner.invoke(cli, ["config", "set", "pipeline.design_enabled", "--value", "false"])

    assert viewed.exit_code == 0
    assert "pipeline:" in viewed.output
    assert updated.exit_code == 0
    assert "Updated pipeline.design_enabled" in updated.output
    config = ConfigManager(env={}).load(include_env=False)
    assert config.pipeline.design_enabled is False


def test_config_set_rejects_invalid_values(home: Path) -> None:
    result = CliRunner().invoke(
        cli, ["config", "set", "pipeline.min_block_length", "--value", "-5"]
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output


def test_generate_json_exports_files_and_saves_state(
    home: Path, tmp_path: Path, generator: ScriptedGenerator
) -> None:
    root = tmp_path / "workspace"

    result = _generate(CliRunner(), root, "--json", "--export")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    paths = [item["path"] for item in payload["files"]]
    assert paths == ["src/a.ts", "src/b.ts", "index.html", "styles.css"]
    assert all("content" not in item for item in payload["files"])
    assert payload["design"]["title"] == "Crisp"
    assert payload["counts"]["failed"] == 0
    assert (root / "src" / "a.ts").exists()
    assert (root / ".codestorm" / "state.json").exists()
    assert (root / ".codestorm" / "codestorm.log").exists()


def test_generate_text_output_reports_summary(
    home: Path, tmp_path: Path, generator: ScriptedGenerator
) -> None:
    result = _generate(CliRunner(), tmp_path / "workspace", "--no-design")

    assert result.exit_code == 0, result.output
    assert "Generate summary for" in result.output
    assert "files=4" in result.output
    assert not generator.prompts_containing("UI/UX designer")


def test_generate_rejects_json_with_quiet(
    home: Path, tmp_path: Path, generator: ScriptedGenerator
) -> None:
    result = _generate(CliRunner(), tmp_path / "workspace", "--json", "--quiet")

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "cli_error"


def test_generate_reports_planning_failure(
    home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    offline = ScriptedGenerator(offline=True)
    monkeypatch.setattr("codestorm.cli._build_generator", lambda config: offline)

    result = _generate(CliRunner(), tmp_path / "workspace", "--json")

    assert result.exit_code == 1
    error = json.loads(result.output)["error"]
    assert error["code"] == "planning_error"
    assert "backend offline" in error["message"]


def test_modify_updates_state_and_reports_analysis(
    home: Path, tmp_path: Path, generator: ScriptedGenerator
) -> None:
    runner = CliRunner()
    root = tmp_path / "workspace"
    assert _generate(runner, root).exit_code == 0

    result = runner.invoke(
        cli, ["modify", "src/a.ts", "Bump the value", "--root", str(root), "--json"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["file"]["content"] == "export const value = 2;"
    assert payload["analysis"]["original_file"]["path"] == "src/a.ts"

    status = runner.invoke(cli, ["status", "--root", str(root), "--json"])
    status_payload = json.loads(status.output)
    assert status_payload["counts"]["files"] == 4
    assert status_payload["tasks"][-1]["type"] == "fileSynchronizer"


def test_modify_unknown_file_fails(
    home: Path, tmp_path: Path, generator: ScriptedGenerator
) -> None:
    runner = CliRunner()
    root = tmp_path / "workspace"
    assert _generate(runner, root).exit_code == 0

    result = runner.invoke(cli, ["modify", "src/zzz.ts", "Edit", "--root", str(root), "--json"])

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "file_not_found"


def test_status_without_state_fails(home: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["status", "--root", str(tmp_path)])

    assert result.exit_code != 0
    assert "No workspace state found" in result.output


def test_status_limits_task_history(
    home: Path, tmp_path: Path, generator: ScriptedGenerator
) -> None:
    runner = CliRunner()
    root = tmp_path / "workspace"
    assert _generate(runner, root).exit_code == 0

    result = runner.invoke(cli, ["status", "--root", str(root), "--json", "--limit", "2"])

    payload = json.loads(result.output)
    assert len(payload["tasks"]) == 2
    assert payload["plan"]["title"] == "Landing page"


def test_split_reads_stdin(home: Path) -> None:
    text = (FIXTURES / "multi_file_response.md").read_text(encoding="utf-8")

    result = CliRunner().invoke(cli, ["split", "--json"], input=text)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [item["path"] for item in payload["files"]] == ["src/cart.ts", "src/checkout.ts"]


def test_split_writes_output_directory(home: Path, tmp_path: Path) -> None:
    output = tmp_path / "out"

    result = CliRunner().invoke(
        cli, ["split", str(FIXTURES / "multi_file_response.md"), "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert (output / "src" / "cart.ts").read_text(encoding="utf-8").startswith("export class")


def test_split_without_files_fails(home: Path) -> None:
    result = CliRunner().invoke(cli, ["split", "--json"], input="nothing to see here")

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "split_failed"


def test_analyze_reports_structure_and_change(tmp_path: Path) -> None:
    source = tmp_path / "foo.ts"
    source.write_text(FOO, encoding="utf-8")
    proposed = tmp_path / "proposed.ts"
    proposed.write_text(FOO.replace("return 1", "return 2"), encoding="utf-8")

    result = CliRunner().invoke(
        cli, ["analyze", str(source), "--proposed", str(proposed), "--json"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    sections = payload["analysis"]["sections"]
    assert [section["label"] for section in sections] == ["Foo"]
    assert payload["analysis"]["language"] == "typescript"
    assert all(impact["level"] == "critical" for impact in payload["change"]["impacts"])
