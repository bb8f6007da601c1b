"""Command line interface for the Codestorm project."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import IO, Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax

from codestorm.agents import TextGenerator
from codestorm.analysis import LectorService
from codestorm.cli_support import (
    analysis_table,
    configure_logging,
    count_task_statuses,
    file_payload,
    files_table,
    impacts_table,
    plan_table,
    task_payload,
    tasks_table,
)
from codestorm.config import (
    CodestormConfig,
    ConfigError,
    ConfigManager,
    resolve_with_precedence,
)
from codestorm.files import FileRecord, file_name_from_path
from codestorm.orchestration import (
    FileNotFoundInCollectionError,
    ModificationError,
    OrchestrationError,
    Orchestrator,
    PlanningError,
)
from codestorm.segmentation import CodeSplitter, LanguageDetector
from codestorm.state import (
    LOG_FILENAME,
    MissingStateError,
    StateError,
    WorkspaceRepository,
    WorkspaceState,
)

console = Console()


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    important_modes = {"summary", "warning", "error"}
    if summary_only and mode not in important_modes:
        return

    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        root: Target root path relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    formatted_root = str(root)
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {formatted_root}: {parts}.[/green]"


def _resolve_output_modes(
    ctx: click.Context,
    config: CodestormConfig,
    *,
    json_output: bool,
    quiet: bool,
    summary_mode: bool,
) -> tuple[bool, bool]:
    """Combine CLI flags with configured defaults into (quiet, summary_only).

    Raises:
        click.ClickException: If the requested modes conflict.
    """

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _load_config() -> CodestormConfig:
    manager = ConfigManager()
    manager.ensure_exists()
    return manager.load()


def _build_generator(config: CodestormConfig) -> TextGenerator:
    """Return the DSPy-backed text generator configured from ``config``.

    DSPy is imported lazily so commands that never call a model start quickly.
    """

    from codestorm.agents.dspy_backend import DSPyTextGenerator

    return DSPyTextGenerator(config.llm)


def _prepare_workspace(root: Path, config: CodestormConfig) -> WorkspaceRepository:
    repository = WorkspaceRepository()
    state_dir = repository.initialize(root)
    configure_logging(config.logging, state_dir / LOG_FILENAME)
    return repository


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Args:
        target: Mapping to mutate in-place.
        path: Sequence of keys representing the nested location.
        value: Value to assign at the nested location.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="codestorm")
def cli() -> None:
    """Codestorm plans, generates, splits, and analyzes project files with AI agents.

    Returns:
        None: This function is invoked for its side effects.
    """


@cli.command()
@click.argument("instruction")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=str),
    default=".",
    show_default=True,
    help="Workspace directory that stores state and exported files.",
)
@click.option("--export", "export_enabled", is_flag=True, help="Write generated files under ROOT.")
@click.option("--no-design", is_flag=True, help="Skip the design proposal for this run.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the project.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def generate(
    ctx: click.Context,
    instruction: str,
    root: str,
    export_enabled: bool,
    no_design: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Plan and generate a project described by INSTRUCTION.

    Args:
        ctx: Click context used for parameter source inspection.
        instruction: Free-text description of the project to build.
        root: Workspace directory holding `.codestorm/` state.
        export_enabled: When True, write every generated file under ``root``.
        no_design: When True, skip the design proposal regardless of configuration.
        json_output: If True, emit JSON describing the generated project.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error CLI output entirely.

    Raises:
        click.ClickException: If configuration, planning, or persistence fails.
    """

    json_enabled = json_output
    try:
        config = _load_config()
        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
        )

        workspace_root = Path(root).expanduser().resolve()
        repository = _prepare_workspace(workspace_root, config)
        if repository.exists(workspace_root):
            state = repository.load(workspace_root)
        else:
            state = WorkspaceState(root=str(workspace_root))

        options = config.pipeline
        if no_design:
            options = options.model_copy(update={"design_enabled": False})

        orchestrator = Orchestrator(
            _build_generator(config),
            files=state.files,
            options=options,
            splitter=CodeSplitter(min_length=options.min_block_length),
        )
        outcome = orchestrator.generate_project(instruction)

        state.files = list(outcome.files)
        state.tasks = [*state.tasks, *outcome.tasks]
        state.plan = outcome.plan
        if outcome.design is not None:
            state.design = outcome.design
        repository.save(workspace_root, state)

        exported: list[Path] = []
        if export_enabled:
            exported = repository.export_files(workspace_root, outcome.files)

        task_counts = count_task_statuses(outcome.tasks)
        if json_output:
            console.print_json(
                data={
                    "context": {"root": str(workspace_root), "instruction": instruction},
                    "plan": outcome.plan.model_dump(mode="json"),
                    "design": outcome.design.model_dump(mode="json") if outcome.design else None,
                    "files": [
                        file_payload(record, include_content=False) for record in outcome.files
                    ],
                    "tasks": [task_payload(task) for task in outcome.tasks],
                    "counts": {"files": len(outcome.files), **task_counts},
                    "exported": [str(path) for path in exported],
                }
            )
            return

        _emit_message(
            plan_table(outcome.plan), mode="detail", quiet=quiet_enabled, summary_only=summary_only
        )
        _emit_message(
            files_table(outcome.files, title="Generated files"),
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        if outcome.design is not None:
            _emit_message(
                f"[cyan]Design proposal: {outcome.design.title} "
                f"({len(outcome.design.components)} component(s)).[/cyan]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        if task_counts["failed"]:
            _emit_message(
                f"[yellow]{task_counts['failed']} task(s) failed; see `codestorm status`.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        if exported:
            _emit_message(
                f"[green]Exported {len(exported)} file(s) to {workspace_root}.[/green]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        _emit_message(
            _format_summary_line(
                "Generate",
                workspace_root,
                {
                    "files": len(outcome.files),
                    "steps": len(outcome.plan.steps),
                    "tasks_failed": task_counts["failed"],
                    "exported": len(exported),
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except StateError as exc:
        _handle_cli_error(str(exc), code="state_error", json_output=json_enabled, original=exc)
    except PlanningError as exc:
        _handle_cli_error(
            f"Planning failed: {exc}", code="planning_error", json_output=json_enabled, original=exc
        )
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while generating the project: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("file_path")
@click.argument("instruction")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    default=".",
    show_default=True,
    help="Workspace directory that stores state.",
)
@click.option("--export", "export_enabled", is_flag=True, help="Write the modified file to ROOT.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the change.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def modify(
    ctx: click.Context,
    file_path: str,
    instruction: str,
    root: str,
    export_enabled: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Rewrite FILE_PATH of a generated workspace according to INSTRUCTION.

    The change is assessed by the structural analyzer before the result is
    reported, so critical sections touched by the rewrite are surfaced.
    """

    json_enabled = json_output
    try:
        config = _load_config()
        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
        )

        workspace_root = Path(root).expanduser().resolve()
        repository = _prepare_workspace(workspace_root, config)
        try:
            state = repository.load(workspace_root)
        except MissingStateError as exc:
            raise click.ClickException(
                f"No workspace state found for {workspace_root}. "
                "Run `codestorm generate` first."
            ) from exc

        orchestrator = Orchestrator(
            _build_generator(config),
            files=state.files,
            options=config.pipeline,
            lector=LectorService(active=config.lector.enabled),
        )
        record = orchestrator.find_file_by_path(file_path)
        if record is None:
            raise FileNotFoundInCollectionError(f"{file_path} is not part of the workspace.")
        review = orchestrator.review_modification(instruction, record.id)
        outcome = review.modification

        state.files = list(orchestrator.files)
        state.tasks = [*state.tasks, *outcome.tasks]
        repository.save(workspace_root, state)

        exported: list[Path] = []
        if export_enabled:
            exported = repository.export_files(workspace_root, [outcome.modified_file])

        change = review.change_analysis
        if json_output:
            console.print_json(
                data={
                    "context": {"root": str(workspace_root), "path": file_path},
                    "file": file_payload(outcome.modified_file),
                    "changes": [item.model_dump(mode="json") for item in outcome.changes],
                    "analysis": change.model_dump(mode="json") if change else None,
                    "exported": [str(path) for path in exported],
                }
            )
            return

        for item in outcome.changes:
            _emit_message(
                f"- {item.type}: {item.description}",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        if change is not None:
            _emit_message(
                impacts_table(change), mode="detail", quiet=quiet_enabled, summary_only=summary_only
            )
            _emit_message(
                f"[cyan]{change.recommendation}[/cyan]",
                mode="warning" if change.requires_action else "detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        _emit_message(
            _format_summary_line(
                "Modify",
                workspace_root,
                {
                    "path": file_path,
                    "changes": len(outcome.changes),
                    "impacts": len(change.impacts) if change else 0,
                    "exported": len(exported),
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except StateError as exc:
        _handle_cli_error(str(exc), code="state_error", json_output=json_enabled, original=exc)
    except FileNotFoundInCollectionError as exc:
        _handle_cli_error(str(exc), code="file_not_found", json_output=json_enabled, original=exc)
    except ModificationError as exc:
        _handle_cli_error(
            f"Modification failed: {exc}",
            code="modification_error",
            json_output=json_enabled,
            original=exc,
        )
    except OrchestrationError as exc:
        _handle_cli_error(
            str(exc), code="orchestration_error", json_output=json_enabled, original=exc
        )
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while modifying {file_path}: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--min-length",
    type=click.IntRange(min=0),
    default=None,
    help="Minimum block length (defaults to configuration).",
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=str),
    help="Directory to write the recovered files into.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the recovered files as JSON.")
def split(source: IO[str], min_length: int | None, output: str | None, json_output: bool) -> None:
    """Split generated text from SOURCE (or stdin) into individual files."""

    try:
        config = _load_config()
        threshold = min_length if min_length is not None else config.pipeline.min_block_length
        result = CodeSplitter(min_length=threshold).split(source.read())
        if not result.success:
            _handle_cli_error(
                result.error or "No files could be identified.",
                code="split_failed",
                json_output=json_output,
            )
            return

        written: list[Path] = []
        if output:
            target = Path(output).expanduser()
            target.mkdir(parents=True, exist_ok=True)
            written = WorkspaceRepository().export_files(target, result.files)

        if json_output:
            console.print_json(
                data={
                    "message": result.message,
                    "files": [file_payload(record) for record in result.files],
                    "written": [str(path) for path in written],
                }
            )
            return

        console.print(files_table(result.files, title="Recovered files"))
        console.print(f"[green]{result.message}[/green]")
        if written:
            console.print(f"[green]Wrote {len(written)} file(s) to {output}.[/green]")
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    except StateError as exc:
        _handle_cli_error(str(exc), code="state_error", json_output=json_output, original=exc)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option(
    "--proposed",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="File holding proposed replacement content to assess.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the analysis as JSON.")
def analyze(path: str, proposed: str | None, json_output: bool) -> None:
    """Describe the structure of PATH and, optionally, the impact of a proposed rewrite."""

    source = Path(path)
    display_path = source.as_posix()
    record = FileRecord(
        name=file_name_from_path(display_path),
        path=display_path,
        content=source.read_text(encoding="utf-8"),
        language=LanguageDetector().from_path(display_path),
    )
    proposed_text = Path(proposed).read_text(encoding="utf-8") if proposed else None

    lector = LectorService()
    result = lector.execute(record, proposed_text)
    if not result.success or result.file_analysis is None:
        _handle_cli_error(
            result.error or f"Unable to analyze {path}.",
            code="analysis_failed",
            json_output=json_output,
        )
        return

    analysis = result.file_analysis
    change = result.change_analysis
    if json_output:
        console.print_json(
            data={
                "analysis": analysis.model_dump(mode="json"),
                "change": change.model_dump(mode="json", exclude={"original_file"})
                if change
                else None,
            }
        )
        return

    console.print(lector.describe_analysis(analysis))
    console.print(analysis_table(analysis))
    if change is not None:
        console.print(impacts_table(change))
        console.print(lector.describe_change(change))


@cli.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    default=".",
    show_default=True,
    help="Workspace directory that stores state.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit status information as JSON.")
@click.option(
    "--limit",
    "task_limit",
    type=int,
    default=None,
    help="Number of recent tasks to include (defaults to configuration).",
)
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def status(
    ctx: click.Context,
    root: str,
    json_output: bool,
    task_limit: int | None,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Display the files, plan, and recent tasks recorded for a workspace.

    Args:
        ctx: Click context for parameter source inspection.
        root: Workspace directory whose state should be inspected.
        json_output: When True, emit JSON instead of textual output.
        task_limit: Optional override for how many tasks to include.
        summary_mode: When True, restrict output to summary lines and warnings.
        quiet: When True, suppress non-error output entirely.

    Raises:
        click.ClickException: If state cannot be loaded or arguments conflict.
    """

    json_enabled = json_output
    try:
        config = _load_config()
        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
        )
        limit = max(0, task_limit if task_limit is not None else config.cli.task_history_limit)

        workspace_root = Path(root).expanduser().resolve()
        try:
            state = WorkspaceRepository().load(workspace_root)
        except MissingStateError as exc:
            raise click.ClickException(
                f"No workspace state found for {workspace_root}. "
                "Run `codestorm generate` first."
            ) from exc

        recent_tasks = state.tasks[-limit:] if limit else []
        counts = {"files": len(state.files), **count_task_statuses(state.tasks)}

        if json_output:
            console.print_json(
                data={
                    "context": {"root": str(workspace_root)},
                    "counts": counts,
                    "created_at": state.created_at.isoformat(),
                    "updated_at": state.updated_at.isoformat(),
                    "plan": state.plan.model_dump(mode="json") if state.plan else None,
                    "design": state.design.title if state.design else None,
                    "files": [
                        file_payload(record, include_content=False) for record in state.files
                    ],
                    "tasks": [task_payload(task) for task in recent_tasks],
                }
            )
            return

        _emit_message(
            files_table(state.files, title=f"Files in {workspace_root}"),
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        if state.plan is not None:
            _emit_message(
                plan_table(state.plan),
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        if recent_tasks:
            _emit_message(
                tasks_table(recent_tasks, title=f"Last {len(recent_tasks)} task(s)"),
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        _emit_message(
            _format_summary_line("Status", workspace_root, counts),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except StateError as exc:
        _handle_cli_error(str(exc), code="state_error", json_output=json_enabled, original=exc)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)


@cli.group()
def config() -> None:
    """Manage Codestorm configuration files and overrides.

    Returns:
        None: This function is invoked for its side effects.
    """


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        config = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'llm.temperature'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=CodestormConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    # The header timestamp always changes; compare the body only.
    diff = [
        line
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if "Last updated:" not in line
    ]

    if any(line[:1] in {"+", "-"} and line[:3] not in {"+++", "---"} for line in diff):
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    else:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point.

    Returns:
        None: This function is invoked for its side effects.
    """
    cli()


if __name__ == "__main__":
    main()
