"""Command line interface for mindstash."""

from __future__ import annotations

import asyncio
import copy
import difflib
import locale
import logging
from contextlib import aclosing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Sequence

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from mindstash.classification import classify as classify_text
from mindstash.collection import Asset, AssetCollection, AssetType
from mindstash.config import ConfigError, ConfigManager, MindstashConfig, resolve_with_precedence
from mindstash.config.resolver import assign_dotted
from mindstash.ingestion import (
    DropPayload,
    IngestionComplete,
    IngestionEvent,
    IngestionSession,
    IngestionStatus,
    ProgressEvent,
)
from mindstash.search import FILTER_ALL, QueryOptions, SortKey, preview_text, query, type_counts

LOGGER = logging.getLogger(__name__)
console = Console()

_TYPE_CHOICES = [FILTER_ALL, *(asset_type.value for asset_type in AssetType)]


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

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
    """Print ``message`` unless quiet or summary-only settings suppress it.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _format_summary_line(command: str, target: str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {target}: {parts}.[/green]"


def _configure_logging(config: MindstashConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_output_modes(
    ctx: click.Context,
    config: MindstashConfig,
    *,
    quiet: bool,
    summary_mode: bool,
    json_output: bool,
) -> tuple[bool, bool]:
    """Combine explicit flags with configured defaults for quiet/summary output.

    Raises:
        click.ClickException: If the resulting modes conflict.
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


async def _drain(
    events: AsyncGenerator[IngestionEvent, None],
    on_progress: Callable[[ProgressEvent], None],
) -> IngestionComplete | None:
    final: IngestionComplete | None = None
    async with aclosing(events):
        async for event in events:
            if isinstance(event, IngestionComplete):
                final = event
            else:
                on_progress(event)
    return final


def _run_session(
    session: IngestionSession,
    payload: DropPayload,
    *,
    show_progress: bool,
) -> IngestionComplete | None:
    """Run a drop payload through ``session``, optionally with a live progress bar."""

    if not show_progress:
        return asyncio.run(_drain(session.ingest_drop(payload), lambda _: None))

    with Progress(
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("{task.fields[label]}"),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Scanning", total=None, label="")

        def _update(event: ProgressEvent) -> None:
            if event.status is IngestionStatus.SCANNING:
                progress.update(task_id, description="Scanning", label=event.current_label)
                return
            progress.update(
                task_id,
                description="Ingesting",
                total=event.total,
                completed=event.processed,
                label=event.current_label,
            )

        return asyncio.run(_drain(session.ingest_drop(payload), _update))


def _asset_row(asset: Asset) -> list[str]:
    size = asset.metadata.get("file_size")
    added = datetime.fromtimestamp(asset.added_at / 1000, tz=timezone.utc)
    return [
        asset.type.value,
        asset.title or "",
        preview_text(asset.content, limit=60),
        "" if size is None else str(size),
        ", ".join(asset.tags),
        added.strftime("%Y-%m-%d %H:%M:%S"),
    ]


def _results_table(assets: Sequence[Asset]) -> Table:
    table = Table(title="Assets", show_lines=False)
    for column in ("Type", "Title", "Content", "Size", "Tags", "Added (UTC)"):
        table.add_column(column)
    for asset in assets:
        table.add_row(*_asset_row(asset))
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="mindstash")
def cli() -> None:
    """mindstash gathers pasted text, links and dropped files into one searchable board."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        LOGGER.debug("Keeping the default collation locale: %s", exc)


@cli.command()
@click.argument("text")
@click.option("--json", "json_output", is_flag=True, help="Emit the classification as JSON.")
def classify(text: str, json_output: bool) -> None:
    """Classify TEXT as a video, post, image, link or note.

    Args:
        text: Raw string to classify.
        json_output: When True, emit JSON instead of a table.
    """
    result = classify_text(text)
    if json_output:
        console.print_json(data=result.model_dump(mode="json"))
        return

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("type", result.type.value)
    table.add_row("content", result.content)
    for key, value in result.metadata.items():
        table.add_row(key, str(value))
    console.print(table)


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--paste", "pasted", multiple=True, help="Text or URL to add as if pasted.")
@click.option(
    "--type",
    "filter_type",
    type=click.Choice(_TYPE_CHOICES, case_sensitive=False),
    default=FILTER_ALL,
    show_default=True,
    help="Only show assets of this type.",
)
@click.option("--search", "search_text", default="", help="Case-insensitive text filter.")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([key.value for key in SortKey]),
    help="Sort key (defaults to the configured key).",
)
@click.option(
    "--direction",
    type=click.Choice(["asc", "desc"]),
    help="Sort direction (defaults to the configured direction).",
)
@click.option("--chunk-size", type=click.IntRange(min=1), help="Files processed per chunk.")
@click.option("--limit", type=click.IntRange(min=1), help="Maximum rows to display.")
@click.option(
    "--skip-hidden", is_flag=True, help="Skip dot-files and dot-directories inside dropped folders."
)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the results.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def ingest(
    ctx: click.Context,
    paths: tuple[Path, ...],
    pasted: tuple[str, ...],
    filter_type: str,
    search_text: str,
    sort_key: str | None,
    direction: str | None,
    chunk_size: int | None,
    limit: int | None,
    skip_hidden: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Ingest PATHS (files or directories) and pasted text, then list the assets.

    Args:
        ctx: Click context for parameter source inspection.
        paths: Files and directories to ingest recursively.
        pasted: Strings added as if pasted into the board.
        filter_type: Asset type filter, or ALL.
        search_text: Free-text search applied to the results.
        sort_key: Optional sort key override.
        direction: Optional sort direction override.
        chunk_size: Optional chunk size override.
        limit: Optional row limit override.
        skip_hidden: Whether hidden entries below each PATH are left out.
        json_output: When True, emit JSON instead of a table.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error output entirely.
    """

    json_enabled = json_output
    try:
        if not paths and not pasted:
            raise click.ClickException("Provide at least one PATH or --paste value.")

        overrides: dict[str, Any] = {}
        if chunk_size is not None:
            overrides["ingestion.chunk_size"] = chunk_size
        if skip_hidden:
            overrides["traversal.include_hidden"] = False
        if limit is not None:
            overrides["query.result_limit"] = limit

        manager = ConfigManager()
        config = manager.load(cli_overrides=overrides)
        _configure_logging(config)
        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )

        collection = AssetCollection()
        session = IngestionSession.from_config(collection, config)

        pasted_assets = [session.ingest_text(text, "paste") for text in pasted]

        completion: IngestionComplete | None = None
        if paths:
            payload = DropPayload.from_paths(list(paths))
            completion = _run_session(
                session,
                payload,
                show_progress=not (json_output or quiet_enabled or summary_only),
            )

        options = QueryOptions(
            filter_type=filter_type,
            search_text=search_text,
            sort_key=sort_key or config.query.sort_key,
            sort_direction=direction or config.query.sort_direction,
        )
        results = query(collection, options)
        shown = results[: config.query.result_limit]
        counts = type_counts(collection)
        metrics = {
            "ingested": len(completion.assets) if completion else 0,
            "pasted": sum(asset is not None for asset in pasted_assets),
            "total": counts[FILTER_ALL],
            "matches": len(results),
        }

        if json_output:
            console.print_json(
                data={
                    "context": {
                        "paths": [str(path) for path in paths],
                        "query": options.model_dump(mode="json"),
                    },
                    "counts": {**metrics, "by_type": counts},
                    "results": [asset.model_dump(mode="json") for asset in shown],
                }
            )
            return

        if shown:
            _emit_message(
                _results_table(shown), mode="detail", quiet=quiet_enabled, summary_only=summary_only
            )
        else:
            _emit_message(
                "[yellow]No assets match the current filters.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        if len(results) > len(shown):
            _emit_message(
                f"[yellow]Showing {len(shown)} of {len(results)} matches.[/yellow]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        target = ", ".join(str(path) for path in paths) or "pasted input"
        _emit_message(
            _format_summary_line("Ingest", target, metrics),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while ingesting: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.group()
def config() -> None:
    """Manage mindstash configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as ``ingestion.chunk_size``.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'ingestion.chunk_size'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        current = manager.read_overrides()
        updated = copy.deepcopy(current)
        assign_dotted(updated, segments, parsed_value)
        resolve_with_precedence(defaults=MindstashConfig(), file_overrides=updated)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if updated == current:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(updated)
    diff = list(
        difflib.unified_diff(
            before,
            manager.read_text().splitlines(),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=MindstashConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
