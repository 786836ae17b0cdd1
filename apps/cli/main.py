"""Typer CLI entrypoint for unitodo-core."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, cast

import typer

from apps.cli.format_human import render_todo_list
from apps.cli.io import (
    annotation_to_dict,
    build_sorted_payload,
    load_todos_payload,
    write_json_atomic,
)
from core.annotations.composer import compose_new_todo, cycle_state, mark_done
from core.annotations.parser import parse_annotation
from core.annotations.timestamp import decode_timestamp, encode_timestamp, generate_timestamp
from core.ordering.engine import FILTER_MODES, FilterMode, sort_records
from core.status.config_loader import load_config
from core.status.transitions import Direction
from core.utils.errors import StateCycleError, TodoCompositionError
from core.utils.log_events import log_event

app = typer.Typer(help="Unitodo annotation CLI", rich_markup_mode=None)
logger = logging.getLogger("unitodo.cli")

REPORT_MODES = ("human", "json")


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep subcommands explicit."""


@app.command("parse")
def parse_command(line: Annotated[str, typer.Argument()]) -> None:
    """Parse one todo line and print its fields as JSON."""

    parsed = parse_annotation(line)
    typer.echo(_dump(annotation_to_dict(parsed)))


@app.command("encode")
def encode_command(
    at: Annotated[
        str | None,
        typer.Option("--at", help="ISO-8601 instant to encode; defaults to now (UTC)."),
    ] = None,
) -> None:
    """Encode an instant as a 5-character timestamp token."""

    if at is None:
        typer.echo(generate_timestamp())
        return

    try:
        instant = datetime.fromisoformat(at)
    except ValueError:
        typer.echo(f"ERROR: --at must be an ISO-8601 datetime, got: {at}")
        raise typer.Exit(code=1) from None
    typer.echo(encode_timestamp(instant))


@app.command("decode")
def decode_command(token: Annotated[str, typer.Argument()]) -> None:
    """Decode a timestamp token to an ISO-8601 UTC instant."""

    instant = decode_timestamp(token)
    if instant is None:
        typer.echo(f"ERROR: invalid timestamp token: {token!r}")
        raise typer.Exit(code=2)
    typer.echo(instant.isoformat())


@app.command("sort")
def sort_command(
    records: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    mode: Annotated[str, typer.Option()] = "all",
    config: Annotated[Path | None, typer.Option()] = None,
    query: Annotated[str | None, typer.Option(help="Case-insensitive search text.")] = None,
    report: Annotated[str, typer.Option()] = "human",
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Also write the ordered list as JSON to this path."),
    ] = None,
) -> None:
    """Filter and order scanned todos for display."""

    normalized_mode = mode.lower().strip()
    if normalized_mode not in FILTER_MODES:
        typer.echo("ERROR: --mode must be one of: all, active, closed.")
        _log_error("sort", "INVALID_ARGUMENT", failure_stage="args")
        raise typer.Exit(code=1)
    mode_typed = cast(FilterMode, normalized_mode)

    normalized_report = report.lower().strip()
    if normalized_report not in REPORT_MODES:
        typer.echo("ERROR: --report must be one of: human, json.")
        _log_error("sort", "INVALID_ARGUMENT", failure_stage="args")
        raise typer.Exit(code=1)

    log_event(
        logger,
        logging.INFO,
        "start",
        command="sort",
        mode=mode_typed,
        records=str(records),
        config_provided=config is not None,
        query_provided=bool(query),
    )

    failure_stage = "load_config"
    try:
        state_sets = load_config(config).active_state_sets()
        failure_stage = "load_records"
        payload = load_todos_payload(records)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        _log_error("sort", "INVALID_INPUT", failure_stage=failure_stage)
        raise typer.Exit(code=1) from None

    ordered = sort_records(payload.to_records(), mode_typed, state_sets, query)
    result = build_sorted_payload(payload, ordered, mode=mode_typed, state_sets=state_sets)

    if normalized_report == "human":
        typer.echo(render_todo_list(result))
    else:
        typer.echo(_dump(result))

    if out is not None:
        try:
            write_json_atomic(out, result)
        except OSError as exc:
            typer.echo(f"ERROR: write output failed: {exc}")
            _log_error("sort", "WRITE_FAILED", failure_stage="write_output")
            raise typer.Exit(code=1) from None
        typer.echo(f"INFO: wrote ordered todos to {out}")

    log_event(logger, logging.INFO, "done", command="sort", mode=mode_typed, count=len(ordered))


@app.command("new")
def new_command(
    content: Annotated[str, typer.Argument()],
    marker: Annotated[str | None, typer.Option(help="Override the configured TODO marker.")] = None,
    config: Annotated[Path | None, typer.Option()] = None,
) -> None:
    """Print a new todo line with a fresh timestamp id."""

    state_sets = _load_state_sets_or_exit("new", config)
    try:
        line = compose_new_todo(content, marker=marker, state_sets=state_sets)
    except TodoCompositionError as exc:
        typer.echo(f"ERROR: {exc}")
        _log_error("new", "EMPTY_CONTENT", failure_stage="compose")
        raise typer.Exit(code=2) from None
    typer.echo(line)
    log_event(logger, logging.INFO, "done", command="new")


@app.command("mark-done")
def mark_done_command(
    marker: Annotated[str, typer.Option(...)],
    content: Annotated[str, typer.Option(...)],
    config: Annotated[Path | None, typer.Option()] = None,
) -> None:
    """Switch a todo to its DONE marker and stamp the completion time."""

    state_sets = _load_state_sets_or_exit("mark-done", config)
    result = mark_done(marker, content, state_sets)
    if not result.marker_transformed:
        typer.echo(f"WARNING: no DONE marker configured for {marker!r}; marker kept.")
    typer.echo(
        _dump(
            {
                "marker": result.marker,
                "content": result.content,
                "marker_transformed": result.marker_transformed,
            }
        )
    )
    log_event(
        logger,
        logging.INFO,
        "done",
        command="mark-done",
        marker_transformed=result.marker_transformed,
    )


@app.command("cycle")
def cycle_command(
    marker: Annotated[str, typer.Option(...)],
    content: Annotated[str, typer.Option(...)],
    backward: Annotated[
        bool, typer.Option("--backward", help="Step to the previous state instead.")
    ] = False,
    config: Annotated[Path | None, typer.Option()] = None,
) -> None:
    """Move a todo to the next (or previous) state of its four-state cycle."""

    state_sets = _load_state_sets_or_exit("cycle", config)
    direction = Direction.BACKWARD if backward else Direction.FORWARD
    try:
        result = cycle_state(marker, content, state_sets, direction)
    except StateCycleError as exc:
        typer.echo(f"ERROR: {exc}")
        _log_error("cycle", "MARKER_NOT_CYCLABLE", failure_stage="cycle")
        raise typer.Exit(code=2) from None
    typer.echo(_dump({"marker": result.marker, "content": result.content}))
    log_event(logger, logging.INFO, "done", command="cycle", direction=direction.value)


def _load_state_sets_or_exit(command: str, config: Path | None) -> list[list[str]]:
    try:
        return load_config(config).active_state_sets()
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        _log_error(command, "INVALID_CONFIG", failure_stage="load_config")
        raise typer.Exit(code=1) from None


def _log_error(command: str, error_code: str, **fields: Any) -> None:
    log_event(logger, logging.ERROR, "error", command=command, error_code=error_code, **fields)


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
