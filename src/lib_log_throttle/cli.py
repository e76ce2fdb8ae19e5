"""Click command line interface for the throttle filter.

Purpose
-------
Offer a shell entry point that throttles JSON-lines log streams, so the filter
can sit in a pipe (``tail -f app.log | lib_log_throttle filter -k app``) or be
tried against recorded logs before it is embedded in a host pipeline.

Contents
--------
* :func:`cli` - root group with traceback and dotenv toggles.
* :func:`cli_info` - metadata banner.
* :func:`cli_filter` - read records, forward the accepted ones.
* :func:`main` - runs the group through :mod:`lib_cli_exit_tools`.

System Role
-----------
Presentation layer: parses options into :class:`ThrottleConfig`, wires the Rich
console sink as the notifier's logger, and leaves every decision to
:class:`~lib_log_throttle.application.use_cases.FilterStage`.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import IO, Any, Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as log_config
from .__init__conf__ import summary_info
from .adapters import InMemoryCounterRegistry, RichConsoleLogger
from .application.use_cases import FilterStage
from .runtime import ThrottleConfig, create_throttle_filter

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--traceback/--no-traceback",
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Throttle structured log records per group."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if log_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()

    if ctx.get_parameter_source("traceback") is not click.core.ParameterSource.DEFAULT:
        lib_cli_exit_tools.config.traceback = traceback
        lib_cli_exit_tools.config.traceback_force_color = traceback

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("filter", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--group-key",
    "-k",
    "group_key",
    multiple=True,
    help="Dotted field path forming the group key (repeatable).",
)
@click.option("--period", type=int, default=None, help="Accounting period in seconds.")
@click.option("--limit", type=int, default=None, help="Records allowed per group per period.")
@click.option("--reset-rate", type=int, default=None, help="Records/second below which an exceeded group recovers (-1: always).")
@click.option("--warning-delay", type=int, default=None, help="Seconds between repeated warnings for a group.")
@click.option("--drop/--no-drop", default=None, help="Drop throttled records, or only report them.")
@click.option("--emit-metrics/--no-emit-metrics", default=None, help="Count exceeded events and print a summary.")
@click.option("--label", "labels", multiple=True, metavar="KEY=VALUE", help="Static metric label (repeatable).")
@click.option("--time-key", default=None, help="Field holding the record time (epoch seconds or ISO 8601).")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning"], case_sensitive=False),
    default="info",
    show_default=True,
    help="Lowest notification level printed to stderr.",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable coloured notifications.")
def cli_filter(
    source: IO[str],
    group_key: tuple[str, ...],
    period: int | None,
    limit: int | None,
    reset_rate: int | None,
    warning_delay: int | None,
    drop: bool | None,
    emit_metrics: bool | None,
    labels: tuple[str, ...],
    time_key: str | None,
    log_level: str,
    no_color: bool,
) -> None:
    """Read JSON lines from SOURCE and print the records that pass."""

    options: dict[str, Any] = {
        "group_key": group_key or None,
        "group_bucket_period_s": period,
        "group_bucket_limit": limit,
        "group_reset_rate_s": reset_rate,
        "group_warning_delay_s": warning_delay,
        "group_drop_logs": drop,
        "group_emit_metrics": emit_metrics,
        "labels": _parse_labels(labels),
    }
    throttle_config = ThrottleConfig(**{key: value for key, value in options.items() if value is not None})

    console_logger = RichConsoleLogger(min_level=log_level, no_color=no_color)
    registry = InMemoryCounterRegistry()
    try:
        stage = create_throttle_filter(throttle_config, logger=console_logger, registry=registry)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    _pump(source, stage, console_logger, time_key=time_key)
    stage.shutdown()

    for name, series in registry.snapshot().items():
        for label_values, value in series.items():
            console_logger.info("metric", {"name": name, "labels": label_values, "value": value})


def _parse_labels(raw_labels: Sequence[str]) -> dict[str, str] | None:
    if not raw_labels:
        return None
    parsed: dict[str, str] = {}
    for item in raw_labels:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--label")
        parsed[key.strip()] = value
    return parsed


def _pump(source: IO[str], stage: FilterStage, console_logger: RichConsoleLogger, *, time_key: str | None) -> None:
    """Feed JSON lines to ``stage`` and echo the records that pass.

    With ``time_key`` set, a record without a usable time reuses the last record
    time seen, so replayed streams never jump to the wall clock. Records before
    the first usable time are skipped.
    """

    last_time: datetime | None = None
    for line_number, line in enumerate(source, start=1):
        text = line.strip()
        if not text:
            continue
        try:
            record = json.loads(text)
        except json.JSONDecodeError as exc:
            console_logger.warning("skipping malformed line", {"line": line_number, "error": exc.msg})
            continue
        if not isinstance(record, dict):
            console_logger.warning("skipping non-object line", {"line": line_number})
            continue
        now: datetime | None = None
        if time_key is not None:
            now = _record_time(record, time_key) or last_time
            if now is None:
                console_logger.warning("skipping line without record time", {"line": line_number, "time_key": time_key})
                continue
            last_time = now
        passed = stage.process(record, now=now)
        if passed is not None:
            click.echo(json.dumps(passed, ensure_ascii=False))


def _record_time(record: dict[str, Any], time_key: str | None) -> datetime | None:
    """Return the record's own timestamp when ``time_key`` names a usable field."""

    if time_key is None:
        return None
    value: Any = record
    for segment in time_key.split("."):
        if not isinstance(value, dict) or segment not in value:
            return None
        value = value[segment]
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)
    return None


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards so
    embedding callers and tests keep their own settings.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "cli_filter", "cli_info", "main"]
