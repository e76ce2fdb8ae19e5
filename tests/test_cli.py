"""CLI behaviour coverage for the throttle command line."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner

from lib_log_throttle import __init__conf__
from lib_log_throttle import cli as cli_mod
from lib_log_throttle.__init__conf__ import summary_info


def run_cli(args: list[str] | None = None, *, input: str | None = None) -> tuple[int, str, BaseException | None]:
    """Invoke the click group with ``CliRunner`` and capture output."""

    runner = CliRunner()
    original_argv = sys.argv
    sys.argv = [__init__conf__.shell_command]
    try:
        result = runner.invoke(
            cli_mod.cli,
            args or [],
            input=input,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        sys.argv = original_argv
    return result.exit_code, result.output, result.exception


def json_lines(output: str) -> list[dict[str, Any]]:
    """Return the records printed on stdout, ignoring notifier lines.

    Examples
    --------
    >>> json_lines('{"a": 1}\\n2025-01-01T00:00:00+00:00 WARNING rate exceeded\\n')
    [{'a': 1}]
    """

    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def _lines(*records: dict[str, Any]) -> str:
    return "".join(json.dumps(record) + "\n" for record in records)


def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout, _ = run_cli()

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_info_command_matches_summary() -> None:
    runner = CliRunner()
    result = runner.invoke(cli_mod.cli, ["info"])

    assert result.exit_code == 0
    assert result.output == summary_info()


def test_cli_version_option_prints_version() -> None:
    exit_code, stdout, _ = run_cli(["--version"])

    assert exit_code == 0
    assert stdout.strip() == __init__conf__.version


def test_cli_no_traceback_option(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--no-traceback` should disable verbose tracebacks for subsequent commands."""

    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    exit_code, _stdout, _exception = run_cli(["--no-traceback", "info"])

    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_cli_filter_forwards_records_within_budget() -> None:
    records = [{"app": "api", "n": index} for index in range(3)]

    exit_code, output, _ = run_cli(["filter", "-k", "app", "--limit", "5"], input=_lines(*records))

    assert exit_code == 0
    assert json_lines(output) == records


def test_cli_filter_drops_records_over_limit_and_warns() -> None:
    records = [{"app": "api", "n": index} for index in range(4)] + [{"app": "db", "n": 0}]

    exit_code, output, _ = run_cli(
        ["filter", "-k", "app", "--limit", "2", "--period", "60", "--no-color"],
        input=_lines(*records),
    )

    assert exit_code == 0
    assert [(record["app"], record["n"]) for record in json_lines(output)] == [("api", 0), ("api", 1), ("db", 0)]
    assert "rate exceeded" in output


def test_cli_filter_observe_only_keeps_every_record() -> None:
    records = [{"app": "api", "n": index} for index in range(4)]

    exit_code, output, _ = run_cli(["filter", "-k", "app", "--limit", "1", "--no-drop"], input=_lines(*records))

    assert exit_code == 0
    assert json_lines(output) == records
    assert "rate exceeded" in output


def test_cli_filter_uses_record_time_with_time_key() -> None:
    records = [
        {"app": "api", "ts": "2025-01-01T00:00:00Z"},
        {"app": "api", "ts": "2025-01-01T00:00:10Z"},
        {"app": "api", "ts": 1735689660},
    ]

    exit_code, output, _ = run_cli(
        ["filter", "-k", "app", "--limit", "1", "--reset-rate", "-1", "--time-key", "ts"],
        input=_lines(*records),
    )

    assert exit_code == 0
    assert [record["ts"] for record in json_lines(output)] == ["2025-01-01T00:00:00Z", 1735689660]


def test_cli_filter_reuses_last_record_time_when_field_is_missing() -> None:
    records = [
        {"app": "api", "ts": 0},
        {"app": "api", "ts": 0},
        {"app": "api"},
        {"app": "api", "ts": "not a time"},
        {"app": "api", "ts": 120},
        {"app": "api", "ts": 121},
    ]

    exit_code, output, _ = run_cli(
        ["filter", "-k", "app", "--limit", "1", "--period", "60", "--reset-rate", "-1", "--time-key", "ts"],
        input=_lines(*records),
    )

    assert exit_code == 0
    assert [record.get("ts") for record in json_lines(output)] == [0, 120]


def test_cli_filter_skips_records_before_first_record_time() -> None:
    records = [{"app": "api"}, {"app": "api", "ts": 60}]

    exit_code, output, _ = run_cli(
        ["filter", "-k", "app", "--limit", "1", "--time-key", "ts", "--no-color"],
        input=_lines(*records),
    )

    assert exit_code == 0
    assert json_lines(output) == [{"app": "api", "ts": 60}]
    assert "skipping line without record time" in output


def test_cli_filter_groups_by_nested_path(tmp_path: Path) -> None:
    source = tmp_path / "logs.jsonl"
    source.write_text(
        _lines(
            {"kubernetes": {"container_name": "a"}},
            {"kubernetes": {"container_name": "a"}},
            {"kubernetes": {"container_name": "b"}},
        ),
        encoding="utf-8",
    )

    exit_code, output, _ = run_cli(["filter", "--limit", "1", str(source)])

    assert exit_code == 0
    assert [record["kubernetes"]["container_name"] for record in json_lines(output)] == ["a", "b"]


def test_cli_filter_skips_malformed_lines() -> None:
    payload = "not json\n[1, 2]\n\n" + _lines({"app": "api"})

    exit_code, output, _ = run_cli(["filter", "-k", "app", "--no-color"], input=payload)

    assert exit_code == 0
    assert json_lines(output) == [{"app": "api"}]
    assert "skipping malformed line" in output
    assert "skipping non-object line" in output


def test_cli_filter_reports_metrics_summary() -> None:
    records = [{"app": "api"}] * 3

    exit_code, output, _ = run_cli(
        ["filter", "-k", "app", "--limit", "1", "--emit-metrics", "--label", "env=test", "--no-color"],
        input=_lines(*records),
    )

    assert exit_code == 0
    assert "metric name=log_throttle_rate_limit_exceeded labels=[test,api] value=2.0" in output


@pytest.mark.parametrize(
    "args",
    [
        ["filter", "--limit", "0"],
        ["filter", "--period", "-1"],
        ["filter", "--limit", "60", "--reset-rate", "5"],
        ["filter", "--label", "novalue"],
    ],
)
def test_cli_filter_rejects_invalid_options(args: list[str]) -> None:
    exit_code, _output, _ = run_cli(args, input="")

    assert exit_code == 2


def test_main_restores_traceback_preferences(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    recorded: dict[str, bool] = {}

    def fake_run_cli(command: Callable[..., int], argv: list[str] | None = None, *, prog_name: str | None = None, **_: object) -> int:
        runner = CliRunner()
        result = runner.invoke(command, ["info"] if argv is None else argv)
        if result.exception is not None:
            raise result.exception
        recorded["traceback"] = lib_cli_exit_tools.config.traceback
        recorded["traceback_force_color"] = lib_cli_exit_tools.config.traceback_force_color
        return result.exit_code

    monkeypatch.setattr(lib_cli_exit_tools, "run_cli", fake_run_cli)

    exit_code = cli_mod.main(["--no-traceback", "info"])

    assert exit_code == 0
    assert recorded == {"traceback": False, "traceback_force_color": False}
    assert lib_cli_exit_tools.config.traceback is True
    assert lib_cli_exit_tools.config.traceback_force_color is True


def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "info"], raising=False)

    exit_code = cli_mod.main()
    captured = capsys.readouterr()

    assert exit_code == 0
    assert f"Info for {__init__conf__.name}:" in captured.out
