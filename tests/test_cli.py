"""Tests for the CLI: argument parsing and the run/validate commands."""

from __future__ import annotations

import json

import pytest

from shipyard.cli import _build_parser, _parse_params, main


# ── _parse_params ─────────────────────────────────────────────────────────────

class TestParseParams:
    def test_empty(self):
        assert _parse_params([], None) == {}

    def test_values_stay_strings(self):
        assert _parse_params(["BUILD=42", "FLAG=true"], None) == {
            "BUILD": "42",
            "FLAG": "true",
        }

    def test_equals_in_value(self):
        assert _parse_params(["JAVA_OPTS=-Dx=y"], None) == {"JAVA_OPTS": "-Dx=y"}

    def test_params_json_values_stringified(self, tmp_path):
        f = tmp_path / "params.json"
        f.write_text(json.dumps({"REPLICAS": 3, "APP_NAME": "orders"}))
        assert _parse_params([], f) == {"REPLICAS": "3", "APP_NAME": "orders"}

    def test_flag_overrides_json_file(self, tmp_path):
        f = tmp_path / "params.json"
        f.write_text(json.dumps({"VERSION": "1.0"}))
        assert _parse_params(["VERSION=2.0"], f)["VERSION"] == "2.0"

    def test_missing_equals_exits(self):
        with pytest.raises(SystemExit):
            _parse_params(["novalue"], None)

    def test_missing_json_file_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _parse_params([], tmp_path / "absent.json")
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_malformed_json_file_exits(self, tmp_path, capsys):
        f = tmp_path / "params.json"
        f.write_text("{not json")
        with pytest.raises(SystemExit) as exc_info:
            _parse_params([], f)
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_json_array_exits(self, tmp_path):
        f = tmp_path / "params.json"
        f.write_text("[1, 2]")
        with pytest.raises(SystemExit):
            _parse_params([], f)


# ── Parser ────────────────────────────────────────────────────────────────────

def test_run_requires_build_number(tmp_path):
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["run", str(tmp_path / "p.yaml")])


def test_run_args_parsed(tmp_path):
    args = _build_parser().parse_args(
        ["run", "p.yaml", "-w", str(tmp_path), "-n", "5", "-p", "A=1"]
    )
    assert args.build_number == 5
    assert args.workspace == tmp_path
    assert args.param == ["A=1"]


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 0
    assert "shipyard" in capsys.readouterr().out


# ── Commands ──────────────────────────────────────────────────────────────────

def test_validate_prints_plan(tmp_path, capsys):
    path = tmp_path / "pipeline.yaml"
    path.write_text("maven:\n  command: mvn package\n")
    with pytest.raises(SystemExit) as exc_info:
        main(["validate", str(path)])
    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "+ maven" in out
    assert "- docker_build" in out
    assert "1 of 6 stages enabled" in out


def test_validate_bad_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["validate", str(tmp_path / "missing.yaml")])
    assert exc_info.value.code == 1
    assert "[error]" in capsys.readouterr().err


def test_run_emits_json_result(tmp_path, capsys):
    workspace = tmp_path / "ws"
    workspace.mkdir()
    path = tmp_path / "pipeline.yaml"
    path.write_text("maven:\n  command: echo building $APP_NAME\n")

    with pytest.raises(SystemExit) as exc_info:
        main(["run", str(path), "-w", str(workspace), "-n", "3", "-p", "APP_NAME=orders"])

    assert exc_info.value.code == 0
    captured = capsys.readouterr()
    result = json.loads(captured.out)
    assert result["success"] is True
    assert result["environment"]["APP_NAME"] == "orders"
    assert result["environment"]["BUILD_NUMBER"] == "3"
    assert "building orders" in captured.err


def test_run_failure_exit_code(tmp_path, capsys):
    workspace = tmp_path / "ws"
    workspace.mkdir()
    path = tmp_path / "pipeline.yaml"
    path.write_text("maven:\n  command: exit 4\n")
    out_file = tmp_path / "result.json"

    with pytest.raises(SystemExit) as exc_info:
        main(["run", str(path), "-w", str(workspace), "-n", "1", "-o", str(out_file)])

    assert exc_info.value.code == 1
    result = json.loads(out_file.read_text())
    assert result["success"] is False
    assert "exited with status 4" in result["error"]


def test_run_invalid_workspace(tmp_path, capsys):
    path = tmp_path / "pipeline.yaml"
    path.write_text("{}\n")
    with pytest.raises(SystemExit) as exc_info:
        main(["run", str(path), "-w", str(tmp_path / "nope"), "-n", "1"])
    assert exc_info.value.code == 1
    assert "workspace does not exist" in capsys.readouterr().err
