"""CLI-mode tests for app.py; the interactive menu is driven by rich prompts and is not covered here."""

import json
from pathlib import Path

import pytest

import app
from config.config_loader import DEFAULT_CONFIG
from tools.machine_loader import BUILTIN_MACHINES

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def config_path(tmp_path):
    config = dict(
        DEFAULT_CONFIG,
        machines_directory=str(PROJECT_ROOT / "machines"),
        output_directory=str(tmp_path / "logs"),
        results_directory=str(tmp_path / "results"),
    )
    path = tmp_path / "runtime_config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


@pytest.fixture
def machine_file(tmp_path):
    path = tmp_path / "even_ones.json"
    path.write_text(json.dumps(BUILTIN_MACHINES["even_ones"]), encoding="utf-8")
    return path


class TestCli:

    def test_runs_inputs_as_json(self, config_path, machine_file, capsys):
        code = app.main([
            "--config", str(config_path),
            "--machine", str(machine_file),
            "--input", "11", "--input", "1", "--json",
        ])
        assert code == 0
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
        assert [(l["input"], l["outcome"]) for l in lines] == [("11", "accepted"), ("1", "rejected")]

    def test_invalid_input_exit_code(self, config_path, machine_file):
        code = app.main(["--config", str(config_path), "--machine", str(machine_file), "--input", "12"])
        assert code == 1

    def test_bad_machine_file_exit_code(self, config_path, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"states": []}', encoding="utf-8")
        assert app.main(["--config", str(config_path), "--machine", str(bad)]) == 1

    def test_max_steps_override(self, config_path, machine_file, capsys):
        app.main([
            "--config", str(config_path),
            "--machine", str(machine_file),
            "--input", "0000", "--max-steps", "2", "--json",
        ])
        line = [l for l in capsys.readouterr().out.splitlines() if l.startswith("{")][0]
        assert json.loads(line)["outcome"] == "did_not_halt"

    def test_non_positive_max_steps_rejected(self, config_path, machine_file):
        with pytest.raises(SystemExit):
            app.main(["--config", str(config_path), "--machine", str(machine_file), "--max-steps", "0"])

    def test_input_without_machine_is_rejected(self, config_path):
        with pytest.raises(SystemExit):
            app.main(["--config", str(config_path), "--input", "11"])

    def test_json_without_machine_is_rejected(self, config_path):
        with pytest.raises(SystemExit):
            app.main(["--config", str(config_path), "--json"])

    def test_runs_are_logged(self, config_path, machine_file, tmp_path):
        app.main(["--config", str(config_path), "--machine", str(machine_file), "--input", "11"])
        logs = list((tmp_path / "logs").glob("turing_*.jsonl"))
        assert len(logs) == 1

    def test_examples_mode(self, config_path):
        assert app.main(["--config", str(config_path), "--examples"]) == 0


def test_describe_result():
    from simulator.machine import validate
    from simulator.turing_machine import run

    definition = validate(BUILTIN_MACHINES["even_ones"])
    assert app.describe_result(run(definition, "1", 10)) == "REJECTS (state: reject, steps: 2)"
    assert app.describe_result(run(definition, "0000", 2)).startswith("DID NOT HALT")
