import json
from pathlib import Path

import pytest

from config.config_loader import DEFAULT_CONFIG, load_config, save_config, validate_config
from logger.logger import JSONLogger
from simulator.machine import validate
from simulator.turing_machine import InputValidationError, run
from tools.machine_loader import BUILTIN_MACHINES

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def write_config(path, overrides):
    path.write_text(json.dumps(overrides), encoding="utf-8")
    return path


class TestConfigLoader:

    def test_defaults_merged_with_overrides(self, tmp_path):
        path = write_config(tmp_path / "runtime_config.json", {
            "max_steps": 500,
            "output_directory": str(tmp_path / "logs"),
        })
        config = load_config(path, verbose=False)
        assert config["max_steps"] == 500
        assert config["trace_limit"] == DEFAULT_CONFIG["trace_limit"]
        assert (tmp_path / "logs").is_dir()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json", verbose=False)

    def test_wrong_type(self, tmp_path):
        path = write_config(tmp_path / "c.json", {"max_steps": "lots"})
        with pytest.raises(TypeError):
            load_config(path, verbose=False)

    def test_bool_is_not_a_step_bound(self):
        config = dict(DEFAULT_CONFIG, max_steps=True)
        with pytest.raises(TypeError):
            validate_config(config)

    def test_non_positive_bound(self):
        with pytest.raises(ValueError, match="must be positive"):
            validate_config(dict(DEFAULT_CONFIG, max_steps=0))

    def test_missing_key(self):
        config = dict(DEFAULT_CONFIG)
        del config["log_runs"]
        with pytest.raises(ValueError, match="Missing required configuration key"):
            validate_config(config)

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "runtime_config.json"
        config = dict(DEFAULT_CONFIG, max_steps=42, output_directory=str(tmp_path / "logs"))
        save_config(config, path)
        assert load_config(path, verbose=False)["max_steps"] == 42

    def test_shipped_config_is_valid(self):
        with open(PROJECT_ROOT / "config" / "runtime_config.json", "r", encoding="utf-8") as f:
            shipped = json.load(f)
        validate_config(dict(DEFAULT_CONFIG, **shipped))


class TestJSONLogger:

    @pytest.fixture
    def logger(self, tmp_path):
        return JSONLogger(output_directory=str(tmp_path / "logs"), log_file_prefix="turing_")

    @pytest.fixture
    def even_ones(self):
        return validate(BUILTIN_MACHINES["even_ones"])

    def read_lines(self, path):
        with open(path, "r", encoding="utf-8") as f:
            return [json.loads(line) for line in f]

    def test_log_run(self, logger, even_ones):
        logger.log_run("even_ones", "11", run(even_ones, "11", 100))
        entries = self.read_lines(logger.current_log)
        assert len(entries) == 1
        assert entries[0]["machine"] == "even_ones"
        assert entries[0]["outcome"] == "accepted"
        assert entries[0]["steps"] == 3
        assert Path(logger.current_log).name.startswith("turing_")

    def test_non_halting_runs_also_logged_separately(self, logger, even_ones):
        logger.log_run("even_ones", "0000", run(even_ones, "0000", 2))
        path = Path(logger.output_directory) / f"non_halting_{logger.today}.jsonl"
        entries = self.read_lines(path)
        assert entries[0]["outcome"] == "did_not_halt"
        assert entries[0]["halted"] is False

    def test_log_error(self, logger, even_ones):
        with pytest.raises(InputValidationError) as exc:
            run(even_ones, "2", 10)
        logger.log_error("even_ones", "2", exc.value)
        path = Path(logger.output_directory) / f"errors_{logger.today}.jsonl"
        entries = self.read_lines(path)
        assert entries[0]["error_type"] == "InputValidationError"
        assert entries[0]["input"] == "2"
