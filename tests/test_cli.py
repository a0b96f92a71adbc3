"""Tests for the trace-params command line.

Validates exit codes, the YAML dump of the derived config, engine
hand-off, and that configuration errors never reach the engine.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pytest
import yaml

from trace_params import cli
from trace_params.schema import EngineConfig


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


class TestMain:
    def test_dry_run_prints_engine_config(self, capsys) -> None:
        code = cli.main(["-i", "in.png", "-o", "out.svg", "--preset", "bw"])
        assert code == cli.EXIT_OK
        dumped = yaml.safe_load(capsys.readouterr().out)
        assert dumped["color_mode"] == "binary"
        assert dumped["filter_speckle_area"] == 16
        assert dumped["color_precision_loss"] == 2
        assert dumped["corner_threshold_rad"] == pytest.approx(math.pi / 3)
        assert dumped["splice_threshold_rad"] == pytest.approx(math.pi / 4)
        assert dumped["input_path"] == "in.png"

    def test_engine_receives_derived_config(self) -> None:
        received = []
        code = cli.main(
            ["-i", "in.png", "-o", "out.svg", "--preset", "photo", "-p", "6"],
            engine=received.append,
        )
        assert code == cli.EXIT_OK
        assert len(received) == 1
        assert isinstance(received[0], EngineConfig)
        assert received[0].color_precision_loss == 2
        assert received[0].filter_speckle_area == 100

    def test_invalid_parameter_exit_code(self, capsys) -> None:
        received = []
        code = cli.main(["-i", "a", "-o", "b", "-f", "foo"], engine=received.append)
        assert code == cli.EXIT_CONFIG_ERROR
        assert received == []
        err = capsys.readouterr().err
        assert "Filter speckle is not a positive integer" in err

    def test_missing_paths_exit_code(self, capsys) -> None:
        assert cli.main([]) == cli.EXIT_CONFIG_ERROR
        assert "Input path is required" in capsys.readouterr().err

    def test_collect_errors_flag(self, capsys) -> None:
        code = cli.main(["-i", "a", "-o", "b", "-f", "0", "-p", "9", "--collect-errors"])
        assert code == cli.EXIT_CONFIG_ERROR
        err = capsys.readouterr().err
        assert "2 invalid parameter(s)" in err
        assert "Filter speckle" in err and "Color precision" in err

    def test_config_file(self, tmp_path: Path, capsys) -> None:
        params = tmp_path / "params.yaml"
        params.write_text("input: a.png\noutput: a.svg\nmode: pixel\n", encoding="utf-8")
        assert cli.main(["--config", str(params), "--log-level", "WARNING"]) == cli.EXIT_OK
        assert yaml.safe_load(capsys.readouterr().out)["mode"] == "none"

    def test_missing_config_file(self, tmp_path: Path) -> None:
        assert cli.main(["--config", str(tmp_path / "nope.yaml")]) == cli.EXIT_CONFIG_ERROR

    def test_non_utf8_config_file(self, tmp_path: Path, capsys) -> None:
        params = tmp_path / "params.yaml"
        params.write_bytes(b"input: \xff\xfe\n")
        assert cli.main(["--config", str(params)]) == cli.EXIT_CONFIG_ERROR
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_directory_as_config_file(self, tmp_path: Path, capsys) -> None:
        assert cli.main(["--config", str(tmp_path)]) == cli.EXIT_CONFIG_ERROR
        assert "Cannot read parameter file" in capsys.readouterr().err

    def test_log_file(self, tmp_path: Path, capsys) -> None:
        log_file = tmp_path / "logs" / "run.log"
        cli.main(["-i", "a", "-o", "b", "--preset", "poster", "--log-file", str(log_file)])
        assert "Using preset 'poster'" in log_file.read_text(encoding="utf-8")

    def test_unknown_flag_is_argparse_error(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--speckle", "4"])
        assert excinfo.value.code == 2
