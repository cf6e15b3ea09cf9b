"""
Tests for the command line entry point.
"""

import json
import logging
from dataclasses import replace

import pytest

from surfaceload.core.engine import analyze
from surfaceload.core.json_io import ResultExporter
from surfaceload.core.models import PipeSection
from surfaceload.main import EXIT_FAIL, EXIT_INVALID, EXIT_PASS, format_summary, main


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handlers main() installs so later tests do not write to them."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def case_file(tmp_path):
    """Write a load case to disk and return its path."""
    def write(case, name="case.json"):
        path = tmp_path / name
        assert ResultExporter().export_load_case(case, path)
        return str(path)
    return write


class TestMain:
    """Test exit codes and output of the CLI."""

    def test_passing_case(self, case_file, grid_case, tmp_path, capsys):
        output = tmp_path / "result.json"
        code = main([case_file(grid_case), '--log-file', '', '-o', str(output)])

        assert code == EXIT_PASS
        assert "Result: PASS" in capsys.readouterr().out
        with open(output, 'r', encoding='utf-8') as f:
            assert json.load(f)['summary']['overall_pass'] is True

    def test_failing_case(self, case_file, grid_case):
        thin = replace(grid_case, pipe=PipeSection(outer_diameter=24.0, wall_thickness=0.25,
                                                   smys=35000.0, mop=1000.0))

        assert main([case_file(thin), '--log-file', '']) == EXIT_FAIL

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.json"), '--log-file', '']) == EXIT_INVALID

    def test_invalid_load_case(self, case_file, grid_case):
        bad = replace(grid_case, pipe=replace(grid_case.pipe, wall_thickness=0.0))

        assert main([case_file(bad), '--log-file', '']) == EXIT_INVALID

    def test_log_file_written(self, case_file, grid_case, tmp_path):
        log_file = tmp_path / "run.log"
        main([case_file(grid_case), '--log-file', str(log_file)])

        assert log_file.exists()

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(['--version'])

        assert excinfo.value.code == 0
        assert "Pipeline Surface Load" in capsys.readouterr().out


class TestFormatSummary:
    """Test the printed summary."""

    def test_english_units(self, track_case):
        summary = format_summary(analyze(track_case))

        assert summary.startswith("Excavator crossing (TRACK, EN units)")
        assert "Under the tracks" in summary
        assert "psi" in summary
        assert "At zero pressure" in summary
        assert "At MOP" in summary

    def test_metric_units(self, si_case):
        summary = format_summary(analyze(si_case))

        assert "SI units" in summary
        assert "MPa" in summary
        assert "kPa" in summary
