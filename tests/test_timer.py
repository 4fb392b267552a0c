"""Tests for GNU time output parsing and the timed command wrapper."""

import pytest

from tarbench import timer
from tarbench.errors import MetricParseError, ToolError
from tarbench.timer import Timer, extract_value, parse_time_output, run_timed, time_to_seconds

from conftest import time_report


class TestTimeToSeconds:
    """Conversion of h:mm:ss and m:ss notation."""

    def test_minutes_seconds(self):
        assert time_to_seconds("1:30") == 90

    def test_hours_minutes_seconds(self):
        assert time_to_seconds("1:02:03") == 3723

    def test_fractional_seconds(self):
        assert time_to_seconds("0:01.50") == pytest.approx(1.5)

    def test_plain_number_passes_through(self):
        assert time_to_seconds("4.25") == pytest.approx(4.25)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            time_to_seconds("soon")


class TestExtractValue:
    """Key lookup in labelled time output."""

    def test_finds_indented_key(self, sample_report):
        assert extract_value(sample_report, "File system inputs") == "128"

    def test_key_containing_colons(self, sample_report):
        assert extract_value(sample_report, "Elapsed (wall clock) time (h:mm:ss or m:ss)") == "0:01.50"

    def test_missing_key(self, sample_report):
        assert extract_value(sample_report, "Voluntary context switches") is None

    def test_first_match_wins(self):
        text = "File system inputs: 1\nFile system inputs: 2\n"

        assert extract_value(text, "File system inputs") == "1"


class TestParseTimeOutput:
    """Building TimeMetrics from a full report."""

    def test_parses_all_metrics(self, sample_report):
        metrics = parse_time_output(sample_report)

        assert metrics.elapsed == pytest.approx(1.5)
        assert metrics.cpu_percent == 350.0
        assert metrics.fs_inputs == 128
        assert metrics.fs_outputs == 2048
        assert metrics.elapsed_raw == "0:01.50"
        assert metrics.cpu_raw == "350%"

    def test_unmeasurable_cpu_is_zero(self):
        metrics = parse_time_output(time_report(cpu="?%"))

        assert metrics.cpu_percent == 0.0
        assert metrics.cpu_raw == "?%"

    def test_missing_label(self):
        report = time_report().replace("File system outputs", "Swaps")

        with pytest.raises(MetricParseError, match="File system outputs"):
            parse_time_output(report)

    def test_bad_number(self):
        with pytest.raises(MetricParseError):
            parse_time_output(time_report().replace("File system inputs: 128", "File system inputs: lots"))


class TestRunTimed:
    """run_timed wraps the command and reads the report file."""

    def test_wraps_command_and_cleans_up(self, tmp_path, monkeypatch):
        seen = []

        def fake_pipeline(stages, stdin=None, stdout=None):
            argv = stages[0].argv
            seen.append(argv)
            report_path = argv[argv.index("-o") + 1]
            with open(report_path, "w") as handle:
                handle.write(time_report(elapsed="1:02:03", inputs=7, outputs=9))
            return 0

        monkeypatch.setattr(timer, "run_pipeline", fake_pipeline)

        metrics = run_timed("compress run 1", ["tar", "-cf", "x.tar", "src"], tmp_path)

        assert metrics.elapsed == 3723
        assert metrics.fs_inputs == 7
        assert metrics.fs_outputs == 9
        assert seen[0][:3] == ("/usr/bin/time", "-v", "-o")
        assert seen[0][4:] == ("tar", "-cf", "x.tar", "src")
        assert "time_compress_run_1_" in seen[0][3]
        assert list(tmp_path.iterdir()) == []

    def test_tool_failure_propagates(self, tmp_path, monkeypatch):
        def failing_pipeline(stages, stdin=None, stdout=None):
            raise ToolError(stages[0].argv, 2)

        monkeypatch.setattr(timer, "run_pipeline", failing_pipeline)

        with pytest.raises(ToolError) as excinfo:
            run_timed("decompress run 2", ["tar", "-xf", "x.tar"], tmp_path)

        assert excinfo.value.returncode == 2
        assert list(tmp_path.iterdir()) == []


class TestTimer:
    def test_measures_elapsed(self):
        with Timer("block") as block:
            pass

        assert block.elapsed >= 0.0

    def test_does_not_swallow_exceptions(self):
        with pytest.raises(RuntimeError):
            with Timer("block"):
                raise RuntimeError("boom")
