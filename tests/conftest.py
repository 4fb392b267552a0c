"""Shared fixtures for the tarbench test suite."""

import pytest

from tarbench.timer import TimeMetrics


def time_report(elapsed: str = "0:01.50", cpu: str = "350%", inputs: int = 128, outputs: int = 2048) -> str:
    """Build text shaped like the report GNU time -v writes."""
    return (
        '\tCommand being timed: "tar -I zstd -T0 -cf out.tar.zst src"\n'
        "\tUser time (seconds): 4.20\n"
        "\tSystem time (seconds): 0.31\n"
        f"\tPercent of CPU this job got: {cpu}\n"
        f"\tElapsed (wall clock) time (h:mm:ss or m:ss): {elapsed}\n"
        "\tAverage shared text size (kbytes): 0\n"
        "\tMaximum resident set size (kbytes): 40212\n"
        "\tMajor (requiring I/O) page faults: 0\n"
        f"\tFile system inputs: {inputs}\n"
        f"\tFile system outputs: {outputs}\n"
        "\tSocket messages sent: 0\n"
        "\tExit status: 0\n"
    )


@pytest.fixture
def sample_report():
    return time_report()


@pytest.fixture
def make_metrics():
    def _make(elapsed=1.5, cpu=350.0, inputs=128, outputs=2048, elapsed_raw="0:01.50", cpu_raw="350%"):
        return TimeMetrics(
            elapsed=elapsed,
            cpu_percent=cpu,
            fs_inputs=inputs,
            fs_outputs=outputs,
            elapsed_raw=elapsed_raw,
            cpu_raw=cpu_raw,
        )

    return _make
