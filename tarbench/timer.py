import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from . import config
from .errors import MetricParseError
from .pipeline import Stage, run_pipeline


@dataclass(frozen=True)
class TimeMetrics:
    elapsed: float
    cpu_percent: float
    fs_inputs: int
    fs_outputs: int
    elapsed_raw: str = ""
    cpu_raw: str = ""


def time_to_seconds(value: str) -> float:
    """Convert GNU time's h:mm:ss or m:ss notation to seconds."""
    fields = value.strip().split(":")
    if len(fields) == 2:
        return float(fields[0]) * 60 + float(fields[1])
    if len(fields) == 3:
        return float(fields[0]) * 3600 + float(fields[1]) * 60 + float(fields[2])
    return float(value)


def extract_value(output: str, key: str) -> Optional[str]:
    prefix = key + ":"
    for line in output.splitlines():
        stripped = line.lstrip()
        if stripped.startswith(prefix):
            return stripped[len(prefix):].strip()
    return None


def _require(output: str, key: str) -> str:
    value = extract_value(output, key)
    if value is None:
        raise MetricParseError(f"'{key}' missing from time output")
    return value


def parse_cpu_percent(value: str) -> float:
    number = value.strip().rstrip("%")
    # GNU time prints "?" when the elapsed time was too short to measure
    if number == "?":
        return 0.0
    return float(number)


def parse_time_output(output: str) -> TimeMetrics:
    elapsed_raw = _require(output, config.ELAPSED_LABEL)
    cpu_raw = _require(output, config.CPU_LABEL)
    inputs_raw = _require(output, config.FS_INPUTS_LABEL)
    outputs_raw = _require(output, config.FS_OUTPUTS_LABEL)

    try:
        return TimeMetrics(
            elapsed=time_to_seconds(elapsed_raw),
            cpu_percent=parse_cpu_percent(cpu_raw),
            fs_inputs=int(inputs_raw),
            fs_outputs=int(outputs_raw),
            elapsed_raw=elapsed_raw,
            cpu_raw=cpu_raw,
        )
    except ValueError as exc:
        raise MetricParseError(f"Unparseable time output: {exc}") from exc


def run_timed(label: str, argv: Sequence[str], workdir: Path) -> TimeMetrics:
    """Run argv under GNU time -v and return the metrics it reports."""
    fd, report_path = tempfile.mkstemp(
        prefix=f"time_{label.replace(' ', '_')}_",
        suffix=".txt",
        dir=str(workdir),
    )
    os.close(fd)
    try:
        run_pipeline([Stage((config.TIME_BIN, "-v", "-o", report_path, *argv), label)])
        with open(report_path, "r", encoding="utf-8", errors="replace") as handle:
            report = handle.read()
    finally:
        os.unlink(report_path)

    metrics = parse_time_output(report)
    logging.debug(
        "%s: %.2fs, %s CPU, %d in / %d out",
        label,
        metrics.elapsed,
        metrics.cpu_raw,
        metrics.fs_inputs,
        metrics.fs_outputs,
    )
    return metrics


class Timer:
    def __init__(self, name: str = "operation", log_on_exit: bool = False) -> None:
        self.name = name
        self.log_on_exit = log_on_exit
        self.start_time: Optional[float] = None
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self.start_time is None:
            return False
        self.elapsed = time.perf_counter() - self.start_time
        if self.log_on_exit:
            logging.debug("%s took %.3fs", self.name, self.elapsed)
        return False
