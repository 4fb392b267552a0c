import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .timer import TimeMetrics


def compression_ratio(archive_bytes: int, source_bytes: int) -> str:
    """Archive size over source size, to six decimals."""
    if source_bytes <= 0:
        raise ValueError(f"source size must be positive, got {source_bytes}")
    return f"{archive_bytes / source_bytes:.6f}"


def average(values: Iterable) -> str:
    """Arithmetic mean to two decimals, formatted from the binary double like awk's printf."""
    samples = [float(value) for value in values]
    if not samples:
        raise ValueError("cannot average an empty sequence")
    total = 0.0
    for sample in samples:
        # Running sum is kept at six decimals between additions
        total = float(f"{total + sample:.6f}")
    return f"{total / len(samples):.2f}"


def average_int(values: Iterable[int]) -> int:
    # Truncates like shell integer arithmetic; the fractional part is dropped on purpose.
    samples = [int(value) for value in values]
    if not samples:
        raise ValueError("cannot average an empty sequence")
    return sum(samples) // len(samples)


@dataclass
class CompressionRun:
    index: int
    metrics: TimeMetrics
    archive_bytes: int
    ratio: str


@dataclass
class DecompressionRun:
    index: int
    metrics: TimeMetrics


@dataclass
class BenchmarkSummary:
    compression_time: str
    decompression_time: str
    compression_ratio: str
    compression_cpu: str
    decompression_cpu: str
    compression_fs_inputs: int
    compression_fs_outputs: int
    decompression_fs_inputs: int
    decompression_fs_outputs: int

    def as_fields(self) -> list[tuple[str, object]]:
        return [
            ("Compression time (s)", self.compression_time),
            ("Decompression time (s)", self.decompression_time),
            ("Compression ratio (avg)", self.compression_ratio),
            ("Compression CPU avg (%)", self.compression_cpu),
            ("Decompression CPU avg (%)", self.decompression_cpu),
            ("Compression FS inputs avg", self.compression_fs_inputs),
            ("Compression FS outputs avg", self.compression_fs_outputs),
            ("Decompression FS inputs avg", self.decompression_fs_inputs),
            ("Decompression FS outputs avg", self.decompression_fs_outputs),
        ]


@dataclass
class BenchmarkStats:
    source_bytes: int = 0
    compression_runs: List[CompressionRun] = field(default_factory=list)
    decompression_runs: List[DecompressionRun] = field(default_factory=list)

    def record_compression(self, index: int, metrics: TimeMetrics, archive_bytes: int) -> CompressionRun:
        run = CompressionRun(
            index=index,
            metrics=metrics,
            archive_bytes=archive_bytes,
            ratio=compression_ratio(archive_bytes, self.source_bytes),
        )
        self.compression_runs.append(run)
        return run

    def record_decompression(self, index: int, metrics: TimeMetrics) -> DecompressionRun:
        run = DecompressionRun(index=index, metrics=metrics)
        self.decompression_runs.append(run)
        return run

    def summary(self) -> BenchmarkSummary:
        comp = [run.metrics for run in self.compression_runs]
        decomp = [run.metrics for run in self.decompression_runs]
        return BenchmarkSummary(
            compression_time=average(m.elapsed for m in comp),
            decompression_time=average(m.elapsed for m in decomp),
            compression_ratio=average(run.ratio for run in self.compression_runs),
            compression_cpu=average(m.cpu_percent for m in comp),
            decompression_cpu=average(m.cpu_percent for m in decomp),
            compression_fs_inputs=average_int(m.fs_inputs for m in comp),
            compression_fs_outputs=average_int(m.fs_outputs for m in comp),
            decompression_fs_inputs=average_int(m.fs_inputs for m in decomp),
            decompression_fs_outputs=average_int(m.fs_outputs for m in decomp),
        )


def _format_size(value: int) -> str:
    if value >= 1024 * 1024 * 1024:
        return f"{value / (1024 * 1024 * 1024):.1f}GB"
    return f"{value / (1024 * 1024):.1f}MB"


def print_benchmark_summary(stats: BenchmarkStats, summary: BenchmarkSummary) -> None:
    logging.info("\nBenchmark Summary")
    logging.info("-----------------")
    logging.info("Source size: %s", _format_size(stats.source_bytes))
    if stats.compression_runs:
        logging.info("Archive size (last run): %s", _format_size(stats.compression_runs[-1].archive_bytes))
    logging.info("Compression:   %ss avg, %s%% CPU, ratio %s", summary.compression_time, summary.compression_cpu, summary.compression_ratio)
    logging.info("Decompression: %ss avg, %s%% CPU", summary.decompression_time, summary.decompression_cpu)
    logging.debug(
        "FS I/O avg: compress %d in / %d out, decompress %d in / %d out",
        summary.compression_fs_inputs,
        summary.compression_fs_outputs,
        summary.decompression_fs_inputs,
        summary.decompression_fs_outputs,
    )
