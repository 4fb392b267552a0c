import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from . import config
from .cache import DropResult, drop_caches
from .config import Algorithm
from .errors import DirectoryNotFoundError, TarbenchError
from .file_utils import file_size, remove_path, source_size_bytes
from .logfile import BenchmarkLog
from .progress import ProgressTimer
from .stats import BenchmarkStats, print_benchmark_summary
from .timer import TimeMetrics, Timer, run_timed


@dataclass
class BenchmarkSession:
    algorithm: Algorithm
    source_parent: Path
    source_name: str
    threads: int
    result_dir: Path
    log: BenchmarkLog
    stats: BenchmarkStats = field(default_factory=BenchmarkStats)

    @property
    def source(self) -> Path:
        return self.source_parent / self.source_name

    @property
    def archive(self) -> Path:
        return self.result_dir / f"{self.source_name}_{self.algorithm.name}.{self.algorithm.extension}"

    @property
    def extract_dir(self) -> Path:
        return self.result_dir / f"tmp_extract_{self.algorithm.name}"

    def compress_argv(self) -> list[str]:
        return ["tar", "-I", self.algorithm.compress_cmd, "-C", str(self.source_parent), "-cf", str(self.archive), self.source_name]

    def decompress_argv(self) -> list[str]:
        return ["tar", "-I", self.algorithm.decompress_cmd, "-xf", str(self.archive), "-C", str(self.extract_dir)]


def open_session(algorithm: str, directory: str, result_dir: Optional[str] = None) -> BenchmarkSession:
    """Validate the arguments and create the result directory and log header."""
    threads = config.get_thread_count()
    resolved = config.resolve_algorithm(algorithm, threads)

    if not os.path.isdir(directory):
        raise DirectoryNotFoundError(directory)

    results = Path(result_dir) if result_dir else Path.cwd() / config.RESULT_DIR_NAME
    results = results.absolute()
    os.makedirs(results, exist_ok=True)

    # Like `cd dirname && pwd -P`: the parent is resolved, the basename kept as given.
    source = Path(directory).absolute()
    if source.name in ("", ".."):
        source = source.resolve()
    parent = source.parent.resolve()
    name = source.name

    timestamp = datetime.now().strftime(config.LOG_TIMESTAMP_FORMAT)
    log = BenchmarkLog(results / f"{resolved.name}_{name}_{timestamp}.txt")

    session = BenchmarkSession(
        algorithm=resolved,
        source_parent=parent,
        source_name=name,
        threads=threads,
        result_dir=results,
        log=log,
    )
    _write_header(session)
    return session


def _write_header(session: BenchmarkSession) -> None:
    session.log.line("Tarball Benchmark")
    session.log.fields([
        ("Algorithm", session.algorithm.name),
        ("Source", session.source),
        ("Threads", session.threads),
        ("Compression command", session.algorithm.compress_cmd),
        ("Decompression command", session.algorithm.decompress_cmd),
        ("Runs", config.RUNS),
        ("Result dir", session.result_dir),
    ])
    session.log.line()


def _drop_caches(session: BenchmarkSession) -> DropResult:
    result = drop_caches()
    if not result.ok:
        logging.warning("Cannot drop caches (%s); timings may include cached reads", result.value)
        session.log.warn("cannot drop caches")
    return result


def _timed_step(session: BenchmarkSession, label: str, argv: list[str]) -> TimeMetrics:
    logging.info("Running %s...", label)
    with ProgressTimer(label):
        metrics = run_timed(label, argv, session.result_dir)

    session.log.section(f"### {label}", [
        ("Elapsed", metrics.elapsed_raw),
        ("CPU", metrics.cpu_raw),
        ("FS inputs", metrics.fs_inputs),
        ("FS outputs", metrics.fs_outputs),
    ])
    session.log.line()
    return metrics


def run_once(session: BenchmarkSession, index: int) -> None:
    """One compress-then-decompress cycle, leaving no archive or extracted tree behind."""
    remove_path(session.archive)
    remove_path(session.extract_dir)
    os.makedirs(session.extract_dir, exist_ok=True)

    _drop_caches(session)
    metrics = _timed_step(session, f"compress run {index}", session.compress_argv())

    run = session.stats.record_compression(index, metrics, file_size(session.archive))
    session.log.fields([
        (f"Archive size (bytes) run {index}", run.archive_bytes),
        (f"Compression ratio run {index} (archive/source)", run.ratio),
    ])
    session.log.line()

    _drop_caches(session)
    metrics = _timed_step(session, f"decompress run {index}", session.decompress_argv())
    session.stats.record_decompression(index, metrics)

    remove_path(session.extract_dir)
    remove_path(session.archive)


def write_summary(session: BenchmarkSession) -> None:
    summary = session.stats.summary()
    session.log.section("## Summary (averages)", summary.as_fields())
    print_benchmark_summary(session.stats, summary)


def run(algorithm: str, directory: str, result_dir: Optional[str] = None) -> Path:
    """
    Benchmark one algorithm against one directory and return the log path.

    Runs exactly config.RUNS compress/decompress cycles. Any failing external tool aborts
    the whole benchmark; the log keeps what had been written up to that point.
    """
    session = open_session(algorithm, directory, result_dir)
    logging.info("Benchmarking %s on %s (%d threads)", session.algorithm.name, session.source, session.threads)
    logging.debug("Log file: %s", session.log.path)

    with Timer("benchmark", log_on_exit=True):
        session.stats.source_bytes = source_size_bytes(session.source)
        if session.stats.source_bytes <= 0:
            raise TarbenchError(f"Source size is zero: {session.source}")
        session.log.line(f"Source size (bytes): {session.stats.source_bytes}")
        session.log.line()

        for index in range(1, config.RUNS + 1):
            run_once(session, index)

        write_summary(session)
    return session.log.path
