import os
from dataclasses import dataclass
from typing import Optional

from .errors import UnknownAlgorithmError

RUNS = 2
DEFAULT_THREADS = 4

RESULT_DIR_NAME = "tarball_test_result"
LOG_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

TIME_BIN = "/usr/bin/time"
DROP_CACHES_PATH = "/proc/sys/vm/drop_caches"
DROP_CACHES_VALUE = "3"

# Labels printed by GNU time -v
ELAPSED_LABEL = "Elapsed (wall clock) time (h:mm:ss or m:ss)"
CPU_LABEL = "Percent of CPU this job got"
FS_INPUTS_LABEL = "File system inputs"
FS_OUTPUTS_LABEL = "File system outputs"


@dataclass(frozen=True)
class Algorithm:
    name: str
    compress_cmd: str
    decompress_cmd: str
    extension: str


ALGORITHM_NAMES = ("zstd", "zstd-fast", "pzstd", "pigz")


def build_algorithms(threads: int) -> dict[str, Algorithm]:
    return {
        "zstd": Algorithm("zstd", "zstd -T0", "zstd -d -T0", "tar.zst"),
        "zstd-fast": Algorithm("zstd-fast", "zstd -T0 --fast=3", "zstd -d -T0", "tar.zst"),
        "pzstd": Algorithm("pzstd", f"pzstd -p {threads}", f"pzstd -d -p {threads}", "tar.zst"),
        "pigz": Algorithm("pigz", f"pigz -p {threads}", f"pigz -d -p {threads}", "tar.gz"),
    }


def resolve_algorithm(name: str, threads: Optional[int] = None) -> Algorithm:
    if threads is None:
        threads = get_thread_count()
    algorithms = build_algorithms(threads)
    try:
        return algorithms[name]
    except KeyError:
        raise UnknownAlgorithmError(name) from None


def get_thread_count() -> int:
    """Processors usable by this process, like nproc. Falls back to DEFAULT_THREADS."""
    try:
        count = len(os.sched_getaffinity(0))
    except (AttributeError, OSError):
        count = os.cpu_count() or 0
    return count if count > 0 else DEFAULT_THREADS


# Archiver front-end tools. Threaded tools take the thread count flag.
@dataclass(frozen=True)
class CompressorSpec:
    name: str
    binary: str
    extension: str
    threaded: bool
    compress_args: tuple[str, ...] = ()
    decompress_args: tuple[str, ...] = ("-d", "-c")


ARCHIVER_TOOLS = {
    "zstd": CompressorSpec("zstd", "zstd", "tar.zst", True, ("-T0", "-c"), ("-d", "-T0", "-c")),
    "pigz": CompressorSpec("pigz", "pigz", "tar.gz", True, ("-c",)),
    "gzip": CompressorSpec("gzip", "gzip", "tar.gz", False, ("-c",)),
}

# Default order when no tool is requested: multi-threaded first.
GZIP_FAMILY_PREFERENCE = ("pigz", "gzip")
PROGRESS_TOOL = "pv"
