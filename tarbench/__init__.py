from .archiver import compress, extract, select_compressor
from .benchmark import BenchmarkSession, open_session, run
from .config import ALGORITHM_NAMES, Algorithm, get_thread_count, resolve_algorithm
from .errors import (
	DirectoryNotFoundError,
	MetricParseError,
	TarbenchError,
	ToolError,
	UnknownAlgorithmError,
	UsageError,
)
from .stats import BenchmarkStats, average, average_int, compression_ratio
from .timer import TimeMetrics, parse_time_output, time_to_seconds
