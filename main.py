import argparse
import sys
from textwrap import dedent
from typing import NoReturn, Optional, Sequence

from colorama import init

from tarbench import benchmark
from tarbench.config import ALGORITHM_NAMES
from tarbench.console import report_error, report_success, setup_logging
from tarbench.errors import TarbenchError

PROG = "tarball_test"

USAGE = dedent(
    """
    Usage:
      tarball_test.sh <algo> <directory>

    Algos:
      zstd        -> zstd -T0
      zstd-fast   -> zstd -T0 --fast=3
      pzstd       -> pzstd -p <threads>
      pigz        -> pigz -p <threads>

    Examples:
      tarball_test.sh zstd BA40x
      tarball_test.sh zstd-fast BA40x
      tarball_test.sh pzstd BA40x
      tarball_test.sh pigz BA40x
    """
).strip().replace("tarball_test.sh", PROG)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        # Usage problems exit with 1, not argparse's 2
        print(USAGE, file=sys.stderr)
        self.exit(1, f"{PROG}: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog=PROG,
        description="Time two tar compress/decompress cycles with an external compressor and log the averages.",
        epilog=USAGE,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("algo", help="Compression algorithm: " + ", ".join(ALGORITHM_NAMES))
    parser.add_argument("directory", help="Directory to archive")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--result-dir",
        default=None,
        help="Where logs and temporary archives go (default: ./tarball_test_result)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    init(autoreset=True)
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        log_path = benchmark.run(args.algo, args.directory, result_dir=args.result_dir)
    except TarbenchError as exc:
        report_error(PROG, exc)
        return exc.exit_code
    except KeyboardInterrupt:
        report_error(PROG, "interrupted")
        return 130

    print()
    report_success(f"Done. Log saved to: {log_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
