import argparse
import sys
from textwrap import dedent
from typing import Optional, Sequence

from colorama import init

from tarbench import archiver
from tarbench.console import report_error, report_success, setup_logging
from tarbench.errors import TarbenchError

PROG = "tarball"


def build_parser() -> argparse.ArgumentParser:
    epilog = dedent(
        """
        Examples:
          tarball BA40x                 Create ./BA40x.tar.gz with pigz (gzip if pigz is missing)
          tarball --zstd BA40x          Create ./BA40x.tar.zst with zstd -T0
          tarball -d BA40x.tar.zst      Extract into the current directory
          tarball -d -o /data x.tar.gz  Extract into /data

        A progress bar is shown when pv is installed.
        """
    ).rstrip()

    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Create or extract tar archives through an external compressor.",
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("path", help="Directory to compress, or archive to extract with -d")
    parser.add_argument(
        "-d",
        "--decompress",
        action="store_true",
        help="Extract ARCHIVE instead of compressing a directory",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Archive path when compressing, target directory when extracting",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not interpose pv even if it is installed",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Enable debug logging",
    )

    tool_group = parser.add_mutually_exclusive_group()
    tool_group.add_argument(
        "--zstd",
        action="store_const",
        const="zstd",
        dest="tool",
        help="Use zstd (multi-threaded)",
    )
    tool_group.add_argument(
        "--pigz",
        action="store_const",
        const="pigz",
        dest="tool",
        help="Use pigz (multi-threaded gzip)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    init(autoreset=True)
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    progress = not args.no_progress

    try:
        if args.decompress:
            target = archiver.extract(args.path, preference=args.tool, target=args.output, progress=progress)
            report_success(f"Extracted into {target}")
        else:
            archive = archiver.compress(args.path, preference=args.tool, output=args.output, progress=progress)
            report_success(f"Archive written to {archive}")
    except TarbenchError as exc:
        report_error(PROG, exc)
        return exc.exit_code
    except KeyboardInterrupt:
        report_error(PROG, "interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
