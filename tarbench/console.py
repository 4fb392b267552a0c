import logging
import sys

from colorama import Fore, Style


def setup_logging(verbosity: int) -> None:
    debug_enabled = verbosity >= 1

    class _Formatter(logging.Formatter):
        def __init__(self, debug: bool) -> None:
            super().__init__()
            self._debug = debug

        def format(self, record: logging.LogRecord) -> str:
            if record.levelno == logging.DEBUG:
                if self._debug:
                    return f"DEBUG: {record.getMessage()}"
                return ""
            if record.levelno == logging.INFO:
                return record.getMessage()
            if record.levelno >= logging.WARNING:
                return f"{record.levelname}: {record.getMessage()}"
            return ""

    handler = logging.StreamHandler()
    handler.setFormatter(_Formatter(debug_enabled))

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if debug_enabled else logging.INFO)


def report_error(prog: str, message: object) -> None:
    print(Fore.RED + f"{prog}: {message}" + Style.RESET_ALL, file=sys.stderr)


def report_success(message: str) -> None:
    print(Fore.GREEN + message + Style.RESET_ALL)
