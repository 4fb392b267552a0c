import enum
import logging
import os
import subprocess

from . import config
from .pipeline import which


class DropResult(enum.Enum):
    DROPPED = "dropped"
    DENIED = "denied"
    UNSUPPORTED = "unsupported"

    @property
    def ok(self) -> bool:
        return self is DropResult.DROPPED


def drop_caches(path: str = config.DROP_CACHES_PATH) -> DropResult:
    """
    Ask the kernel to discard the page cache before a timed run.
    Best effort: the result is reported, never raised.
    """
    os.sync()

    if os.access(path, os.W_OK):
        try:
            with open(path, "w") as handle:
                handle.write(config.DROP_CACHES_VALUE)
            return DropResult.DROPPED
        except OSError as exc:
            logging.debug("Writing %s failed: %s", path, exc)
            return DropResult.DENIED

    if not os.path.exists(path):
        return DropResult.UNSUPPORTED

    sudo = which("sudo")
    if not sudo:
        return DropResult.DENIED

    # -n: never prompt for a password in the middle of a benchmark
    try:
        result = subprocess.run(
            [sudo, "-n", "tee", path],
            input=config.DROP_CACHES_VALUE,
            text=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        logging.debug("sudo tee %s failed: %s", path, exc)
        return DropResult.DENIED
    return DropResult.DROPPED if result.returncode == 0 else DropResult.DENIED
