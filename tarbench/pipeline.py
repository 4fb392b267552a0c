import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import IO, Optional, Sequence

from .errors import ToolError


@dataclass(frozen=True)
class Stage:
    argv: tuple[str, ...]
    name: Optional[str] = None

    @classmethod
    def of(cls, *argv: str, name: Optional[str] = None) -> "Stage":
        return cls(tuple(argv), name)

    @property
    def label(self) -> str:
        return self.name or self.argv[0]

    def __str__(self) -> str:
        return " ".join(self.argv)


def which(tool: str) -> Optional[str]:
    return shutil.which(tool)


def describe(stages: Sequence[Stage]) -> str:
    return " | ".join(str(stage) for stage in stages)


def _launch_error(argv: Sequence[str], label: str, exc: OSError) -> ToolError:
    # Shell conventions: 127 for a missing command, 126 for one that cannot be executed
    if isinstance(exc, FileNotFoundError):
        return ToolError(argv, 127, f"{label}: command not found")
    return ToolError(argv, 126, f"{label}: {exc.strerror or exc}")


def run_pipeline(
    stages: Sequence[Stage],
    stdin: Optional[IO[bytes]] = None,
    stdout: Optional[IO[bytes]] = None,
) -> int:
    """
    Run the stages as one process pipeline, each stage's stdout feeding the next stage's stdin.
    The whole pipeline fails if any stage fails; the first failing stage is reported.
    """
    if not stages:
        raise ValueError("pipeline needs at least one stage")

    logging.debug("Running pipeline: %s", describe(stages))

    processes: list[subprocess.Popen] = []
    upstream: Optional[IO[bytes]] = stdin
    try:
        for index, stage in enumerate(stages):
            is_last = index == len(stages) - 1
            try:
                proc = subprocess.Popen(
                    stage.argv,
                    stdin=upstream,
                    stdout=stdout if is_last else subprocess.PIPE,
                )
            except OSError as exc:
                raise _launch_error(stage.argv, stage.label, exc) from None
            # The child holds its own copy; closing ours lets SIGPIPE reach the writer.
            if upstream is not None and upstream is not stdin:
                upstream.close()
            upstream = proc.stdout
            processes.append(proc)
    except BaseException:
        for proc in processes:
            proc.kill()
            proc.wait()
        raise

    returncodes = [proc.wait() for proc in processes]

    for stage, code in zip(stages, returncodes):
        if code != 0:
            raise ToolError(stage.argv, code)
    return 0


def capture(argv: Sequence[str]) -> str:
    """Run a single command and return its standard output."""
    logging.debug("Capturing output of: %s", " ".join(argv))
    try:
        result = subprocess.run(list(argv), capture_output=True, text=True)
    except OSError as exc:
        raise _launch_error(argv, argv[0], exc) from None
    if result.returncode != 0:
        raise ToolError(argv, result.returncode, result.stderr)
    return result.stdout
