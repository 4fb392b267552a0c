from typing import Optional, Sequence


class TarbenchError(Exception):
    """Base class for errors reported by the tarbench command line tools."""

    exit_code = 1


class UsageError(TarbenchError):
    pass


class UnknownAlgorithmError(UsageError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown algo: {name}")
        self.name = name


class DirectoryNotFoundError(TarbenchError):
    def __init__(self, directory: str) -> None:
        super().__init__(f"Directory not found: {directory}")
        self.directory = directory


class ToolError(TarbenchError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: Optional[str] = None) -> None:
        command = " ".join(argv)
        message = f"Command failed with exit status {returncode}: {command}"
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode

    @property
    def exit_code(self) -> int:
        # Killed by a signal: report it the way a shell would
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode or 1


class MetricParseError(TarbenchError):
    pass
