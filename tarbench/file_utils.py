import os
import shutil
from pathlib import Path
from typing import Union

from .pipeline import capture, which

PathLike = Union[str, Path]


def source_size_bytes(directory: PathLike) -> int:
    """Apparent size of a directory tree in bytes. Prefers gdu, which does not round to blocks."""
    if which("gdu"):
        output = capture(["gdu", "-n", "-p", "--no-prefix", "--show-apparent-size", str(directory)])
    else:
        output = capture(["du", "-sb", str(directory)])
    lines = output.strip().splitlines()
    if not lines:
        raise ValueError(f"no disk usage reported for {directory}")
    return int(lines[0].split()[0])


def file_size(path: PathLike) -> int:
    return os.stat(path).st_size


def remove_path(path: PathLike) -> None:
    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    elif target.exists() or target.is_symlink():
        target.unlink()
