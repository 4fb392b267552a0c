import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import ARCHIVER_TOOLS, GZIP_FAMILY_PREFERENCE, PROGRESS_TOOL, CompressorSpec
from .errors import DirectoryNotFoundError, UsageError
from .file_utils import source_size_bytes
from .pipeline import Stage, describe, run_pipeline, which


@dataclass(frozen=True)
class Compressor:
    tool: CompressorSpec
    path: str

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def extension(self) -> str:
        return self.tool.extension

    def compress_stage(self) -> Stage:
        return Stage((self.path, *self.tool.compress_args), self.name)

    def decompress_stage(self, archive: Optional[Path] = None) -> Stage:
        argv = [self.path, *self.tool.decompress_args]
        if archive is not None:
            argv.append(str(archive))
        return Stage(tuple(argv), self.name)


def _locate(name: str) -> Optional[Compressor]:
    tool = ARCHIVER_TOOLS[name]
    path = which(tool.binary)
    return Compressor(tool, path) if path else None


def select_compressor(preference: Optional[str] = None, archive: Optional[Path] = None) -> Compressor:
    """
    Pick the external compressor for an archive operation.

    An explicit preference always wins. Without one, extraction follows the archive suffix
    and everything else prefers the multi-threaded gzip implementation over plain gzip.
    """
    if preference:
        if preference not in ARCHIVER_TOOLS:
            raise UsageError(f"Unknown compressor: {preference}")
        compressor = _locate(preference)
        if compressor is None:
            raise UsageError(f"{preference} is not installed")
        return compressor

    if archive is not None and archive.name.endswith(".zst"):
        compressor = _locate("zstd")
        if compressor is None:
            raise UsageError("zstd is not installed")
        return compressor

    for name in GZIP_FAMILY_PREFERENCE:
        compressor = _locate(name)
        if compressor is not None:
            if not compressor.tool.threaded:
                logging.debug("No multi-threaded compressor found, falling back to %s", name)
            return compressor
    raise UsageError("No supported compressor found (tried %s)" % ", ".join(GZIP_FAMILY_PREFERENCE))


def progress_stage(size_hint: Optional[int] = None) -> Optional[Stage]:
    path = which(PROGRESS_TOOL)
    if not path:
        return None
    argv = [path]
    if size_hint:
        argv += ["-s", str(size_hint)]
    return Stage(tuple(argv), PROGRESS_TOOL)


def compress(
    directory: str,
    preference: Optional[str] = None,
    output: Optional[str] = None,
    progress: bool = True,
) -> Path:
    source = Path(directory)
    if not source.is_dir():
        raise DirectoryNotFoundError(directory)
    source = source.resolve()

    compressor = select_compressor(preference)
    archive = Path(output) if output else Path.cwd() / f"{source.name}.{compressor.extension}"

    stages = [Stage.of("tar", "-C", str(source.parent), "-cf", "-", source.name, name="tar")]
    if progress:
        meter = progress_stage(source_size_bytes(str(source)))
        if meter is not None:
            stages.append(meter)
    stages.append(compressor.compress_stage())

    logging.info("Compressing %s with %s -> %s", source, compressor.name, archive)
    logging.debug("Pipeline: %s > %s", describe(stages), archive)
    try:
        sink = open(archive, "wb")
    except OSError as exc:
        raise UsageError(f"Cannot write archive {archive}: {exc.strerror or exc}") from exc
    with sink:
        run_pipeline(stages, stdout=sink)
    return archive


def extract(
    archive: str,
    preference: Optional[str] = None,
    target: Optional[str] = None,
    progress: bool = True,
) -> Path:
    archive_path = Path(archive)
    if not archive_path.is_file():
        raise UsageError(f"Archive not found: {archive}")

    destination = Path(target) if target else Path.cwd()
    try:
        os.makedirs(destination, exist_ok=True)
    except OSError as exc:
        raise UsageError(f"Cannot create directory {destination}: {exc.strerror or exc}") from exc

    compressor = select_compressor(preference, archive_path)
    stages = [compressor.decompress_stage(archive_path)]
    if progress:
        meter = progress_stage()
        if meter is not None:
            stages.append(meter)
    stages.append(Stage.of("tar", "-xf", "-", "-C", str(destination), name="tar"))

    logging.info("Extracting %s with %s into %s", archive_path, compressor.name, destination)
    logging.debug("Pipeline: %s", describe(stages))
    run_pipeline(stages)
    return destination
