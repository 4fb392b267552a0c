from pathlib import Path
from typing import Iterable


class BenchmarkLog:
    """Append-only text log of one benchmark invocation. Every write is flushed to disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def line(self, text: str = "") -> None:
        with open(self.path, "a", encoding="utf-8") as handle:
            handle.write(f"{text}\n")

    def lines(self, texts: Iterable[str]) -> None:
        with open(self.path, "a", encoding="utf-8") as handle:
            for text in texts:
                handle.write(f"{text}\n")

    def fields(self, pairs: Iterable[tuple[str, object]]) -> None:
        self.lines(f"{key}: {value}" for key, value in pairs)

    def section(self, title: str, pairs: Iterable[tuple[str, object]]) -> None:
        self.line(title)
        self.fields(pairs)

    def warn(self, message: str) -> None:
        self.line(f"WARN: {message}")
