import sys
import threading
import time
from typing import Optional


class ProgressTimer:
    """Redraws an elapsed-time line on stdout while a blocking external command runs."""

    def __init__(self, label: str = "Working") -> None:
        self._label = label
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._render_interval = 0.1
        self._last_line_length = 0
        self._start_time: float = 0.0

    @staticmethod
    def enabled() -> bool:
        return getattr(sys.stdout, "isatty", lambda: False)()

    def __enter__(self) -> "ProgressTimer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.stop()
        return False

    def start(self) -> None:
        if not self.enabled():
            return
        with self._lock:
            self._start_time = time.monotonic()
            if self._thread and self._thread.is_alive():
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None
        self._clear_line()
        sys.stdout.flush()

    def _spin(self) -> None:
        while not self._stop_event.is_set():
            with self._lock:
                self._write(self._render_line())
            self._stop_event.wait(self._render_interval)

    def _render_line(self) -> str:
        elapsed = time.monotonic() - self._start_time
        return f"[{elapsed:6.1f}s] {self._label}"

    def _write(self, content: str) -> None:
        sys.stdout.write("\r" + content)
        pad = self._last_line_length - len(content)
        if pad > 0:
            sys.stdout.write(" " * pad)
        sys.stdout.flush()
        self._last_line_length = len(content)

    def _clear_line(self) -> None:
        if self._last_line_length:
            sys.stdout.write("\r" + " " * self._last_line_length + "\r")
            self._last_line_length = 0
