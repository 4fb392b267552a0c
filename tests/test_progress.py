"""Tests for the elapsed-time spinner."""

import time

from tarbench.progress import ProgressTimer


class TestProgressTimer:
    def test_silent_when_not_a_tty(self, capsys):
        with ProgressTimer("compress run 1") as spinner:
            pass

        assert spinner._thread is None
        assert capsys.readouterr().out == ""

    def test_renders_and_clears_on_tty(self, monkeypatch, capsys):
        monkeypatch.setattr(ProgressTimer, "enabled", staticmethod(lambda: True))

        with ProgressTimer("decompress run 2") as spinner:
            time.sleep(0.3)

        out = capsys.readouterr().out
        assert "s] decompress run 2" in out
        assert out.endswith("\r")
        assert spinner._thread is None
