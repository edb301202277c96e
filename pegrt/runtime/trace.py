# pegrt/runtime/trace.py
from __future__ import annotations
import sys
from typing import Optional, TextIO


class Tracer:
    """Human-readable callback log. Writes nothing unless enabled."""

    def __init__(self, enabled: bool = False, stream: Optional[TextIO] = None):
        self.enabled = enabled
        self.stream = stream
        self.depth = 0

    def _write(self, line: str) -> None:
        out = self.stream if self.stream is not None else sys.stderr
        print("[TRACE] " + "  " * self.depth + line, file=out)

    def call(self, name: str, *args: object) -> None:
        if self.enabled:
            self._write(f"{name}({', '.join(repr(a) for a in args)})")

    def enter(self, rule: str) -> None:
        if self.enabled:
            self._write(f"enter {rule}")
            self.depth += 1

    def leave(self, rule: str, successful: bool) -> None:
        if self.enabled:
            self.depth = max(0, self.depth - 1)
            self._write(f"leave {rule} {'ok' if successful else 'fail'}")
