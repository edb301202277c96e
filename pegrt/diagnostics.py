# pegrt/diagnostics.py
"""Failure message rendering.

All offsets are byte offsets into the input the matcher saw (without the
sentinel byte).
"""

from __future__ import annotations
from typing import Iterable, List, Tuple

CONTEXT_BYTES = 20


def line_column(src: bytes, pos: int) -> Tuple[int, int]:
    """(line, column) of byte offset `pos`.

    line   = 1 + number of newlines strictly before pos
    column = pos - offset of the last newline before pos, or pos if none
    """
    before = src[:pos]
    line = before.count(b"\n") + 1
    nl = before.rfind(b"\n")
    column = pos if nl < 0 else pos - nl
    return line, column


def caret_snippet(src: bytes, pos: int) -> str:
    """The line holding `pos` with a caret (^) under it."""
    start = src.rfind(b"\n", 0, pos) + 1
    end = src.find(b"\n", pos)
    if end < 0:
        end = len(src)
    line = src[start:end].decode("utf-8", errors="replace")
    # caret offset counts decoded characters, not bytes
    width = len(src[start:pos].decode("utf-8", errors="replace"))
    return f"{line}\n{' ' * width}^"


def format_failure(src: bytes, pos: int,
                   expectations: Iterable[str],
                   other_reasons: Iterable[str]) -> str:
    """Render the single user-facing failure message.

    Parameters
    ----------
    src : bytes
        Input the matcher ran over.
    pos : int
        Furthest failure position.
    expectations, other_reasons : Iterable[str]
        Reasons recorded at `pos`. Deduplicated and sorted here so the
        message does not depend on recording order.
    """
    line, column = line_column(src, pos)
    context = src[max(0, pos - CONTEXT_BYTES):pos].decode("utf-8", errors="replace")

    reasons: List[str] = sorted(set(other_reasons))
    expected = sorted(set(expectations))
    if expected:
        reasons.append("expected one of " + ", ".join(expected))
    return (f"at line {line}, column {column} (byte {pos}, after {context!r}): "
            + " / ".join(reasons))
