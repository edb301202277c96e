# pegrt/runtime/failure.py
from __future__ import annotations
from typing import Optional, Set

from ..errors import ParsingError


class FailureTracker:
    """Furthest-failure bookkeeping.

    Only reasons observed at `position` are ever kept; a failure further
    right discards everything recorded so far, one further left is ignored.
    `position is None` means no failure has been traced yet.
    """

    def __init__(self) -> None:
        self.position: Optional[int] = None
        self.expectations: Set[str] = set()
        self.other_reasons: Set[str] = set()

    def record(self, pos: int, reason: str, is_expectation: bool) -> None:
        pos = int(pos)
        if self.position is None or pos > self.position:
            self.position = pos
            self.expectations = set()
            self.other_reasons = set()
        elif pos < self.position:
            return
        if is_expectation:
            self.expectations.add(reason)
        else:
            self.other_reasons.add(reason)

    def to_error(self, input: bytes) -> ParsingError:
        pos = 0 if self.position is None else self.position
        return ParsingError(input, pos, self.expectations, self.other_reasons)
