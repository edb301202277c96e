# pegrt/errors.py
"""Error types raised by the runtime.

Two disjoint classes:

- `ParsingError` : the matcher reported no match. Expected, recoverable.
- `ContractViolation` : the matcher and the runtime disagree (stack underflow,
  wrong value variant, reserved callback, broken module). Always fatal for the
  current invocation.
"""

from __future__ import annotations
from typing import Iterable, Tuple

from .diagnostics import caret_snippet, format_failure, line_column


class ParsingError(SyntaxError):
    """Parse failure at the furthest position any alternative reached."""

    def __init__(self, input: bytes, position: int,
                 expectations: Iterable[str] = (),
                 other_reasons: Iterable[str] = ()):
        self.input = bytes(input)
        self.position = position
        self.expectations: Tuple[str, ...] = tuple(sorted(set(expectations)))
        self.other_reasons: Tuple[str, ...] = tuple(sorted(set(other_reasons)))
        self.line, self.column = line_column(self.input, position)
        super().__init__(format_failure(
            self.input, position, self.expectations, self.other_reasons))

    def __str__(self) -> str:
        return self.msg

    def merge(self, other: "ParsingError") -> "ParsingError":
        """Union the reasons of two failures at the same position."""
        if other.position != self.position:
            raise ValueError(
                f"cannot merge failures at bytes {self.position} and {other.position}")
        return ParsingError(
            self.input,
            self.position,
            self.expectations + other.expectations,
            self.other_reasons + other.other_reasons,
        )

    def describe(self) -> str:
        """Message plus the offending line with a caret under the failure."""
        return f"{self.msg}\n{caret_snippet(self.input, self.position)}"


class ContractViolation(RuntimeError):
    """Runtime and matcher disagree about the callback contract."""


class StackUnderflow(ContractViolation):
    pass


class VariantMismatch(ContractViolation):
    """A typed pop found a value of the wrong variant."""


class UnsupportedOperation(ContractViolation):
    """A reserved callback was invoked."""


class MatcherLoadError(ContractViolation):
    """The matcher module or one of its entry points could not be resolved."""


class AbiMismatch(ContractViolation):
    pass


class FactoryError(ContractViolation):
    pass
