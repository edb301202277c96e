# pegrt/values.py
"""Values flowing through the output and locals stacks.

Variants map onto plain Python types:

    Empty   -> {}            (fresh dict)
    Range   -> InputRange    (borrows the input buffer)
    Boolean -> bool
    Text    -> str
    Array   -> list
    Mapping -> dict
    Object  -> whatever the factory returned
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional

from .errors import VariantMismatch

Value = Any


def as_text(op: str, value: object) -> str:
    """Text argument passed by a matcher (str, or UTF-8 bytes)."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise VariantMismatch(f"{op}: text argument is not valid UTF-8: {e}") from e
    raise VariantMismatch(f"{op}: expected text, got {type(value).__name__}")


class InputRange:
    """A [start, end) slice of the input buffer, by reference."""

    __slots__ = ("input", "start", "end", "_text")

    def __init__(self, input: bytes, start: int, end: int):
        self.input = input
        self.start = start
        self.end = end
        self._text: Optional[str] = None

    def bytes(self) -> bytes:
        return self.input[self.start:self.end]

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self.bytes().decode("utf-8", errors="replace")
        return self._text

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"InputRange({self.start}, {self.end}, {self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InputRange):
            return self.bytes() == other.bytes()
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)


class ValueKind(Enum):
    RANGE = "range"
    BOOLEAN = "boolean"
    TEXT = "text"
    ARRAY = "array"
    MAPPING = "mapping"
    OBJECT = "object"


def kind_of(value: Value) -> ValueKind:
    # bool before anything numeric-looking; Empty is just an empty mapping
    if isinstance(value, InputRange):
        return ValueKind.RANGE
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.MAPPING
    return ValueKind.OBJECT


def copy_value(value: Value) -> Value:
    """Copy used when a local is loaded back onto the output stack.

    Containers are copied shallowly so that appending to the loaded copy
    leaves the local binding untouched.
    """
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value


def realize(value: Value) -> Value:
    """Turn a result tree into plain data (ranges become str)."""
    if isinstance(value, InputRange):
        return value.text
    if isinstance(value, list):
        return [realize(v) for v in value]
    if isinstance(value, dict):
        return {k: realize(v) for k, v in value.items()}
    return value
