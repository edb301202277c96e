# pegrt/runtime/stacks.py
"""Output and locals stacks.

The matcher builds its result on the output stack with push/pop/combine
operations; the locals stack holds scoped bindings (loop accumulators,
captures referenced later by a backreference). Every misuse is a
ContractViolation, never a parse failure.
"""

from __future__ import annotations
from typing import Dict, List, Union

from ..errors import ContractViolation, StackUnderflow, VariantMismatch
from ..factory import Factory, identity_factory
from ..values import InputRange, Value, as_text, copy_value, kind_of


def _check_count(op: str, count: int) -> int:
    count = int(count)
    if count < 0:
        raise ContractViolation(f"{op}: negative count {count}")
    return count


class OutputStack:
    """Result-building stack.

    Parameters
    ----------
    buffer : bytes
        Sentinel-terminated input buffer. Ranges borrow it.
    input_end : int
        Offset one past the last real input byte.
    factory : Factory
        Used by `make_object`.
    """

    def __init__(self, buffer: bytes, input_end: int,
                 factory: Factory = identity_factory):
        self.buffer = buffer
        self.input_end = input_end
        self.factory = factory
        self.items: List[Value] = []

    def __len__(self) -> int:
        return len(self.items)

    # ---- raw access ----
    def push(self, v: Value) -> None:
        self.items.append(v)

    def pop(self) -> Value:
        if not self.items:
            raise StackUnderflow("pop from empty output stack")
        return self.items.pop()

    # ---- typed pops ----
    def pop_array(self, op: str) -> list:
        v = self.pop()
        if not isinstance(v, list):
            raise VariantMismatch(f"{op}: expected array, got {kind_of(v).value}")
        return v

    def pop_mapping(self, op: str) -> dict:
        v = self.pop()
        if not isinstance(v, dict):
            raise VariantMismatch(f"{op}: expected mapping, got {kind_of(v).value}")
        return v

    def pop_matchable(self, op: str) -> Union[InputRange, str]:
        v = self.pop()
        if not isinstance(v, (InputRange, str)):
            raise VariantMismatch(f"{op}: expected range or text, got {kind_of(v).value}")
        return v

    # ---- value construction ----
    def push_empty(self) -> None:
        self.push({})

    def push_input_range(self, from_pos: int, to_pos: int) -> None:
        start, end = int(from_pos), int(to_pos)
        if not 0 <= start <= end <= self.input_end:
            raise ContractViolation(
                f"push_input_range: invalid range [{start}, {end}) for input of {self.input_end} bytes")
        self.push(InputRange(self.buffer, start, end))

    def push_boolean(self, value: bool) -> None:
        self.push(bool(value))

    def push_string(self, value: Union[str, bytes]) -> None:
        self.push(as_text("push_string", value))

    def push_array(self, append_current: bool) -> None:
        if append_current:
            self.push([self.pop()])
        else:
            self.push([])

    def append_to_array(self) -> None:
        v = self.pop()
        arr = self.pop_array("append_to_array")
        arr.append(v)
        self.push(arr)

    def make_label(self, name: str) -> None:
        self.push({as_text("make_label", name): self.pop()})

    def merge_labels(self, count: int) -> None:
        # Merged in pop order: on a key collision the mapping popped later
        # (pushed earlier) overwrites.
        count = _check_count("merge_labels", count)
        merged: Dict[str, Value] = {}
        for _ in range(count):
            merged.update(self.pop_mapping("merge_labels"))
        self.push(merged)

    def make_object(self, class_name: str) -> None:
        self.push(self.factory(as_text("make_object", class_name), self.pop()))


class LocalsStack:
    """Scoped bindings, addressed by depth from the top."""

    def __init__(self) -> None:
        self.items: List[Value] = []

    def __len__(self) -> int:
        return len(self.items)

    def push(self, output: OutputStack, count: int) -> None:
        """Move `count` values from the output stack, keeping pop order."""
        count = _check_count("locals_push", count)
        for _ in range(count):
            self.items.append(output.pop())

    def load(self, output: OutputStack, index: int) -> None:
        index = int(index)
        if index < 0:
            raise ContractViolation(f"locals_load: negative index {index}")
        if index >= len(self.items):
            raise StackUnderflow(
                f"locals_load: index {index} beyond locals depth {len(self.items)}")
        output.push(copy_value(self.items[-1 - index]))

    def pop(self, count: int) -> None:
        count = _check_count("locals_pop", count)
        if count > len(self.items):
            raise StackUnderflow(
                f"locals_pop: {count} entries requested, depth is {len(self.items)}")
        if count:
            del self.items[-count:]
