# pegrt/runtime/callbacks.py
"""The callback table handed to a matcher entry point.

Each method is one ABI slot (see pegrt.abi). Methods are bound to a single
ParseContext, which is how per-invocation state reaches the callbacks
without any globals.
"""

from __future__ import annotations
from typing import Callable, List, Union

from ..abi import CALLBACK_SLOTS, NO_MATCH
from ..errors import ContractViolation, UnsupportedOperation
from ..values import InputRange, as_text
from .context import ParseContext


class Callbacks:
    def __init__(self, ctx: ParseContext):
        self.ctx = ctx
        self.out = ctx.output
        self.trace = ctx.tracer

    def table(self) -> List[Callable[..., object]]:
        """Bound callbacks in ABI order."""
        return [getattr(self, slot.name) for slot in CALLBACK_SLOTS]

    # ---- output stack ----
    def push_empty(self) -> None:
        self.trace.call("push_empty")
        self.out.push_empty()

    def push_input_range(self, from_pos: int, to_pos: int) -> None:
        self.trace.call("push_input_range", from_pos, to_pos)
        self.out.push_input_range(from_pos, to_pos)

    def push_boolean(self, value: bool) -> None:
        self.trace.call("push_boolean", bool(value))
        self.out.push_boolean(value)

    def push_string(self, value: Union[str, bytes]) -> None:
        self.trace.call("push_string", value)
        self.out.push_string(value)

    def push_array(self, append_current: bool) -> None:
        self.trace.call("push_array", bool(append_current))
        self.out.push_array(append_current)

    def append_to_array(self) -> None:
        self.trace.call("append_to_array")
        self.out.append_to_array()

    def make_label(self, name: str) -> None:
        self.trace.call("make_label", name)
        self.out.make_label(name)

    def merge_labels(self, count: int) -> None:
        self.trace.call("merge_labels", count)
        self.out.merge_labels(count)

    def make_value(self, code: str, filename: str, line: int) -> None:
        self.trace.call("make_value", code, filename, line)
        raise UnsupportedOperation("make_value is not supported")

    def make_object(self, class_name: str) -> None:
        self.trace.call("make_object", class_name)
        self.out.make_object(class_name)

    def pop(self) -> None:
        self.trace.call("pop")
        self.out.pop()

    # ---- locals ----
    def locals_push(self, count: int) -> None:
        self.trace.call("locals_push", count)
        self.ctx.locals.push(self.out, count)

    def locals_load(self, index: int) -> None:
        self.trace.call("locals_load", index)
        self.ctx.locals.load(self.out, index)

    def locals_pop(self, count: int) -> None:
        self.trace.call("locals_pop", count)
        self.ctx.locals.pop(count)

    # ---- backreference matching ----
    def match(self, pos: int) -> int:
        self.trace.call("match", pos)
        expected = self.out.pop_matchable("match")
        pos = int(pos)
        if not 0 <= pos <= self.ctx.input_end:
            raise ContractViolation(
                f"match: position {pos} outside input of {self.ctx.input_end} bytes")
        if isinstance(expected, InputRange):
            data = expected.bytes()
        else:
            data = expected.encode("utf-8")
        # compare against the input proper; the sentinel never matches
        if self.ctx.buffer.startswith(data, pos, self.ctx.input_end):
            return pos + len(data)
        return NO_MATCH

    # TODO: source switching needs a nested context per sub-grammar input;
    # until then both slots stay reserved.
    def set_as_source(self) -> None:
        self.trace.call("set_as_source")
        raise UnsupportedOperation("set_as_source is not supported")

    def read_from_source(self, name: str) -> None:
        self.trace.call("read_from_source", name)
        raise UnsupportedOperation("read_from_source is not supported")

    # ---- tracing / failures ----
    def trace_enter(self, name: str) -> None:
        self.trace.enter(name)

    def trace_leave(self, name: str, successful: bool) -> None:
        self.trace.leave(name, bool(successful))

    def trace_failure(self, pos: int, reason: str, is_expectation: bool) -> None:
        self.trace.call("trace_failure", pos, reason, bool(is_expectation))
        pos = int(pos)
        if not 0 <= pos <= self.ctx.input_end:
            raise ContractViolation(
                f"trace_failure: position {pos} outside input of {self.ctx.input_end} bytes")
        self.ctx.failure.record(pos, as_text("trace_failure", reason), bool(is_expectation))
