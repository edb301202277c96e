# pegrt/abi.py
"""
Callback table ABI
==================

A compiled matcher talks to the runtime only through the callables it is
handed at entry. This module pins that contract down.

Calling convention
------------------
    <rule>_match(buffer, input_start, input_end, initial_flag, *callbacks) -> int

- buffer        : input bytes followed by one sentinel byte (b"\\0")
- input_start   : offset of the first input byte (always 0)
- input_end     : offset one past the last input byte (== len(input))
- initial_flag  : "currently matching a backreference", always False at entry
- callbacks     : the slots below, in exactly this order
- return value  : nonzero/truthy on success, zero/falsy on failure

All positions exchanged with callbacks are offsets into `buffer`.

Notes
-----
- Order is part of the ABI. A matcher built against another order is not
  detectable at call time, so modules may declare `CALLBACK_ABI_VERSION`
  and/or `CALLBACK_ABI` (tuple of slot names) to be checked at load time.
- Reserved slots exist in the table but raise UnsupportedOperation.
"""

from __future__ import annotations
import inspect
from collections import namedtuple
from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Tuple

from .errors import AbiMismatch

ABI_VERSION = 1

# Returned by `match` when the input does not start with the expected bytes.
NO_MATCH = -1

# Leading entry-point parameters before the callback slots.
ENTRY_FIXED_PARAMS = ("buffer", "input_start", "input_end", "initial_flag")


@dataclass(frozen=True)
class Slot:
    """One callback entry: name, parameter names, result kind."""
    name: str
    params: Tuple[str, ...] = ()
    returns: str = "none"   # "none" | "position"
    reserved: bool = False


CALLBACK_SLOTS: Tuple[Slot, ...] = (
    Slot("push_empty"),
    Slot("push_input_range", ("from_pos", "to_pos")),
    Slot("push_boolean", ("value",)),
    Slot("push_string", ("value",)),
    Slot("push_array", ("append_current",)),
    Slot("append_to_array"),
    Slot("make_label", ("name",)),
    Slot("merge_labels", ("count",)),
    Slot("make_value", ("code", "filename", "line"), reserved=True),
    Slot("make_object", ("class_name",)),
    Slot("pop"),
    Slot("locals_push", ("count",)),
    Slot("locals_load", ("index",)),
    Slot("locals_pop", ("count",)),
    Slot("match", ("pos",), returns="position"),
    Slot("set_as_source", reserved=True),
    Slot("read_from_source", ("name",), reserved=True),
    Slot("trace_enter", ("name",)),
    Slot("trace_leave", ("name", "successful")),
    Slot("trace_failure", ("pos", "reason", "is_expectation")),
)

CALLBACK_NAMES: Tuple[str, ...] = tuple(s.name for s in CALLBACK_SLOTS)

# Convenience for matchers written in Python: `cb = CallbackTable(*callbacks)`
CallbackTable = namedtuple("CallbackTable", CALLBACK_NAMES)

ENTRY_ARITY = len(ENTRY_FIXED_PARAMS) + len(CALLBACK_SLOTS)


def check_module_abi(module: ModuleType) -> None:
    """Compare the ABI a matcher module declares (if any) against ours."""
    version = getattr(module, "CALLBACK_ABI_VERSION", None)
    if version is not None and version != ABI_VERSION:
        raise AbiMismatch(
            f"{module.__name__}: callback ABI version {version!r}, runtime has {ABI_VERSION}")

    names = getattr(module, "CALLBACK_ABI", None)
    if names is None:
        return
    names = tuple(names)
    if names == CALLBACK_NAMES:
        return
    if len(names) != len(CALLBACK_NAMES):
        raise AbiMismatch(
            f"{module.__name__}: expects {len(names)} callbacks, runtime provides {len(CALLBACK_NAMES)}")
    for i, (theirs, ours) in enumerate(zip(names, CALLBACK_NAMES)):
        if theirs != ours:
            raise AbiMismatch(
                f"{module.__name__}: callback #{i} is {theirs!r}, runtime has {ours!r}")


def check_entry_signature(entry: Callable[..., object], name: str) -> None:
    """Entry must accept ENTRY_ARITY positional arguments."""
    try:
        sig = inspect.signature(entry)
    except (TypeError, ValueError):
        # builtins / extension callables without metadata
        return

    positional = 0
    for p in sig.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY,
                      inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    if positional != ENTRY_ARITY:
        raise AbiMismatch(
            f"entry {name!r} takes {positional} positional arguments, expected {ENTRY_ARITY}")
