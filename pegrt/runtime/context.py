# pegrt/runtime/context.py
from __future__ import annotations
from typing import Optional

from ..factory import Factory, identity_factory
from .failure import FailureTracker
from .stacks import LocalsStack, OutputStack
from .trace import Tracer

SENTINEL = b"\0"


class ParseContext:
    """All state owned by one parse invocation.

    A fresh context is built per call, so two parses (on any threads) never
    share stacks or failure state.
    """

    def __init__(self, input: bytes, factory: Factory = identity_factory,
                 tracer: Optional[Tracer] = None):
        self.input = bytes(input)
        # one extra byte so range ends may point one past the input
        self.buffer = self.input + SENTINEL
        self.input_end = len(self.input)
        self.output = OutputStack(self.buffer, self.input_end, factory)
        self.locals = LocalsStack()
        self.failure = FailureTracker()
        self.tracer = tracer or Tracer()
