"""Shared test helpers for the pegrt test suite."""

from __future__ import annotations

from pathlib import Path
from types import ModuleType

from pegrt.factory import identity_factory
from pegrt.runtime import Callbacks, ParseContext

MATCHERS = Path(__file__).resolve().parent / "matchers"


def callbacks(text: bytes = b"", factory=identity_factory) -> Callbacks:
    """Callback table over a fresh context for `text`."""
    return Callbacks(ParseContext(text, factory))


def make_module(name: str, **attrs) -> ModuleType:
    """Build an in-memory matcher module from keyword attributes."""
    module = ModuleType(name)
    for key, value in attrs.items():
        setattr(module, key, value)
    return module


def stack(cb: Callbacks) -> list:
    return list(cb.ctx.output.items)
