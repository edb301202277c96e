# pegrt/runtime/__init__.py
"""Per-invocation runtime state and the harness that drives a matcher."""

from .stacks import OutputStack, LocalsStack
from .failure import FailureTracker
from .context import ParseContext
from .callbacks import Callbacks
from .trace import Tracer
from .harness import Parser, parse
