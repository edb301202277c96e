# pegrt/__init__.py
"""Runtime for compiled PEG matchers.

This package provides:
- The callback table ABI a compiled matcher module is called with
- Output/locals stacks that assemble the result tree from callback calls
- Furthest-failure tracking and the failure message formatter
- `Parser` / `parse` to run a rule of a matcher module over an input

Grammar compilation is out of scope; a matcher module is any Python module
exposing `<rule>_match` entry points that follow pegrt.abi.
"""

from .abi import ABI_VERSION, CALLBACK_NAMES, CallbackTable, NO_MATCH
from .config import ParserConfig
from .errors import (
    ParsingError, ContractViolation, StackUnderflow, VariantMismatch,
    UnsupportedOperation, MatcherLoadError, AbiMismatch, FactoryError,
)
from .factory import ClassFactory, Factory, identity_factory
from .values import InputRange, ValueKind, kind_of, realize
from .runtime import Parser, parse

__version__ = "0.1.0"
