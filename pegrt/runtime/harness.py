# pegrt/runtime/harness.py
"""Invocation harness: run a compiled rule and decode its outcome."""

from __future__ import annotations
from types import ModuleType
from typing import Callable, Dict, List, Optional, Union

from ..abi import check_entry_signature, check_module_abi
from ..config import ParserConfig
from ..errors import ContractViolation, MatcherLoadError, ParsingError
from ..factory import Factory, identity_factory
from ..loader import MatcherSource, discover_rules, load_matcher, resolve_entry
from ..values import Value
from .callbacks import Callbacks
from .context import ParseContext
from .trace import Tracer

InputData = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: InputData) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class Parser:
    """Run rules of one matcher module.

    The module is loaded once; every `parse` call gets its own ParseContext,
    so a Parser may be shared between threads.
    """

    def __init__(self, matcher: MatcherSource, *,
                 config: Optional[ParserConfig] = None,
                 factory: Optional[Factory] = None,
                 debug: Optional[bool] = None):
        self.config = config or ParserConfig()
        self.factory = factory or identity_factory
        self.debug = self.config.debug if debug is None else debug
        self.module: ModuleType = load_matcher(matcher)
        if self.config.check_abi:
            check_module_abi(self.module)
        self._entries: Dict[str, Callable[..., object]] = {}

    @property
    def rules(self) -> List[str]:
        return discover_rules(self.module)

    def default_rule(self) -> str:
        rule = getattr(self.module, "DEFAULT_RULE", None)
        if rule:
            return rule
        rules = self.rules
        if not rules:
            raise MatcherLoadError(f"{self.module.__name__}: no rule entry points")
        return rules[0]

    def entry(self, rule: str) -> Callable[..., object]:
        fn = self._entries.get(rule)
        if fn is None:
            fn = resolve_entry(self.module, rule)
            if self.config.check_abi:
                check_entry_signature(fn, rule)
            self._entries[rule] = fn
        return fn

    def parse(self, input: InputData, rule: Optional[str] = None) -> Value:
        """Match `rule` against `input` and return the result value.

        Raises
        ------
        ParsingError
            The rule did not match.
        ContractViolation
            The matcher broke the callback contract.
        """
        return self.run(self.new_context(input), rule)

    def new_context(self, input: InputData) -> ParseContext:
        return ParseContext(_as_bytes(input), self.factory,
                            Tracer(self.debug, self.config.trace_stream))

    def run(self, ctx: ParseContext, rule: Optional[str] = None) -> Value:
        """Run `rule` inside `ctx`; the result is popped off ctx.output."""
        rule = rule or self.default_rule()
        entry = self.entry(rule)
        callbacks = Callbacks(ctx)

        result = entry(ctx.buffer, 0, ctx.input_end, False, *callbacks.table())

        if not result:
            raise ctx.failure.to_error(ctx.input)
        if len(ctx.output) != 1:
            raise ContractViolation(
                f"rule {rule!r} succeeded leaving {len(ctx.output)} values on the output stack, expected 1")
        return ctx.output.pop()

    def match_rule(self, rule: str, input: InputData,
                   raise_on_failure: bool = True) -> Optional[Value]:
        """Like `parse`, but returns None on parse failure if asked to."""
        try:
            return self.parse(input, rule)
        except ParsingError:
            if raise_on_failure:
                raise
            return None


def parse(matcher: MatcherSource, rule: str, input: InputData, *,
          factory: Optional[Factory] = None,
          debug: Optional[bool] = None,
          config: Optional[ParserConfig] = None) -> Value:
    """One-shot `Parser(matcher, ...).parse(input, rule)`."""
    return Parser(matcher, config=config, factory=factory, debug=debug).parse(input, rule)
