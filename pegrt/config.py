# pegrt/config.py
"""Parser configuration."""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional, TextIO

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ParserConfig:
    """
    Fields
    ------
    debug        : write one trace line per callback
    trace_stream : where trace lines go (None -> sys.stderr at write time)
    check_abi    : validate module ABI declarations and entry signatures
    """
    debug: bool = False
    trace_stream: Optional[TextIO] = None
    check_abi: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ParserConfig":
        env = os.environ if environ is None else environ
        debug = env.get("PEGRT_DEBUG", "").strip().lower() in _TRUE
        return cls(debug=debug)
