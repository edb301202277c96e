# pegrt/loader.py
"""Matcher module loading and entry-point resolution."""

from __future__ import annotations
import importlib
import importlib.util
from pathlib import Path
from types import ModuleType
from typing import Callable, List, Union

import regex

from .errors import MatcherLoadError

ENTRY_SUFFIX = "_match"

# Rule names are Unicode identifiers (same class the matcher compiler emits).
_RULE_RE = regex.compile(r"[\p{XID_Start}_]\p{XID_Continue}*")
_ENTRY_RE = regex.compile(r"(?P<rule>[\p{XID_Start}_]\p{XID_Continue}*?)" + ENTRY_SUFFIX)

MatcherSource = Union[ModuleType, str, Path]


def _load_from_path(path: Path) -> ModuleType:
    if not path.is_file():
        raise MatcherLoadError(f"matcher module not found: {path}")
    name = "_pegrt_matcher_" + regex.sub(r"\W", "_", path.stem)
    spec = importlib.util.spec_from_file_location(name, str(path))
    if spec is None or spec.loader is None:
        raise MatcherLoadError(f"cannot load matcher module from {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise MatcherLoadError(f"{path}: {type(e).__name__}: {e}") from e
    return module


def load_matcher(source: MatcherSource) -> ModuleType:
    """Load a matcher from a module object, a dotted name or a .py path."""
    if isinstance(source, ModuleType):
        return source
    if isinstance(source, Path) or str(source).endswith(".py"):
        return _load_from_path(Path(source))
    try:
        return importlib.import_module(str(source))
    except ImportError as e:
        raise MatcherLoadError(f"cannot import matcher module {source!r}: {e}") from e
    except Exception as e:
        raise MatcherLoadError(f"{source}: {type(e).__name__}: {e}") from e


def entry_name(rule: str) -> str:
    if not _RULE_RE.fullmatch(rule):
        raise MatcherLoadError(f"invalid rule name {rule!r}")
    return rule + ENTRY_SUFFIX


def discover_rules(module: ModuleType) -> List[str]:
    """Rule names with a callable `<rule>_match`, in definition order."""
    rules: List[str] = []
    for attr, obj in vars(module).items():
        m = _ENTRY_RE.fullmatch(attr)
        if m and callable(obj) and not attr.startswith("_"):
            rules.append(m.group("rule"))
    return rules


def resolve_entry(module: ModuleType, rule: str) -> Callable[..., object]:
    name = entry_name(rule)
    entry = getattr(module, name, None)
    if entry is None:
        raise MatcherLoadError(f"{module.__name__}: no entry point {name!r} for rule {rule!r}")
    if not callable(entry):
        raise MatcherLoadError(f"{module.__name__}: {name!r} is not callable")
    return entry
