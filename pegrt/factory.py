# pegrt/factory.py
"""Factories used by `make_object` to turn captures into domain objects."""

from __future__ import annotations
from types import ModuleType
from typing import Any, Callable, Dict, Mapping, Union

from .errors import FactoryError
from .values import Value

Factory = Callable[[str, Value], Value]


def identity_factory(class_name: str, value: Value) -> Value:
    return value


class ClassFactory:
    """Instantiate classes looked up by name in a namespace.

    `namespace` is a module or a mapping of names. Class paths may be nested
    with "::" or "." (`"ast::Number"`, `"ast.Number"`). Mapping payloads are
    passed as keyword arguments, anything else as the single positional
    argument.
    """

    def __init__(self, namespace: Union[ModuleType, Mapping[str, Any]]):
        self.namespace = namespace
        self._cache: Dict[str, Any] = {}

    def resolve(self, class_name: str) -> Any:
        cls = self._cache.get(class_name)
        if cls is not None:
            return cls
        scope: Any = self.namespace
        for part in class_name.replace("::", ".").split("."):
            if isinstance(scope, Mapping):
                found = scope.get(part)
            else:
                found = getattr(scope, part, None)
            if found is None:
                raise FactoryError(f"unknown class {class_name!r} (no {part!r})")
            scope = found
        if not callable(scope):
            raise FactoryError(f"{class_name!r} is not callable")
        self._cache[class_name] = scope
        return scope

    def __call__(self, class_name: str, value: Value) -> Value:
        cls = self.resolve(class_name)
        if isinstance(value, dict):
            return cls(**value)
        return cls(value)
