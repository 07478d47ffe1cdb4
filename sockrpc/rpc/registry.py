"""Method registry: a read-only mapping from method name to leaf method.

The registry is built once at startup and shared by every connection. It
exposes lookups only; there is no way to add or remove methods after
construction.

Example:
    registry = create_method_registry()
    method = registry.lookup("reverse")
    if method is not None:
        result, result_type = method(["abc"])
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from sockrpc.rpc.methods import (
    MethodResult,
    rpc_floor,
    rpc_nroot,
    rpc_reverse,
    rpc_sort,
    rpc_valid_anagram,
)

# Method type: takes the raw params value, returns (result, result_type)
Method = Callable[[Any], MethodResult]


class MethodRegistry(Mapping[str, Method]):
    """Immutable name -> method table."""

    def __init__(self, methods: Mapping[str, Method]) -> None:
        self._methods: Mapping[str, Method] = MappingProxyType(dict(methods))

    def lookup(self, name: str) -> Method | None:
        """Return the method registered under name, or None if unknown."""
        return self._methods.get(name)

    def names(self) -> list[str]:
        """Return registered method names in sorted order."""
        return sorted(self._methods)

    def __getitem__(self, name: str) -> Method:
        return self._methods[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)


def create_method_registry() -> MethodRegistry:
    """Build the registry with the five built-in methods."""
    return MethodRegistry(
        {
            "floor": rpc_floor,
            "nroot": rpc_nroot,
            "reverse": rpc_reverse,
            "valid_anagram": rpc_valid_anagram,
            "sort": rpc_sort,
        }
    )
