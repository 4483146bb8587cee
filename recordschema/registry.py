"""Reference registry protocol.

The walker never keeps its own record of visited types.  Instead the caller
hands it two functions, ``register(name, property)`` and ``has_ref(name)``,
and owns whatever store sits behind them.  Sharing one registry across many
:func:`~recordschema.walker.convert` calls deduplicates definitions across a
whole API surface; the same mechanism terminates recursion on cyclic types.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator, Protocol, runtime_checkable

from .property import Property

__all__ = [
    "RegisterFn",
    "HasRefFn",
    "RefRegistry",
    "DefinitionRegistry",
    "derive_ref_name",
]

RegisterFn = Callable[[str, Property], None]
HasRefFn = Callable[[str], bool]

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")


@runtime_checkable
class RefRegistry(Protocol):
    """Object form of the ``register`` / ``has_ref`` pair."""

    def register(self, name: str, prop: Property) -> None:
        ...

    def has_ref(self, name: str) -> bool:
        ...


def derive_ref_name(tp: type) -> str:
    """Derive a stable definition name from a type's module and qualified name.

    Each dotted segment is stripped to ``[A-Za-z0-9_]`` and capitalised, then
    the segments are joined: ``shop.models.Order`` becomes ``ShopModelsOrder``
    and a class local to ``test_x`` becomes ``...Test_xLocalsOrder``.
    """
    qualified = f"{tp.__module__}.{tp.__qualname__}"
    parts = []
    for segment in qualified.split("."):
        segment = _UNSAFE_CHARS.sub("", segment)
        if segment:
            parts.append(segment[0].upper() + segment[1:])
    return "".join(parts)


class DefinitionRegistry:
    """In-memory registry suitable for passing to ``convert``.

    Definitions are kept in registration order.  Registering the same name
    twice is a protocol violation and raises :class:`ValueError`.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, Property] = {}

    def register(self, name: str, prop: Property) -> None:
        if name in self._definitions:
            raise ValueError(f"Definition {name!r} is already registered.")
        self._definitions[name] = prop

    def has_ref(self, name: str) -> bool:
        return name in self._definitions

    @property
    def definitions(self) -> dict[str, Property]:
        return dict(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)
