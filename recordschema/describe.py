"""Custom description capability.

Any class may take over its own schema by exposing a class-level
``json_schema_describe()`` that returns a complete :class:`Property`:

.. code-block:: python

    class ObjectId:
        @classmethod
        def json_schema_describe(cls) -> Property:
            return Property(type=PropertyType.STRING, title="object id")

The walker then uses that literal instead of deriving one from the type's
kind.  Raw ``enum``/``examples`` literals of the returned tree must be valid
JSON; an invalid literal raises :class:`LiteralValidationFault`.
"""

from __future__ import annotations

import json
import typing
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .errors import LiteralValidationFault
from .property import Property
from .utils.logging import get_logger

__all__ = [
    "JSONSchemaDescriber",
    "ExampleProvider",
    "StaticExampleProvider",
    "describes_itself",
    "describe_custom",
    "validate_literals",
]

logger = get_logger(__name__)


@runtime_checkable
class JSONSchemaDescriber(Protocol):
    """Protocol for types that supply their own descriptor."""

    @classmethod
    def json_schema_describe(cls) -> Property:
        """Return the complete descriptor for this type."""
        ...


@runtime_checkable
class ExampleProvider(Protocol):
    """Optional collaborator adding ``examples``/``enum`` literals to custom descriptions."""

    def examples_for(self, tp: type) -> Sequence[str]:
        ...

    def enum_for(self, tp: type) -> Sequence[str]:
        ...


class StaticExampleProvider:
    """:class:`ExampleProvider` backed by two lookup tables keyed by type."""

    def __init__(
        self,
        examples: Optional[Mapping[type, Sequence[str]]] = None,
        enum: Optional[Mapping[type, Sequence[str]]] = None,
    ) -> None:
        self._examples = dict(examples or {})
        self._enum = dict(enum or {})

    def examples_for(self, tp: type) -> Sequence[str]:
        return self._examples.get(tp, ())

    def enum_for(self, tp: type) -> Sequence[str]:
        return self._enum.get(tp, ())


def describes_itself(tp: Any) -> bool:
    """Return True if *tp* is a class implementing :class:`JSONSchemaDescriber`."""
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    return isinstance(tp, JSONSchemaDescriber)


def _merge(existing: list[str], extra: Iterable[str]) -> list[str]:
    merged = list(existing)
    for literal in extra:
        if literal not in merged:
            merged.append(literal)
    return merged


def validate_literals(prop: Property, owner: str) -> None:
    """Check every raw ``enum``/``examples`` literal in *prop* and its children.

    Raises
    ------
    LiteralValidationFault
        On the first literal that is not syntactically valid JSON.
    """
    for attribute in ("enum", "examples"):
        for literal in getattr(prop, attribute):
            try:
                json.loads(literal)
            except (TypeError, ValueError):
                raise LiteralValidationFault(owner, attribute, literal) from None
    if prop.items is not None:
        validate_literals(prop.items, owner)
    for child in (prop.properties or {}).values():
        validate_literals(child, owner)


def describe_custom(tp: type, example_provider: Optional[ExampleProvider] = None) -> Property:
    """Return a private copy of *tp*'s own description, extras merged and validated."""
    literal = tp.json_schema_describe()  # type: ignore[attr-defined]
    if not isinstance(literal, Property):
        raise TypeError(
            f"{tp.__qualname__}.json_schema_describe() must return a Property, "
            f"got {type(literal).__name__}"
        )
    prop = literal.model_copy(deep=True)
    if example_provider is not None:
        prop.examples = _merge(prop.examples, example_provider.examples_for(tp))
        prop.enum = _merge(prop.enum, example_provider.enum_for(tp))
    validate_literals(prop, tp.__qualname__)
    logger.debug("Using custom description of %s", tp.__qualname__)
    return prop
