"""Error taxonomy for schema conversion.

Two families exist on purpose:

- :class:`SchemaConversionError` and its subclasses describe bad *input*
  (a non-record value, a malformed tag).  Callers are expected to catch
  these and report them.
- :class:`LiteralValidationFault` describes a defect in a type's own
  shipped description.  It sits outside the conversion hierarchy so that
  ``except SchemaConversionError`` never absorbs it.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "SchemaConversionError",
    "InputKindError",
    "TagParseError",
    "LiteralValidationFault",
]


class SchemaConversionError(Exception):
    """Base class for recoverable conversion failures."""


class InputKindError(SchemaConversionError, TypeError):
    """Raised when the top-level value is not record-shaped."""

    def __init__(self, value: Any) -> None:
        self.value = value
        kind = "None" if value is None else type(value).__name__
        if isinstance(value, type):
            kind = f"type {value.__qualname__}"
        super().__init__(
            f"Expected a dataclass or Pydantic model, got {kind}."
        )


class TagParseError(SchemaConversionError, ValueError):
    """Raised when a field tag cannot be parsed.

    ``path`` is the dotted location of the offending field, starting at the
    top-level record (e.g. ``Order.customer.age``).
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class LiteralValidationFault(RuntimeError):
    """An ``enum`` or ``examples`` literal in a custom description is not JSON."""

    def __init__(self, owner: str, attribute: str, literal: str) -> None:
        self.owner = owner
        self.attribute = attribute
        self.literal = literal
        super().__init__(
            f"{owner}.json_schema_describe() returned invalid JSON in "
            f"{attribute}: {literal!r}"
        )
