"""Descriptor tree produced by the type walker.

A :class:`Property` is one node of a JSON-Schema-like document.  The model is a
plain Pydantic container: attribute names are Pythonic, while aliases carry the
JSON Schema keywords (``$ref``, ``minItems``, ...) used by :meth:`Property.to_schema`.

``enum`` and ``examples`` hold *raw JSON text*, not decoded values, because a
schema's literals may be heterogeneous.  They are decoded only when the tree is
serialised.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

__all__ = ["PropertyType", "Property"]


class PropertyType(str, Enum):
    """JSON Schema primitive type names.  An unset type is ``None``."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class Property(BaseModel):
    """One node of the descriptor tree."""

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[PropertyType] = None
    title: str = ""
    description: str = ""
    deprecated: bool = False
    ref: Optional[str] = Field(None, alias="$ref")

    # Arrays
    items: Optional[Property] = None
    min_items: Optional[NonNegativeInt] = Field(None, alias="minItems")
    max_items: Optional[NonNegativeInt] = Field(None, alias="maxItems")
    unique_items: bool = Field(False, alias="uniqueItems")

    # Strings
    min_length: Optional[NonNegativeInt] = Field(None, alias="minLength")
    max_length: Optional[NonNegativeInt] = Field(None, alias="maxLength")

    # Numbers
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None

    # Raw JSON literals, validated lazily
    enum: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)

    # Objects
    properties: Optional[dict[str, Property]] = None
    required: Optional[list[str]] = None

    # Only filled by callers assembling a document from registered definitions
    defs: Optional[dict[str, Property]] = Field(None, alias="$defs")

    @property
    def is_ref(self) -> bool:
        return self.ref is not None

    @property
    def is_array(self) -> bool:
        return self.type is PropertyType.ARRAY

    def to_schema(self) -> dict[str, Any]:
        """Return this node as a plain JSON Schema dict.

        Default-valued keywords are omitted, except that record nodes always
        carry ``properties`` and ``required`` (possibly empty).  Raw ``enum``
        and ``examples`` entries are decoded with :func:`json.loads`.
        """
        data = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_defaults=True,
            exclude={"items", "enum", "examples", "properties", "defs"},
        )
        if self.items is not None:
            data["items"] = self.items.to_schema()
        if self.enum:
            data["enum"] = [json.loads(literal) for literal in self.enum]
        if self.examples:
            data["examples"] = [json.loads(literal) for literal in self.examples]
        if self.properties is not None:
            data["properties"] = {
                name: child.to_schema() for name, child in self.properties.items()
            }
        if self.required is not None:
            data["required"] = list(self.required)
        if self.defs is not None:
            data["$defs"] = {name: child.to_schema() for name, child in self.defs.items()}
        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_schema(), indent=indent, ensure_ascii=False)
