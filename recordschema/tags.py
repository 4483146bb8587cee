"""Per-field tag parsing.

Fields carry their directives as a string mapping, the way Go struct tags do:

.. code-block:: python

    @dataclass
    class Order:
        id: str = field(metadata=tags(json="order_id"))
        note: str = field(metadata=tags(schema="notRequired,max=140"))
        legacy: int = field(metadata=tags(json="-"))

Three keys are read (names come from :class:`~recordschema.config.RecordSchemaConfig`):

``json``
    Rename-or-ignore.  ``"-"`` drops the field, ``"name,opts"`` renames it to
    ``name``; an empty name keeps the declared one.
``jsonschema``
    Comma separated directives: ``notRequired``, ``required``, ``deprecated``,
    ``uniqueItems``, ``hidden``, ``embed``, ``minimum=N`` (``min=N``) and
    ``maximum=N`` (``max=N``).
``jsonschema_description``
    Free text description.

Unknown directives are ignored unless the ``unknown_directives`` setting is
``"reject"``.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from .config import RecordSchemaConfig, get_config
from .errors import TagParseError

__all__ = [
    "IGNORE_MARKER",
    "FieldDirectives",
    "parse_field_tags",
    "parse_directive_list",
    "tags",
]

IGNORE_MARKER = "-"

# token -> (FieldDirectives attribute, value)
_FLAG_DIRECTIVES: dict[str, tuple[str, bool]] = {
    "notRequired": ("required", False),
    "required": ("required", True),
    "deprecated": ("deprecated", True),
    "uniqueItems": ("unique_items", True),
    "hidden": ("hidden", True),
    "embed": ("embed", True),
}

_BOUND_DIRECTIVES: dict[str, str] = {
    "minimum": "minimum",
    "min": "minimum",
    "maximum": "maximum",
    "max": "maximum",
}


class FieldDirectives(BaseModel):
    """Parsed directive set for a single field."""

    name: Optional[str] = None
    ignore: bool = False
    required: Optional[bool] = None  # None: use the kind-based default
    deprecated: bool = False
    unique_items: bool = False
    hidden: bool = False
    embed: bool = False
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    description: Optional[str] = None

    @property
    def excluded(self) -> bool:
        """True when the field must not appear in the schema at all."""
        return self.ignore or self.hidden


def _parse_number(path: str, token: str, raw: str) -> Union[int, float]:
    raw = raw.strip()
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        raise TagParseError(path, f"directive {token!r} expects a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise TagParseError(path, f"directive {token!r} expects a finite number, got {raw!r}")
    return value


def parse_directive_list(
    raw: str,
    path: str,
    unknown: str = "ignore",
    into: Optional[FieldDirectives] = None,
) -> FieldDirectives:
    """Parse a comma separated ``jsonschema`` directive list."""
    directives = into if into is not None else FieldDirectives()
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        if "=" in token:
            key, _, value = token.partition("=")
            key = key.strip()
            if key in _BOUND_DIRECTIVES:
                setattr(directives, _BOUND_DIRECTIVES[key], _parse_number(path, key, value))
                continue
        elif token in _FLAG_DIRECTIVES:
            attr, flag = _FLAG_DIRECTIVES[token]
            setattr(directives, attr, flag)
            continue
        if unknown == "reject":
            raise TagParseError(path, f"unknown directive {token!r}")
    return directives


def _tag_text(tags: Mapping[str, Any], key: str, path: str) -> Optional[str]:
    value = tags.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TagParseError(path, f"tag {key!r} must be a string, got {type(value).__name__}")
    return value


def parse_field_tags(
    tags: Mapping[str, Any],
    path: str,
    config: Optional[RecordSchemaConfig] = None,
) -> FieldDirectives:
    """Parse the tag mapping of one field into :class:`FieldDirectives`.

    Parameters
    ----------
    tags:
        Field metadata (dataclass ``metadata`` or Pydantic ``json_schema_extra``).
        Keys other than the three configured tag names are ignored.
    path:
        Dotted field location, used in :class:`TagParseError` messages.
    config:
        Settings providing the tag names and unknown-directive policy.
        Defaults to :func:`get_config`.
    """
    cfg = config or get_config()
    directives = FieldDirectives()

    rename = _tag_text(tags, cfg.json_tag, path)
    if rename is not None:
        if rename == IGNORE_MARKER:
            directives.ignore = True
        else:
            name = rename.split(",", 1)[0].strip()
            if name:
                directives.name = name

    schema = _tag_text(tags, cfg.schema_tag, path)
    if schema:
        parse_directive_list(schema, path, cfg.unknown_directives, into=directives)

    description = _tag_text(tags, cfg.description_tag, path)
    if description:
        directives.description = description

    return directives


def tags(
    json: Optional[str] = None,
    schema: Optional[str] = None,
    description: Optional[str] = None,
    embed: bool = False,
) -> dict[str, str]:
    """Build a field metadata mapping understood by :func:`parse_field_tags`."""
    cfg = get_config()
    out: dict[str, str] = {}
    if json is not None:
        out[cfg.json_tag] = json
    directive_list = [part for part in (schema, "embed" if embed else None) if part]
    if directive_list:
        out[cfg.schema_tag] = ",".join(directive_list)
    if description is not None:
        out[cfg.description_tag] = description
    return out
