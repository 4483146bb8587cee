"""Type walker: derive a :class:`Property` tree from a record type.

Record types are dataclasses and Pydantic models.  Each field's annotation is
dispatched by kind:

- ``str``/``int``/``bool``/``float`` map to the JSON primitive types;
- ``Optional[X]`` walks ``X`` and makes the field not required;
- sequences and sets become arrays, fixed-length tuples carry equal
  ``min_items``/``max_items``;
- mappings are left unconstrained (an empty node);
- nested records go through the caller's registry and are emitted as ``$ref``;
- classes with ``json_schema_describe()`` provide their own node.

Fields are required by default, except optional, sequence, tuple and mapping
fields.  ``required``/``notRequired`` tag directives override that default.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import json
import sys
import types
import typing
import uuid
from typing import Any, Iterator, NamedTuple, Optional, Union

from pydantic import BaseModel

from .config import RecordSchemaConfig, get_config
from .describe import ExampleProvider, describe_custom, describes_itself
from .errors import InputKindError, SchemaConversionError, TagParseError
from .property import Property, PropertyType
from .registry import DefinitionRegistry, HasRefFn, RefRegistry, RegisterFn, derive_ref_name
from .tags import FieldDirectives, parse_field_tags
from .utils.logging import get_logger

__all__ = ["TypeWalker", "convert", "convert_with", "is_record_type"]

logger = get_logger(__name__)

_NONE_TYPE = type(None)

# Well-known classes serialised as JSON strings
_STRING_LIKE: tuple[type, ...] = (
    uuid.UUID,
    datetime.datetime,
    datetime.date,
    datetime.time,
)


class _FieldDef(NamedTuple):
    name: str
    annotation: Any
    tags: typing.Mapping[str, Any]
    alias: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False


def is_record_type(tp: Any) -> bool:
    """Return True for dataclass classes and Pydantic model classes."""
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def _strip_annotated(tp: Any) -> Any:
    while True:
        if typing.get_origin(tp) is typing.Annotated:
            tp = typing.get_args(tp)[0]
        elif hasattr(tp, "__supertype__"):  # typing.NewType
            tp = tp.__supertype__
        else:
            return tp


def _strip_optional(tp: Any) -> Any:
    """Unwrap ``Optional[X]`` to ``X``; other unions yield None."""
    tp = _strip_annotated(tp)
    if typing.get_origin(tp) in (Union, types.UnionType):
        args = [a for a in typing.get_args(tp) if a is not _NONE_TYPE]
        return _strip_annotated(args[0]) if len(args) == 1 else None
    return tp


def _literal_type(values: list[Any]) -> Optional[PropertyType]:
    if values and all(isinstance(v, str) for v in values):
        return PropertyType.STRING
    if values and all(isinstance(v, bool) for v in values):
        return PropertyType.BOOLEAN
    if values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return PropertyType.INTEGER
    if values and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return PropertyType.NUMBER
    return None


def _choices(values: list[Any]) -> Property:
    return Property(
        type=_literal_type(values),
        enum=[json.dumps(v, default=str) for v in values],
    )


def _length_bound(path: str, token: str, value: Union[int, float]) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise TagParseError(path, f"{token} must be an integer for this field, got {value}")
    if value < 0:
        raise TagParseError(path, f"{token} must not be negative, got {value}")
    return int(value)


class TypeWalker:
    """Recursive engine behind :func:`convert`.

    A walker is bound to one registry (the ``register``/``has_ref`` pair) and
    keeps no other state, so it can be reused for any number of conversions.
    """

    def __init__(
        self,
        name_prefix: str,
        register: RegisterFn,
        has_ref: HasRefFn,
        example_provider: Optional[ExampleProvider] = None,
        config: Optional[RecordSchemaConfig] = None,
    ) -> None:
        self.name_prefix = name_prefix
        self.register = register
        self.has_ref = has_ref
        self.example_provider = example_provider
        self.config = config or get_config()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def convert(self, value: Any) -> Property:
        """Describe the record type of *value* (an instance or the class itself)."""
        cls = value if isinstance(value, type) else type(value)
        if not is_record_type(cls):
            raise InputKindError(value)

        logger.debug("Converting %s", cls.__qualname__)
        if describes_itself(cls):
            return describe_custom(cls, self.example_provider)
        node = Property(type=PropertyType.OBJECT, properties={}, required=[])
        self._fill_record(cls, node, cls.__name__)
        return node

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _record_fields(self, cls: type, path: str) -> Iterator[_FieldDef]:
        if issubclass(cls, BaseModel):
            if not cls.__pydantic_complete__:
                try:
                    cls.model_rebuild()
                except NameError as exc:
                    raise SchemaConversionError(f"{path}: cannot resolve annotation ({exc})") from exc
            for name, info in cls.model_fields.items():
                extra = info.json_schema_extra
                yield _FieldDef(
                    name=name,
                    annotation=info.annotation,
                    tags=extra if isinstance(extra, dict) else {},
                    alias=info.alias,
                    description=info.description,
                    deprecated=bool(getattr(info, "deprecated", None)),
                )
            # Underscore attributes become pydantic private attributes,
            # only self-described ones are kept by _add_field.
            if cls.__private_attributes__:
                for name, annotation in self._private_hints(cls, path).items():
                    yield _FieldDef(name=name, annotation=annotation, tags={})
            return

        hints = self._type_hints(cls, path)
        for f in dataclasses.fields(cls):
            yield _FieldDef(name=f.name, annotation=hints.get(f.name, f.type), tags=f.metadata)

    @staticmethod
    def _type_hints(cls: type, path: str) -> dict[str, Any]:
        try:
            return typing.get_type_hints(cls, include_extras=True)
        except NameError as exc:
            raise SchemaConversionError(f"{path}: cannot resolve annotation ({exc})") from exc

    @staticmethod
    def _private_hints(cls: type[BaseModel], path: str) -> dict[str, Any]:
        """Resolve the annotations of *cls*'s private attributes, base classes first."""
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            if klass is BaseModel or not issubclass(klass, BaseModel):
                continue
            own = {
                name: annotation
                for name, annotation in inspect.get_annotations(klass).items()
                if name in cls.__private_attributes__
            }
            if not own:
                continue
            module = sys.modules.get(klass.__module__)
            try:
                hints.update(
                    typing.get_type_hints(
                        types.SimpleNamespace(__annotations__=own),
                        vars(module) if module else {},
                        dict(vars(klass)),
                        include_extras=True,
                    )
                )
            except NameError as exc:
                raise SchemaConversionError(f"{path}: cannot resolve annotation ({exc})") from exc
        return hints

    def _fill_record(self, cls: type, node: Property, path: str) -> None:
        """Add the fields of *cls* to *node*'s ``properties``/``required`` in declaration order."""
        assert node.properties is not None and node.required is not None
        for fdef in self._record_fields(cls, path):
            self._add_field(node, fdef, f"{path}.{fdef.name}")

    def _add_field(self, node: Property, fdef: _FieldDef, path: str) -> None:
        annotation = fdef.annotation
        if fdef.name.startswith("_") and not describes_itself(_strip_optional(annotation)):
            logger.debug("Skipping private field %s", path)
            return

        directives = parse_field_tags(fdef.tags, path, self.config)
        if directives.excluded:
            logger.debug("Excluding field %s", path)
            return
        if directives.name is None and fdef.alias:
            directives.name = fdef.alias
        if directives.description is None and fdef.description:
            directives.description = fdef.description
        if fdef.deprecated:
            directives.deprecated = True

        if directives.embed:
            embedded = self._embedded_record(annotation)
            if embedded is not None:
                self._fill_record(embedded, node, path)
                return

        key = directives.name or fdef.name
        prop, required = self.walk(annotation, path)
        prop = self._apply_directives(prop, directives, path)
        if directives.required is not None:
            required = directives.required

        node.properties[key] = prop
        if key in node.required:
            node.required.remove(key)
        if required:
            node.required.append(key)

    def _embedded_record(self, annotation: Any) -> Optional[type]:
        tp = _strip_optional(annotation)
        if is_record_type(tp) and not describes_itself(tp):
            return tp
        return None

    def _ref(self, tp: type, path: str) -> Property:
        name = derive_ref_name(tp)
        if self.has_ref(name):
            logger.debug("Reusing definition %s", name)
        else:
            definition = Property(type=PropertyType.OBJECT, properties={}, required=[])
            # Registered before its fields are walked so that a cycle back to
            # this type finds it through has_ref.
            self.register(name, definition)
            logger.debug("Registered definition %s", name)
            self._fill_record(tp, definition, path)
        return Property(ref=self.name_prefix + name)

    # ------------------------------------------------------------------
    # Kind dispatch
    # ------------------------------------------------------------------

    def walk(self, annotation: Any, path: str) -> tuple[Property, bool]:
        """Return the node for *annotation* and whether the field defaults to required."""
        tp = _strip_annotated(annotation)

        if describes_itself(tp):
            return describe_custom(tp, self.example_provider), True
        if tp is Any or tp is object:
            return Property(), True

        origin = typing.get_origin(tp)
        if origin in (Union, types.UnionType):
            args = typing.get_args(tp)
            members = [a for a in args if a is not _NONE_TYPE]
            if len(members) == 1:
                inner, _ = self.walk(members[0], path)
                return inner, False
            # TODO: emit anyOf once Property grows a composition keyword
            return Property(), len(members) == len(args)
        if origin is typing.Literal:
            return _choices(list(typing.get_args(tp))), True
        if origin is not None:
            return self._walk_container(
                origin, typing.get_args(tp), path, subscripted=tp is not typing.Tuple
            )

        if not isinstance(tp, type):
            return Property(), True
        if issubclass(tp, enum.Enum):
            return _choices([member.value for member in tp]), True
        if issubclass(tp, bool):
            return Property(type=PropertyType.BOOLEAN), True
        if issubclass(tp, int):
            return Property(type=PropertyType.INTEGER), True
        if issubclass(tp, (float, decimal.Decimal)):
            return Property(type=PropertyType.NUMBER), True
        if issubclass(tp, str) or issubclass(tp, _STRING_LIKE):
            return Property(type=PropertyType.STRING), True
        if is_record_type(tp):
            return self._ref(tp, path), True
        if tp in (list, tuple, set, frozenset, dict):
            return self._walk_container(tp, (), path, subscripted=False)
        return Property(), True

    def _walk_container(
        self,
        origin: Any,
        args: tuple[Any, ...],
        path: str,
        subscripted: bool = True,
    ) -> tuple[Property, bool]:
        if not isinstance(origin, type):
            return Property(), True
        if is_record_type(origin):
            # Parametrised generic record, described through its origin class
            return self._ref(origin, path), True
        if issubclass(origin, collections.abc.Mapping):
            return Property(), False

        # tuple[()] is the fixed-length empty tuple (spelled ((),) before 3.11)
        if origin is tuple and subscripted and not (len(args) == 2 and args[1] is Ellipsis):
            if args == ((),):
                args = ()
            if args and all(a == args[0] for a in args):
                items, _ = self.walk(args[0], path)
            else:
                items = Property()
            return Property(
                type=PropertyType.ARRAY,
                items=items,
                min_items=len(args),
                max_items=len(args),
            ), False

        if issubclass(origin, (collections.abc.Sequence, collections.abc.Set, collections.abc.Iterable)):
            items, _ = self.walk(args[0], path) if args else (Property(), True)
            return Property(
                type=PropertyType.ARRAY,
                items=items,
                unique_items=issubclass(origin, collections.abc.Set),
            ), False

        return Property(), True

    # ------------------------------------------------------------------
    # Field directives
    # ------------------------------------------------------------------

    def _apply_directives(self, prop: Property, directives: FieldDirectives, path: str) -> Property:
        updates: dict[str, Any] = {}
        if directives.deprecated:
            updates["deprecated"] = True
        if directives.description:
            updates["description"] = directives.description
        if directives.unique_items and prop.is_array:
            updates["unique_items"] = True
        updates.update(self._bounds(prop, directives, path))
        if not updates:
            return prop
        return prop.model_copy(update=updates)

    def _bounds(self, prop: Property, directives: FieldDirectives, path: str) -> dict[str, Any]:
        if directives.minimum is None and directives.maximum is None:
            return {}
        if prop.type is PropertyType.STRING:
            low, high = "min_length", "max_length"
        elif prop.type is PropertyType.ARRAY:
            low, high = "min_items", "max_items"
        elif prop.type in (PropertyType.INTEGER, PropertyType.NUMBER):
            out = {}
            if directives.minimum is not None:
                out["minimum"] = directives.minimum
            if directives.maximum is not None:
                out["maximum"] = directives.maximum
            return out
        else:
            logger.debug("Ignoring bounds on %s, node has no length or numeric type", path)
            return {}

        out = {}
        if directives.minimum is not None:
            out[low] = _length_bound(path, "minimum", directives.minimum)
        if directives.maximum is not None:
            out[high] = _length_bound(path, "maximum", directives.maximum)
        return out


def convert(
    value: Any,
    name_prefix: Optional[str] = None,
    register: Optional[RegisterFn] = None,
    has_ref: Optional[HasRefFn] = None,
    example_provider: Optional[ExampleProvider] = None,
    *,
    config: Optional[RecordSchemaConfig] = None,
) -> Property:
    """Convert a record value or type into a :class:`Property` tree.

    Parameters
    ----------
    value:
        A dataclass or Pydantic model, as an instance or as the class.
    name_prefix:
        Prepended to every definition name in emitted ``$ref`` nodes.
        Defaults to the configured ``name_prefix`` (``"#/$defs/"``).
    register, has_ref:
        The caller's registry functions.  Nested record types are passed to
        ``register`` once, the first time ``has_ref`` reports them unknown.
        When both are omitted a throwaway :class:`DefinitionRegistry` is used.
        The node passed to ``register`` is still empty: it is filled in place
        after registration (so that cyclic types terminate), which means it is
        complete only once ``convert`` returns.  Store the object itself, not a
        copy or serialised snapshot taken inside ``register``.  If conversion
        fails, the node stays partially filled.
    example_provider:
        Optional source of extra ``examples``/``enum`` literals for types
        with a custom description.

    Raises
    ------
    InputKindError
        *value* is not a dataclass or Pydantic model.
    TagParseError
        A field tag holds a malformed directive.
    LiteralValidationFault
        A custom description carries a literal that is not valid JSON.
    """
    cfg = config or get_config()
    if register is None and has_ref is None:
        scratch = DefinitionRegistry()
        register, has_ref = scratch.register, scratch.has_ref
    elif register is None or has_ref is None:
        raise TypeError("register and has_ref must be given together")

    walker = TypeWalker(
        cfg.name_prefix if name_prefix is None else name_prefix,
        register,
        has_ref,
        example_provider,
        cfg,
    )
    return walker.convert(value)


def convert_with(
    value: Any,
    registry: RefRegistry,
    name_prefix: Optional[str] = None,
    example_provider: Optional[ExampleProvider] = None,
    *,
    config: Optional[RecordSchemaConfig] = None,
) -> Property:
    """:func:`convert` using the ``register``/``has_ref`` methods of *registry*."""
    return convert(
        value,
        name_prefix,
        registry.register,
        registry.has_ref,
        example_provider,
        config=config,
    )
