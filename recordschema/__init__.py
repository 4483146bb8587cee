"""
recordschema - JSON Schema descriptors derived from record types.

Converts the static shape of a dataclass or Pydantic model (its fields and
their nested types) into a :class:`Property` tree, without hand-written
per-type schema code.

Main Components:
    - recordschema.walker: the type walker (:func:`convert`)
    - recordschema.tags: per-field tag directives
    - recordschema.describe: the custom description capability
    - recordschema.registry: the register / has_ref definition protocol
    - recordschema.property: the descriptor data type
"""

__version__ = "0.3.0"

from .describe import ExampleProvider, JSONSchemaDescriber, StaticExampleProvider
from .errors import InputKindError, LiteralValidationFault, SchemaConversionError, TagParseError
from .property import Property, PropertyType
from .registry import DefinitionRegistry, RefRegistry, derive_ref_name
from .tags import FieldDirectives, parse_field_tags, tags
from .walker import TypeWalker, convert, convert_with

__all__ = [
    "__version__",
    "convert",
    "convert_with",
    "TypeWalker",
    "Property",
    "PropertyType",
    "FieldDirectives",
    "parse_field_tags",
    "tags",
    "JSONSchemaDescriber",
    "ExampleProvider",
    "StaticExampleProvider",
    "RefRegistry",
    "DefinitionRegistry",
    "derive_ref_name",
    "SchemaConversionError",
    "InputKindError",
    "TagParseError",
    "LiteralValidationFault",
]
