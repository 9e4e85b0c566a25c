"""
Type mapper: PostgreSQL column types to Zod validators.
Classification is a single immutable lookup plus an explicit fallback arm;
unknown types degrade to z.unknown() instead of failing the table.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional

from zodgen.core.defaults import normalize_default
from zodgen.core.errors import PatternNotFoundError
from zodgen.core.expression import (
    SchemaNode, array_of, binary, boolean, integer, number, raw, render, string, unknown,
)
from zodgen.core.patterns import pattern_node
from zodgen.models.column import ColumnDescriptor, OverrideContext

logger = logging.getLogger(__name__)


class TypeKind(str, Enum):
    BOUNDED_STRING = "bounded_string"
    UNBOUNDED_STRING = "unbounded_string"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIME = "time"
    DOCUMENT = "document"
    IDENTIFIER = "identifier"
    BINARY = "binary"
    ARRAY = "array"
    ENUMERATED = "enumerated"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Classification:
    kind: TypeKind
    token: str
    element: Optional["Classification"] = None   # ARRAY only


def _kinds(kind: TypeKind, *tokens: str) -> dict[str, TypeKind]:
    return {t: kind for t in tokens}


_STRING_TOKENS = ("character varying", "varchar", "character", "char", "text")
_INTEGER_TOKENS = ("integer", "int", "int4", "smallint", "int2", "bigint", "int8", "serial", "bigserial")

TYPE_TABLE = MappingProxyType({
    **_kinds(TypeKind.BOUNDED_STRING, *_STRING_TOKENS),
    **_kinds(TypeKind.INTEGER, *_INTEGER_TOKENS),
    **_kinds(TypeKind.REAL, "real", "float4", "double precision", "float8", "numeric", "decimal"),
    **_kinds(TypeKind.BOOLEAN, "boolean", "bool"),
    **_kinds(TypeKind.DATE, "date"),
    **_kinds(TypeKind.TIMESTAMP, "timestamp", "timestamp without time zone",
             "timestamp with time zone", "timestamptz"),
    **_kinds(TypeKind.TIME, "time", "time without time zone", "time with time zone", "timetz"),
    **_kinds(TypeKind.DOCUMENT, "json", "jsonb"),
    **_kinds(TypeKind.IDENTIFIER, "uuid"),
    **_kinds(TypeKind.BINARY, "bytea"),
    # Geometric, network, bit string, money and range types travel as text
    **_kinds(TypeKind.UNBOUNDED_STRING,
             "point", "line", "lseg", "box", "path", "polygon", "circle",
             "cidr", "inet", "macaddr", "macaddr8",
             "bit", "bit varying", "varbit",
             "money",
             "int4range", "int8range", "numrange", "tsrange", "tstzrange", "daterange"),
})

# Element types recognised inside `x[]`; anything else falls to the default rule
ARRAY_ELEMENT_TOKENS = frozenset(_STRING_TOKENS + _INTEGER_TOKENS)

_PRECISION = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")
_ENUM_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")
_ARRAY_SUFFIX = "[]"


def normalize_type(base_type: str) -> str:
    """Lower-case, drop `(precision, scale)` groups and collapse whitespace."""
    token = _PRECISION.sub("", str(base_type).lower())
    token = _WHITESPACE.sub(" ", token).strip()
    return token.replace(" []", "[]")


def classify(base_type: str) -> Classification:
    token = normalize_type(base_type)

    kind = TYPE_TABLE.get(token)
    if kind is not None:
        return Classification(kind, token)

    if token.endswith(_ARRAY_SUFFIX):
        element = token[: -len(_ARRAY_SUFFIX)].strip()
        if element in ARRAY_ELEMENT_TOKENS:
            return Classification(TypeKind.ARRAY, token, element=classify(element))

    # Default rule: identifier-shaped names are assumed to be string-valued enums
    if _ENUM_NAME.match(token):
        return Classification(TypeKind.ENUMERATED, token)
    return Classification(TypeKind.UNKNOWN, token)


def _document_node(override: Optional[OverrideContext]) -> SchemaNode:
    if override is None:
        return unknown()
    if override.override:
        return raw(override.override)
    if override.pattern:
        try:
            return pattern_node(override.pattern)
        except PatternNotFoundError:
            raise PatternNotFoundError(override.pattern, override.column_name) from None
    return unknown()


def _base_node(
    cls: Classification,
    descriptor: ColumnDescriptor,
    override: Optional[OverrideContext],
) -> SchemaNode:
    kind = cls.kind
    if kind is TypeKind.BOUNDED_STRING:
        node = string()
        if descriptor.max_length and descriptor.max_length > 0:
            node = node.with_check("max", descriptor.max_length)
        return node
    if kind in (TypeKind.UNBOUNDED_STRING, TypeKind.ENUMERATED):
        return string()
    if kind is TypeKind.INTEGER:
        return integer()
    if kind is TypeKind.REAL:
        return number()
    if kind is TypeKind.BOOLEAN:
        return boolean()
    if kind is TypeKind.DATE:
        return string().with_check("date")
    if kind is TypeKind.TIMESTAMP:
        return string().with_check("datetime")
    if kind is TypeKind.TIME:
        return string().with_check("time")
    if kind is TypeKind.IDENTIFIER:
        return string().with_check("uuid")
    if kind is TypeKind.BINARY:
        return binary()
    if kind is TypeKind.DOCUMENT:
        return _document_node(override)
    if kind is TypeKind.ARRAY:
        # Length limits apply to the column, never to its elements
        return array_of(_base_node(cls.element, descriptor.without_length(), None))
    return unknown()


def map_column(
    base_type: str,
    descriptor: ColumnDescriptor,
    override: Optional[OverrideContext] = None,
) -> SchemaNode:
    """Map one column to its decorated schema node (nullable before default)."""
    cls = classify(base_type)
    node = _base_node(cls, descriptor, override)
    if cls.kind is TypeKind.UNKNOWN:
        logger.debug("Unrecognised type %r mapped to z.unknown()", base_type)

    if descriptor.nullable:
        node = node.as_nullable()

    result = normalize_default(descriptor.default_value)
    if result.present:
        node = node.with_default(result.literal)
    return node


def map_column_type(
    base_type: str,
    descriptor: ColumnDescriptor,
    override: Optional[OverrideContext] = None,
) -> str:
    """Map one column to Zod expression text, e.g. `z.string().max(255).nullable()`."""
    return render(map_column(base_type, descriptor, override))
