"""
Live-object builder: constructs a runtime schema value for a table.
Walks the same SchemaNode tree the text renderer uses and calls runtime
constructors directly; override text is parsed, never evaluated.
"""
import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Optional

from zodgen.core.assembler import assemble
from zodgen.core.errors import ConfigurationError, EvaluationError, SchemaGenerationError
from zodgen.core.expression import NodeKind, SchemaNode
from zodgen.core.expression_parser import parse_expression
from zodgen.core.metadata import MetadataProvider
from zodgen.models.options import MappingOptions

logger = logging.getLogger(__name__)

_STRING_FORMATS = ("date", "datetime", "time", "uuid", "url", "email")
_NAME_PART = re.compile(r"[^0-9A-Za-z]+")


@dataclass(frozen=True)
class FieldSpec:
    name: str
    schema: Any
    required: bool
    default: Any = None


class SchemaRuntime:
    """
    Constructor surface a live schema backend must provide.
    Subclasses return backend-specific schema values from every method.
    """

    def string(self, *, min_length=None, max_length=None, fmt=None):
        raise NotImplementedError("string")

    def number(self, *, integer=False, gt=None, ge=None, lt=None, le=None):
        raise NotImplementedError("number")

    def boolean(self):
        raise NotImplementedError("boolean")

    def unknown(self):
        raise NotImplementedError("unknown")

    def binary(self):
        raise NotImplementedError("binary")

    def array(self, item, *, min_length=None, max_length=None):
        raise NotImplementedError("array")

    def record(self, value):
        raise NotImplementedError("record")

    def enum(self, options):
        raise NotImplementedError("enum")

    def literal(self, value):
        raise NotImplementedError("literal")

    def union(self, variants):
        raise NotImplementedError("union")

    def nullable(self, schema):
        raise NotImplementedError("nullable")

    def object(self, name: str, fields: list[FieldSpec], mode: Optional[str] = None):
        raise NotImplementedError("object")


def model_name(*parts: str) -> str:
    """`("order_items", "shipping")` → `OrderItemsShipping`."""
    words = [w for p in parts for w in _NAME_PART.split(p) if w]
    name = "".join(w[:1].upper() + w[1:] for w in words) or "Schema"
    return name if not name[0].isdigit() else f"_{name}"


def _resolve_raw(node: SchemaNode) -> SchemaNode:
    parsed = parse_expression(node.raw or "")
    return replace(
        parsed,
        checks=parsed.checks + node.checks,
        mode=node.mode or parsed.mode,
        optional=parsed.optional or node.optional,
        nullable=parsed.nullable or node.nullable,
        default=node.default if node.default is not None else parsed.default,
    )


def _size_bounds(node: SchemaNode) -> dict:
    bounds: dict = {}
    for c in node.checks:
        if c.name == "min":
            bounds["min_length"] = c.args[0]
        elif c.name == "max":
            bounds["max_length"] = c.args[0]
        elif c.name == "length":
            bounds["min_length"] = bounds["max_length"] = c.args[0]
    return bounds


def _number_bounds(node: SchemaNode) -> dict:
    bounds: dict = {"integer": False}
    for c in node.checks:
        if c.name == "int":
            bounds["integer"] = True
        elif c.name == "positive":
            bounds["gt"] = 0
        elif c.name == "nonnegative":
            bounds["ge"] = 0
        elif c.name == "negative":
            bounds["lt"] = 0
        elif c.name == "nonpositive":
            bounds["le"] = 0
        elif c.name == "min":
            bounds["ge"] = c.args[0]
        elif c.name == "max":
            bounds["le"] = c.args[0]
        else:
            raise ValueError(f".{c.name}() is not a number refinement")
    return bounds


def _build_type(node: SchemaNode, runtime: SchemaRuntime, name: str) -> Any:
    if node.kind is NodeKind.RAW:
        node = _resolve_raw(node)
    kind = node.kind
    if kind is NodeKind.STRING:
        fmt = next((c.name for c in node.checks if c.name in _STRING_FORMATS), None)
        schema = runtime.string(fmt=fmt, **_size_bounds(node))
    elif kind is NodeKind.NUMBER:
        schema = runtime.number(**_number_bounds(node))
    elif kind is NodeKind.BOOLEAN:
        schema = runtime.boolean()
    elif kind is NodeKind.UNKNOWN:
        schema = runtime.unknown()
    elif kind is NodeKind.BINARY:
        schema = runtime.binary()
    elif kind is NodeKind.ARRAY:
        schema = runtime.array(_build_type(node.item, runtime, name), **_size_bounds(node))
    elif kind is NodeKind.RECORD:
        schema = runtime.record(_build_type(node.item, runtime, name))
    elif kind is NodeKind.ENUM:
        schema = runtime.enum(list(node.values))
    elif kind is NodeKind.LITERAL:
        schema = runtime.literal(node.values[0])
    elif kind is NodeKind.UNION:
        schema = runtime.union([_build_type(v, runtime, name) for v in node.variants])
    elif kind is NodeKind.OBJECT:
        schema = runtime.object(name, _build_fields(node, runtime, name),
                                node.mode.value if node.mode else None)
    else:
        raise ValueError(f"Cannot build schema node of kind {kind.value!r}")

    if node.nullable:
        schema = runtime.nullable(schema)
    return schema


def _build_fields(node: SchemaNode, runtime: SchemaRuntime, name: str) -> list[FieldSpec]:
    fields = []
    for field_name, child in node.fields:
        if child.kind is NodeKind.RAW:
            child = _resolve_raw(child)
        schema = _build_type(child, runtime, model_name(name, field_name))
        if child.default is not None:
            fields.append(FieldSpec(field_name, schema, required=False, default=child.default.value))
        else:
            fields.append(FieldSpec(field_name, schema, required=not child.optional))
    return fields


def build_schema_value(node: SchemaNode, runtime: SchemaRuntime, name: str) -> Any:
    """Construct a runtime schema value from an object node."""
    return _build_type(node, runtime, name)


def _check_runtime(runtime: Any) -> None:
    if runtime is None or not callable(getattr(runtime, "object", None)):
        raise ConfigurationError("A schema runtime exposing an object() constructor must be provided")


def generate_schema_value(
    provider: MetadataProvider,
    table_name: str,
    runtime: SchemaRuntime,
    options: Optional[MappingOptions] = None,
) -> Any:
    """
    Build a live schema value (a pydantic model class with PydanticRuntime)
    for `table_name`.
    """
    _check_runtime(runtime)
    node = assemble(provider, table_name, options)
    try:
        value = build_schema_value(node, runtime, model_name(table_name))
    except SchemaGenerationError:
        raise
    except Exception as e:
        raise EvaluationError(f'Failed to build schema object for table "{table_name}": {e}') from e
    logger.info("Built live schema for %s with %d fields", table_name, len(node.fields))
    return value
