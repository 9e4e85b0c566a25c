"""
Schema expression tree and its Zod renderer.
Every column validator is built as a SchemaNode first; text output and live
schema construction both walk the same tree.
"""
import json
import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class NodeKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"
    BINARY = "binary"
    ARRAY = "array"
    RECORD = "record"
    OBJECT = "object"
    ENUM = "enum"
    UNION = "union"
    LITERAL = "literal"
    RAW = "raw"           # caller-supplied expression text, emitted verbatim


class ObjectMode(str, Enum):
    STRICT = "strict"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class Check:
    """A refinement call chained onto a base validator, e.g. `.max(255)`."""
    name: str
    args: tuple = ()


@dataclass(frozen=True)
class DefaultLiteral:
    value: Any
    text: Optional[str] = field(default=None, compare=False)   # source token for numbers

    @property
    def kind(self) -> str:
        if isinstance(self.value, bool):
            return "boolean"
        if isinstance(self.value, (int, float)):
            return "number"
        if isinstance(self.value, str):
            return "string"
        return "json"


@dataclass(frozen=True)
class SchemaNode:
    kind: NodeKind
    checks: tuple[Check, ...] = ()
    item: Optional["SchemaNode"] = None                   # array element / record value
    fields: tuple[tuple[str, "SchemaNode"], ...] = ()     # object members, in order
    values: tuple = ()                                    # enum options / literal value
    variants: tuple["SchemaNode", ...] = ()               # union members
    mode: Optional[ObjectMode] = None
    optional: bool = False
    nullable: bool = False
    default: Optional[DefaultLiteral] = None
    raw: Optional[str] = None

    def with_check(self, name: str, *args) -> "SchemaNode":
        return replace(self, checks=self.checks + (Check(name, tuple(args)),))

    def as_nullable(self) -> "SchemaNode":
        return replace(self, nullable=True)

    def as_optional(self) -> "SchemaNode":
        return replace(self, optional=True)

    def with_default(self, literal: DefaultLiteral) -> "SchemaNode":
        return replace(self, default=literal)

    def with_mode(self, mode: ObjectMode) -> "SchemaNode":
        return replace(self, mode=mode)


# ── Constructors ─────────────────────────────────────────────────────────────

def string() -> SchemaNode:
    return SchemaNode(NodeKind.STRING)


def number() -> SchemaNode:
    return SchemaNode(NodeKind.NUMBER)


def integer() -> SchemaNode:
    return SchemaNode(NodeKind.NUMBER).with_check("int")


def boolean() -> SchemaNode:
    return SchemaNode(NodeKind.BOOLEAN)


def unknown() -> SchemaNode:
    return SchemaNode(NodeKind.UNKNOWN)


def binary() -> SchemaNode:
    return SchemaNode(NodeKind.BINARY)


def array_of(item: SchemaNode) -> SchemaNode:
    return SchemaNode(NodeKind.ARRAY, item=item)


def record_of(value: SchemaNode) -> SchemaNode:
    return SchemaNode(NodeKind.RECORD, item=value)


def object_of(fields: dict[str, SchemaNode], mode: Optional[ObjectMode] = None) -> SchemaNode:
    return SchemaNode(NodeKind.OBJECT, fields=tuple(fields.items()), mode=mode)


def enum_of(*options: str) -> SchemaNode:
    return SchemaNode(NodeKind.ENUM, values=tuple(options))


def union_of(*variants: SchemaNode) -> SchemaNode:
    return SchemaNode(NodeKind.UNION, variants=tuple(variants))


def literal(value: Any) -> SchemaNode:
    return SchemaNode(NodeKind.LITERAL, values=(value,))


def raw(text: str) -> SchemaNode:
    return SchemaNode(NodeKind.RAW, raw=text)


# ── Rendering ────────────────────────────────────────────────────────────────

def format_literal(value: Any) -> str:
    """Format a Python value as a JavaScript literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        body = ", ".join(f"{_format_key(k)}: {format_literal(v)}" for k, v in value.items())
        return "{ " + body + " }"
    raise TypeError(f"Cannot format {type(value).__name__} as a literal")


def _format_key(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


def _render_base(node: SchemaNode) -> str:
    kind = node.kind
    if kind is NodeKind.RAW:
        return node.raw or ""
    if kind is NodeKind.BINARY:
        return "z.instanceof(Buffer)"
    if kind is NodeKind.ARRAY:
        return f"z.array({render(node.item)})"
    if kind is NodeKind.RECORD:
        return f"z.record({render(node.item)})"
    if kind is NodeKind.ENUM:
        return f"z.enum({format_literal(list(node.values))})"
    if kind is NodeKind.UNION:
        return "z.union([" + ", ".join(render(v) for v in node.variants) + "])"
    if kind is NodeKind.LITERAL:
        return f"z.literal({format_literal(node.values[0])})"
    if kind is NodeKind.OBJECT:
        if not node.fields:
            return "z.object({})"
        body = ", ".join(f"{_format_key(k)}: {render(v)}" for k, v in node.fields)
        return "z.object({ " + body + " })"
    return f"z.{kind.value}()"


def _render_decorations(node: SchemaNode) -> str:
    parts = []
    for c in node.checks:
        parts.append(f".{c.name}({', '.join(format_literal(a) for a in c.args)})")
    if node.mode is not None:
        parts.append(f".{node.mode.value}()")
    if node.optional:
        parts.append(".optional()")
    if node.nullable:
        parts.append(".nullable()")
    if node.default is not None:
        parts.append(f".default({node.default.text or format_literal(node.default.value)})")
    return "".join(parts)


def render(node: SchemaNode) -> str:
    """Render a node as a single-line Zod expression."""
    return _render_base(node) + _render_decorations(node)


def render_object_block(node: SchemaNode, indent: str = "  ") -> str:
    """Render a top-level object with one member per line."""
    if node.kind is not NodeKind.OBJECT:
        raise ValueError("render_object_block expects an object node")
    lines = [f"{indent}{_format_key(k)}: {render(v)}" for k, v in node.fields]
    return "z.object({\n" + ",\n".join(lines) + "\n})" + _render_decorations(node)
