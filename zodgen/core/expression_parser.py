"""
Parser for the Zod expression subset accepted as JSON column overrides.
Turns override text into a SchemaNode so live schemas can be built without
evaluating code. Anything outside the known vocabulary is rejected.
"""
import re
from typing import Any, Optional

from zodgen.core.expression import (
    DefaultLiteral, NodeKind, ObjectMode, SchemaNode,
    array_of, binary, enum_of, literal, record_of, union_of,
)

_TOKEN = re.compile(r"""
    (?P<number>-?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
  | (?P<punct>[()\[\]{},.:?])
""", re.VERBOSE | re.DOTALL)
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}

_SIMPLE_CONSTRUCTORS = {
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "boolean": NodeKind.BOOLEAN,
    "unknown": NodeKind.UNKNOWN,
    "any": NodeKind.UNKNOWN,
}
# Refinements that take no argument / one numeric argument
_FLAG_CHECKS = {"int", "positive", "negative", "nonnegative", "nonpositive",
                "date", "datetime", "time", "uuid", "url", "email"}
_SIZE_CHECKS = {"min", "max", "length"}


class ExpressionSyntaxError(ValueError):
    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} at offset {position}")


def _unescape(body: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def tokenize(text: str) -> list[tuple[str, str, int]]:
    tokens = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        m = _TOKEN.match(text, pos)
        if not m:
            raise ExpressionSyntaxError(f"Unexpected character {text[pos]!r}", pos)
        tokens.append((m.lastgroup, m.group(), pos))
        pos = m.end()
    return tokens


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    # ── token helpers ──

    def _peek(self) -> Optional[tuple[str, str, int]]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _offset(self) -> int:
        tok = self._peek()
        return tok[2] if tok else len(self.text)

    def _next(self) -> tuple[str, str, int]:
        tok = self._peek()
        if tok is None:
            raise ExpressionSyntaxError("Unexpected end of expression", len(self.text))
        self.pos += 1
        return tok

    def _at(self, value: str) -> bool:
        tok = self._peek()
        return tok is not None and tok[0] != "string" and tok[1] == value

    def _expect(self, value: str) -> None:
        kind, text, offset = self._next()
        if kind == "string" or text != value:
            raise ExpressionSyntaxError(f"Expected {value!r} but found {text!r}", offset)

    def _name(self) -> str:
        kind, text, offset = self._next()
        if kind != "name":
            raise ExpressionSyntaxError(f"Expected a name but found {text!r}", offset)
        return text

    def _separated(self, close: str, item):
        items = []
        while not self._at(close):
            items.append(item())
            if not self._at(close):
                self._expect(",")
        self._expect(close)
        return items

    # ── grammar ──

    def parse(self) -> SchemaNode:
        node = self.expression()
        if self._peek() is not None:
            raise ExpressionSyntaxError("Trailing input", self._offset())
        return node

    def expression(self) -> SchemaNode:
        offset = self._offset()
        if self._name() != "z":
            raise ExpressionSyntaxError("Expressions must start with 'z.'", offset)
        self._expect(".")
        node = self.constructor()
        while self._at("."):
            self._next()
            node = self.method(node)
        return node

    def constructor(self) -> SchemaNode:
        offset = self._offset()
        name = self._name()
        self._expect("(")
        if name in _SIMPLE_CONSTRUCTORS:
            self._expect(")")
            return SchemaNode(_SIMPLE_CONSTRUCTORS[name])
        if name == "array":
            node = array_of(self.expression())
        elif name == "record":
            node = self.expression()
            if self._at(","):
                self._next()
                node = self.expression()    # z.record(keySchema, valueSchema)
            node = record_of(node)
        elif name == "object":
            self._expect("{")
            node = SchemaNode(NodeKind.OBJECT, fields=tuple(self._separated("}", self.member)))
        elif name == "enum":
            self._expect("[")
            options = self._separated("]", self.value)
            if not options or not all(isinstance(o, str) for o in options):
                raise ExpressionSyntaxError("z.enum() expects a non-empty list of strings", offset)
            node = enum_of(*options)
        elif name == "union":
            self._expect("[")
            node = union_of(*self._separated("]", self.expression))
        elif name == "literal":
            node = literal(self.value())
        elif name == "instanceof":
            cls = self._name()
            if cls != "Buffer":
                raise ExpressionSyntaxError(f"Unsupported instanceof target {cls!r}", offset)
            node = binary()
        else:
            raise ExpressionSyntaxError(f"Unknown constructor z.{name}()", offset)
        self._expect(")")
        return node

    def member(self) -> tuple[str, SchemaNode]:
        kind, key, offset = self._next()
        if kind == "string":
            key = _unescape(key[1:-1])
        elif kind != "name":
            raise ExpressionSyntaxError(f"Expected a property name but found {key!r}", offset)
        optional = False
        if self._at("?"):
            self._next()
            optional = True
        self._expect(":")
        node = self.expression()
        return key, node.as_optional() if optional else node

    def method(self, node: SchemaNode) -> SchemaNode:
        offset = self._offset()
        name = self._name()
        self._expect("(")
        if name in _FLAG_CHECKS:
            node = node.with_check(name)
        elif name in _SIZE_CHECKS:
            value = self.value()
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ExpressionSyntaxError(f".{name}() expects a number", offset)
            node = node.with_check(name, value)
        elif name == "nullable":
            node = node.as_nullable()
        elif name == "optional":
            node = node.as_optional()
        elif name == "default":
            node = node.with_default(DefaultLiteral(self.value()))
        elif name in ("strict", "passthrough"):
            if node.kind is not NodeKind.OBJECT:
                raise ExpressionSyntaxError(f".{name}() only applies to objects", offset)
            node = node.with_mode(ObjectMode(name))
        else:
            raise ExpressionSyntaxError(f"Unknown method .{name}()", offset)
        self._expect(")")
        return node

    def value(self) -> Any:
        kind, text, offset = self._next()
        if kind == "number":
            return float(text) if any(c in text for c in ".eE") else int(text)
        if kind == "string":
            return _unescape(text[1:-1])
        if kind == "name":
            constants = {"true": True, "false": False, "null": None}
            if text in constants:
                return constants[text]
        elif text == "[":
            return self._separated("]", self.value)
        elif text == "{":
            return dict(self._separated("}", self._pair))
        raise ExpressionSyntaxError(f"Expected a literal value but found {text!r}", offset)

    def _pair(self) -> tuple[str, Any]:
        kind, key, offset = self._next()
        if kind == "string":
            key = _unescape(key[1:-1])
        elif kind != "name":
            raise ExpressionSyntaxError(f"Expected a key but found {key!r}", offset)
        self._expect(":")
        return key, self.value()


def parse_expression(text: str) -> SchemaNode:
    """Parse Zod expression text such as `z.array(z.string()).nullable()`."""
    return _Parser(text).parse()
