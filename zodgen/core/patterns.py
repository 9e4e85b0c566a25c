"""
Pattern library: reusable schemas for common JSON/JSONB payload shapes.
Columns opt in with `structured_patterns={"profile": "user_profile"}`.
"""
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Callable, Optional, Union

from zodgen.core.errors import PatternNotFoundError
from zodgen.core.expression import (
    ObjectMode, SchemaNode,
    array_of, boolean, enum_of, number, object_of, raw, record_of, render, string,
    union_of, unknown,
)

Parameter = Union[str, SchemaNode, None]


@dataclass(frozen=True)
class Pattern:
    name: str
    description: str
    build: Callable[[Optional[SchemaNode]], SchemaNode]
    parameterized: bool = False


def _user_profile(_: Optional[SchemaNode]) -> SchemaNode:
    return object_of({
        "avatar": string().with_check("url").as_optional(),
        "bio": string().with_check("max", 500).as_optional(),
        "location": string().as_optional(),
        "website": string().with_check("url").as_optional(),
        "social": record_of(string()).as_optional(),
        "preferences": record_of(unknown()).as_optional(),
    })


def _settings(_: Optional[SchemaNode]) -> SchemaNode:
    return object_of({
        "theme": enum_of("light", "dark", "auto").as_optional(),
        "notifications": boolean().as_optional(),
        "language": string().as_optional(),
        "timezone": string().as_optional(),
    })


def _address(_: Optional[SchemaNode]) -> SchemaNode:
    return object_of({
        "street": string(),
        "city": string(),
        "state": string().as_optional(),
        "postal_code": string().as_optional(),
        "country": string(),
    })


_PATTERNS = MappingProxyType({
    p.name: p for p in (
        Pattern("record", "Keyed mapping; parameter is the value schema",
                lambda value: record_of(value or unknown()), parameterized=True),
        Pattern("string_record", "Keyed mapping of strings",
                lambda _: record_of(string())),
        Pattern("string_array", "Array of strings",
                lambda _: array_of(string())),
        Pattern("number_array", "Array of numbers",
                lambda _: array_of(number())),
        Pattern("object_array", "Array of objects; parameter is the element schema",
                lambda item: array_of(item or object_of({}, mode=ObjectMode.PASSTHROUGH)),
                parameterized=True),
        Pattern("tags", "List of string tags",
                lambda _: array_of(string())),
        Pattern("user_profile", "Avatar, bio, links and free-form preferences", _user_profile),
        Pattern("settings", "Theme, notification and locale settings", _settings),
        Pattern("metadata", "Free-form mapping of primitive values",
                lambda _: record_of(union_of(string(), number(), boolean()))),
        Pattern("address", "Postal address", _address),
    )
})


def _as_node(parameter: Parameter) -> Optional[SchemaNode]:
    if parameter is None or isinstance(parameter, SchemaNode):
        return parameter
    return raw(parameter)


def get_pattern(name: str) -> Pattern:
    try:
        return _PATTERNS[name]
    except KeyError:
        raise PatternNotFoundError(name) from None


def pattern_node(name: str, parameter: Parameter = None) -> SchemaNode:
    """Build the schema tree for a named pattern."""
    pattern = get_pattern(name)
    return pattern.build(_as_node(parameter) if pattern.parameterized else None)


def resolve_pattern(name: str, parameter: Parameter = None) -> str:
    """Render a named pattern as Zod expression text."""
    return render(pattern_node(name, parameter))


def pattern_names() -> list[str]:
    return list(_PATTERNS)


def list_patterns() -> dict[str, Union[str, Callable[..., str]]]:
    """
    Fixed patterns map to their expression text; parameterized ones map to a
    callable taking the value/element expression.
    """
    result: dict[str, Union[str, Callable[..., str]]] = {}
    for name, pattern in _PATTERNS.items():
        result[name] = partial(resolve_pattern, name) if pattern.parameterized else resolve_pattern(name)
    return result
