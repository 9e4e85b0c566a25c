"""Pydantic v2 backend for live schema construction."""
import datetime
import keyword
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StringConstraints,
    create_model,
)

from zodgen.core.live_builder import FieldSpec, SchemaRuntime

_FORMAT_TYPES = {
    "date": datetime.date,
    "datetime": datetime.datetime,
    "time": datetime.time,
    "uuid": UUID,
    "url": AnyUrl,
}
_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_EXTRA_BY_MODE = {"strict": "forbid", "passthrough": "allow"}


def _needs_alias(name: str) -> bool:
    return (
        not name.isidentifier()
        or keyword.iskeyword(name)
        or name.startswith("_")
        or name.startswith("model_")
        or hasattr(BaseModel, name)
    )


def _attribute_name(index: int, taken: set[str]) -> str:
    """Synthetic attribute for an aliased column, distinct from every column name."""
    attr = f"field_{index}"
    while attr in taken:
        attr += "_"
    return attr


class PydanticRuntime(SchemaRuntime):
    """
    Maps schema constructors onto pydantic types. Objects become models built
    with create_model; strict objects forbid extra keys, passthrough allows them.

    Numbers and booleans use pydantic's strict types so that "7" or "yes" are
    rejected the same way z.number() and z.boolean() reject them. Date, time
    and uuid formats stay lax because their Zod counterparts validate strings.
    """

    def string(self, *, min_length=None, max_length=None, fmt=None):
        if fmt in _FORMAT_TYPES:
            return _FORMAT_TYPES[fmt]
        pattern = _EMAIL_PATTERN if fmt == "email" else None
        if min_length is None and max_length is None and pattern is None:
            return str
        return Annotated[str, StringConstraints(min_length=min_length, max_length=max_length, pattern=pattern)]

    def number(self, *, integer=False, gt=None, ge=None, lt=None, le=None):
        base = StrictInt if integer else StrictFloat
        if gt is None and ge is None and lt is None and le is None:
            return base
        return Annotated[base, Field(gt=gt, ge=ge, lt=lt, le=le)]

    def boolean(self):
        return StrictBool

    def unknown(self):
        return Any

    def binary(self):
        return bytes

    def array(self, item, *, min_length=None, max_length=None):
        if min_length is None and max_length is None:
            return list[item]
        return Annotated[list[item], Field(min_length=min_length, max_length=max_length)]

    def record(self, value):
        return dict[str, value]

    def enum(self, options):
        return Literal[tuple(options)]

    def literal(self, value):
        return Literal[value]

    def union(self, variants):
        return Union[tuple(variants)]

    def nullable(self, schema):
        return Optional[schema]

    def object(self, name: str, fields: list[FieldSpec], mode: Optional[str] = None):
        config = ConfigDict(
            extra=_EXTRA_BY_MODE.get(mode, "ignore"),
            populate_by_name=True,
            protected_namespaces=(),
        )
        definitions: dict[str, Any] = {}
        taken = {spec.name for spec in fields}
        for index, spec in enumerate(fields):
            default = ... if spec.required else spec.default
            if _needs_alias(spec.name):
                attr = _attribute_name(index, taken)
                taken.add(attr)
                definitions[attr] = (spec.schema, Field(default, alias=spec.name))
            else:
                definitions[spec.name] = (spec.schema, default)
        return create_model(name, __config__=config, **definitions)
