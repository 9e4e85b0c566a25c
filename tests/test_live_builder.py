import datetime
import pytest
from pydantic import ValidationError

from zodgen.core.errors import ConfigurationError, EvaluationError
from zodgen.core.live_builder import SchemaRuntime, generate_schema_value, model_name
from zodgen.core.metadata import StaticMetadataProvider
from zodgen.core.pydantic_runtime import PydanticRuntime
from zodgen.models.options import MappingOptions


@pytest.fixture
def sample_row():
    return {
        "id": 1,
        "name": "Ada Lovelace",
        "email": None,
        "profile": {"bio": "Mathematician"},
        "tags": ["math", "engines"],
        "created_at": "2024-01-01T09:30:00Z",
    }


def test_round_trip(provider, sample_row):
    Users = generate_schema_value(provider, "users", PydanticRuntime())
    row = Users.model_validate(sample_row)
    assert row.id == 1
    assert row.is_active is True                     # filled from the column default
    assert row.email is None
    assert row.created_at == datetime.datetime(2024, 1, 1, 9, 30, tzinfo=datetime.timezone.utc)


def test_strict_mode_rejects_extra_keys(provider, sample_row):
    Users = generate_schema_value(provider, "users", PydanticRuntime())
    with pytest.raises(ValidationError):
        Users.model_validate({**sample_row, "unexpected": 1})


def test_passthrough_mode_keeps_extra_keys(provider, sample_row):
    Users = generate_schema_value(provider, "users", PydanticRuntime(), MappingOptions(strict=False))
    row = Users.model_validate({**sample_row, "unexpected": 1})
    assert row.model_extra == {"unexpected": 1}


def test_nullable_columns_are_still_required(provider, sample_row):
    Users = generate_schema_value(provider, "users", PydanticRuntime())
    incomplete = dict(sample_row)
    del incomplete["email"]
    with pytest.raises(ValidationError):
        Users.model_validate(incomplete)


def test_max_length_enforced(provider, sample_row):
    Users = generate_schema_value(provider, "users", PydanticRuntime())
    with pytest.raises(ValidationError):
        Users.model_validate({**sample_row, "name": "x" * 256})


def test_pattern_builds_nested_model(provider, sample_row):
    options = MappingOptions(structured_patterns={"profile": "user_profile"})
    Users = generate_schema_value(provider, "users", PydanticRuntime(), options)
    row = Users.model_validate({**sample_row, "profile": {"bio": "hi", "social": {"x": "@ada"}}})
    assert row.profile.social == {"x": "@ada"}
    with pytest.raises(ValidationError):
        Users.model_validate({**sample_row, "profile": {"bio": "x" * 501}})


def test_text_override_is_parsed(provider, sample_row):
    options = MappingOptions(structured_overrides={
        "profile": "z.object({ theme: z.enum(['light', 'dark']), size?: z.number().int().positive() }).strict()",
    })
    Users = generate_schema_value(provider, "users", PydanticRuntime(), options)
    assert Users.model_validate({**sample_row, "profile": {"theme": "dark"}}).profile.theme == "dark"
    assert Users.model_validate({**sample_row, "profile": None}).profile is None
    with pytest.raises(ValidationError):
        Users.model_validate({**sample_row, "profile": {"theme": "blue"}})
    with pytest.raises(ValidationError):
        Users.model_validate({**sample_row, "profile": {"theme": "dark", "size": 0}})


def test_invalid_override_text(provider):
    options = MappingOptions(structured_overrides={"profile": "z.shape()"})
    with pytest.raises(EvaluationError, match='table "users"'):
        generate_schema_value(provider, "users", PydanticRuntime(), options)


@pytest.mark.parametrize("runtime", [None, object()])
def test_runtime_required(provider, runtime):
    with pytest.raises(ConfigurationError):
        generate_schema_value(provider, "users", runtime)


def test_runtime_missing_constructor(provider):
    class ObjectOnlyRuntime(SchemaRuntime):
        def object(self, name, fields, mode=None):
            return {"name": name, "fields": fields, "mode": mode}

    with pytest.raises(EvaluationError):
        generate_schema_value(provider, "users", ObjectOnlyRuntime())


def test_custom_runtime_receives_fields_in_order(provider):
    class RecordingRuntime(SchemaRuntime):
        def string(self, **kw): return ("string", kw)
        def number(self, **kw): return ("number", kw)
        def boolean(self): return ("boolean",)
        def unknown(self): return ("unknown",)
        def array(self, item, **kw): return ("array", item)
        def nullable(self, schema): return ("nullable", schema)
        def object(self, name, fields, mode=None): return {"name": name, "fields": fields, "mode": mode}

    result = generate_schema_value(provider, "users", RecordingRuntime(), MappingOptions(exclude=["profile"]))
    assert result["name"] == "Users"
    assert result["mode"] == "strict"
    assert [f.name for f in result["fields"]] == ["id", "name", "email", "is_active", "tags", "created_at"]
    is_active = result["fields"][3]
    assert is_active.required is False and is_active.default is True
    assert result["fields"][1].schema == ("string", {"fmt": None, "max_length": 255})


def test_model_name():
    assert model_name("order_items") == "OrderItems"
    assert model_name("users", "profile") == "UsersProfile"
    assert model_name("2fa-codes") == "_2faCodes"


def test_synthetic_attribute_does_not_collide_with_column_names():
    provider = StaticMetadataProvider({
        "events": {"_id": {"type": "integer"}, "field_0": {"type": "text"}},
    })
    Events = generate_schema_value(provider, "events", PydanticRuntime())
    assert len(Events.model_fields) == 2
    row = Events.model_validate({"_id": 1, "field_0": "x"})
    assert row.model_dump(by_alias=True) == {"_id": 1, "field_0": "x"}


def test_numbers_and_booleans_are_not_coerced():
    provider = StaticMetadataProvider({
        "flags": {"id": {"type": "integer"}, "ok": {"type": "boolean"}, "ratio": {"type": "real"}},
    })
    Flags = generate_schema_value(provider, "flags", PydanticRuntime())
    assert Flags.model_validate({"id": 7, "ok": True, "ratio": 1}).ratio == 1
    with pytest.raises(ValidationError):
        Flags.model_validate({"id": "7", "ok": True, "ratio": 0.5})
    with pytest.raises(ValidationError):
        Flags.model_validate({"id": 7, "ok": "yes", "ratio": 0.5})
