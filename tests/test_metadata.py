import pytest
from unittest.mock import MagicMock, patch
from sqlalchemy import INTEGER, TEXT, TIMESTAMP, VARCHAR, create_engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from zodgen.core.assembler import generate_schema_text
from zodgen.core.errors import UnsupportedSourceError
from zodgen.core.metadata import SqlAlchemyMetadataProvider, StaticMetadataProvider, get_enum_values
from zodgen.core.type_mapper import map_column_type
from zodgen.models.column import ColumnDescriptor


@pytest.fixture
def sqlite_engine(temp_sqlite_db):
    engine = create_engine(f"sqlite:///{temp_sqlite_db}")
    yield engine
    engine.dispose()


def test_reflects_sqlite_columns(sqlite_engine):
    provider = SqlAlchemyMetadataProvider(sqlite_engine)
    columns = provider.fetch_columns("users")

    assert list(columns) == ["id", "name", "email", "status"]
    name = columns["name"]
    assert name.base_type == "VARCHAR(120)"
    assert name.max_length == 120
    assert name.nullable is False
    assert columns["email"].nullable is True
    assert columns["status"].default_value == "'active'"
    assert map_column_type(name.base_type, name) == "z.string().max(120)"
    assert map_column_type(columns["status"].base_type, columns["status"]) == 'z.string().max(20).nullable().default("active")'


def test_missing_table_yields_no_columns(sqlite_engine):
    assert SqlAlchemyMetadataProvider(sqlite_engine).fetch_columns("nope") == {}


def test_sqlite_is_not_a_supported_source(sqlite_engine):
    provider = SqlAlchemyMetadataProvider(sqlite_engine)
    assert provider.dialect == "sqlite"
    assert provider.schema is None
    with pytest.raises(UnsupportedSourceError, match="sqlite"):
        generate_schema_text(provider, "users")


def test_enum_lookup_is_best_effort(sqlite_engine):
    assert get_enum_values(sqlite_engine, "mood") == []


def test_static_provider_accepts_catalog_keys():
    provider = StaticMetadataProvider({
        "t": {
            "a": {"type": "text", "nullable": True},
            "b": ColumnDescriptor(base_type="uuid"),
        }
    })
    columns = provider.fetch_columns("t")
    assert columns["a"] == ColumnDescriptor(base_type="text", nullable=True)
    assert columns["b"].nullable is False
    assert provider.fetch_columns("other") == {}


@pytest.fixture
def pg_engine():
    engine = MagicMock()
    engine.dialect = postgresql.dialect()
    return engine


PG_COLUMNS = [
    {"name": "id", "type": INTEGER(), "nullable": False, "default": "nextval('users_id_seq'::regclass)"},
    {"name": "handle", "type": VARCHAR(64), "nullable": False, "default": None},
    {"name": "tags", "type": postgresql.ARRAY(TEXT()), "nullable": True, "default": None},
    {"name": "payload", "type": postgresql.JSONB(), "nullable": True, "default": None},
    {"name": "seen_at", "type": TIMESTAMP(timezone=True), "nullable": False, "default": "now()"},
]


def test_reflects_postgresql_columns(pg_engine):
    inspector = MagicMock()
    inspector.get_columns.return_value = PG_COLUMNS
    with patch("zodgen.core.metadata.inspect", return_value=inspector):
        provider = SqlAlchemyMetadataProvider(pg_engine)
        columns = provider.fetch_columns("users")
        schema = generate_schema_text(provider, "users")

    inspector.get_columns.assert_called_with("users", schema="public")
    assert columns["tags"].base_type == "TEXT[]"
    assert columns["payload"].base_type == "JSONB"
    assert columns["seen_at"].base_type == "TIMESTAMP WITH TIME ZONE"
    assert columns["handle"].max_length == 64
    assert schema == (
        "z.object({\n"
        "  id: z.number().int(),\n"
        "  handle: z.string().max(64),\n"
        "  tags: z.array(z.string()).nullable(),\n"
        "  payload: z.unknown().nullable(),\n"
        "  seen_at: z.string().datetime()\n"
        "}).strict()"
    )


def test_postgresql_missing_table(pg_engine):
    inspector = MagicMock()
    inspector.get_columns.side_effect = NoSuchTableError("ghost")
    with patch("zodgen.core.metadata.inspect", return_value=inspector):
        assert SqlAlchemyMetadataProvider(pg_engine, schema="audit").fetch_columns("ghost") == {}
    inspector.get_columns.assert_called_once_with("ghost", schema="audit")


def test_enum_labels_from_postgresql(pg_engine):
    inspector = MagicMock()
    inspector.get_enums.return_value = [
        {"name": "status", "schema": "public", "labels": ["draft"], "visible": True},
        {"name": "mood", "schema": "public", "labels": ["sad", "ok", "happy"], "visible": True},
    ]
    with patch("zodgen.core.metadata.inspect", return_value=inspector):
        assert get_enum_values(pg_engine, "mood") == ["sad", "ok", "happy"]
        assert get_enum_values(pg_engine, "colour") == []
    inspector.get_enums.assert_called_with(schema="public")


def test_enum_lookup_failure_returns_empty(pg_engine):
    inspector = MagicMock()
    inspector.get_enums.side_effect = SQLAlchemyError("permission denied")
    with patch("zodgen.core.metadata.inspect", return_value=inspector):
        assert get_enum_values(pg_engine, "mood", schema="app") == []
    inspector.get_enums.assert_called_once_with(schema="app")
