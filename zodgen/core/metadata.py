"""
Metadata providers: supply column descriptors for a table.
The SQLAlchemy provider reflects a caller-owned engine; the static provider
serves descriptors already in memory (API payloads, tests, fixtures).
"""
import logging
from typing import Any, Mapping, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from zodgen.config import settings
from zodgen.models.column import ColumnDescriptor

logger = logging.getLogger(__name__)


class MetadataProvider:
    """Source of column metadata. `dialect` names the database engine."""

    dialect: str = "postgresql"

    def fetch_columns(self, table_name: str) -> dict[str, ColumnDescriptor]:
        raise NotImplementedError


class StaticMetadataProvider(MetadataProvider):
    def __init__(
        self,
        tables: Mapping[str, Mapping[str, Any]],
        dialect: str = "postgresql",
    ):
        self.dialect = dialect
        self._tables = {
            table: {name: _as_descriptor(col) for name, col in columns.items()}
            for table, columns in tables.items()
        }

    def fetch_columns(self, table_name: str) -> dict[str, ColumnDescriptor]:
        return dict(self._tables.get(table_name, {}))


def _as_descriptor(col: Any) -> ColumnDescriptor:
    if isinstance(col, ColumnDescriptor):
        return col
    return ColumnDescriptor.model_validate(col)


class SqlAlchemyMetadataProvider(MetadataProvider):
    """
    Reflects columns through `sqlalchemy.inspect`. The engine is owned by the
    caller; this class never creates or disposes connections.
    """

    def __init__(self, engine, schema: Optional[str] = None):
        self.engine = engine
        self.schema = schema if schema is not None else _get_default_schema(engine)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def fetch_columns(self, table_name: str) -> dict[str, ColumnDescriptor]:
        insp = inspect(self.engine)
        try:
            raw_cols = insp.get_columns(table_name, schema=self.schema)
        except NoSuchTableError:
            return {}
        columns = {col["name"]: _reflect_column(col, self.engine.dialect) for col in raw_cols}
        logger.debug("Reflected %d columns from %s", len(columns), table_name)
        return columns


def _reflect_column(col: dict, dialect) -> ColumnDescriptor:
    col_type = col["type"]
    try:
        data_type = col_type.compile(dialect=dialect)
    except SQLAlchemyError:
        data_type = type(col_type).__name__
    length = getattr(col_type, "length", None)
    return ColumnDescriptor(
        base_type=data_type,
        # Missing nullability fails closed
        nullable=bool(col.get("nullable", False)),
        max_length=length if isinstance(length, int) else None,
        default_value=col.get("default"),
    )


def _get_default_schema(engine) -> Optional[str]:
    if engine.dialect.name == "postgresql":
        return settings.DEFAULT_SCHEMA
    return None   # SQLite has no schema concept


def get_enum_values(engine, enum_type: str, schema: Optional[str] = None) -> list[str]:
    """
    Best-effort lookup of a PostgreSQL enum's labels.
    Returns an empty list when the type is unknown or the lookup fails.
    """
    if engine.dialect.name != "postgresql":
        return []
    schema = schema or settings.DEFAULT_SCHEMA
    try:
        enums = inspect(engine).get_enums(schema=schema)
    except (SQLAlchemyError, NotImplementedError, AttributeError) as e:
        logger.warning("Enum lookup for %s failed: %s", enum_type, e)
        return []
    for enum in enums:
        if enum.get("name") == enum_type:
            return list(enum.get("labels", []))
    return []
