"""
zodgen: Zod validation schemas from PostgreSQL column metadata.
"""
from zodgen.core import (  # noqa: F401
    generate_schema_text,
    generate_schema_value,
    map_column_type,
    list_patterns,
    resolve_pattern,
    PydanticRuntime,
    SchemaRuntime,
    StaticMetadataProvider,
    SqlAlchemyMetadataProvider,
    get_enum_values,
)
from zodgen.core.errors import (  # noqa: F401
    SchemaGenerationError,
    TableNotFoundError,
    UnsupportedSourceError,
    ConfigurationError,
    PatternNotFoundError,
    EvaluationError,
)
from zodgen.models import ColumnDescriptor, MappingOptions, OverrideContext  # noqa: F401

__version__ = "1.0.0"
