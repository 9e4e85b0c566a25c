from zodgen.core.assembler import assemble, generate_schema_text  # noqa: F401
from zodgen.core.live_builder import generate_schema_value, SchemaRuntime  # noqa: F401
from zodgen.core.pydantic_runtime import PydanticRuntime  # noqa: F401
from zodgen.core.type_mapper import classify, map_column, map_column_type  # noqa: F401
from zodgen.core.patterns import list_patterns, resolve_pattern  # noqa: F401
from zodgen.core.metadata import StaticMetadataProvider, SqlAlchemyMetadataProvider, get_enum_values  # noqa: F401
