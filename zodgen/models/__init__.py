from zodgen.models.column import ColumnDescriptor, OverrideContext  # noqa: F401
from zodgen.models.options import MappingOptions  # noqa: F401
from zodgen.models.schema import SchemaRequest, SchemaResponse, MapTypeRequest, MapTypeResponse  # noqa: F401
