"""
Schema assembler: one Zod object schema per table.
Column order always follows the provider; allow-list first, deny-list wins.
"""
import logging
from typing import Optional

from zodgen.core.errors import TableNotFoundError, UnsupportedSourceError
from zodgen.core.expression import ObjectMode, SchemaNode, object_of, render_object_block
from zodgen.core.metadata import MetadataProvider
from zodgen.core.type_mapper import map_column
from zodgen.models.options import MappingOptions

logger = logging.getLogger(__name__)

SUPPORTED_DIALECTS = frozenset({"postgresql"})


def assemble(
    provider: MetadataProvider,
    table_name: str,
    options: Optional[MappingOptions] = None,
) -> SchemaNode:
    """Build the object schema tree for `table_name`."""
    options = options or MappingOptions()

    if provider.dialect not in SUPPORTED_DIALECTS:
        raise UnsupportedSourceError(provider.dialect)

    column_info = provider.fetch_columns(table_name)
    if not column_info:
        raise TableNotFoundError(table_name)

    selected = options.select(list(column_info))
    fields: dict[str, SchemaNode] = {}
    for name in selected:
        column = column_info[name]
        fields[name] = map_column(column.base_type, column, options.override_for(name))

    mode = ObjectMode.STRICT if options.strict else ObjectMode.PASSTHROUGH
    logger.debug("Assembled %s: %d of %d columns, %s mode",
                 table_name, len(fields), len(column_info), mode.value)
    return object_of(fields, mode=mode)


def generate_schema_text(
    provider: MetadataProvider,
    table_name: str,
    options: Optional[MappingOptions] = None,
) -> str:
    """
    Generate Zod schema source for a table, e.g.

        z.object({
          id: z.number().int(),
          email: z.string().max(255).nullable()
        }).strict()
    """
    node = assemble(provider, table_name, options)
    return render_object_block(node)
