"""POST /api/schema, /api/map-type: generate Zod schemas from column metadata."""
import logging
from fastapi import APIRouter, HTTPException

from zodgen.core.assembler import generate_schema_text
from zodgen.core.errors import ConfigurationError, TableNotFoundError, UnsupportedSourceError
from zodgen.core.metadata import StaticMetadataProvider
from zodgen.core.type_mapper import map_column_type
from zodgen.models.column import ColumnDescriptor, OverrideContext
from zodgen.models.schema import MapTypeRequest, MapTypeResponse, SchemaRequest, SchemaResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/schema", response_model=SchemaResponse)
def create_schema(req: SchemaRequest):
    provider = StaticMetadataProvider({req.table_name: req.columns}, dialect=req.dialect)
    try:
        text = generate_schema_text(provider, req.table_name, req.options)
    except TableNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsupportedSourceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("Generated schema for %s", req.table_name)
    return SchemaResponse(
        table_name=req.table_name,
        columns=req.options.select(list(req.columns)),
        strict=req.options.strict,
        schema_text=text,
    )


@router.post("/map-type", response_model=MapTypeResponse)
def map_type(req: MapTypeRequest):
    column = req.column or ColumnDescriptor(base_type=req.base_type)
    override = OverrideContext(column_name=req.column_name, override=req.override, pattern=req.pattern)
    try:
        expression = map_column_type(req.base_type, column, override)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MapTypeResponse(base_type=req.base_type, expression=expression)
