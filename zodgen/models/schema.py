"""Pydantic schemas for the schema generation API."""
from typing import Optional
from pydantic import BaseModel, Field

from zodgen.models.column import ColumnDescriptor
from zodgen.models.options import MappingOptions


class SchemaRequest(BaseModel):
    table_name: str
    dialect: str = "postgresql"
    columns: dict[str, ColumnDescriptor] = Field(..., description="Column name → descriptor, in table order")
    options: MappingOptions = Field(default_factory=MappingOptions)


class SchemaResponse(BaseModel):
    table_name: str
    columns: list[str]
    strict: bool
    schema_text: str


class MapTypeRequest(BaseModel):
    base_type: str
    column: Optional[ColumnDescriptor] = None   # defaults to a non-null column without default
    column_name: str = ""
    override: Optional[str] = None
    pattern: Optional[str] = None


class MapTypeResponse(BaseModel):
    base_type: str
    expression: str
