"""Pydantic schemas for column metadata as supplied by a metadata provider."""
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ColumnDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_type: str = Field(..., alias="type", description="Catalog type, e.g. 'character varying(255)' or 'text[]'")
    nullable: bool = False
    max_length: Optional[int] = Field(None, alias="maxLength")
    default_value: Optional[Union[bool, int, float, str]] = Field(None, alias="defaultValue")

    def without_length(self) -> "ColumnDescriptor":
        return self.model_copy(update={"max_length": None})


class OverrideContext(BaseModel):
    """Per-column JSON schema override: literal expression text or a pattern name."""
    model_config = ConfigDict(frozen=True)

    column_name: str = ""
    override: Optional[str] = None
    pattern: Optional[str] = None
