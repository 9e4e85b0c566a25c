"""Pydantic schema for per-call schema generation options."""
from typing import Optional
from pydantic import BaseModel, Field

from zodgen.models.column import OverrideContext


class MappingOptions(BaseModel):
    columns: Optional[list[str]] = Field(None, description="Allow-list; output keeps provider order")
    exclude: list[str] = Field(default_factory=list, description="Deny-list, applied after the allow-list")
    strict: bool = Field(True, description="Reject unknown keys (.strict) instead of passing them through")
    structured_overrides: dict[str, str] = Field(default_factory=dict)   # column → expression text
    structured_patterns: dict[str, str] = Field(default_factory=dict)    # column → pattern name

    def select(self, available: list[str]) -> list[str]:
        selected = available
        if self.columns:
            allowed = set(self.columns)
            selected = [c for c in selected if c in allowed]
        if self.exclude:
            denied = set(self.exclude)
            selected = [c for c in selected if c not in denied]
        return selected

    def override_for(self, column_name: str) -> OverrideContext:
        return OverrideContext(
            column_name=column_name,
            override=self.structured_overrides.get(column_name),
            pattern=self.structured_patterns.get(column_name),
        )
