"""GET /api/patterns: list the built-in JSON column patterns."""
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from zodgen.core.errors import PatternNotFoundError
from zodgen.core.patterns import get_pattern, pattern_names, resolve_pattern

router = APIRouter()


@router.get("/patterns")
def get_patterns():
    result = []
    for name in pattern_names():
        pattern = get_pattern(name)
        result.append({
            "name": name,
            "description": pattern.description,
            "parameterized": pattern.parameterized,
            "expression": resolve_pattern(name),
        })
    return {"patterns": result}


@router.get("/patterns/{name}")
def get_pattern_expression(name: str, parameter: Optional[str] = Query(None)):
    try:
        return {"name": name, "expression": resolve_pattern(name, parameter)}
    except PatternNotFoundError as e:
        raise HTTPException(404, detail=str(e))
