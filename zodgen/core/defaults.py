"""
Default normalizer: turns a catalog default literal into a schema default.
Server-computed defaults (clock functions, sequences) are skipped; everything
else is surfaced so validation can fill the value when a field is omitted.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from zodgen.core.expression import DefaultLiteral

logger = logging.getLogger(__name__)

# `::text`, `::character varying`, `::timestamp without time zone`, `::text[]`
_CAST = re.compile(
    r"::\s*\"?[A-Za-z_][A-Za-z0-9_]*\"?"
    r"(?:\s+(?:varying|precision|with(?:out)?\s+time\s+zone))?"
    r"(?:\[\])?"
)
_QUOTED = re.compile(r"'(?:[^']|'')*'")
_CLOCK_FUNCTION = re.compile(
    r"\b(?:current_timestamp|current_date|current_time|localtimestamp|localtime)\b"
    r"|\b(?:now|transaction_timestamp|statement_timestamp|clock_timestamp|timeofday)\s*\(",
    re.IGNORECASE,
)
_SEQUENCE_FUNCTION = re.compile(r"\bnextval\s*\(", re.IGNORECASE)
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGER = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class DefaultResult:
    skip: bool = False
    literal: Optional[DefaultLiteral] = None

    @property
    def present(self) -> bool:
        return not self.skip and self.literal is not None


SKIP = DefaultResult(skip=True)


def strip_casts(text: str) -> str:
    """Remove PostgreSQL `::type` cast annotations outside quoted literals."""
    parts = []
    last = 0
    for quoted in _QUOTED.finditer(text):
        parts.append(_CAST.sub("", text[last:quoted.start()]))
        parts.append(quoted.group(0))
        last = quoted.end()
    parts.append(_CAST.sub("", text[last:]))
    return "".join(parts).strip()


def normalize_default(raw: Any) -> DefaultResult:
    """
    Interpret a column default as reported by the catalog.
    Returns SKIP when there is no default or the value is database-computed.
    """
    if raw is None:
        return SKIP

    # Providers that already decoded the literal
    if isinstance(raw, (bool, int, float)):
        return DefaultResult(literal=DefaultLiteral(raw))

    text = strip_casts(str(raw))

    # String literals are blanked so a quoted 'now()' stays a plain default
    code = _QUOTED.sub("''", text)
    if _CLOCK_FUNCTION.search(code):
        logger.debug("Skipping clock default %r", raw)
        return SKIP
    if _SEQUENCE_FUNCTION.search(code):
        logger.debug("Skipping sequence default %r", raw)
        return SKIP

    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
        return DefaultResult(literal=DefaultLiteral(text[1:-1].replace("''", "'")))
    if _NUMBER.match(text):
        value = int(text) if _INTEGER.match(text) else float(text)
        # Rendered from the catalog token, not the parsed value
        return DefaultResult(literal=DefaultLiteral(value, text=text.lstrip("+")))
    if text in ("true", "false"):
        return DefaultResult(literal=DefaultLiteral(text == "true"))

    # Last resort: surface the expression text itself
    return DefaultResult(literal=DefaultLiteral(text))
