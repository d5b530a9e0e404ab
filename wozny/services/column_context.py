"""Column context inference — CITY / STATE / GENERAL from header and values."""

import re
from typing import Dict, Iterable, List, Sequence

from wozny.config import get_settings
from wozny.schemas.quality import ColumnContext


CITY_KEYWORDS = ("city", "borough", "town")
STATE_KEYWORDS = ("state", "code")

STATE_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")


def classify_column(column_name: str, sample_values: Iterable[str]) -> ColumnContext:
    """
    Infer a column's context.

    Header keywords win; otherwise the column is STATE when most of the
    first non-empty values are bare two-letter upper-case codes.
    """
    name = (column_name or "").lower()

    if any(k in name for k in CITY_KEYWORDS):
        return ColumnContext.CITY
    if name == "st" or any(k in name for k in STATE_KEYWORDS):
        return ColumnContext.STATE

    settings = get_settings()
    sample: List[str] = []
    for value in sample_values:
        if value is None:
            continue
        text = str(value).strip()
        if not text:
            continue
        sample.append(text)
        if len(sample) >= settings.CONTEXT_SAMPLE_SIZE:
            break

    if not sample:
        return ColumnContext.GENERAL

    matches = sum(1 for v in sample if STATE_CODE_PATTERN.match(v))
    if matches / len(sample) > settings.STATE_CODE_RATIO:
        return ColumnContext.STATE
    return ColumnContext.GENERAL


def classify_columns(rows: Sequence[Dict[str, str]], columns: Sequence[str]) -> Dict[str, ColumnContext]:
    """Context for every column, computed once per detection pass."""
    return {col: classify_column(col, (row.get(col) for row in rows)) for col in columns}
