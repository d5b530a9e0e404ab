"""
Row ordering for display.

With no sort config rows go back to their original order via the stable
index field. With a config the sort column is compared numerically when
every non-empty value is a number, chronologically when every non-empty
value is a date, and as natural case-insensitive text otherwise. Choosing
the mode per column keeps the ordering a valid total preorder. Empty cells
sort last ascending and first descending.
"""

import math
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from dateutil import parser as dateutil_parser

from wozny.config import get_settings
from wozny.schemas.quality import SortConfig, SortDirection
from wozny.services.normalizers import is_missing_value


NUMERIC_NOISE_PATTERN = re.compile(r"[$€£\s,]")
NATURAL_CHUNK_PATTERN = re.compile(r"(\d+)")

# Short strings like "2020" or "3/4" parse as dates but are not meant as dates
DATE_MIN_LENGTH = 6


def _index_of(row: Dict[str, Any], field: str) -> int:
    try:
        return int(row.get(field) or 0)
    except (TypeError, ValueError):
        return 0


def _cell(row: Dict[str, Any], column: str) -> str:
    value = row.get(column)
    if is_missing_value(value):
        return ""
    return str(value).strip()


def parse_number(value: str) -> Optional[float]:
    cleaned = NUMERIC_NOISE_PATTERN.sub("", value)
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_timestamp(value: str) -> Optional[float]:
    if len(value) < DATE_MIN_LENGTH:
        return None
    try:
        parsed = dateutil_parser.parse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.timestamp()
    except (OverflowError, OSError):
        return (parsed - datetime(1970, 1, 1, tzinfo=timezone.utc)).total_seconds()


def natural_key(value: str):
    """Case- and accent-insensitive key that orders embedded numbers numerically."""
    folded = unicodedata.normalize("NFKD", value.casefold())
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    key = []
    for chunk in NATURAL_CHUNK_PATTERN.split(folded):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk), ""))
        else:
            key.append((1, 0, chunk))
    return tuple(key)


def column_sort_key(values: Sequence[str]) -> Callable[[str], Any]:
    """Pick numeric, date or natural-text comparison for a column's non-empty values."""
    if values and all(parse_number(v) is not None for v in values):
        return parse_number
    if values and all(parse_timestamp(v) is not None for v in values):
        return parse_timestamp
    return natural_key


def sort_rows(rows: Sequence[Dict[str, Any]], config: Optional[SortConfig] = None) -> List[Dict[str, Any]]:
    """Return a new list of rows in display order; ``rows`` is not modified."""
    if config is None:
        field = get_settings().INDEX_FIELD
        return sorted(rows, key=lambda row: _index_of(row, field))

    column = config.column_id
    descending = config.direction == SortDirection.DESC

    filled = []
    empty = []
    for row in rows:
        (filled if _cell(row, column) else empty).append(row)

    key = column_sort_key([_cell(row, column) for row in filled])
    ordered = sorted(filled, key=lambda row: key(_cell(row, column)), reverse=descending)

    return empty + ordered if descending else ordered + empty
