"""
Duplicate grouping — exact fingerprints first, then single-key partial matches.

A row index lands in at most one group per pass. Within a group the lowest
index comes first and is treated as the original.
"""

import logging
from typing import Dict, List, Sequence, Set, Tuple

from wozny.config import get_settings
from wozny.services.normalizers import is_missing_value

logger = logging.getLogger(__name__)


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def row_fingerprint(row: Dict[str, str], columns: Sequence[str]) -> Tuple[str, ...]:
    """Cleaned cell values in column order."""
    return tuple(_clean(row.get(col)) for col in columns)


def partial_key_columns(columns: Sequence[str]) -> List[str]:
    """Columns strong enough to identify a record by themselves."""
    keys = []
    for col in columns:
        name = col.lower()
        if "email" in name or "phone" in name or ("name" in name and "last" not in name):
            keys.append(col)
    return keys


def find_exact_groups(rows: Sequence[Dict[str, str]], columns: Sequence[str]) -> List[List[int]]:
    buckets: Dict[Tuple[str, ...], List[int]] = {}
    for idx, row in enumerate(rows):
        buckets.setdefault(row_fingerprint(row, columns), []).append(idx)
    return [members for members in buckets.values() if len(members) >= 2]


def find_duplicate_groups(rows: Sequence[Dict[str, str]], columns: Sequence[str]) -> List[List[int]]:
    """
    Partition duplicate rows into groups.

    Pass 1 groups rows whose whole fingerprint matches. Pass 2 walks each
    key column (email / phone / name, not last name) and groups rows not yet
    claimed that share its value.
    """
    min_length = get_settings().PARTIAL_KEY_MIN_LENGTH
    groups = find_exact_groups(rows, columns)
    processed: Set[int] = {idx for group in groups for idx in group}

    for col in partial_key_columns(columns):
        buckets: Dict[str, List[int]] = {}
        for idx, row in enumerate(rows):
            if idx in processed:
                continue
            value = row.get(col)
            key = _clean(value)
            if len(key) < min_length or is_missing_value(value):
                continue
            buckets.setdefault(key, []).append(idx)

        for members in buckets.values():
            if len(members) >= 2:
                groups.append(members)
                processed.update(members)

    return groups


def remove_exact_duplicates(
    rows: Sequence[Dict[str, str]], columns: Sequence[str]
) -> Tuple[List[Dict[str, str]], List[int]]:
    """
    Drop every exact copy, keeping the first row of each group.

    Partial matches are reported by detection but never removed here.
    """
    removed: Set[int] = set()
    for group in find_exact_groups(rows, columns):
        removed.update(group[1:])

    if removed:
        logger.info("Removing %d exact duplicate rows", len(removed))

    kept = [dict(row) for idx, row in enumerate(rows) if idx not in removed]
    return kept, sorted(removed)
