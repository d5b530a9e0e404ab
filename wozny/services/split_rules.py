"""
Composite Column Splitting — addresses and full names.

- get_splittable_type: decides whether a column holds ADDRESS or NAME values
- parse_address: ordered strategy chain, first non-None result wins
    1. ZIP in lookup, suffix-anchored     (lookup city/state override the text)
    2. ZIP in lookup, literal strip       (remove ZIP, state, city from the tail)
    3. ZIP unknown, suffix-anchored       (in-text city, valid state required)
    4. ZIP unknown, single-token city     (non-greedy street, valid state required)
    5. Comma-delimited                    (street, ..., city, state)
  Input is length-bounded before any pattern runs, so backtracking stays
  cheap on hostile values.
- parse_full_name: honorific strip, then First / Middle / Last
- smart_split_column / apply_split: bulk application over a row set
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from wozny.config import get_settings
from wozny.schemas.quality import AddressComponents, NameComponents, SplitOutcome, SplitType
from wozny.services.normalizers import is_missing_value, to_title_case
from wozny.services.us_data import US_STATES, lookup_zip

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

STREET_SUFFIXES = (
    "Street", "St", "Avenue", "Ave", "Road", "Rd", "Boulevard", "Blvd",
    "Lane", "Ln", "Drive", "Dr", "Way", "Court", "Ct", "Place", "Pl",
    "Circle", "Cir", "Parkway", "Pkwy", "Highway", "Hwy", "Terrace", "Ter",
    "Square", "Sq",
)
_SUFFIX_ALT = "|".join(STREET_SUFFIXES)
_ZIP = r"\d{5}(?:-?\d{4})?"

ZIP_TAIL_PATTERN = re.compile(r"(?<!\d)(" + _ZIP + r")\s*$")
ZIP_ANYWHERE_PATTERN = re.compile(r"(?<!\d)(" + _ZIP + r")(?!\d)")
STREET_SUFFIX_PATTERN = re.compile(r"\b(?:" + _SUFFIX_ALT + r")\b\.?", re.IGNORECASE)

SUFFIX_ANCHORED_PATTERN = re.compile(
    r"^(?P<street>.*\b(?:" + _SUFFIX_ALT + r")\b\.?)"
    r"[\s,]+(?P<city>[^,\d]*?)[\s,]*"
    r"\b(?P<state>[A-Za-z]{2})[\s,]+(?P<zip>" + _ZIP + r")\s*$",
    re.IGNORECASE,
)

SINGLE_TOKEN_CITY_PATTERN = re.compile(
    r"^(?P<street>.+?)[\s,]+(?P<city>[A-Za-z]+)[\s,]+"
    r"(?P<state>[A-Za-z]{2})[\s,]+(?P<zip>" + _ZIP + r")\s*$"
)

HONORIFIC_PATTERN = re.compile(r"^(?:mrs|mr|ms|dr|prof)\.?\s+", re.IGNORECASE)
DIGIT_PATTERN = re.compile(r"\d")

BUSINESS_KEYWORDS = {
    "corp", "corporation", "inc", "incorporated", "llc", "ltd", "co",
    "company", "group", "holdings", "partners", "associates", "services",
    "solutions", "technologies", "tech", "international", "enterprises",
    "industries", "bank", "foundation", "trust", "plc", "gmbh",
}


def _missing() -> str:
    return get_settings().MISSING_SENTINEL


def _fallback(raw: str) -> AddressComponents:
    missing = _missing()
    return AddressComponents(Street=raw, City=missing, State=missing, Zip=missing)


def _build(street: str, city: str, state: str, zip_code: str) -> AddressComponents:
    missing = _missing()
    street = street.strip(" ,")
    city = city.strip(" ,")
    return AddressComponents(
        Street=to_title_case(street) if street else missing,
        City=to_title_case(city) if city else missing,
        State=state.upper() if state else missing,
        Zip=zip_code or missing,
    )


# ============================================================================
# ADDRESS STRATEGIES
# ============================================================================

AddressStrategy = Callable[[str], Optional[AddressComponents]]


def _known_zip(text: str):
    match = ZIP_TAIL_PATTERN.search(text)
    if not match:
        return None, None
    return match, lookup_zip(match.group(1))


def _zip_lookup_suffix_anchored(text: str) -> Optional[AddressComponents]:
    match, entry = _known_zip(text)
    if entry is None:
        return None
    parsed = SUFFIX_ANCHORED_PATTERN.match(text)
    if not parsed:
        return None
    return _build(parsed.group("street"), entry["city"], entry["state"], match.group(1))


def _zip_lookup_strip(text: str) -> Optional[AddressComponents]:
    match, entry = _known_zip(text)
    if entry is None:
        return None

    remainder = text[:match.start()].strip(" ,")
    state = entry["state"]
    if re.search(r"(?:^|[\s,])" + state + r"$", remainder, re.IGNORECASE):
        remainder = remainder[:-len(state)].strip(" ,")
    city = entry["city"]
    if remainder.lower().endswith(city.lower()):
        remainder = remainder[:-len(city)].strip(" ,")

    return _build(remainder, city, state, match.group(1))


def _zip_unknown_suffix_anchored(text: str) -> Optional[AddressComponents]:
    match, entry = _known_zip(text)
    if match is None or entry is not None:
        return None
    parsed = SUFFIX_ANCHORED_PATTERN.match(text)
    if not parsed or parsed.group("state").upper() not in US_STATES:
        return None
    return _build(parsed.group("street"), parsed.group("city"), parsed.group("state"), parsed.group("zip"))


def _zip_unknown_single_token_city(text: str) -> Optional[AddressComponents]:
    match, entry = _known_zip(text)
    if match is None or entry is not None:
        return None
    parsed = SINGLE_TOKEN_CITY_PATTERN.match(text)
    if not parsed or parsed.group("state").upper() not in US_STATES:
        return None
    return _build(parsed.group("street"), parsed.group("city"), parsed.group("state"), parsed.group("zip"))


def _comma_delimited(text: str) -> Optional[AddressComponents]:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) < 3:
        return None
    zip_match = ZIP_ANYWHERE_PATTERN.search(text)
    return _build(
        ", ".join(parts[:-2]),
        parts[-2],
        parts[-1][:2],
        zip_match.group(1) if zip_match else "",
    )


ADDRESS_STRATEGIES: Tuple[Tuple[str, AddressStrategy], ...] = (
    ("zip_lookup_suffix", _zip_lookup_suffix_anchored),
    ("zip_lookup_strip", _zip_lookup_strip),
    ("zip_unknown_suffix", _zip_unknown_suffix_anchored),
    ("zip_unknown_single_city", _zip_unknown_single_token_city),
    ("comma_delimited", _comma_delimited),
)


def parse_address(raw: str) -> AddressComponents:
    """Split a free-text US address; unresolved fields come back as the sentinel."""
    if raw is None:
        return _fallback("")

    settings = get_settings()
    if not (settings.ADDRESS_MIN_LENGTH <= len(raw) <= settings.ADDRESS_MAX_LENGTH):
        return _fallback(raw)

    text = raw.strip()
    for name, strategy in ADDRESS_STRATEGIES:
        result = strategy(text)
        if result is not None:
            logger.debug("Address parsed by %s strategy", name)
            return result

    logger.debug("No address strategy matched; keeping raw value as street")
    return _fallback(raw)


# ============================================================================
# NAMES
# ============================================================================

def parse_full_name(raw: str) -> Optional[NameComponents]:
    if not raw or len(raw.strip()) < 2:
        return None

    tokens = HONORIFIC_PATTERN.sub("", raw.strip()).split()
    if not tokens:
        return None

    first = to_title_case(tokens[0])
    if not first:
        return None
    return NameComponents(
        First=first,
        Middle=to_title_case(" ".join(tokens[1:-1])),
        Last=to_title_case(tokens[-1]) if len(tokens) > 1 else "",
    )


# ============================================================================
# CLASSIFICATION
# ============================================================================

def is_address_like(value: str) -> bool:
    return bool(ZIP_TAIL_PATTERN.search(value) or STREET_SUFFIX_PATTERN.search(value))


def is_name_like(value: str) -> bool:
    if DIGIT_PATTERN.search(value):
        return False
    tokens = value.split()
    if not 2 <= len(tokens) <= 3:
        return False
    return not any(t.lower().strip(".,") in BUSINESS_KEYWORDS for t in tokens)


def get_splittable_type(values: Sequence[str]) -> SplitType:
    """
    Classify a column as ADDRESS, NAME or NONE from its leading values.

    Low-uniqueness columns are categorical and never split.
    """
    settings = get_settings()
    sample: List[str] = []
    for value in values:
        if is_missing_value(value):
            continue
        sample.append(str(value).strip())
        if len(sample) >= settings.SPLIT_SAMPLE_SIZE:
            break

    if len(sample) < settings.SPLIT_MIN_SAMPLES:
        return SplitType.NONE

    distinct = {v.lower() for v in sample}
    if len(distinct) / len(sample) < settings.SPLIT_UNIQUENESS_RATIO:
        return SplitType.NONE

    address_ratio = sum(1 for v in sample if is_address_like(v)) / len(sample)
    if address_ratio > settings.SPLIT_MATCH_RATIO:
        return SplitType.ADDRESS

    name_ratio = sum(1 for v in sample if is_name_like(v)) / len(sample)
    if name_ratio > settings.SPLIT_MATCH_RATIO:
        return SplitType.NAME

    return SplitType.NONE


# ============================================================================
# BULK SPLIT
# ============================================================================

SPLIT_FIELDS: Dict[SplitType, Tuple[str, ...]] = {
    SplitType.ADDRESS: ("Street", "City", "State", "Zip"),
    SplitType.NAME: ("First", "Middle", "Last"),
}

Components = Union[AddressComponents, NameComponents]


def _parse(value: str, split_type: SplitType) -> Optional[Components]:
    if split_type == SplitType.ADDRESS:
        return parse_address(value)
    if split_type == SplitType.NAME:
        return parse_full_name(value)
    return None


def smart_split_column(rows: Sequence[Dict[str, str]], column: str, split_type: SplitType) -> SplitOutcome:
    """Parse every value of ``column``; a success has no sentinel field."""
    missing = _missing()
    success_count = 0
    fail_count = 0
    results: List[Optional[Components]] = []

    for row in rows:
        value = row.get(column)
        if is_missing_value(value):
            results.append(None)
            continue

        parsed = _parse(str(value), split_type)
        if parsed is not None and missing not in parsed.model_dump().values():
            success_count += 1
        else:
            fail_count += 1
        results.append(parsed)

    return SplitOutcome(success_count=success_count, fail_count=fail_count, results=results)


def apply_split(
    rows: Sequence[Dict[str, str]],
    columns: Sequence[str],
    column: str,
    split_type: SplitType,
) -> Tuple[List[Dict[str, str]], List[str], SplitOutcome]:
    """
    Add ``<column>_<Field>`` columns right after ``column``.

    The source column is kept. Rows without a parse result get the sentinel.
    """
    outcome = smart_split_column(rows, column, split_type)
    fields = SPLIT_FIELDS.get(split_type, ())
    if not fields:
        return [dict(r) for r in rows], list(columns), outcome

    new_names = [f"{column}_{f}" for f in fields]
    position = list(columns).index(column) + 1
    new_columns = [c for c in columns[:position] if c not in new_names]
    new_columns += new_names
    new_columns += [c for c in columns[position:] if c not in new_names]

    missing = _missing()
    new_rows = []
    for row, parsed in zip(rows, outcome.results):
        values = parsed.model_dump() if parsed is not None else {}
        merged = dict(row)
        for field_name, new_name in zip(fields, new_names):
            merged[new_name] = values[field_name] if parsed is not None else missing
        out = {c: merged.get(c, missing) for c in new_columns}
        out.update((k, v) for k, v in row.items() if k not in out)
        new_rows.append(out)

    logger.info(
        "Split column %s as %s: %d parsed, %d failed",
        column, split_type.value, outcome.success_count, outcome.fail_count,
    )
    return new_rows, new_columns, outcome
