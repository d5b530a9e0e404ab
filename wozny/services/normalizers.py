"""
Value normalizers — title case, abbreviation expansion, dates, currency.

Every function here is total: when a value cannot be normalized it comes
back unchanged rather than raising.
"""

import re
from datetime import timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from dateutil import parser as dateutil_parser

from wozny.schemas.quality import ColumnContext
from wozny.services.us_data import CITY_ABBREVIATIONS, NORMALIZATION_DICTIONARY


# ============================================================================
# PATTERNS
# ============================================================================

TITLE_TOKEN_PATTERN = re.compile(r"\w\S*")

# Capturing group keeps the delimiters in the split output
DICTIONARY_DELIMITER_PATTERN = re.compile(r"(\s+|,|\.|/)")

STRICT_MDY_PATTERN = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{2}|\d{4})$")

CURRENCY_STRIP_PATTERN = re.compile(r"[^\d.\-]")

# Leading numeric prefix, the way a lenient float parser reads "12.5abc"
LEADING_NUMBER_PATTERN = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)")


# ============================================================================
# FUNCTIONS
# ============================================================================

def to_title_case(value: str) -> str:
    """Upper-case the first character of each word, lower-case the rest."""
    if not value:
        return value
    return TITLE_TOKEN_PATTERN.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), value)


def _lookup(table, token: str):
    lowered = token.lower()
    clean = lowered[:-1] if lowered.endswith(".") else lowered
    return table.get(lowered) or table.get(clean)


def apply_dictionary(value: str, context: ColumnContext = ColumnContext.GENERAL) -> str:
    """
    Expand known abbreviations token by token.

    City abbreviations are only consulted for CITY columns; the general
    dictionary (street suffixes, job titles) applies everywhere. Delimiter
    tokens are emitted verbatim so spacing and punctuation survive.
    """
    if not value:
        return value

    out = []
    for token in DICTIONARY_DELIMITER_PATTERN.split(value):
        if not token:
            continue
        if context == ColumnContext.CITY:
            city = _lookup(CITY_ABBREVIATIONS, token)
            if city:
                out.append(city)
                continue
        out.append(_lookup(NORMALIZATION_DICTIONARY, token) or token)
    return "".join(out)


def normalize_date(value: str) -> str:
    """Return YYYY-MM-DD for any parseable date, else the input unchanged."""
    if not value or not value.strip():
        return value

    text = value.strip()
    try:
        parsed = dateutil_parser.parse(text)
    except (ValueError, OverflowError):
        parsed = None

    if parsed is not None:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.strftime("%Y-%m-%d")

    match = STRICT_MDY_PATTERN.match(text)
    if match:
        month, day, year = match.groups()
        if len(year) == 2:
            year = f"20{year}"
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return value


def parse_leading_number(text: str):
    """Decimal for the numeric prefix of ``text``, or None."""
    match = LEADING_NUMBER_PATTERN.match(text)
    if not match:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def normalize_currency(value: str) -> str:
    """Strip symbols and separators and render with exactly two decimals."""
    if value is None:
        return value

    number = parse_leading_number(CURRENCY_STRIP_PATTERN.sub("", str(value)))
    if number is None:
        return value
    return str(number.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def collapse_whitespace(value: str) -> str:
    if not value:
        return value
    return " ".join(value.split())


# ============================================================================
# PLACEHOLDERS
# ============================================================================

MISSING_TOKENS = {"null", "n/a", "undefined", "missing", "tbd"}

BRACKET_PAIRS = {"[": "]", "(": ")", "<": ">", "{": "}"}


def is_bracketed(text: str) -> bool:
    return len(text) >= 2 and BRACKET_PAIRS.get(text[0]) == text[-1]


def is_missing_value(value) -> bool:
    """Blank, or a null-like placeholder such as "[MISSING]", "N/A", "(null)"."""
    if value is None:
        return True
    text = str(value).strip()
    if not text:
        return True
    if is_bracketed(text):
        text = text[1:-1].strip()
    return text.lower() in MISSING_TOKENS


def is_placeholder(value) -> bool:
    """Empty or bracket-wrapped cells are never rewritten by fixes."""
    if value is None:
        return True
    text = str(value).strip()
    return not text or is_bracketed(text)
