"""
Issue Detection & Auto-Fix Rules

Detection walks every cell once and reports:
- MISSING   — blank or null-like placeholder cells
- FORMAT    — values that break the convention implied by the column name
- VALIDITY  — two-letter state codes that are not US states
- DUPLICATE — exact and partial duplicate rows (see duplicates.py)

Column-name rules live in ordered tables of (predicate, handler) pairs. For
a given cell the first rule whose predicate accepts the column owns it, so
at most one FORMAT / VALIDITY issue is produced per cell.

Fixes reuse the same column predicates. A targeted fix only rewrites cells
that carry a FORMAT issue; a bulk fix rewrites every non-placeholder cell.
Both are idempotent.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from wozny.schemas.quality import ColumnContext, Issue, IssueType
from wozny.services.column_context import classify_column, classify_columns
from wozny.services.duplicates import find_duplicate_groups
from wozny.services.normalizers import (
    apply_dictionary,
    collapse_whitespace,
    is_missing_value,
    is_placeholder,
    normalize_currency,
    normalize_date,
    to_title_case,
)
from wozny.services.us_data import US_STATES, state_code_for


# ============================================================================
# COLUMN NAME PREDICATES
# ============================================================================

def _normalize_column_name(col: str) -> str:
    """camelCase and snake_case both become space-separated lower case."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", col or "")
    return re.sub(r"[^a-z0-9]+", " ", spaced.lower()).strip()


def _keywords(contains=(), token_start=()) -> Callable[[str], bool]:
    """
    Build a column-name predicate.

    ``contains`` keywords match anywhere ("birthdate", "unitprice"). Short
    ``token_start`` keywords only match where a name token starts, so
    "end_date" matches but "gender" does not.
    """
    anchored = re.compile(r"(?<![a-z])(?:" + "|".join(token_start) + r")") if token_start else None

    def predicate(col: str) -> bool:
        name = _normalize_column_name(col)
        if any(k in name for k in contains):
            return True
        return bool(anchored and anchored.search(name))

    return predicate


def _substring(*keywords: str) -> Callable[[str], bool]:
    return lambda col: any(k in (col or "").lower() for k in keywords)


is_email_column = _substring("email", "e-mail")
is_phone_column = _keywords(contains=("phone", "mobile"), token_start=("tel", "cell"))
is_date_column = _keywords(contains=("date", "dob", "joined"), token_start=("start", "end"))
is_currency_column = _keywords(
    contains=("price", "cost", "amount", "revenue", "salary"),
    token_start=("fee",),
)
is_url_column = _keywords(contains=("website", "homepage"), token_start=("url", "link"))

# "statement" is a document, not a region
STATE_PATTERN = re.compile(r"state(?!ment)")


def is_state_column(col: str) -> bool:
    name = _normalize_column_name(col)
    return name == "st" or bool(STATE_PATTERN.search(name))


is_text_column = _substring(
    "name", "address", "street", "city", "town", "borough", "country",
    "role", "title", "position", "job", "category", "department", "dept",
    "company", "employer", "manager",
)


# ============================================================================
# VALUE PATTERNS
# ============================================================================

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\(\d{3}\) \d{3}-\d{4}$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
CURRENCY_SYMBOL_PATTERN = re.compile(r"[$€£¥₹]")
CURRENCY_NOISE_PATTERN = re.compile(r"[$€£¥₹,\s]")
TWO_DECIMAL_PATTERN = re.compile(r"^-?\d+\.\d{2}$")
TWO_LETTER_PATTERN = re.compile(r"^[A-Za-z]{2}$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)
LETTER_PATTERN = re.compile(r"[A-Za-z]")
NON_DIGIT_PATTERN = re.compile(r"\D")


# ============================================================================
# DETECTION RULES
# ============================================================================

Finding = Optional[Tuple[IssueType, str]]


@dataclass(frozen=True)
class DetectionRule:
    name: str
    applies_to: Callable[[str], bool]
    check: Callable[[str, ColumnContext], Finding]


def _check_email(value: str, context: ColumnContext) -> Finding:
    if not EMAIL_PATTERN.match(value):
        return IssueType.FORMAT, "Invalid Email"
    if value != value.lower():
        return IssueType.FORMAT, "Lowercase Email"
    return None


def _check_phone(value: str, context: ColumnContext) -> Finding:
    if not PHONE_PATTERN.match(value):
        return IssueType.FORMAT, "Standardize Phone"
    return None


def _check_date(value: str, context: ColumnContext) -> Finding:
    if not ISO_DATE_PATTERN.match(value):
        return IssueType.FORMAT, "Use YYYY-MM-DD"
    return None


def _check_currency(value: str, context: ColumnContext) -> Finding:
    stripped = CURRENCY_NOISE_PATTERN.sub("", value)
    if CURRENCY_SYMBOL_PATTERN.search(value) or not TWO_DECIMAL_PATTERN.match(stripped):
        return IssueType.FORMAT, "Standardize Currency"
    return None


def _check_state(value: str, context: ColumnContext) -> Finding:
    if TWO_LETTER_PATTERN.match(value):
        if value.upper() not in US_STATES:
            return IssueType.VALIDITY, "Invalid State"
        return None
    if len(value) > 2 and state_code_for(value):
        return IssueType.FORMAT, "Use 2-letter Code"
    return None


def _check_url(value: str, context: ColumnContext) -> Finding:
    if not URL_PATTERN.match(value):
        return IssueType.FORMAT, "Fix URL"
    return None


def _check_text(value: str, context: ColumnContext) -> Finding:
    if not LETTER_PATTERN.search(value):
        return None
    if to_title_case(apply_dictionary(value, context)) != value:
        return IssueType.FORMAT, "Fix Casing/Abbr"
    return None


DETECTION_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule("email", is_email_column, _check_email),
    DetectionRule("phone", is_phone_column, _check_phone),
    DetectionRule("date", is_date_column, _check_date),
    DetectionRule("currency", is_currency_column, _check_currency),
    DetectionRule("state", is_state_column, _check_state),
    DetectionRule("url", is_url_column, _check_url),
    DetectionRule("text", lambda col: True, _check_text),
)


def rule_for_column(col: str, rules: Sequence[DetectionRule] = DETECTION_RULES) -> DetectionRule:
    for rule in rules:
        if rule.applies_to(col):
            return rule
    return rules[-1]


def check_cell(
    value,
    col: str,
    context: ColumnContext = ColumnContext.GENERAL,
    rule: Optional[DetectionRule] = None,
) -> Finding:
    """Single-cell verdict: MISSING, a rule finding, or None."""
    if is_missing_value(value):
        return IssueType.MISSING, f"Provide value for {col}"
    rule = rule or rule_for_column(col)
    return rule.check(str(value).strip(), context)


def detect_issues(rows: Sequence[Dict[str, str]], columns: Sequence[str]) -> List[Issue]:
    """
    Re-derive the full issue list for a dataset.

    Nothing is cached between calls; every edit is followed by a full scan.
    """
    issues: List[Issue] = []
    if not columns:
        return issues

    contexts = classify_columns(rows, columns)
    rules = {col: rule_for_column(col) for col in columns}

    anchor = columns[0]
    for group in find_duplicate_groups(rows, columns):
        for position, row_id in enumerate(group):
            issues.append(Issue(
                row_id=row_id,
                column=anchor,
                issue_type=IssueType.DUPLICATE,
                suggestion="Original" if position == 0 else "Duplicate Row",
            ))

    for row_id, row in enumerate(rows):
        for col in columns:
            finding = check_cell(row.get(col), col, contexts[col], rules[col])
            if finding:
                issue_type, suggestion = finding
                issues.append(Issue(
                    row_id=row_id,
                    column=col,
                    issue_type=issue_type,
                    suggestion=suggestion,
                ))

    return issues


# ============================================================================
# FIX RULES
# ============================================================================

@dataclass(frozen=True)
class FixRule:
    name: str
    applies_to: Callable[[str], bool]
    transform: Callable[[str, ColumnContext], str]


def format_phone(value: str) -> str:
    """(###) ###-#### for 10-digit numbers (or 11 with a leading 1); else unchanged."""
    digits = NON_DIGIT_PATTERN.sub("", value)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        return value
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def format_state(value: str) -> str:
    if TWO_LETTER_PATTERN.match(value):
        return value.upper()
    return state_code_for(value) or value


def format_text(value: str, context: ColumnContext) -> str:
    return to_title_case(apply_dictionary(value, context))


FIX_RULES: Tuple[FixRule, ...] = (
    FixRule("email", is_email_column, lambda v, ctx: v.lower()),
    FixRule("phone", is_phone_column, lambda v, ctx: format_phone(v)),
    FixRule("state", is_state_column, lambda v, ctx: format_state(v)),
    FixRule("date", is_date_column, lambda v, ctx: normalize_date(v)),
    FixRule("currency", is_currency_column, lambda v, ctx: normalize_currency(v)),
    FixRule("text", is_text_column, format_text),
)


def fix_rule_for_column(col: str) -> Optional[FixRule]:
    for rule in FIX_RULES:
        if rule.applies_to(col):
            return rule
    return None


def fix_value(value, col: str, context: ColumnContext = ColumnContext.GENERAL):
    """Apply the column's fix to one value; placeholders and unmatched columns pass through."""
    if is_placeholder(value):
        return value
    rule = fix_rule_for_column(col)
    if rule is None:
        return value
    return rule.transform(collapse_whitespace(str(value)), context)


def fix_row(
    row: Mapping[str, str],
    columns: Sequence[str],
    issues_for_row: Iterable[Issue],
    contexts: Optional[Mapping[str, ColumnContext]] = None,
) -> Dict[str, str]:
    """Return a fixed copy of ``row``; only cells with a FORMAT issue are touched."""
    targets = {
        issue.column for issue in issues_for_row
        if issue.issue_type == IssueType.FORMAT
    }
    fixed = dict(row)
    for col in columns:
        if col not in targets or col not in fixed:
            continue
        context = (contexts or {}).get(col) or classify_column(col, [fixed[col]])
        fixed[col] = fix_value(fixed[col], col, context)
    return fixed


def fix_all(rows: Sequence[Mapping[str, str]], columns: Sequence[str]) -> List[Dict[str, str]]:
    """Bulk-normalize every non-placeholder cell regardless of detected issues."""
    contexts = classify_columns(rows, columns)
    fixed_rows = []
    for row in rows:
        fixed = dict(row)
        for col in columns:
            if col in fixed:
                fixed[col] = fix_value(fixed[col], col, contexts[col])
        fixed_rows.append(fixed)
    return fixed_rows
