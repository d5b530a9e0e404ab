"""Quality report — issue counts per type and an A-F health grade."""

from typing import Dict, Iterable, List, Optional, Sequence

from wozny.schemas.quality import Issue, IssueType, QualityReport


# Ratio of clean cells -> grade, checked top-down
GRADE_THRESHOLDS = (
    (0.9, "A"),
    (0.8, "B"),
    (0.7, "C"),
    (0.6, "D"),
)


def issues_for_row(issues: Iterable[Issue], row_id: int) -> List[Issue]:
    return [i for i in issues if i.row_id == row_id]


def filter_issues(
    issues: Iterable[Issue],
    issue_type: Optional[IssueType] = None,
    ignored_columns: Iterable[str] = (),
) -> List[Issue]:
    ignored = set(ignored_columns)
    return [
        i for i in issues
        if i.column not in ignored and (issue_type is None or i.issue_type == issue_type)
    ]


def health_grade(ratio: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if ratio > threshold:
            return grade
    return "F"


def build_quality_report(
    rows: Sequence[Dict[str, str]],
    columns: Sequence[str],
    issues: Iterable[Issue],
    ignored_columns: Iterable[str] = (),
) -> QualityReport:
    """
    Summarise an issue list for display.

    Health ratio = 1 - issues / cells, counting only issues on columns the
    user has not chosen to ignore. An empty dataset counts as one cell so
    the ratio stays defined. A cell can carry several issues, so the ratio
    is floored at zero.
    """
    active = filter_issues(issues, ignored_columns=ignored_columns)

    counts: Dict[IssueType, int] = {t: 0 for t in IssueType}
    missing_columns: List[str] = []
    format_columns: List[str] = []
    for issue in active:
        counts[issue.issue_type] += 1
        if issue.issue_type == IssueType.MISSING and issue.column not in missing_columns:
            missing_columns.append(issue.column)
        elif issue.issue_type == IssueType.FORMAT and issue.column not in format_columns:
            format_columns.append(issue.column)

    cell_count = max(len(rows) * len(columns), 1)
    ratio = max(0.0, 1 - len(active) / cell_count)

    return QualityReport(
        row_count=len(rows),
        column_count=len(columns),
        total_issues=len(active),
        missing_count=counts[IssueType.MISSING],
        format_count=counts[IssueType.FORMAT],
        validity_count=counts[IssueType.VALIDITY],
        duplicate_count=counts[IssueType.DUPLICATE],
        missing_columns=missing_columns,
        format_columns=format_columns,
        health_ratio=round(ratio, 4),
        health_grade=health_grade(ratio),
    )
