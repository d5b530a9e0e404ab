"""
Tests for the quality report and issue filtering helpers.
"""

import pytest

from wozny.schemas.quality import Issue, IssueType
from wozny.services.quality import build_quality_report, filter_issues, health_grade, issues_for_row


def _issue(row_id, column, issue_type, suggestion="x"):
    return Issue(row_id=row_id, column=column, issue_type=issue_type, suggestion=suggestion)


@pytest.fixture
def issues():
    return [
        _issue(0, "name", IssueType.MISSING),
        _issue(1, "name", IssueType.FORMAT),
        _issue(1, "state", IssueType.VALIDITY),
        _issue(2, "email", IssueType.FORMAT),
        _issue(2, "name", IssueType.DUPLICATE),
    ]


class TestHealthGrade:
    @pytest.mark.parametrize("ratio,grade", [
        (1.0, "A"),
        (0.95, "A"),
        (0.9, "B"),
        (0.85, "B"),
        (0.75, "C"),
        (0.65, "D"),
        (0.6, "F"),
        (0.0, "F"),
    ])
    def test_thresholds(self, ratio, grade):
        assert health_grade(ratio) == grade


class TestFilters:
    def test_issues_for_row(self, issues):
        assert [i.column for i in issues_for_row(issues, 1)] == ["name", "state"]

    def test_filter_by_type(self, issues):
        assert [i.row_id for i in filter_issues(issues, IssueType.FORMAT)] == [1, 2]

    def test_filter_ignored_columns(self, issues):
        assert [i.column for i in filter_issues(issues, ignored_columns=["name"])] == ["state", "email"]


class TestBuildQualityReport:
    def test_counts_and_grade(self, issues):
        rows = [{"name": "", "email": "", "state": ""}] * 4
        report = build_quality_report(rows, ["name", "email", "state"], issues)

        assert report.row_count == 4
        assert report.column_count == 3
        assert report.total_issues == 5
        assert report.missing_count == 1
        assert report.format_count == 2
        assert report.validity_count == 1
        assert report.duplicate_count == 1
        assert report.missing_columns == ["name"]
        assert report.format_columns == ["name", "email"]
        assert report.health_ratio == pytest.approx(0.5833, abs=1e-4)
        assert report.health_grade == "F"

    def test_ignored_columns_excluded(self, issues):
        rows = [{"name": "", "email": "", "state": ""}] * 4
        report = build_quality_report(rows, ["name", "email", "state"], issues, ignored_columns=["name"])
        assert report.total_issues == 2
        assert report.missing_columns == []
        assert report.health_grade == "B"

    def test_ratio_never_negative(self):
        stacked = [
            _issue(0, "a", IssueType.DUPLICATE),
            _issue(0, "a", IssueType.MISSING),
            _issue(1, "a", IssueType.DUPLICATE),
            _issue(1, "a", IssueType.FORMAT),
            _issue(1, "a", IssueType.FORMAT),
        ]
        report = build_quality_report([{"a": ""}, {"a": ""}], ["a"], stacked)
        assert report.total_issues == 5
        assert report.health_ratio == 0.0
        assert report.health_grade == "F"

    def test_clean_dataset(self):
        report = build_quality_report([{"a": "1"}], ["a"], [])
        assert report.health_ratio == 1.0
        assert report.health_grade == "A"

    def test_empty_dataset(self):
        report = build_quality_report([], [], [])
        assert report.row_count == 0
        assert report.health_grade == "A"
