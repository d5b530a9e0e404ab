"""
DataQualityPipeline — DataFrame-facing orchestration of the rule services.

Holds the current row set for one dataset and re-derives the issue list
after every mutation:

    analyze            full detection pass
    auto_format        targeted fix of cells carrying a FORMAT issue
    fix_all            bulk normalization of every non-placeholder cell
    remove_duplicates  drop exact copies (partial matches are only reported)
    split_column       add structured address / name columns
    sort               display ordering, or original order with no config

Every cell change is recorded in ``change_log``; ``summary`` counts actions.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from wozny.config import get_settings
from wozny.exceptions import UnknownColumnError
from wozny.schemas.quality import ChangeLogEntry, Issue, QualityReport, SortConfig, SplitOutcome, SplitType
from wozny.services.column_context import classify_columns
from wozny.services.duplicates import remove_exact_duplicates
from wozny.services.quality import build_quality_report, issues_for_row
from wozny.services.quality_rules import detect_issues, fix_all, fix_row
from wozny.services.sorting import sort_rows
from wozny.services.split_rules import apply_split, get_splittable_type

logger = logging.getLogger(__name__)


def rows_from_dataframe(df: pd.DataFrame) -> List[Dict[str, str]]:
    """String rows with NaN / None / blank cells replaced by the sentinel."""
    missing = get_settings().MISSING_SENTINEL
    rows = []
    for record in df.astype(object).to_dict(orient="records"):
        row = {}
        for col, value in record.items():
            text = "" if value is None or pd.isna(value) else str(value).strip()
            row[str(col)] = text or missing
        rows.append(row)
    return rows


class DataQualityPipeline:
    def __init__(self, df: pd.DataFrame, ignored_columns: Iterable[str] = ()):
        self.settings = get_settings()
        self.columns: List[str] = [str(c) for c in df.columns]
        self.rows: List[Dict[str, str]] = rows_from_dataframe(df)
        for position, row in enumerate(self.rows):
            row[self.settings.INDEX_FIELD] = str(position)

        self.ignored_columns: List[str] = list(ignored_columns)
        self.issues: List[Issue] = []
        self.change_log: List[ChangeLogEntry] = []
        self.summary = {
            "analysis_runs": 0,
            "cells_fixed": 0,
            "duplicates_removed": 0,
            "columns_split": 0,
        }

    # ─────────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────────

    def _require_column(self, column: str) -> None:
        if column not in self.columns:
            raise UnknownColumnError(column, self.columns)

    def _log(
        self,
        action: str,
        reason: str,
        column_name: Optional[str] = None,
        row_index: Optional[int] = None,
        original_value: Optional[Any] = None,
        new_value: Optional[Any] = None,
    ):
        self.change_log.append(ChangeLogEntry(
            row_index=row_index,
            column_name=column_name,
            action=action,
            original_value=str(original_value) if original_value is not None else None,
            new_value=str(new_value) if new_value is not None else None,
            reason=reason,
        ))

    def _record_changes(self, before: List[Dict[str, str]], after: List[Dict[str, str]], action: str, reason: str) -> int:
        changed = 0
        for row_index, (old, new) in enumerate(zip(before, after)):
            for col in self.columns:
                if old.get(col) != new.get(col):
                    self._log(action, reason, col, row_index, old.get(col), new.get(col))
                    changed += 1
        return changed

    # ─────────────────────────────────────────────────────────────────
    # Detection
    # ─────────────────────────────────────────────────────────────────

    def analyze(self) -> List[Issue]:
        self.issues = detect_issues(self.rows, self.columns)
        self.summary["analysis_runs"] += 1
        logger.info("Analysis found %d issues across %d rows", len(self.issues), len(self.rows))
        return self.issues

    def report(self) -> QualityReport:
        return build_quality_report(self.rows, self.columns, self.issues, self.ignored_columns)

    def toggle_ignore_column(self, column: str) -> List[str]:
        self._require_column(column)
        if column in self.ignored_columns:
            self.ignored_columns.remove(column)
        else:
            self.ignored_columns.append(column)
        return self.ignored_columns

    # ─────────────────────────────────────────────────────────────────
    # Fixes
    # ─────────────────────────────────────────────────────────────────

    def auto_format(self) -> int:
        """Fix cells flagged FORMAT by the last analysis, then re-analyze."""
        if not self.issues:
            self.analyze()

        contexts = classify_columns(self.rows, self.columns)
        fixed = [
            fix_row(row, self.columns, issues_for_row(self.issues, idx), contexts)
            for idx, row in enumerate(self.rows)
        ]
        changed = self._record_changes(self.rows, fixed, "auto_format", "Targeted fix of FORMAT issue")
        self.rows = fixed
        self.summary["cells_fixed"] += changed
        self.analyze()
        return changed

    def fix_all(self) -> int:
        fixed = fix_all(self.rows, self.columns)
        changed = self._record_changes(self.rows, fixed, "fix_all", "Bulk normalization")
        self.rows = fixed
        self.summary["cells_fixed"] += changed
        self.analyze()
        return changed

    def remove_duplicates(self) -> int:
        """Drop exact duplicate rows; partial duplicates stay for manual review."""
        kept, removed = remove_exact_duplicates(self.rows, self.columns)
        for row_index in removed:
            self._log(
                action="remove_duplicate",
                reason="Row is an exact duplicate of a previous row",
                row_index=row_index,
            )
        self.rows = kept
        self.summary["duplicates_removed"] += len(removed)
        self.analyze()
        return len(removed)

    # ─────────────────────────────────────────────────────────────────
    # Structure
    # ─────────────────────────────────────────────────────────────────

    def split_column(self, column: str, split_type: Optional[SplitType] = None) -> SplitOutcome:
        self._require_column(column)
        if split_type is None:
            split_type = get_splittable_type([row.get(column) for row in self.rows])

        rows, columns, outcome = apply_split(self.rows, self.columns, column, split_type)
        if columns != self.columns:
            self._log(
                action="split_column",
                reason=f"Split into {split_type.value} components",
                column_name=column,
            )
            self.summary["columns_split"] += 1
        self.rows, self.columns = rows, columns
        self.analyze()
        return outcome

    def sort(self, config: Optional[SortConfig] = None) -> List[Dict[str, str]]:
        if config is not None:
            self._require_column(config.column_id)
        self.rows = sort_rows(self.rows, config)
        self.analyze()
        return self.rows

    def to_dataframe(self, include_index: bool = False) -> pd.DataFrame:
        columns = list(self.columns)
        if include_index:
            columns.append(self.settings.INDEX_FIELD)
        return pd.DataFrame(self.rows, columns=columns)
