from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class ColumnContext(str, Enum):
    CITY = "CITY"
    STATE = "STATE"
    GENERAL = "GENERAL"


class IssueType(str, Enum):
    MISSING = "MISSING"
    FORMAT = "FORMAT"
    DUPLICATE = "DUPLICATE"
    VALIDITY = "VALIDITY"


class SplitType(str, Enum):
    ADDRESS = "ADDRESS"
    NAME = "NAME"
    NONE = "NONE"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Issue(BaseModel):
    row_id: int = Field(alias="rowId")
    column: str
    issue_type: IssueType = Field(alias="issueType")
    suggestion: str

    model_config = {"populate_by_name": True, "frozen": True}


class AddressComponents(BaseModel):
    Street: str
    City: str
    State: str
    Zip: str


class NameComponents(BaseModel):
    First: str
    Middle: str = ""
    Last: str


class SortConfig(BaseModel):
    column_id: str = Field(alias="columnId")
    direction: SortDirection = SortDirection.ASC

    model_config = {"populate_by_name": True}


class SplitOutcome(BaseModel):
    success_count: int
    fail_count: int
    results: list[Optional[Union[AddressComponents, NameComponents]]]


class ChangeLogEntry(BaseModel):
    row_index: Optional[int]
    column_name: Optional[str]
    action: str
    original_value: Optional[str]
    new_value: Optional[str]
    reason: str


class QualityReport(BaseModel):
    row_count: int
    column_count: int
    total_issues: int
    missing_count: int
    format_count: int
    validity_count: int
    duplicate_count: int
    missing_columns: list[str]
    format_columns: list[str]
    health_ratio: float
    health_grade: str
