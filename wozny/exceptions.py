"""
Exception types raised by the DataFrame pipeline.

The rule functions themselves never raise on data: unparseable values come
back unchanged or as the missing sentinel. These exceptions cover caller
mistakes such as naming a column the dataset does not have.
"""

from typing import Any, Dict, Optional


class WoznyError(Exception):
    """Base exception with a structured details dictionary."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class UnknownColumnError(WoznyError, KeyError):
    """A column name passed by the caller is not part of the dataset."""

    def __init__(self, column: str, available: Optional[list] = None):
        super().__init__(
            f"Column '{column}' not found in dataset",
            details={"column": column, "available": list(available or [])},
        )
        self.column = column

    def __str__(self) -> str:
        return self.message
