"""
Response Schema Definitions

Contains the error body the server returns with a non-success status.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..codes import SUCCESS_RANGE_START
from .base import Schema, get_int, get_list


@dataclass
class ErrorResponse(Schema):
    """
    Error body returned by the server.

    Attributes:
        code: Response code from the server failure range
        details: Human readable details
    """

    code: int
    details: List[str] = field(default_factory=list)

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ErrorResponse":
        """Create from data dictionary."""
        code = get_int(data, "code")
        if code < 0:
            raise ValueError("response code must be unsigned")
        if code >= SUCCESS_RANGE_START:
            raise ValueError(f"error body carries a success code: {code}")
        details = get_list(data, "details")
        if not all(isinstance(detail, str) for detail in details):
            raise TypeError("error details must be strings")
        return cls(code=code, details=details)
