from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dbstudio.errors.codes import ErrorCode


@dataclass
class StudioError(Exception):
    """Base class for failures raised by the gateways and handles."""

    message: str
    code: ErrorCode = ErrorCode.BACKEND_FAILURE
    details: Optional[List[str]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


@dataclass
class InvalidRequest(StudioError):
    code: ErrorCode = ErrorCode.INVALID_REQUEST


@dataclass
class MethodNotAllowed(StudioError):
    message: str = "Method not allowed"
    code: ErrorCode = ErrorCode.METHOD_NOT_ALLOWED


@dataclass
class MalformedRow(StudioError):
    code: ErrorCode = ErrorCode.MALFORMED_ROW


@dataclass
class BackendExecutionFailure(StudioError):
    """Driver error passed through with its original message."""

    code: ErrorCode = ErrorCode.BACKEND_FAILURE
