from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, List


@dataclass
class AppError(Exception):
    """Base class for application-level errors (configuration, readiness)."""

    message: str
    http_status: int = 500
    code: str = "internal_error"
    retryable: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)
    details: Optional[List[str]] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class HandleConfigError(AppError):
    http_status: int = 500
    code: str = "handle_config_error"


@dataclass
class NotReadyError(AppError):
    http_status: int = 503
    code: str = "not_ready"
    retryable: bool = True
