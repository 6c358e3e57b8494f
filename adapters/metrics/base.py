from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal

Gateway = Literal["raw", "actions"]


class Metrics(ABC):
    @abstractmethod
    def observe_statement_duration_ms(
        self, *, gateway: Gateway, operation: str, dt_ms: float
    ) -> None: ...

    @abstractmethod
    def inc_statement(self, *, gateway: Gateway, operation: str, ok: bool) -> None: ...

    @abstractmethod
    def inc_gateway_error(self, *, gateway: Gateway, error_code: str) -> None: ...
