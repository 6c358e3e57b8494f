from __future__ import annotations

from adapters.metrics.base import Gateway, Metrics


class NoOpMetrics(Metrics):
    def observe_statement_duration_ms(
        self, *, gateway: Gateway, operation: str, dt_ms: float
    ) -> None:
        return

    def inc_statement(self, *, gateway: Gateway, operation: str, ok: bool) -> None:
        return

    def inc_gateway_error(self, *, gateway: Gateway, error_code: str) -> None:
        return
