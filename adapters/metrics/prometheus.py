from __future__ import annotations

from prometheus_client import Counter, Histogram
from dbstudio.prom import REGISTRY

from adapters.metrics.base import Gateway, Metrics
from dbstudio.errors.codes import ErrorCode

# -----------------------------------------------------------------------------
# Statement-level metrics
# -----------------------------------------------------------------------------
statement_duration_ms = Histogram(
    "statement_duration_ms",
    "Duration (ms) of statements executed through a gateway",
    ["gateway", "operation"],
    buckets=(1, 2, 5, 10, 20, 50, 100, 200, 500, 1000, 2000, 5000, 10000, 30000),
    registry=REGISTRY,
)

statement_calls_total = Counter(
    "statement_calls_total",
    "Count of gateway statements labeled by gateway, operation and ok",
    ["gateway", "operation", "ok"],
    registry=REGISTRY,
)

gateway_errors_total = Counter(
    "gateway_errors_total",
    "Count of gateway failures labeled by gateway and error_code",
    ["gateway", "error_code"],
    registry=REGISTRY,
)


class PrometheusMetrics(Metrics):
    def observe_statement_duration_ms(
        self, *, gateway: Gateway, operation: str, dt_ms: float
    ) -> None:
        statement_duration_ms.labels(gateway=gateway, operation=operation).observe(
            float(dt_ms)
        )

    def inc_statement(self, *, gateway: Gateway, operation: str, ok: bool) -> None:
        statement_calls_total.labels(
            gateway=gateway, operation=operation, ok=("true" if ok else "false")
        ).inc()

    def inc_gateway_error(self, *, gateway: Gateway, error_code: str) -> None:
        gateway_errors_total.labels(gateway=gateway, error_code=str(error_code)).inc()


# -----------------------------------------------------------------------------
# Label priming to keep /metrics stable
# -----------------------------------------------------------------------------
for gateway, operations in (
    ("raw", ("read", "write")),
    ("actions", ("getTables", "getTableInfo")),
):
    for operation in operations:
        for ok in ("true", "false"):
            statement_calls_total.labels(
                gateway=gateway, operation=operation, ok=ok
            ).inc(0)
    for code in ErrorCode:
        gateway_errors_total.labels(gateway=gateway, error_code=code.value).inc(0)
