import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from adapters.db.base import DBHandle
from app.dependencies import close_db_handle, get_db_handle
from app.errors import NotReadyError
from app.exception_handlers import register_exception_handlers
from app.routers import actions, raw
from app.settings import get_settings
from dbstudio.errors.exceptions import StudioError
from dbstudio.prom import REGISTRY

log = logging.getLogger(__name__)

settings = get_settings()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    close_db_handle()


# ----------------------------------------------------------------------------
#  App definition
# ----------------------------------------------------------------------------
app = FastAPI(
    title="DB Studio",
    version=settings.app_version,
    description="Run SQL and inspect the schema of one SQLite, PostgreSQL or MySQL database",
    lifespan=lifespan,
)
register_exception_handlers(app)

app.include_router(raw.router)
app.include_router(actions.router)


# ----------------------------------------------------------------------------
#  Prometheus Metrics Middleware
# ----------------------------------------------------------------------------
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["path", "method", "status_code"],
    registry=REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Request latency (seconds)",
    ["path", "method"],
    registry=REGISTRY,
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - start
    route = request.scope.get("route")
    path = getattr(route, "path", None) or "unmatched"
    name = getattr(route, "name", None) or path

    REQUEST_COUNT.labels(
        path=name,
        method=request.method,
        status_code=str(getattr(response, "status_code", 500)),
    ).inc()
    REQUEST_LATENCY.labels(path=name, method=request.method).observe(elapsed)
    return response


# ----------------------------------------------------------------------------
#  Cross-origin middleware (registered last → runs first)
# ----------------------------------------------------------------------------
@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    response: Response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# ----------------------------------------------------------------------------
#  System Endpoints
# ----------------------------------------------------------------------------
@app.get("/healthz", response_class=PlainTextResponse, tags=["system"])
def healthz() -> str:
    return "ok"


@app.get("/readyz", response_class=PlainTextResponse, tags=["system"])
def readyz(db: DBHandle = Depends(get_db_handle)) -> str:
    """Readiness check: round-trip a trivial statement through the handle."""
    try:
        db.ping()
    except StudioError as exc:
        log.warning("Readiness check failed: %s", exc)
        raise NotReadyError("not ready", details=[exc.message])
    return "ready"


@app.get("/metrics", tags=["system"])
def metrics():
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
