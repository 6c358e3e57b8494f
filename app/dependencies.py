from functools import lru_cache

from fastapi import Depends

from adapters.db.base import DBHandle
from adapters.metrics.base import Metrics
from adapters.metrics.prometheus import PrometheusMetrics
from app.services.handle_factory import create_handle
from app.settings import get_settings
from dbstudio.action_gateway import ActionGateway
from dbstudio.raw_gateway import RawGateway


@lru_cache()
def get_db_handle() -> DBHandle:
    """
    Process-wide database handle, opened on first use.

    Uses centralized Settings so configuration is loaded once and injected.
    """
    return create_handle(get_settings())


@lru_cache()
def get_metrics() -> Metrics:
    return PrometheusMetrics()


def get_raw_gateway(db: DBHandle = Depends(get_db_handle)) -> RawGateway:
    return RawGateway(db, metrics=get_metrics())


def get_action_gateway(db: DBHandle = Depends(get_db_handle)) -> ActionGateway:
    return ActionGateway(db, metrics=get_metrics())


def close_db_handle() -> None:
    """Close the cached handle if one was ever opened."""
    if get_db_handle.cache_info().currsize:
        get_db_handle().close()
        get_db_handle.cache_clear()
