# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Database engine factory: the single place the connection pool is built.

The pool is hard-capped at ``DB_POOL_SIZE`` connections (no overflow), opens
nothing up front, recycles connections older than ``DB_POOL_RECYCLE`` and
drops ones that sat idle longer than ``DB_POOL_MAX_IDLE``. Every checkout is
pinged first.
"""
import time
from typing import Any, Dict

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, DisconnectionError

from app.core.config import settings
from app.core.errors import ConfigurationError
from app.core.logging import get_logger

logger = get_logger(__name__)

_LAST_CHECKIN = "last_checkin"


def _connect_args(backend: str, timeout: float) -> Dict[str, Any]:
    if backend != "postgresql":
        return {}
    millis = int(timeout * 1000)
    return {
        "connect_timeout": max(1, int(timeout)),
        "options": f"-c statement_timeout={millis}",
    }


def _install_idle_timeout(engine: Engine, max_idle: int) -> None:
    @event.listens_for(engine, "checkin")
    def _on_checkin(dbapi_conn, record):
        record.info[_LAST_CHECKIN] = time.monotonic()

    @event.listens_for(engine, "checkout")
    def _on_checkout(dbapi_conn, record, proxy):
        last = record.info.get(_LAST_CHECKIN)
        if last is not None and time.monotonic() - last > max_idle:
            record.info.pop(_LAST_CHECKIN, None)
            # the pool invalidates the record and retries with a fresh connection
            raise DisconnectionError("connection exceeded max idle time")


def build_engine(database_url: str) -> Engine:
    """Build the pooled engine for ``database_url`` or raise ConfigurationError."""
    if not database_url:
        raise ConfigurationError("DATABASE_URL not set")
    try:
        url = make_url(database_url)
    except ArgumentError as exc:
        raise ConfigurationError("DATABASE_URL is not a valid connection string") from exc

    backend = url.get_backend_name()
    timeout = settings.REQUEST_TIMEOUT_SECONDS
    try:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=0,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_timeout=timeout,
            connect_args=_connect_args(backend, timeout),
        )
    except (ArgumentError, ImportError) as exc:
        raise ConfigurationError("DATABASE_URL is not a valid connection string") from exc

    _install_idle_timeout(engine, settings.DB_POOL_MAX_IDLE)
    logger.info("Engine built backend=%s pool_size=%d", backend, settings.DB_POOL_SIZE)
    return engine
