# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Ops Logbook Service
===================
Operational incident logbook backed by a single events table.

    GET  /events                 newest-first events, filterable by status/category
    GET  /events?view=summary    aggregate counts and top category/owner
    POST /events                 log one event

Storage is connected at startup; the process refuses to start when
DATABASE_URL is missing or the database is unreachable.

Port: 8080
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.controllers import event_controller, system_controller
from app.core.config import settings
from app.core.database import build_engine
from app.core.errors import BadRequestError, LogbookError
from app.core.logging import get_logger
from app.metrics import STORAGE_ERRORS
from app.middleware import AllowedMethodsMiddleware, MetricsMiddleware, RequestIDMiddleware
from app.repositories.event_repository import EventRepository

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    try:
        engine = build_engine(settings.DATABASE_URL)
        repo = EventRepository(engine, settings.EVENTS_TABLE, settings.LIST_LIMIT)
    except LogbookError as exc:
        logger.critical("Storage misconfigured: %s", exc.message)
        raise
    try:
        repo.verify_connection()
    except LogbookError:
        logger.critical("Storage unreachable at startup")
        repo.dispose()
        raise

    application.state.event_repo = repo
    logger.info("Storage connected table=%s", settings.EVENTS_TABLE)
    yield
    application.state.event_repo = None
    repo.dispose()
    logger.info("Shutting down: connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Ops Logbook Service",
    description="Logs operational events and summarises them.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(AllowedMethodsMiddleware, allowed={"/events": event_controller.ALLOWED_METHODS})
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


def _error_body(exc: LogbookError) -> dict:
    return {"error": exc.code, "detail": exc.message}


@app.exception_handler(LogbookError)
async def logbook_error_handler(request: Request, exc: LogbookError):
    if exc.status_code >= 500:
        STORAGE_ERRORS.labels(kind=exc.code).inc()
        logger.error(
            "Request failed error=%s method=%s path=%s",
            exc.code, request.method, request.url.path,
            extra={"request_id": getattr(request.state, "request_id", "-")},
        )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=_error_body(BadRequestError()))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": None})


app.include_router(system_controller.router)
app.include_router(event_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
