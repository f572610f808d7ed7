# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection wiring.

The repository is built by the application lifespan and kept on
``app.state``; handlers receive it through these functions, so tests can
swap it with ``app.dependency_overrides``.
"""
from fastapi import Depends, Request

from app.core.config import settings
from app.core.deadline import Deadline
from app.core.errors import ConfigurationError
from app.repositories.event_repository import EventRepository
from app.services.event_service import EventService


def get_event_repo(request: Request) -> EventRepository:
    repo = getattr(request.app.state, "event_repo", None)
    if repo is None:
        raise ConfigurationError("storage is not initialised")
    return repo


def get_event_service(repo: EventRepository = Depends(get_event_repo)) -> EventService:
    # the clock starts once per request, before any statement is issued
    return EventService(repo, Deadline(settings.REQUEST_TIMEOUT_SECONDS))
