# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: the /events resource (list, summary, create)."""
from fastapi import APIRouter, Depends

from app.core.dependencies import get_event_service
from app.schemas import EventInput, EventOut, SummaryOut
from app.services.event_service import EventService

router = APIRouter(tags=["Events"])

ALLOWED_METHODS = ("GET", "POST")


@router.get("/events", response_model=None)
def list_events(
    view: str = "",
    status: str = "",
    category: str = "",
    service: EventService = Depends(get_event_service),
):
    """Newest-first events, or the aggregate summary when ``view=summary``."""
    if view == "summary":
        summary = SummaryOut(**service.summarize(status, category))
        # absent top entries and latest_occurred are left out, not nulled
        return summary.model_dump(exclude_none=True)
    return [EventOut(**e).model_dump() for e in service.list_events(status, category)]


@router.post("/events", status_code=201, response_model=EventOut)
def create_event(body: EventInput, service: EventService = Depends(get_event_service)):
    return EventOut(**service.create_event(body))
