# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for the logbook: list, create, summary."""
from typing import Any, Dict, List, Optional

from app.core.deadline import Deadline
from app.core.logging import get_logger
from app.metrics import EVENTS_CREATED, EVENTS_LISTED
from app.repositories.event_repository import EventRepository
from app.schemas import EventInput
from app.services.normalizer import normalize_event_input

logger = get_logger(__name__)


class EventService:
    def __init__(self, repo: EventRepository, deadline: Optional[Deadline] = None):
        self._repo = repo
        self._deadline = deadline

    def list_events(self, status: str = "", category: str = "") -> List[Dict[str, Any]]:
        events = self._repo.list_events(status.strip(), category.strip(), deadline=self._deadline)
        EVENTS_LISTED.observe(len(events))
        return events

    def create_event(self, payload: EventInput) -> Dict[str, Any]:
        normalized, occurred_at = normalize_event_input(payload)
        event = self._repo.insert_event(
            occurred_at=occurred_at,
            title=normalized.title,
            category=normalized.category,
            severity=normalized.severity,
            owner=normalized.owner,
            status=normalized.status,
            notes=normalized.notes,
            deadline=self._deadline,
        )
        EVENTS_CREATED.labels(severity=event["severity"]).inc()
        logger.info("Event created id=%s category=%s severity=%s status=%s",
                    event["id"], event["category"], event["severity"], event["status"])
        return event

    def summarize(self, status: str = "", category: str = "") -> Dict[str, Any]:
        status, category = status.strip(), category.strip()
        summary = self._repo.get_summary(status, category, deadline=self._deadline)
        summary["applied_status"] = status
        summary["applied_category"] = category

        top_category = summary.pop("top_category")
        if top_category:
            summary["top_category"], summary["top_category_count"] = top_category

        top_owner = summary.pop("top_owner")
        if top_owner:
            summary["top_owner"], summary["top_owner_count"] = top_owner
        return summary
