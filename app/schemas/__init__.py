# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

TEXT_FIELDS = ("title", "category", "severity", "owner", "status", "notes")
REQUIRED_FIELDS = ("title", "category", "severity", "owner", "status")


class EventInput(BaseModel):
    """Create payload. Absent or null text fields decode as ''."""
    model_config = ConfigDict(strict=True)

    occurred_at: str = ""
    title: str = ""
    category: str = ""
    severity: str = ""
    owner: str = ""
    status: str = ""
    notes: str = ""

    @field_validator("occurred_at", *TEXT_FIELDS, mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class EventOut(BaseModel):
    id: int
    occurred_at: str
    title: str
    category: str
    severity: str
    owner: str
    status: str
    notes: str
    created_at: str


class SummaryOut(BaseModel):
    total_count: int = 0
    open_count: int = 0
    monitoring_count: int = 0
    resolved_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    top_category: Optional[str] = None
    top_category_count: int = 0
    top_owner: Optional[str] = None
    top_owner_count: int = 0
    latest_occurred: Optional[str] = None
    applied_status: str = ""
    applied_category: str = ""


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
