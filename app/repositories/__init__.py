# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package: re-exports EventRepository."""
from app.repositories.event_repository import EventRepository

__all__ = ["EventRepository"]
