# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for logbook events."""
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError, TimeoutError as PoolTimeoutError

from app.core.deadline import Deadline
from app.core.errors import (
    ConfigurationError, ConnectivityError, DeadlineExceededError, StorageError,
)
from app.core.logging import get_logger

logger = get_logger(__name__)

EVENT_COLS = "id, occurred_at, title, category, severity, owner, status, notes, created_at"

# ($n = '' OR col = $n): an empty filter matches every row
FILTER_WHERE = "(:status = '' OR status = :status) AND (:category = '' OR category = :category)"

_SUMMARY_ERROR = "failed to load summary"

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": int(row[0]),
        "occurred_at": row[1].isoformat(),
        "title": row[2],
        "category": row[3],
        "severity": row[4],
        "owner": row[5],
        "status": row[6],
        "notes": row[7] or "",
        "created_at": row[8].isoformat(),
    }


def _is_connectivity_failure(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    # DBAPI errors raised while opening a connection carry no statement
    return isinstance(exc, DBAPIError) and (exc.statement is None or exc.connection_invalidated)


@contextmanager
def _storage_errors(message: str):
    try:
        yield
    except SQLAlchemyError as exc:
        if _is_connectivity_failure(exc):
            logger.error("Storage unreachable: %s", exc.__class__.__name__, exc_info=exc)
            raise ConnectivityError() from exc
        logger.error("%s: %s", message, exc.__class__.__name__, exc_info=exc)
        raise StorageError(message) from exc


class EventRepository:
    """SQL against the events table.

    Every public method takes an optional request ``Deadline``. Statements
    are refused once it has passed, and on PostgreSQL each statement runs
    under ``SET LOCAL statement_timeout`` set to the time still remaining.
    """

    def __init__(self, engine: Engine, table: str = "events", list_limit: int = 200):
        if not _TABLE_NAME.match(table):
            raise ConfigurationError(f"invalid events table name: {table!r}")
        self._engine = engine
        self._table = table
        self._list_limit = list_limit

    # ── Write ──────────────────────────────────────────────────────────

    def insert_event(self, occurred_at: datetime, title: str, category: str,
                     severity: str, owner: str, status: str, notes: str,
                     deadline: Optional[Deadline] = None) -> Dict[str, Any]:
        """Insert one row and return it exactly as storage committed it."""
        with _storage_errors("failed to create event"):
            with self._engine.begin() as conn:
                row = self._execute(
                    conn, deadline,
                    f"""
                        INSERT INTO {self._table}
                            (occurred_at, title, category, severity, owner, status, notes)
                        VALUES
                            (:occurred_at, :title, :category, :severity, :owner, :status, :notes)
                        RETURNING {EVENT_COLS}
                    """,
                    {"occurred_at": occurred_at, "title": title, "category": category,
                     "severity": severity, "owner": owner, "status": status, "notes": notes},
                ).fetchone()
        if row is None:
            raise StorageError("failed to create event")
        try:
            return _row_to_dict(row)
        except (AttributeError, IndexError, TypeError, ValueError) as exc:
            raise StorageError("failed to create event") from exc

    # ── Read ───────────────────────────────────────────────────────────

    def list_events(self, status: str = "", category: str = "",
                    deadline: Optional[Deadline] = None) -> List[Dict[str, Any]]:
        with _storage_errors("failed to load events"):
            with self._engine.connect() as conn:
                rows = self._execute(
                    conn, deadline,
                    f"""
                        SELECT {EVENT_COLS} FROM {self._table}
                        WHERE {FILTER_WHERE}
                        ORDER BY occurred_at DESC
                        LIMIT :limit
                    """,
                    {"status": status, "category": category, "limit": self._list_limit},
                ).fetchall()
        try:
            return [_row_to_dict(r) for r in rows]
        except (AttributeError, IndexError, TypeError, ValueError) as exc:
            logger.error("Undecodable event row: %s", exc)
            raise StorageError("failed to parse events") from exc

    def get_summary(self, status: str = "", category: str = "",
                    deadline: Optional[Deadline] = None) -> Dict[str, Any]:
        """Counts, latest occurrence, top category and top owner in one connection.

        ``top_category``/``top_owner`` are None when no rows match.
        """
        params = {"status": status, "category": category}
        with _storage_errors(_SUMMARY_ERROR):
            with self._engine.connect() as conn:
                row = self._execute(
                    conn, deadline,
                    f"""
                        SELECT
                            COUNT(*)                                         AS total_count,
                            COUNT(*) FILTER (WHERE status = 'Open')          AS open_count,
                            COUNT(*) FILTER (WHERE status = 'Monitoring')    AS monitoring_count,
                            COUNT(*) FILTER (WHERE status = 'Resolved')      AS resolved_count,
                            COUNT(*) FILTER (WHERE severity = 'High')        AS high_count,
                            COUNT(*) FILTER (WHERE severity = 'Medium')      AS medium_count,
                            COUNT(*) FILTER (WHERE severity = 'Low')         AS low_count,
                            MAX(occurred_at)                                 AS latest_occurred
                        FROM {self._table}
                        WHERE {FILTER_WHERE}
                    """,
                    params,
                ).fetchone()
                if row is None:
                    raise StorageError(_SUMMARY_ERROR)
                top_category = self._top_by(conn, deadline, "category", params)
                top_owner = self._top_by(conn, deadline, "owner", params)
        return {
            "total_count": row[0] or 0,
            "open_count": row[1] or 0,
            "monitoring_count": row[2] or 0,
            "resolved_count": row[3] or 0,
            "high_count": row[4] or 0,
            "medium_count": row[5] or 0,
            "low_count": row[6] or 0,
            "latest_occurred": _iso(row[7]),
            "top_category": top_category,
            "top_owner": top_owner,
        }

    def verify_connection(self):
        with _storage_errors("storage check failed"):
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))

    def dispose(self):
        self._engine.dispose()

    # ── Private ────────────────────────────────────────────────────────

    def _execute(self, conn, deadline: Optional[Deadline], sql: str, params: Dict[str, Any]):
        if deadline is not None:
            remaining = deadline.remaining()
            if remaining <= 0:
                raise DeadlineExceededError()
            if self._engine.dialect.name == "postgresql":
                # SET takes no bind parameters; the value is a computed int
                millis = max(1, int(remaining * 1000))
                conn.execute(text(f"SET LOCAL statement_timeout = {millis}"))
        return conn.execute(text(sql), params)

    def _top_by(self, conn, deadline: Optional[Deadline], column: str,
                params: Dict[str, Any]) -> Optional[Tuple[str, int]]:
        """Most frequent value of ``column``; ties go to the smallest value."""
        row = self._execute(
            conn, deadline,
            f"""
                SELECT {column}, COUNT(*) AS total
                FROM {self._table}
                WHERE {FILTER_WHERE}
                GROUP BY {column}
                ORDER BY total DESC, {column} ASC
                LIMIT 1
            """,
            params,
        ).fetchone()
        if row is None:
            return None
        return row[0], int(row[1])
