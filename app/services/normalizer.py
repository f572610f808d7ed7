# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Create-payload normalisation: trimming, required fields, occurred_at parsing."""
import re
from datetime import datetime, timedelta, timezone
from typing import Tuple

from app.core.errors import InvalidTimestampError, MissingFieldsError
from app.schemas import EventInput, REQUIRED_FIELDS, TEXT_FIELDS

# RFC 3339 date-time: full date, 'T', full time with seconds, optional
# fraction (up to nanoseconds), mandatory 'Z' or numeric offset.
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?"
    r"(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_rfc3339(value: str) -> datetime:
    """Parse ``value`` into an aware datetime, keeping its offset as given.

    Raises ValueError on anything that is not a strict RFC 3339 timestamp.
    Fractions finer than a microsecond are truncated.
    """
    m = _RFC3339.fullmatch(value)
    if not m:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    year, month, day, hour, minute, second = (int(g) for g in m.groups()[:6])
    micros = int((m.group(7) or "0").ljust(6, "0")[:6])

    offset = m.group(8)
    if offset == "Z":
        tz = timezone.utc
    else:
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"offset out of range: {offset}")
        delta = timedelta(hours=hours, minutes=minutes)
        tz = timezone(-delta if offset[0] == "-" else delta)

    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


def normalize_event_input(payload: EventInput) -> Tuple[EventInput, datetime]:
    """Trim every text field, check required ones, resolve occurred_at.

    An empty occurred_at resolves to the current UTC instant. The input model
    is left untouched; a trimmed copy is returned.
    """
    trimmed = payload.model_copy(
        update={name: getattr(payload, name).strip() for name in TEXT_FIELDS}
    )

    missing = [name for name in REQUIRED_FIELDS if not getattr(trimmed, name)]
    if missing:
        raise MissingFieldsError()

    if not payload.occurred_at:
        return trimmed, datetime.now(timezone.utc)
    try:
        occurred_at = parse_rfc3339(payload.occurred_at)
    except ValueError as exc:
        raise InvalidTimestampError() from exc
    return trimmed, occurred_at
