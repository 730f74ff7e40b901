"""Clock and timezone helpers for schedule resolution."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current aware UTC timestamp.

    Routers read wall-clock time only through this function and hand the value
    to the resolution engines, so tests can freeze it with monkeypatch.
    """
    return datetime.now(timezone.utc)


def is_known_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def resolve_timezone(name: str | None) -> ZoneInfo | timezone:
    """Return the zone for ``name`` with settings default and UTC fallbacks."""
    for candidate in (name, settings.default_timezone):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("[SCHEDULE] Unknown timezone %r; trying fallback.", candidate)
    return timezone.utc


def to_local(now: datetime, tz_name: str | None) -> datetime:
    """Convert aware ``now`` to the schedule timezone; naive values are already local."""
    if now.tzinfo is None:
        return now
    return now.astimezone(resolve_timezone(tz_name))
