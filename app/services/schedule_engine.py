"""Opening hours resolution: open/closed status and next opening lookahead."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from app.utils.enums import DayOfWeek, ScheduleType
from app.utils.time import to_local

logger = logging.getLogger(__name__)

LOOKAHEAD_DAYS: int = 7

STATUS_NOT_CONFIGURED = "hours not configured"
STATUS_CLOSED_TODAY = "closed today"
STATUS_CLOSED = "closed"
STATUS_OPEN_24H = "open 24 hours"
STATUS_HOURS_UNDEFINED = "hours not defined"
STATUS_ERROR = "error checking opening hours"


@dataclass
class OpenStatus:
    is_open: bool
    current_status: str
    next_open_time: str | None = None
    today_entry: Any | None = None

    def to_dict(self) -> dict:
        entry = self.today_entry
        return {
            "is_open": self.is_open,
            "current_status": self.current_status,
            "next_open_time": self.next_open_time,
            "today_entry_id": getattr(entry, "id", None),
            "closes_at": getattr(entry, "close_time", None),
        }


def _is_regular(entry: Any) -> bool:
    return entry.schedule_type == ScheduleType.REGULAR


def _valid_on(entry: Any, day: date) -> bool:
    if entry.valid_from is not None and entry.valid_from > day:
        return False
    if entry.valid_until is not None and entry.valid_until < day:
        return False
    return True


def date_override(hours: Iterable[Any], day: date) -> Any | None:
    """Highest-priority non-regular entry pinned to ``day``."""
    candidates = [entry for entry in hours if entry.specific_date == day and not _is_regular(entry)]
    if not candidates:
        return None
    return sorted(candidates, key=lambda entry: entry.priority or 0, reverse=True)[0]


def regular_entry(hours: Iterable[Any], day: date) -> Any | None:
    """First regular entry for the weekday of ``day`` whose validity window contains it."""
    weekday = DayOfWeek.from_date(day)
    for entry in hours:
        if _is_regular(entry) and entry.day_of_week == weekday and _valid_on(entry, day):
            return entry
    return None


def entry_for_day(hours: Iterable[Any], day: date) -> Any | None:
    """Date-specific overrides always beat the weekly regular entry."""
    hours = list(hours)
    return date_override(hours, day) or regular_entry(hours, day)


def _closed_message(config: Any, entry: Any) -> str:
    if entry.schedule_type == ScheduleType.HOLIDAY:
        return config.holiday_message or "closed - holiday"
    if entry.schedule_type == ScheduleType.VACATION:
        return "closed - vacation"
    if entry.schedule_type == ScheduleType.TEMPORARY_CLOSURE:
        return "temporarily closed"
    return config.closed_message or STATUS_CLOSED


def get_next_open_time(config: Any | None, hours: Iterable[Any], now: datetime) -> str | None:
    """Scan the next seven days, starting tomorrow, for the first opening."""
    try:
        if config is None:
            return None
        hours = list(hours)
        today = to_local(now, config.timezone).date()
        for offset in range(1, LOOKAHEAD_DAYS + 1):
            day = today + timedelta(days=offset)
            entry = entry_for_day(hours, day)
            if entry is None or entry.is_closed:
                continue
            opens_at = "00:00" if entry.is_24_hours else entry.open_time
            if opens_at:
                return f"{DayOfWeek.from_date(day).display_name} at {opens_at}"
        return None
    except Exception:
        logger.exception("[SCHEDULE] Failed to compute next opening time")
        return None


def is_open_now(config: Any | None, hours: Iterable[Any], now: datetime) -> OpenStatus:
    """Resolve whether the company is open at ``now``.

    ``now`` is converted to the schedule's timezone before the weekday and
    HH:MM are derived. Bad data yields a closed status, never an exception.
    """
    try:
        if config is None or not config.is_enabled:
            return OpenStatus(is_open=False, current_status=STATUS_NOT_CONFIGURED)

        hours = list(hours)
        local_now = to_local(now, config.timezone)
        today = local_now.date()
        current_time = local_now.strftime("%H:%M")

        entry = entry_for_day(hours, today)
        if entry is None:
            return OpenStatus(is_open=False, current_status=STATUS_CLOSED_TODAY)

        if entry.is_closed:
            return OpenStatus(is_open=False, current_status=_closed_message(config, entry), today_entry=entry)

        if entry.is_24_hours:
            return OpenStatus(is_open=True, current_status=STATUS_OPEN_24H, today_entry=entry)

        open_time, close_time = entry.open_time, entry.close_time
        if not open_time or not close_time:
            return OpenStatus(is_open=False, current_status=STATUS_HOURS_UNDEFINED, today_entry=entry)

        is_after_open = current_time >= open_time
        is_before_close = current_time < close_time
        is_in_break = False
        if entry.break_start_time and entry.break_end_time:
            is_in_break = entry.break_start_time <= current_time < entry.break_end_time

        if is_after_open and is_before_close and not is_in_break:
            return OpenStatus(is_open=True, current_status=f"open until {close_time}", today_entry=entry)
        if is_in_break:
            return OpenStatus(
                is_open=False,
                current_status=f"closed for lunch - reopens at {entry.break_end_time}",
                today_entry=entry,
            )
        if not is_after_open:
            return OpenStatus(
                is_open=False,
                current_status=f"closed - opens at {open_time}",
                next_open_time=open_time,
                today_entry=entry,
            )
        return OpenStatus(
            is_open=False,
            current_status=STATUS_CLOSED,
            next_open_time=get_next_open_time(config, hours, now),
            today_entry=entry,
        )
    except Exception:
        logger.exception("[SCHEDULE] Failed to resolve opening status")
        return OpenStatus(is_open=False, current_status=STATUS_ERROR)
