"""
Due window.

The single definition of "due today" used by every count, list and study
queue: a card is due when its due date falls before the start of the next
local calendar day. Overdue cards and anything due later today are
included; tomorrow is excluded.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from flashcore.cards import Card
from flashcore.fsrs.memory_state import ensure_datetime


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _is_local(now: datetime) -> bool:
    """True when now carries the fixed local offset ``astimezone()`` attaches."""
    local = now.astimezone()
    return (
        type(now.tzinfo) is timezone
        and now.utcoffset() == local.utcoffset()
        and now.tzname() == local.tzname()
    )


def _midnight(day: date, now: datetime) -> datetime:
    """
    Midnight starting day, in now's timezone.

    Local times get the offset in force at that midnight, which differs from
    now's offset on a daylight-saving change day.
    """
    if _is_local(now):
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def start_of_day(now: datetime) -> datetime:
    """
    Midnight at the start of now's calendar day, in now's timezone.

    Naive datetimes are treated as local time.
    """
    now = ensure_datetime(now, "now")
    return _midnight(now.date(), now)


def end_of_day(now: datetime) -> datetime:
    """Start of the next calendar day (exclusive due-window bound)."""
    now = ensure_datetime(now, "now")
    return _midnight(now.date() + timedelta(days=1), now)


def local_date(now: datetime) -> str:
    """Calendar date of now as YYYY-MM-DD."""
    return start_of_day(now).date().isoformat()


def card_due_date(card: Card) -> datetime:
    """Due date of a card; a missing due date counts as the epoch."""
    if card.due_date is None:
        return EPOCH
    return ensure_datetime(card.due_date, "due_date")


def is_due_today(card: Card, now: datetime) -> bool:
    """
    True when the card is due before the end of today.
    """
    return card_due_date(card) < end_of_day(now)


def is_overdue(card: Card, now: datetime) -> bool:
    """True when the card was due before today started."""
    return card_due_date(card) < start_of_day(now)
