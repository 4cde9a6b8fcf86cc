"""
Week status lifecycle.

A week is "future" until its start date, "current" from start to end date
(both inclusive, i.e. [start 00:00:00, end 23:59:59]) and "past" afterwards.
The status column is only a cache of week_status(); refresh_all_statuses()
brings it up to date and must run before anything reads it.
"""
from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.week import STATUS_CURRENT, STATUS_FUTURE, STATUS_PAST, Week

log = logging.getLogger(__name__)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_status(start: date, end: date, today: date | datetime) -> str:
    today = _as_date(today)
    if start <= today <= end:
        return STATUS_CURRENT
    if today > end:
        return STATUS_PAST
    return STATUS_FUTURE


def refresh_all_statuses(db: Session, today: date | datetime) -> int:
    """Recomputes every week's status and writes only the ones that changed."""
    weeks = db.execute(select(Week).order_by(Week.start_date)).scalars().all()

    changed = 0
    for week in weeks:
        status = week_status(week.start_date, week.end_date, today)
        if week.status != status:
            log.info("week %s (%s): %s -> %s", week.id, week.name, week.status, status)
            week.status = status
            changed += 1

    if changed:
        db.commit()
    return changed


def get_current_week(db: Session, today: date | datetime) -> Week | None:
    """
    The week containing today. Between weeks, the nearest upcoming one,
    so schedule views never start on an empty screen.
    """
    refresh_all_statuses(db, today)

    current = db.execute(
        select(Week)
        .where(Week.status == STATUS_CURRENT)
        .order_by(Week.start_date, Week.id)
        .limit(1)
    ).scalar_one_or_none()
    if current is not None:
        return current

    return db.execute(
        select(Week)
        .where(Week.status == STATUS_FUTURE)
        .order_by(Week.start_date, Week.id)
        .limit(1)
    ).scalar_one_or_none()
