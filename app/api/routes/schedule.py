import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.db.session import get_db
from app.api.deps import get_today, require_admin
from app.models.schedule_entry import ScheduleEntry
from app.models.week import Week
from app.schemas.schedule import ImportReport, ImportRequest, ScheduleEntryIn, ScheduleEntryOut
from app.services.schedule_import import ImportPayloadError, import_weeks
from app.services.vocabulary import DAYS
from app.services.week_lifecycle import get_current_week

log = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["schedule"])


# ----------------------------
# IMPORT
# ----------------------------
@router.post(
    "/import",
    response_model=ImportReport,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
def import_schedule(
    payload: ImportRequest,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Expects {"weeks": [{name, startDate, endDate, items: [...]}, ...]}.
    Incomplete or overlapping weeks come back as "skipped" in the report;
    only an empty batch is rejected.
    """
    try:
        return import_weeks(db, payload.weeks, today)
    except ImportPayloadError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# ----------------------------
# LIST (current week by default)
# ----------------------------
@router.get("", response_model=list[ScheduleEntryOut])
def list_schedule(
    week_id: int | None = Query(None, alias="weekId"),
    day: str | None = Query(None, description="Понедельник ... Воскресенье"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    if week_id is None:
        week = get_current_week(db, today)
        if week is None:
            return []
        week_id = week.id

    q = select(ScheduleEntry).where(ScheduleEntry.week_id == week_id)
    if day:
        q = q.where(ScheduleEntry.day == day)

    entries = db.execute(q.order_by(ScheduleEntry.slot, ScheduleEntry.id)).scalars().all()
    # calendar order of days, not alphabetical
    order = {d: i for i, d in enumerate(DAYS)}
    return sorted(entries, key=lambda e: (order.get(e.day, len(order)), e.slot))


# ----------------------------
# CREATE (single entry)
# ----------------------------
@router.post("", response_model=ScheduleEntryOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_entry(payload: ScheduleEntryIn, db: Session = Depends(get_db)):
    if payload.week_id is None or not payload.day or payload.slot is None or not payload.subject:
        raise HTTPException(status_code=400, detail="required fields missing")

    if not db.get(Week, payload.week_id):
        raise HTTPException(status_code=404, detail="week not found")

    exists = db.execute(
        select(ScheduleEntry.id).where(
            ScheduleEntry.week_id == payload.week_id,
            ScheduleEntry.day == payload.day,
            ScheduleEntry.slot == payload.slot,
            ScheduleEntry.is_skipped.is_(False),
        ).limit(1)
    ).scalar_one_or_none()
    if exists and not payload.is_skipped:
        raise HTTPException(status_code=400, detail="entry for this day and slot already exists")

    entry = ScheduleEntry(
        week_id=payload.week_id,
        day=payload.day,
        slot=payload.slot,
        subject=payload.subject,
        teacher=payload.teacher or None,
        room=payload.room or None,
        custom_time=payload.custom_time,
        # slot times apply unless the entry has its own
        start_time=payload.start_time if payload.custom_time else None,
        end_time=payload.end_time if payload.custom_time else None,
        is_skipped=payload.is_skipped,
        lesson_type=payload.lesson_type or None,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_entry(entry_id: int, db: Session = Depends(get_db)):
    entry = db.get(ScheduleEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="schedule entry not found")

    db.delete(entry)
    db.commit()
    return None
