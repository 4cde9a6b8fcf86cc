import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.db.session import get_db
from app.api.deps import get_today, require_admin
from app.models.week import Week
from app.schemas.week import WeekIn, WeekOut
from app.services.conflicts import has_conflict
from app.services.week_lifecycle import get_current_week, refresh_all_statuses, week_status

log = logging.getLogger(__name__)

router = APIRouter(prefix="/weeks", tags=["weeks"])


@router.get("", response_model=list[WeekOut])
def list_weeks(db: Session = Depends(get_db), today: date = Depends(get_today)):
    refresh_all_statuses(db, today)
    return db.execute(select(Week).order_by(Week.start_date)).scalars().all()


@router.get("/current", response_model=WeekOut)
def current_week(db: Session = Depends(get_db), today: date = Depends(get_today)):
    week = get_current_week(db, today)
    if not week:
        raise HTTPException(status_code=404, detail="no current or upcoming week")
    return week


@router.post("/refresh", dependencies=[Depends(require_admin)])
def refresh_weeks(db: Session = Depends(get_db), today: date = Depends(get_today)):
    return {"ok": True, "updated": refresh_all_statuses(db, today)}


@router.post("", response_model=WeekOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_week(payload: WeekIn, db: Session = Depends(get_db), today: date = Depends(get_today)):
    if payload.start_date > payload.end_date:
        raise HTTPException(status_code=400, detail="start date is after end date")

    existing = db.execute(select(Week).order_by(Week.start_date)).scalars().all()
    conflict = has_conflict(payload.start_date, payload.end_date, existing)
    if conflict.conflict:
        raise HTTPException(status_code=409, detail=f"week dates overlap: {conflict.reason}")

    week = Week(
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=week_status(payload.start_date, payload.end_date, today),
    )
    db.add(week)
    db.commit()
    db.refresh(week)
    log.info("week %s created (%s)", week.id, week.name)
    return week


@router.delete("/{week_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_week(week_id: int, db: Session = Depends(get_db)):
    week = db.get(Week, week_id)
    if not week:
        raise HTTPException(status_code=404, detail="week not found")

    db.delete(week)
    db.commit()
    log.info("week %s deleted", week_id)
    return None
