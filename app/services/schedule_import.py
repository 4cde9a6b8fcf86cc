"""
Batch import of weeks with their timetable rows.

Each submitted week is handled on its own: a bad or conflicting week is
recorded in the report and the batch goes on. Only a missing or empty batch
raises (ImportPayloadError).
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.schedule_entry import ScheduleEntry
from app.models.week import Week
from app.schemas.schedule import (
    ImportReport,
    RawScheduleRow,
    WeekImportBatch,
    WeekImportResult,
)
from app.services.conflicts import has_conflict
from app.services.vocabulary import normalize_day, normalize_lesson_type, slot_for_start_time
from app.services.week_lifecycle import week_status

log = logging.getLogger(__name__)

REASON_INCOMPLETE = "incomplete week data"
REASON_REVERSED = "start date is after end date"


class ImportPayloadError(ValueError):
    pass


# ----------------------------
# Helpers
# ----------------------------
def parse_date(value: Any) -> Optional[date]:
    """
    Accepts date/datetime objects and strings as they come from the UI, the
    scraper or the sync script: 2025-09-01, 2025-09-01T00:00:00.000Z,
    01.09.2025, 01.09.25
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    s = str(value).strip()
    if not s:
        return None

    for fmt in ("%Y-%m-%d", "%d.%m.%Y", "%d.%m.%y", "%Y/%m/%d"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            pass

    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_entry(week: Week, row: RawScheduleRow) -> ScheduleEntry:
    # imported times are taken literally, so every imported entry is custom-time
    return ScheduleEntry(
        week_id=week.id,
        day=normalize_day(row.day_of_week),
        slot=slot_for_start_time(row.start_time),
        subject=row.subject,
        teacher=_blank_to_none(row.teacher),
        room=_blank_to_none(row.room),
        custom_time=True,
        start_time=_blank_to_none(row.start_time),
        end_time=_blank_to_none(row.end_time),
        is_skipped=False,
        lesson_type=normalize_lesson_type(row.lesson_type) or None,
    )


def _add_entry(db: Session, entry: ScheduleEntry) -> None:
    with db.begin_nested():
        db.add(entry)
        db.flush()


def _import_rows(db: Session, week: Week, rows: Sequence[RawScheduleRow]) -> int:
    imported = 0
    for row in rows:
        if not row.subject or not row.day_of_week:
            continue
        try:
            _add_entry(db, build_entry(week, row))
        except SQLAlchemyError:
            log.exception("week %s: failed to create entry %r", week.name, row.subject)
            continue
        imported += 1
    return imported


def _validate_week(raw: Any) -> Optional[WeekImportBatch]:
    if isinstance(raw, WeekImportBatch):
        return raw
    try:
        return WeekImportBatch.model_validate(raw)
    except ValidationError as exc:
        log.info("week %r skipped: %d validation error(s)", _raw_name(raw), exc.error_count())
        return None


def _raw_name(raw: Any) -> Optional[str]:
    name = raw.get("name") if isinstance(raw, dict) else None
    return name if isinstance(name, str) else None


# ----------------------------
# Import
# ----------------------------
def import_weeks(db: Session, weeks: Any, today: date | datetime) -> ImportReport:
    if not weeks or not isinstance(weeks, list):
        raise ImportPayloadError("import data is missing or malformed")

    # fixed for the whole batch: weeks created below are not checked against
    # each other, only against what was stored before the import started
    existing = db.execute(select(Week).order_by(Week.start_date)).scalars().all()

    report = ImportReport()

    for raw in weeks:
        item = _validate_week(raw)
        if item is None:
            result = WeekImportResult(week=_raw_name(raw), status="skipped", reason=REASON_INCOMPLETE)
        else:
            result = _import_week(db, item, existing, today)

        report.results.append(result)
        report.summary.total_weeks += 1

        if result.status == "success":
            report.summary.success_count += 1
            report.summary.imported_items_count += result.items_imported or 0
        elif result.status == "skipped":
            report.summary.skipped_count += 1
        else:
            report.summary.error_count += 1

    log.info(
        "schedule import: %d weeks, %d ok, %d skipped, %d errors, %d entries",
        report.summary.total_weeks,
        report.summary.success_count,
        report.summary.skipped_count,
        report.summary.error_count,
        report.summary.imported_items_count,
    )
    return report


def _import_week(
    db: Session,
    item: WeekImportBatch,
    existing: List[Week],
    today: date | datetime,
) -> WeekImportResult:
    start = parse_date(item.start_date)
    end = parse_date(item.end_date)

    if not item.name or start is None or end is None or not item.items:
        return WeekImportResult(week=item.name, status="skipped", reason=REASON_INCOMPLETE)
    if start > end:
        return WeekImportResult(week=item.name, status="skipped", reason=REASON_REVERSED)

    conflict = has_conflict(start, end, existing)
    if conflict.conflict:
        log.info("week %s skipped: %s", item.name, conflict.reason)
        return WeekImportResult(
            week=item.name,
            status="skipped",
            reason=f"conflict with existing week: {conflict.reason}",
        )

    try:
        week = Week(
            name=item.name,
            start_date=start,
            end_date=end,
            status=week_status(start, end, today),
        )
        db.add(week)
        db.flush()

        imported = _import_rows(db, week, item.items)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.exception("week %s: import failed", item.name)
        return WeekImportResult(week=item.name, status="error", error=str(exc))

    log.info("week %s imported as id=%s with %d entries", week.name, week.id, imported)
    return WeekImportResult(
        week=item.name,
        status="success",
        items_imported=imported,
        week_id=week.id,
    )
