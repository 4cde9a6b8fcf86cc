from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.models import ScheduleEntry, Week
from app.schemas.schedule import RawScheduleRow, WeekImportBatch
from app.services import schedule_import
from app.services.schedule_import import ImportPayloadError, import_weeks, parse_date

from conftest import TODAY


def rows():
    return [
        {"date": "08.09.2025", "dayOfWeek": "Пн", "startTime": "10:10", "endTime": "11:40",
         "subject": "Математика", "lessonType": "л", "room": "304к.1", "teacher": "Иванов И.И."},
        {"date": "09.09.2025", "dayOfWeek": "Вторник", "startTime": "11:50", "endTime": "13:20",
         "subject": "Физика", "lessonType": "пр", "room": "309к.1", "teacher": "Петров П.П."},
        {"date": "10.09.2025", "dayOfWeek": "Ср", "startTime": "09:00", "endTime": "10:30",
         "subject": "История", "lessonType": "Семинар", "room": "", "teacher": ""},
    ]


def batch(name="W1", start="2025-09-08", end="2025-09-14", items=None):
    return {"name": name, "startDate": start, "endDate": end, "items": rows() if items is None else items}


def entries(db):
    return db.execute(select(ScheduleEntry).order_by(ScheduleEntry.id)).scalars().all()


def test_single_week_into_empty_store(db):
    report = import_weeks(db, [batch()], TODAY)

    assert report.summary.model_dump() == {
        "total_weeks": 1,
        "success_count": 1,
        "skipped_count": 0,
        "error_count": 0,
        "imported_items_count": 3,
    }
    result = report.results[0]
    assert result.status == "success"
    assert result.items_imported == 3

    week = db.get(Week, result.week_id)
    assert week.name == "W1"
    assert (week.start_date, week.end_date) == (date(2025, 9, 8), date(2025, 9, 14))
    assert week.status == "current"


def test_imported_rows_are_normalized(db):
    import_weeks(db, [batch()], TODAY)

    maths, physics, history = entries(db)
    assert (maths.day, maths.slot, maths.lesson_type) == ("Понедельник", 1, "Лекция")
    assert (physics.day, physics.slot, physics.lesson_type) == ("Вторник", 2, "Практика")
    assert (history.day, history.slot, history.lesson_type) == ("Среда", 0, "Семинар")

    # literal times kept even when the slot would give the same ones
    assert all(e.custom_time for e in (maths, physics, history))
    assert (maths.start_time, maths.end_time) == ("10:10", "11:40")
    assert (history.start_time, history.end_time) == ("09:00", "10:30")
    assert history.room is None and history.teacher is None
    assert not any(e.is_skipped for e in (maths, physics, history))


def test_unknown_day_lands_on_monday(db):
    items = [{"dayOfWeek": "Не определен", "startTime": "13:50", "subject": "Химия"}]
    import_weeks(db, [batch(items=items)], TODAY)

    (entry,) = entries(db)
    assert (entry.day, entry.slot, entry.end_time, entry.lesson_type) == ("Понедельник", 3, None, None)


def test_rows_without_subject_or_day_are_skipped(db):
    items = rows() + [
        {"dayOfWeek": "Пт", "startTime": "10:10", "subject": ""},
        {"dayOfWeek": "", "startTime": "10:10", "subject": "Химия"},
    ]
    report = import_weeks(db, [batch(items=items)], TODAY)

    assert report.results[0].items_imported == 3
    assert len(entries(db)) == 3


def test_same_range_as_stored_week_is_skipped(db, add_week):
    add_week("Stored", date(2025, 9, 8), date(2025, 9, 14))

    report = import_weeks(db, [batch()], TODAY)

    assert report.summary.success_count == 0
    assert report.summary.skipped_count == 1
    result = report.results[0]
    assert result.status == "skipped"
    assert result.reason == 'conflict with existing week: overlaps week "Stored" (08.09.2025 - 14.09.2025)'
    assert entries(db) == []


def test_reimporting_the_same_batch_is_skipped(db):
    import_weeks(db, [batch()], TODAY)
    report = import_weeks(db, [batch()], TODAY)

    assert report.summary.success_count == 0
    assert report.results[0].status == "skipped"
    assert len(db.execute(select(Week)).scalars().all()) == 1


def test_weeks_overlapping_each_other_in_one_batch_both_succeed(db):
    # only stored weeks are checked; the batch is not checked against itself
    report = import_weeks(
        db,
        [batch("A", "2025-09-08", "2025-09-14"), batch("B", "2025-09-12", "2025-09-18")],
        TODAY,
    )

    assert report.summary.success_count == 2
    assert report.summary.imported_items_count == 6
    assert [r.status for r in report.results] == ["success", "success"]


@pytest.mark.parametrize("payload", [
    {"name": "", "startDate": "2025-09-08", "endDate": "2025-09-14", "items": rows()},
    {"name": "W", "startDate": None, "endDate": "2025-09-14", "items": rows()},
    {"name": "W", "startDate": "not a date", "endDate": "2025-09-14", "items": rows()},
    {"name": "W", "startDate": "2025-09-08", "endDate": "2025-09-14", "items": []},
])
def test_incomplete_week_is_skipped(db, payload):
    report = import_weeks(db, [payload], TODAY)

    assert report.summary.skipped_count == 1
    assert report.results[0].status == "skipped"
    assert report.results[0].reason == "incomplete week data"


def test_reversed_range_is_skipped(db):
    report = import_weeks(db, [batch(start="2025-09-14", end="2025-09-08")], TODAY)
    assert report.results[0].reason == "start date is after end date"


def test_bad_week_does_not_stop_the_batch(db):
    report = import_weeks(db, [batch(name=""), batch("W2")], TODAY)

    assert [r.status for r in report.results] == ["skipped", "success"]
    assert report.summary.total_weeks == 2


@pytest.mark.parametrize("payload", [None, [], {"weeks": []}, "weeks"])
def test_missing_or_malformed_batch_raises(db, payload):
    with pytest.raises(ImportPayloadError):
        import_weeks(db, payload, TODAY)


def test_malformed_week_is_skipped_and_the_rest_imported(db):
    broken = {"name": "Broken", "startDate": "2025-09-01", "endDate": "2025-09-07", "items": None}
    report = import_weeks(db, [broken, batch("W2")], TODAY)

    assert [r.status for r in report.results] == ["skipped", "success"]
    assert report.results[0].week == "Broken"
    assert report.results[0].reason == "incomplete week data"
    assert report.summary.total_weeks == 2
    assert report.summary.skipped_count == 1
    assert report.summary.success_count == 1
    assert report.summary.imported_items_count == 3


@pytest.mark.parametrize("raw", [
    42,
    None,
    {"name": "Bad row", "startDate": "2025-09-01", "endDate": "2025-09-07", "items": [{"subject": {"x": 1}}]},
    {"name": "Bad items", "startDate": "2025-09-01", "endDate": "2025-09-07", "items": "Математика"},
])
def test_unreadable_week_counts_as_incomplete(db, raw):
    report = import_weeks(db, [raw, batch("W2")], TODAY)

    assert report.results[0].status == "skipped"
    assert report.results[0].reason == "incomplete week data"
    assert report.results[1].status == "success"
    assert report.summary.total_weeks == 2


def test_row_failure_is_logged_and_not_counted(db, monkeypatch, caplog):
    add_entry = schedule_import._add_entry

    def flaky(session, entry):
        if entry.subject == "Физика":
            raise SQLAlchemyError("disk full")
        add_entry(session, entry)

    monkeypatch.setattr(schedule_import, "_add_entry", flaky)

    report = import_weeks(db, [batch()], TODAY)

    assert report.results[0].status == "success"
    assert report.results[0].items_imported == 2
    assert report.summary.imported_items_count == 2
    assert [e.subject for e in entries(db)] == ["Математика", "История"]
    assert "failed to create entry" in caplog.text


def test_week_failure_is_reported_as_error(db, monkeypatch):
    import_rows = schedule_import._import_rows

    def failing(session, week, items):
        if week.name == "W1":
            raise SQLAlchemyError("connection lost")
        return import_rows(session, week, items)

    monkeypatch.setattr(schedule_import, "_import_rows", failing)

    report = import_weeks(db, [batch("W1"), batch("W2", "2025-09-15", "2025-09-21")], TODAY)

    assert report.summary.error_count == 1
    assert report.summary.success_count == 1
    assert report.results[0].status == "error"
    assert "connection lost" in report.results[0].error
    # the failed week was rolled back
    assert [w.name for w in db.execute(select(Week)).scalars().all()] == ["W2"]


def test_accepts_schema_objects(db):
    batch_in = WeekImportBatch(
        name="W1",
        start_date=date(2025, 9, 8),
        end_date=date(2025, 9, 14),
        items=[RawScheduleRow(day_of_week="Чт", start_time="15:30", subject="Биология")],
    )
    report = import_weeks(db, [batch_in], TODAY)

    assert report.summary.imported_items_count == 1
    assert entries(db)[0].slot == 4


@pytest.mark.parametrize("raw, expected", [
    ("2025-09-08", date(2025, 9, 8)),
    ("2025-09-08T00:00:00.000Z", date(2025, 9, 8)),
    ("08.09.2025", date(2025, 9, 8)),
    ("08.09.25", date(2025, 9, 8)),
    (date(2025, 9, 8), date(2025, 9, 8)),
    ("", None),
    ("tomorrow", None),
    (None, None),
])
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected
