"""
Reads the timetable workbook the study office exports.

Layout (first sheet unless told otherwise):

    13.05.25, вт
    10:10-11:40 | Математика | 304к.1 | лек. | Иванов И.И.
    11:50-13:20 | Физика     | 309к.1 | пр    | Петров П.П.
    14.05.25, ср
    ...

A row whose first cell holds a date starts a new day; every other row with a
time and a subject is a lesson of that day.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import openpyxl

from app.schemas.schedule import RawScheduleRow, WeekImportBatch
from app.services.schedule_import import parse_date
from app.services.vocabulary import (
    DAYS,
    day_for_weekday,
    expand_day_abbreviation,
    normalize_lesson_type_alias,
)

log = logging.getLogger(__name__)

WEEK_NAME = "Неделя {number}"


def norm(s: Any) -> str:
    return ("" if s is None else str(s)).strip()


def _hhmm(value: Any) -> str:
    if isinstance(value, (time, datetime)):
        return f"{value.hour:02d}:{value.minute:02d}"
    s = norm(value)
    # 10:10:00 -> 10:10
    if s.count(":") > 1:
        s = ":".join(s.split(":")[:2])
    return s


def parse_time_cell(value: Any) -> Tuple[str, str]:
    """'10:10-11:40' -> ('10:10', '11:40'); a single time has no end."""
    if isinstance(value, (time, datetime)):
        return _hhmm(value), ""
    s = norm(value).replace("–", "-").replace("—", "-")
    if "-" in s:
        start, end = s.split("-", 1)
        return _hhmm(start.strip()), _hhmm(end.strip())
    return _hhmm(s), ""


def parse_date_cell(value: Any) -> Optional[Tuple[date, str]]:
    """Returns (date, day name) for a date row, None for anything else."""
    if isinstance(value, datetime):
        return value.date(), day_for_weekday(value.weekday())
    if isinstance(value, date):
        return value, day_for_weekday(value.weekday())

    s = norm(value)
    if "." not in s and "," not in s:
        return None

    day_label = ""
    if "," in s:
        s, day_label = (part.strip() for part in s.split(",", 1))

    d = parse_date(s)
    if d is None:
        return None

    day = expand_day_abbreviation(day_label)
    # unknown labels give way to the date itself
    return d, day if day in DAYS else day_for_weekday(d.weekday())


def rows_from_cells(cells: Iterable[Tuple[Any, ...]]) -> List[RawScheduleRow]:
    out: List[RawScheduleRow] = []
    current_date: Optional[date] = None
    current_day = ""

    for values in cells:
        values = tuple(values) + (None,) * 5
        first = values[0]
        if first is None or norm(first) == "":
            continue

        parsed = parse_date_cell(first)
        if parsed is not None:
            current_date, current_day = parsed
            continue

        subject = norm(values[1])
        if current_date is None or not subject:
            continue

        start, end = parse_time_cell(first)
        out.append(RawScheduleRow(
            date=current_date.isoformat(),
            day_of_week=current_day,
            start_time=start,
            end_time=end,
            subject=subject,
            room=norm(values[2]),
            lesson_type=normalize_lesson_type_alias(values[3]),
            teacher=norm(values[4]),
        ))

    return out


def read_schedule_rows(xlsx_path: str, sheet_name: Optional[str] = None) -> List[RawScheduleRow]:
    wb = openpyxl.load_workbook(xlsx_path, data_only=True, read_only=True)
    try:
        if sheet_name is None:
            ws = wb.worksheets[0]
        elif sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            raise ValueError(f"sheet {sheet_name!r} not found, sheets: {wb.sheetnames}")

        rows = rows_from_cells(ws.iter_rows(values_only=True))
    finally:
        wb.close()

    log.info("read %d schedule rows from %s", len(rows), xlsx_path)
    return rows


def group_rows_into_weeks(
    rows: Iterable[RawScheduleRow],
    existing_names: Iterable[str] = (),
) -> List[WeekImportBatch]:
    """
    One batch per ISO week, in order of appearance. The range runs from the
    first to the last date actually present in the group.
    """
    groups: Dict[Tuple[int, int], List[Tuple[date, RawScheduleRow]]] = {}
    for row in rows:
        d = parse_date(row.date)
        if d is None:
            continue
        iso = d.isocalendar()
        groups.setdefault((iso[0], iso[1]), []).append((d, row))

    taken = set(existing_names)
    weeks: List[WeekImportBatch] = []
    for (_year, number), items in groups.items():
        dates = sorted(d for d, _row in items)

        name = WEEK_NAME.format(number=number)
        candidate, counter = name, 1
        while candidate in taken:
            candidate = f"{name} ({counter})"
            counter += 1
        taken.add(candidate)

        weeks.append(WeekImportBatch(
            name=candidate,
            start_date=dates[0].isoformat(),
            end_date=dates[-1].isoformat(),
            items=[row for _d, row in items],
        ))

    return weeks
