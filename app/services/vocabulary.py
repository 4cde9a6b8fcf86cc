"""
Normalization of the vocabulary found in scraped/exported timetables.

Every function here is total: unknown input resolves to a named default
(DEFAULT_DAY, DEFAULT_SLOT, passthrough for lesson types) and never raises.
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

# ----------------------------
# Days
# ----------------------------
MONDAY = "Понедельник"

DAYS = (
    MONDAY,
    "Вторник",
    "Среда",
    "Четверг",
    "Пятница",
    "Суббота",
    "Воскресенье",
)

# unknown days (including "Не определен" from the scraper) land on Monday
DEFAULT_DAY = MONDAY

_DAY_ABBREVIATIONS: Dict[str, str] = {
    "Пн": "Понедельник",
    "Вт": "Вторник",
    "Ср": "Среда",
    "Чт": "Четверг",
    "Пт": "Пятница",
    "Сб": "Суббота",
    "Вс": "Воскресенье",
}

_DAY_MAP: Dict[str, str] = {**_DAY_ABBREVIATIONS, **{d: d for d in DAYS}}


def normalize_day(raw: Any) -> str:
    """Exact, case-sensitive lookup with no trimming; everything else is DEFAULT_DAY."""
    if not isinstance(raw, str):
        return DEFAULT_DAY
    return _DAY_MAP.get(raw, DEFAULT_DAY)


def expand_day_abbreviation(raw: Any) -> str:
    """
    Spreadsheet exports write days as "пн", "ВТ", "Ср" or "вторник".
    Returns the canonical full name, or the input stripped when it is not a day.
    """
    s = ("" if raw is None else str(raw)).strip()
    return _DAY_MAP.get(s.capitalize(), s)


def day_for_weekday(weekday: int) -> str:
    # date.weekday(): 0 = Monday
    return DAYS[weekday % 7]


# ----------------------------
# Lesson types
# ----------------------------
LECTURE = "Лекция"
PRACTICE = "Практика"
LAB = "Лабораторная"
CONSULTATION = "Консультация"
RETAKE = "Пересдача"
EXAM = "Экзамен"
CREDIT = "Зачет"

LESSON_TYPES = (LECTURE, PRACTICE, LAB, CONSULTATION, RETAKE, EXAM, CREDIT)

# codes used by the college site
_LESSON_TYPE_CODES: Dict[str, str] = {
    "л": LECTURE,
    "пр": PRACTICE,
    "лп": LAB,
    "к": CONSULTATION,
}

# what people type into the xlsx by hand
_LESSON_TYPE_ALIASES: Dict[str, str] = {
    "лек": LECTURE, "лекция": LECTURE, "л": LECTURE, "л-к": LECTURE,
    "лек.": LECTURE, "лекц": LECTURE, "лекц.": LECTURE,

    "пр": PRACTICE, "практика": PRACTICE, "практ": PRACTICE, "практ.": PRACTICE,
    "практическое": PRACTICE, "практическое занятие": PRACTICE, "пз": PRACTICE, "п": PRACTICE,

    "лп": LAB, "лаб": LAB, "лаб.": LAB, "лабораторная": LAB,
    "лабораторная работа": LAB, "лабораторный практикум": LAB, "лр": LAB,

    "к": CONSULTATION, "конс": CONSULTATION, "конс.": CONSULTATION, "консультация": CONSULTATION,

    "пересдача": RETAKE, "перес": RETAKE, "перес.": RETAKE,

    "экз": EXAM, "экз.": EXAM, "экзамен": EXAM,

    "зач": CREDIT, "зач.": CREDIT, "зачет": CREDIT, "зачёт": CREDIT,
}


def normalize_lesson_type(raw: Any) -> str:
    """Known codes map to labels, other text passes through, empty stays empty."""
    if raw is None:
        return ""
    s = str(raw)
    if not s:
        return ""
    return _LESSON_TYPE_CODES.get(s, s)


def normalize_lesson_type_alias(raw: Any) -> str:
    s = ("" if raw is None else str(raw)).strip()
    if not s:
        return ""

    lower = s.lower()
    if lower in _LESSON_TYPE_ALIASES:
        return _LESSON_TYPE_ALIASES[lower]

    # longest alias first, so "лаб" is not read as "л"
    for alias in sorted(_LESSON_TYPE_ALIASES, key=len, reverse=True):
        if len(alias) > 2 and alias in lower:
            return _LESSON_TYPE_ALIASES[alias]

    return s[0].upper() + s[1:]


# ----------------------------
# Slots
# ----------------------------
DEFAULT_SLOT = 0

SLOT_TIMES: Dict[int, Tuple[str, str]] = {
    0: ("8:30", "10:00"),
    1: ("10:10", "11:40"),
    2: ("11:50", "13:20"),
    3: ("13:50", "15:20"),
    4: ("15:30", "17:00"),
    5: ("17:10", "18:40"),
}

# slot 0 is deliberately absent: its start time also resolves to DEFAULT_SLOT
_SLOT_BY_START: Dict[str, int] = {
    start: slot for slot, (start, _end) in SLOT_TIMES.items() if slot != DEFAULT_SLOT
}


def slot_for_start_time(time_string: Any) -> int:
    """
    Only the five exact strings "10:10", "11:50", "13:50", "15:30", "17:10"
    are recognized. "10:10:00", "08:30" or "9:00" all collapse to DEFAULT_SLOT.
    """
    if not isinstance(time_string, str):
        return DEFAULT_SLOT
    return _SLOT_BY_START.get(time_string, DEFAULT_SLOT)


def time_range_for_slot(slot: Any) -> Tuple[str, str]:
    try:
        return SLOT_TIMES[int(slot)]
    except (KeyError, TypeError, ValueError):
        return SLOT_TIMES[DEFAULT_SLOT]
