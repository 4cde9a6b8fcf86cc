from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Protocol


class DatedWeek(Protocol):
    name: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class ConflictResult:
    conflict: bool
    with_week: Optional[str] = None
    reason: Optional[str] = None


NO_CONFLICT = ConflictResult(conflict=False)


def format_range(start: date, end: date) -> str:
    return f"{start:%d.%m.%Y} - {end:%d.%m.%Y}"


def ranges_overlap(s1: date, e1: date, s2: date, e2: date) -> bool:
    # inclusive on both sides: sharing a single day is an overlap
    return not (e1 < s2 or e2 < s1)


def has_conflict(
    candidate_start: date,
    candidate_end: date,
    existing_weeks: Iterable[DatedWeek],
) -> ConflictResult:
    """First stored week whose range overlaps [candidate_start, candidate_end]."""
    for week in existing_weeks:
        if ranges_overlap(candidate_start, candidate_end, week.start_date, week.end_date):
            return ConflictResult(
                conflict=True,
                with_week=week.name,
                reason=f'overlaps week "{week.name}" ({format_range(week.start_date, week.end_date)})',
            )
    return NO_CONFLICT
