from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # the admin UI and the sync script send camelCase, python callers snake_case
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True


# ----------------------------
# Single entries
# ----------------------------
class ScheduleEntryIn(_CamelModel):
    week_id: int | None = None
    day: str | None = None
    slot: int | None = Field(default=None, ge=0, le=5)
    subject: str | None = None
    teacher: str | None = None
    room: str | None = None
    custom_time: bool = False
    start_time: str | None = None
    end_time: str | None = None
    is_skipped: bool = False
    lesson_type: str | None = None


class ScheduleEntryOut(_CamelModel):
    id: int
    week_id: int
    day: str
    slot: int
    subject: str
    teacher: str | None
    room: str | None
    custom_time: bool
    start_time: str | None
    end_time: str | None
    is_skipped: bool
    lesson_type: str | None
    time_range: tuple[str | None, str | None]

    class Config:
        from_attributes = True


# ----------------------------
# Import
# ----------------------------
class RawScheduleRow(_CamelModel):
    """One timetable line as produced by the scraper or the xlsx reader."""
    date: str | None = None
    day_of_week: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    subject: str | None = None
    lesson_type: str | None = None
    room: str | None = None
    teacher: str | None = None


class WeekImportBatch(_CamelModel):
    # every field optional: an incomplete week is skipped, not rejected
    name: str | None = None
    start_date: date | str | None = None
    end_date: date | str | None = None
    items: list[RawScheduleRow] | None = None


class ImportRequest(_CamelModel):
    # weeks are validated one by one by the importer
    weeks: list[Any] | None = None


class WeekImportResult(_CamelModel):
    week: str | None
    status: Literal["success", "skipped", "error"]
    reason: str | None = None
    error: str | None = None
    items_imported: int | None = None
    week_id: int | None = None


class ImportSummary(_CamelModel):
    total_weeks: int = 0
    success_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    imported_items_count: int = 0


class ImportReport(_CamelModel):
    success: bool = True
    summary: ImportSummary = Field(default_factory=ImportSummary)
    results: list[WeekImportResult] = Field(default_factory=list)
