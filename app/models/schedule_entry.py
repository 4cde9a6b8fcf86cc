from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.services.vocabulary import time_range_for_slot

if TYPE_CHECKING:
    from app.models.week import Week

class ScheduleEntry(Base):
    __tablename__ = "schedule_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    week_id: Mapped[int] = mapped_column(
        ForeignKey("weeks.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # "Понедельник" ... "Воскресенье"
    day: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    # 0..5, 0 and 5 are the optional extra periods
    slot: Mapped[int] = mapped_column(SmallInteger, nullable=False, index=True)

    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    teacher: Mapped[str | None] = mapped_column(String(120), nullable=True)
    room: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # start_time/end_time only mean something when custom_time is set
    custom_time: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_time: Mapped[str | None] = mapped_column(String(10), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(10), nullable=True)

    is_skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lesson_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    week: Mapped[Week] = relationship(back_populates="entries")

    @property
    def time_range(self) -> tuple[str | None, str | None]:
        if self.custom_time:
            return self.start_time, self.end_time
        return time_range_for_slot(self.slot)
