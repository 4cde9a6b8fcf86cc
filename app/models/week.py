from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.schedule_entry import ScheduleEntry

STATUS_FUTURE = "future"
STATUS_CURRENT = "current"
STATUS_PAST = "past"

class Week(Base):
    __tablename__ = "weeks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    # both ends inclusive
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # derived from the dates, see services/week_lifecycle.py
    status: Mapped[str] = mapped_column(String(10), nullable=False, default=STATUS_FUTURE, index=True)

    entries: Mapped[list[ScheduleEntry]] = relationship(
        back_populates="week",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Week {self.name} ({self.start_date} -> {self.end_date}, {self.status})>"
