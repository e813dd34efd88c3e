"""
Wildwood Zoo Backend — Attraction SQLAlchemy Models
=====================================================

What:  Scheduled attractions (shows, talks) and the many-to-many assignment
       of staff to them.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from wildwood.database import Base


class Attraction(Base):
    __tablename__ = "attractions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(150), nullable=False)
    picture: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Open-ended attractions have no end time
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Lead staff member shown on the detail page
    staff_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Attraction(id={self.id}, title='{self.title}')>"


class StaffAttractionAssignment(Base):
    __tablename__ = "staff_attraction_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attraction_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attractions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    staff_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("attraction_id", "staff_id", name="uq_assignment_attraction_staff"),
    )
