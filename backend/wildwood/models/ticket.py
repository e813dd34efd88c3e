"""
Wildwood Zoo Backend — Ticket & Addon SQLAlchemy Models
=========================================================

What:  ORM models for the `tickets` and `addons` tables.
Who:   Rows are created only by TicketService.purchase(), inside a single
       transaction; every row of one purchase shares a `purchase_id`.

Validity window:
    end_date = start_date + 1 day, fixed at creation and never recomputed.
    `validity_window()` is the only place that computes it.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Tuple

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from wildwood.database import Base

VALIDITY = timedelta(days=1)


def validity_window(visit_date: date) -> Tuple[date, date]:
    """Start and end date of a ticket bought for `visit_date`."""
    return visit_date, visit_date + VALIDITY


class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    purchase_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    visitor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("visitors.id"),
        nullable=False,
        index=True,
    )
    ticket_type: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    enclosure_access: Mapped[str] = mapped_column(String(100), nullable=False, default="None")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, type='{self.ticket_type}', start={self.start_date})>"


class Addon(Base):
    __tablename__ = "addons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    purchase_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    visitor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("visitors.id"),
        nullable=False,
        index=True,
    )
    # Request key ('parking', 'guidedTour', ...); `description` holds the label
    addon_type: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    description: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Addon(id={self.id}, type='{self.addon_type}', start={self.start_date})>"
