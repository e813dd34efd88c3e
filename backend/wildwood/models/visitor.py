"""
Wildwood Zoo Backend — Visitor SQLAlchemy Model
=================================================

What:  ORM model for the `visitors` table: public accounts that buy tickets
       and gift-shop items.

Lifecycle:
    1. Created at registration (membership = 'None')
    2. Mutated on profile, password or membership update
    3. Never hard-deleted; account deletion anonymizes the row so that ticket
       and sales history keep a valid foreign key
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wildwood.database import Base

MEMBERSHIP_TIERS = ("None", "Individual", "Family", "Conservation Club")


class Visitor(Base):
    __tablename__ = "visitors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Login name shared namespace-wise with staff (login checks visitors first)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    membership: Mapped[str] = mapped_column(String(50), nullable=False, default="None")
    billing_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Date the account was registered
    visit_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=lambda: datetime.now(timezone.utc).date(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Visitor(id={self.id}, username='{self.username}')>"
