"""
Wildwood Zoo Backend — Staff SQLAlchemy Model
===============================================

What:  ORM model for the `staff` table.

Two orthogonal attributes drive access control:
    role:        seniority tier ('Manager', 'Staff')
    staff_type:  job function ('Zookeeper', 'Vet', 'Gift Shop Clerk', 'Admin', ...)
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wildwood.database import Base

MANAGER = "Manager"


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    staff_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    ssn: Mapped[str] = mapped_column(String(20), nullable=False)
    birthdate: Mapped[date] = mapped_column(Date, nullable=False)
    sex: Mapped[str] = mapped_column(String(10), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    hire_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=lambda: datetime.now(timezone.utc).date(),
    )

    supervisor_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
    )

    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, role='{self.role}', staff_type='{self.staff_type}')>"
