"""
Wildwood Zoo Backend — Animal SQLAlchemy Model
================================================

What:  ORM model for the `animals` table. Every animal belongs to exactly one
       enclosure.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wildwood.database import Base

if TYPE_CHECKING:
    from wildwood.models.enclosure import Enclosure


class Animal(Base):
    __tablename__ = "animals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    species: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)

    # Free-text status ('Healthy', 'Sick', 'Injured', ...) used by the report breakdown
    health_status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    last_vet_checkup: Mapped[date] = mapped_column(Date, nullable=False)
    danger_level: Mapped[str] = mapped_column(String(50), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    enclosure_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enclosures.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    enclosure: Mapped["Enclosure"] = relationship(back_populates="animals")

    def __repr__(self) -> str:
        return f"<Animal(id={self.id}, name='{self.name}', species='{self.species}')>"
