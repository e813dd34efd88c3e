"""
Wildwood Zoo Backend — Enclosure SQLAlchemy Model
===================================================

What:  ORM model for the `enclosures` table.

An enclosure holds zero or more animals. Deleting an enclosure deletes its
animals through ON DELETE CASCADE; `passive_deletes=True` leaves that to the
database so the async session never has to lazy-load the collection.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wildwood.database import Base

if TYPE_CHECKING:
    from wildwood.models.animal import Animal


class Enclosure(Base):
    __tablename__ = "enclosures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(String(150), nullable=False)

    # Owning staff member (caretaker); cleared if the staff row goes away
    staff_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("staff.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    animals: Mapped[List["Animal"]] = relationship(
        back_populates="enclosure",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def capacity_usage(self, animal_count: int) -> float:
        """Percentage of declared capacity in use (0 for a zero-capacity enclosure)."""
        if not self.capacity:
            return 0.0
        return round(animal_count / self.capacity * 100, 2)

    def __repr__(self) -> str:
        return f"<Enclosure(id={self.id}, name='{self.name}', capacity={self.capacity})>"
