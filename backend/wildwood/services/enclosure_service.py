"""
Wildwood Zoo Backend — Enclosure Service
==========================================

What:  Enclosure CRUD, staff assignment and the enclosure report.

Capacity usage:
    animals housed / declared capacity × 100, rounded to 2 places. The report
    filters on this percentage (`min_capacity` / `max_capacity`), not on the
    raw capacity number.

Deletion:
    Animals go with their enclosure (ON DELETE CASCADE), and their
    observations go with them.
"""

import logging
from collections import Counter
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wildwood.exceptions import NotFoundError, ValidationError
from wildwood.models.enclosure import Enclosure
from wildwood.models.staff import Staff
from wildwood.schemas.enclosure import (
    EnclosureCreate,
    EnclosureDetailResponse,
    EnclosureReportEntry,
    EnclosureReportResponse,
    EnclosureResponse,
    EnclosureUpdate,
)
from wildwood.services.animal_service import to_response as animal_response
from wildwood.services.base import apply_changes, get_or_404

logger = logging.getLogger(__name__)


class EnclosureService:

    def _with_animals(self):
        return (
            select(Enclosure, Staff.name)
            .outerjoin(Staff, Enclosure.staff_id == Staff.id)
            .options(selectinload(Enclosure.animals))
        )

    def _summary(self, enclosure: Enclosure, staff_name: Optional[str]) -> Dict:
        count = len(enclosure.animals)
        return {
            "id": enclosure.id,
            "name": enclosure.name,
            "type": enclosure.type,
            "capacity": enclosure.capacity,
            "location": enclosure.location,
            "staff_id": enclosure.staff_id,
            "staff_name": staff_name,
            "animal_count": count,
            "capacity_usage": enclosure.capacity_usage(count),
        }

    def _detail(self, enclosure: Enclosure, staff_name: Optional[str]) -> EnclosureDetailResponse:
        return EnclosureDetailResponse(
            **self._summary(enclosure, staff_name),
            animals=[animal_response(a, enclosure.name) for a in enclosure.animals],
        )

    async def _load(self, db: AsyncSession, enclosure_id: int):
        row = (await db.execute(
            self._with_animals().where(Enclosure.id == enclosure_id)
        )).first()
        if row is None:
            raise NotFoundError(resource="enclosure", resource_id=enclosure_id)
        return row[0], row[1]

    async def _check_staff(self, db: AsyncSession, staff_id: Optional[int]) -> None:
        if staff_id is not None and await db.get(Staff, staff_id) is None:
            raise NotFoundError(resource="staff member", resource_id=staff_id)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_enclosures(self, db: AsyncSession) -> List[EnclosureResponse]:
        rows = (await db.execute(self._with_animals().order_by(Enclosure.name))).all()
        return [EnclosureResponse(**self._summary(e, staff_name)) for e, staff_name in rows]

    async def get_enclosure(self, db: AsyncSession, enclosure_id: int) -> EnclosureDetailResponse:
        enclosure, staff_name = await self._load(db, enclosure_id)
        return self._detail(enclosure, staff_name)

    async def list_by_staff(self, db: AsyncSession, staff_id: int) -> List[EnclosureResponse]:
        await get_or_404(db, Staff, staff_id, "staff member")
        rows = (await db.execute(
            self._with_animals().where(Enclosure.staff_id == staff_id).order_by(Enclosure.name)
        )).all()
        return [EnclosureResponse(**self._summary(e, staff_name)) for e, staff_name in rows]

    async def report(
        self,
        db: AsyncSession,
        enclosure_type: Optional[str] = None,
        min_capacity: Optional[float] = None,
        max_capacity: Optional[float] = None,
        vet_after: Optional[date] = None,
        vet_before: Optional[date] = None,
    ) -> EnclosureReportResponse:
        """
        Per-enclosure report with animals, health breakdown and capacity usage.

        `vet_after` / `vet_before` narrow the listed animals to those whose last
        checkup falls in the range; enclosures left with no matching animal are
        dropped when either vet filter is given.
        """
        if min_capacity is not None and max_capacity is not None and min_capacity > max_capacity:
            raise ValidationError(message="min_capacity cannot exceed max_capacity")

        query = self._with_animals().order_by(Enclosure.name)
        if enclosure_type:
            query = query.where(Enclosure.type == enclosure_type)
        rows = (await db.execute(query)).all()

        entries: List[EnclosureReportEntry] = []
        for enclosure, staff_name in rows:
            usage = enclosure.capacity_usage(len(enclosure.animals))
            if min_capacity is not None and usage < min_capacity:
                continue
            if max_capacity is not None and usage > max_capacity:
                continue

            animals = [
                a for a in enclosure.animals
                if (vet_after is None or a.last_vet_checkup >= vet_after)
                and (vet_before is None or a.last_vet_checkup <= vet_before)
            ]
            if (vet_after or vet_before) and not animals:
                continue

            summary = self._summary(enclosure, staff_name)
            entries.append(EnclosureReportEntry(
                **summary,
                animals=[animal_response(a, enclosure.name) for a in animals],
                health_breakdown=dict(Counter(a.health_status for a in animals)),
                last_vet_checkup=max((a.last_vet_checkup for a in animals), default=None),
            ))

        return EnclosureReportResponse(
            enclosures=entries,
            total_enclosures=len(entries),
            total_animals=sum(len(e.animals) for e in entries),
        )

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_enclosure(self, db: AsyncSession, data: EnclosureCreate) -> EnclosureResponse:
        await self._check_staff(db, data.staff_id)
        enclosure = Enclosure(**data.model_dump())
        db.add(enclosure)
        await db.flush()
        logger.info("Enclosure created: %s (id=%s)", enclosure.name, enclosure.id)
        return await self.get_enclosure(db, enclosure.id)

    async def update_enclosure(
        self,
        db: AsyncSession,
        enclosure_id: int,
        patch: EnclosureUpdate,
    ) -> EnclosureResponse:
        changes = patch.changes()
        enclosure = await get_or_404(db, Enclosure, enclosure_id, "enclosure")
        await self._check_staff(db, changes.get("staff_id"))
        apply_changes(enclosure, changes)
        await db.flush()
        logger.info("Enclosure %s updated: %s", enclosure_id, sorted(changes))
        return await self.get_enclosure(db, enclosure_id)

    async def delete_enclosure(self, db: AsyncSession, enclosure_id: int) -> None:
        enclosure = await get_or_404(db, Enclosure, enclosure_id, "enclosure")
        await db.delete(enclosure)
        await db.flush()
        logger.info("Enclosure %s deleted with its animals", enclosure_id)

    async def assign_staff(self, db: AsyncSession, enclosure_id: int, staff_id: int) -> None:
        enclosure = await get_or_404(db, Enclosure, enclosure_id, "enclosure")
        await self._check_staff(db, staff_id)
        enclosure.staff_id = staff_id
        await db.flush()
        logger.info("Staff %s assigned to enclosure %s", staff_id, enclosure_id)

    async def unassign_staff(self, db: AsyncSession, enclosure_id: int) -> None:
        enclosure = await get_or_404(db, Enclosure, enclosure_id, "enclosure")
        if enclosure.staff_id is None:
            raise ValidationError(message="Enclosure has no assigned staff")
        enclosure.staff_id = None
        await db.flush()
        logger.info("Staff unassigned from enclosure %s", enclosure_id)


enclosure_service = EnclosureService()
