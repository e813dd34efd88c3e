"""
Wildwood Zoo Backend — Attraction Service

Attraction CRUD plus the staff ↔ attraction assignment table. An assignment
pair is unique; assigning twice is a 400, removing a pair that does not exist
is a 404.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.exceptions import NotFoundError, ValidationError
from wildwood.models.attraction import Attraction, StaffAttractionAssignment
from wildwood.models.staff import Staff
from wildwood.schemas.attraction import (
    AssignedStaffResponse,
    AttractionCreate,
    AttractionResponse,
    AttractionUpdate,
    StaffAssignmentResponse,
)
from wildwood.services.base import apply_changes, get_or_404

logger = logging.getLogger(__name__)


def _utc_naive(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; compare everything as naive UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class AttractionService:

    def _with_staff_name(self):
        return select(Attraction, Staff.name).outerjoin(Staff, Attraction.staff_id == Staff.id)

    def _to_response(self, attraction: Attraction, staff_name: Optional[str]) -> AttractionResponse:
        response = AttractionResponse.model_validate(attraction)
        response.staff_name = staff_name
        return response

    async def _check_staff(self, db: AsyncSession, staff_id: Optional[int]) -> None:
        if staff_id is not None:
            await get_or_404(db, Staff, staff_id, "staff member")

    async def list_attractions(self, db: AsyncSession) -> List[AttractionResponse]:
        rows = (await db.execute(self._with_staff_name().order_by(Attraction.start_time))).all()
        return [self._to_response(a, name) for a, name in rows]

    async def get_attraction(self, db: AsyncSession, attraction_id: int) -> AttractionResponse:
        row = (await db.execute(self._with_staff_name().where(Attraction.id == attraction_id))).first()
        if row is None:
            raise NotFoundError(resource="attraction", resource_id=attraction_id)
        return self._to_response(row[0], row[1])

    async def create_attraction(self, db: AsyncSession, data: AttractionCreate) -> AttractionResponse:
        await self._check_staff(db, data.staff_id)
        attraction = Attraction(**data.model_dump())
        db.add(attraction)
        await db.flush()
        logger.info("Attraction created: %s (id=%s)", attraction.title, attraction.id)
        return await self.get_attraction(db, attraction.id)

    async def update_attraction(
        self,
        db: AsyncSession,
        attraction_id: int,
        patch: AttractionUpdate,
    ) -> AttractionResponse:
        changes = patch.changes()
        attraction = await get_or_404(db, Attraction, attraction_id, "attraction")
        await self._check_staff(db, changes.get("staff_id"))

        start = changes.get("start_time", attraction.start_time)
        end = changes.get("end_time", attraction.end_time)
        if end is not None and start is not None and _utc_naive(end) < _utc_naive(start):
            raise ValidationError(message="end_time must not be before start_time", field="end_time")

        apply_changes(attraction, changes)
        await db.flush()
        logger.info("Attraction %s updated: %s", attraction_id, sorted(changes))
        return await self.get_attraction(db, attraction_id)

    async def delete_attraction(self, db: AsyncSession, attraction_id: int) -> None:
        attraction = await get_or_404(db, Attraction, attraction_id, "attraction")
        await db.delete(attraction)
        await db.flush()
        logger.info("Attraction %s deleted", attraction_id)

    # ── Staff assignments ─────────────────────────────────────────────────

    async def assigned_staff(self, db: AsyncSession, attraction_id: int) -> List[AssignedStaffResponse]:
        await get_or_404(db, Attraction, attraction_id, "attraction")
        rows = (await db.execute(
            select(StaffAttractionAssignment, Staff)
            .join(Staff, StaffAttractionAssignment.staff_id == Staff.id)
            .where(StaffAttractionAssignment.attraction_id == attraction_id)
            .order_by(Staff.name)
        )).all()
        return [
            AssignedStaffResponse(
                assignment_id=assignment.id,
                staff_id=staff.id,
                name=staff.name,
                role=staff.role,
                staff_type=staff.staff_type,
                assigned_date=assignment.assigned_date,
            )
            for assignment, staff in rows
        ]

    async def assign_staff(self, db: AsyncSession, attraction_id: int, staff_id: int) -> StaffAttractionAssignment:
        await get_or_404(db, Staff, staff_id, "staff member")
        await get_or_404(db, Attraction, attraction_id, "attraction")
        existing = (await db.execute(
            select(StaffAttractionAssignment.id).where(
                StaffAttractionAssignment.attraction_id == attraction_id,
                StaffAttractionAssignment.staff_id == staff_id,
            )
        )).first()
        if existing is not None:
            raise ValidationError(message="Staff is already assigned to this attraction")

        assignment = StaffAttractionAssignment(attraction_id=attraction_id, staff_id=staff_id)
        db.add(assignment)
        await db.flush()
        logger.info("Staff %s assigned to attraction %s", staff_id, attraction_id)
        return assignment

    async def unassign_staff(self, db: AsyncSession, attraction_id: int, staff_id: int) -> None:
        assignment = (await db.execute(
            select(StaffAttractionAssignment).where(
                StaffAttractionAssignment.attraction_id == attraction_id,
                StaffAttractionAssignment.staff_id == staff_id,
            )
        )).scalar_one_or_none()
        if assignment is None:
            raise NotFoundError(resource="assignment", message="Assignment not found")
        await db.delete(assignment)
        await db.flush()
        logger.info("Staff %s removed from attraction %s", staff_id, attraction_id)

    async def staff_assignments(self, db: AsyncSession, staff_id: int) -> List[StaffAssignmentResponse]:
        await get_or_404(db, Staff, staff_id, "staff member")
        rows = (await db.execute(
            select(StaffAttractionAssignment, Attraction)
            .join(Attraction, StaffAttractionAssignment.attraction_id == Attraction.id)
            .where(StaffAttractionAssignment.staff_id == staff_id)
            .order_by(Attraction.start_time)
        )).all()
        return [
            StaffAssignmentResponse(
                assignment_id=assignment.id,
                attraction_id=attraction.id,
                title=attraction.title,
                location=attraction.location,
                start_time=attraction.start_time,
                end_time=attraction.end_time,
                assigned_date=assignment.assigned_date,
            )
            for assignment, attraction in rows
        ]


attraction_service = AttractionService()
