"""
Wildwood Zoo Backend — Staff Service
======================================

What:  Staff listing, profile reads and patches, deletion and password change.

Self-service rule:
    A non-manager editing their own record may change only `address`; any
    other field in the patch is a 403. Managers may change every field.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from wildwood.models.enclosure import Enclosure
from wildwood.models.staff import Staff
from wildwood.schemas.staff import StaffUpdate
from wildwood.security import Principal, hash_password, verify_password
from wildwood.services.base import apply_changes, get_or_404

logger = logging.getLogger(__name__)

SELF_EDITABLE_FIELDS = frozenset({"address"})


class StaffService:

    async def list_staff(self, db: AsyncSession) -> List[Staff]:
        result = await db.execute(select(Staff).order_by(Staff.name))
        return list(result.scalars().all())

    async def list_zookeepers(self, db: AsyncSession) -> List[Staff]:
        result = await db.execute(
            select(Staff).where(Staff.staff_type == "Zookeeper").order_by(Staff.name)
        )
        return list(result.scalars().all())

    async def get_staff(self, db: AsyncSession, staff_id: int) -> Staff:
        return await get_or_404(db, Staff, staff_id, "staff member")

    async def list_by_enclosure(self, db: AsyncSession, enclosure_id: int) -> List[Staff]:
        result = await db.execute(
            select(Staff)
            .join(Enclosure, Enclosure.staff_id == Staff.id)
            .where(Enclosure.id == enclosure_id)
        )
        return list(result.scalars().all())

    async def update_staff(
        self,
        db: AsyncSession,
        staff_id: int,
        patch: StaffUpdate,
        principal: Principal,
    ) -> Staff:
        changes = patch.changes()
        if not principal.is_manager:
            forbidden = sorted(set(changes) - SELF_EDITABLE_FIELDS)
            if forbidden:
                raise PermissionDeniedError(
                    message="Staff members may only update their own address",
                    context={"fields": forbidden},
                )

        staff = await get_or_404(db, Staff, staff_id, "staff member")
        supervisor_id = changes.get("supervisor_id")
        if supervisor_id is not None:
            if supervisor_id == staff_id:
                raise ValidationError(message="A staff member cannot supervise themselves", field="supervisor_id")
            if await db.get(Staff, supervisor_id) is None:
                raise NotFoundError(resource="supervisor", resource_id=supervisor_id)

        apply_changes(staff, changes)
        await db.flush()
        logger.info("Staff %s updated by %s: %s", staff_id, principal.id, sorted(changes))
        return staff

    async def delete_staff(self, db: AsyncSession, staff_id: int) -> None:
        staff = await get_or_404(db, Staff, staff_id, "staff member")
        owns_enclosure = (await db.execute(
            select(Enclosure.id).where(Enclosure.staff_id == staff_id).limit(1)
        )).first()
        if owns_enclosure is not None:
            raise ValidationError(
                message=(
                    "Cannot delete staff member. They are assigned to one or more "
                    "enclosures. Reassign enclosures first."
                )
            )
        await db.delete(staff)
        await db.flush()
        logger.info("Staff %s deleted", staff_id)

    async def change_password(
        self,
        db: AsyncSession,
        staff_id: int,
        current_password: str,
        new_password: str,
    ) -> None:
        staff = await get_or_404(db, Staff, staff_id, "staff member")
        if not verify_password(staff.password_hash, current_password):
            raise AuthenticationError(message="Current password is incorrect")
        staff.password_hash = hash_password(new_password)
        await db.flush()
        logger.info("Staff %s changed password", staff_id)


staff_service = StaffService()
