"""
Wildwood Zoo Backend — Visitor Service

Profile reads and patches, password change, membership tier and account
deletion. Deletion keeps the row (tickets and sales reference it) and
replaces every personal field instead.
"""

import logging
import secrets
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.exceptions import AuthenticationError
from wildwood.models.visitor import Visitor
from wildwood.schemas.visitor import VisitorUpdate
from wildwood.security import hash_password, verify_password
from wildwood.services.base import apply_changes, get_or_404

logger = logging.getLogger(__name__)


class VisitorService:

    async def list_visitors(self, db: AsyncSession) -> List[Visitor]:
        result = await db.execute(select(Visitor).order_by(Visitor.last_name, Visitor.first_name))
        return list(result.scalars().all())

    async def get_visitor(self, db: AsyncSession, visitor_id: int) -> Visitor:
        return await get_or_404(db, Visitor, visitor_id, "visitor")

    async def update_visitor(self, db: AsyncSession, visitor_id: int, patch: VisitorUpdate) -> Visitor:
        changes = patch.changes()
        visitor = await get_or_404(db, Visitor, visitor_id, "visitor")
        apply_changes(visitor, changes)
        await db.flush()
        logger.info("Visitor %s updated: %s", visitor_id, sorted(changes))
        return visitor

    async def change_password(
        self,
        db: AsyncSession,
        visitor_id: int,
        current_password: str,
        new_password: str,
    ) -> None:
        visitor = await get_or_404(db, Visitor, visitor_id, "visitor")
        if not verify_password(visitor.password_hash, current_password):
            raise AuthenticationError(message="Current password is incorrect")
        visitor.password_hash = hash_password(new_password)
        await db.flush()
        logger.info("Visitor %s changed password", visitor_id)

    async def update_membership(self, db: AsyncSession, visitor_id: int, membership: str) -> Visitor:
        visitor = await get_or_404(db, Visitor, visitor_id, "visitor")
        visitor.membership = membership
        await db.flush()
        logger.info("Visitor %s membership set to %s", visitor_id, membership)
        return visitor

    async def delete_account(self, db: AsyncSession, visitor_id: int, password: str) -> None:
        """Anonymise the account after confirming the password."""
        visitor = await get_or_404(db, Visitor, visitor_id, "visitor")
        if not verify_password(visitor.password_hash, password):
            raise AuthenticationError(message="Invalid password")

        visitor.first_name = "Deleted"
        visitor.last_name = "User"
        visitor.username = f"deleted_{visitor_id}_{secrets.token_hex(4)}"
        # Random secret nobody knows, so the account can never be logged into
        visitor.password_hash = hash_password(secrets.token_urlsafe(32))
        visitor.billing_address = None
        visitor.membership = "None"
        await db.flush()
        logger.info("Visitor %s anonymised", visitor_id)


visitor_service = VisitorService()
