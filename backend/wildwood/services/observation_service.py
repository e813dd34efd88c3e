"""
Wildwood Zoo Backend — Observation & Notification Services
============================================================

What:  Staff observations on animals and manager notifications to staff.

Acknowledgment:
    Both use a guarded UPDATE (`WHERE acknowledged = false`). A row that is
    missing, already acknowledged or (for notifications) not addressed to the
    caller affects zero rows and is reported as 404.

Notification visibility:
    Managers see every notification. Other staff see those addressed to their
    staff type plus broadcasts (staff_type IS NULL).
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from wildwood.exceptions import NotFoundError
from wildwood.models.animal import Animal
from wildwood.models.notification import Notification
from wildwood.models.observation import Observation
from wildwood.models.staff import Staff
from wildwood.schemas.observation import (
    NotificationCreate,
    ObservationCreate,
    ObservationResponse,
)
from wildwood.security import Principal
from wildwood.services.base import get_or_404

logger = logging.getLogger(__name__)


class ObservationService:

    def _named(self):
        author = aliased(Staff)
        acknowledger = aliased(Staff)
        return (
            select(Observation, author.name, Animal.name, acknowledger.name)
            .join(Animal, Observation.animal_id == Animal.id)
            .outerjoin(author, Observation.staff_id == author.id)
            .outerjoin(acknowledger, Observation.acknowledged_by == acknowledger.id)
        )

    def _to_response(self, row) -> ObservationResponse:
        observation, staff_name, animal_name, acknowledged_by_name = row
        response = ObservationResponse.model_validate(observation)
        response.staff_name = staff_name
        response.animal_name = animal_name
        response.acknowledged_by_name = acknowledged_by_name
        return response

    async def list_observations(
        self,
        db: AsyncSession,
        acknowledged: Optional[bool] = None,
    ) -> List[ObservationResponse]:
        query = self._named().order_by(Observation.created_at.desc(), Observation.id.desc())
        if acknowledged is not None:
            query = query.where(Observation.acknowledged.is_(acknowledged))
        return [self._to_response(row) for row in (await db.execute(query)).all()]

    async def list_by_animal(self, db: AsyncSession, animal_id: int) -> List[ObservationResponse]:
        await get_or_404(db, Animal, animal_id, "animal")
        query = (
            self._named()
            .where(Observation.animal_id == animal_id)
            .order_by(Observation.created_at.desc(), Observation.id.desc())
        )
        return [self._to_response(row) for row in (await db.execute(query)).all()]

    async def create_observation(
        self,
        db: AsyncSession,
        data: ObservationCreate,
        principal: Principal,
    ) -> ObservationResponse:
        await get_or_404(db, Animal, data.animal_id, "animal")
        observation = Observation(
            staff_id=principal.id,
            animal_id=data.animal_id,
            title=data.title,
            content=data.content,
        )
        db.add(observation)
        await db.flush()
        logger.info("Observation %s recorded on animal %s by staff %s", observation.id, data.animal_id, principal.id)
        row = (await db.execute(self._named().where(Observation.id == observation.id))).one()
        return self._to_response(row)

    async def acknowledge(self, db: AsyncSession, observation_id: int, principal: Principal) -> None:
        result = await db.execute(
            update(Observation)
            .where(Observation.id == observation_id, Observation.acknowledged.is_(False))
            .values(
                acknowledged=True,
                acknowledged_by=principal.id,
                acknowledged_at=datetime.now(timezone.utc),
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(message="Observation not found or already acknowledged")
        logger.info("Observation %s acknowledged by staff %s", observation_id, principal.id)


class NotificationService:

    def _visible_to(self, query, principal: Principal):
        if principal.is_manager:
            return query
        return query.where(or_(
            Notification.staff_type.is_(None),
            Notification.staff_type == principal.staff_type,
        ))

    async def list_notifications(self, db: AsyncSession, principal: Principal) -> List[Notification]:
        query = self._visible_to(
            select(Notification).order_by(Notification.created_at.desc(), Notification.id.desc()),
            principal,
        )
        return list((await db.execute(query)).scalars().all())

    async def create_notification(self, db: AsyncSession, data: NotificationCreate) -> Notification:
        notification = Notification(message=data.message, staff_type=data.staff_type)
        db.add(notification)
        await db.flush()
        logger.info("Notification %s created for %s", notification.id, data.staff_type or "everyone")
        return notification

    async def acknowledge(self, db: AsyncSession, notification_id: int, principal: Principal) -> None:
        query = self._visible_to(
            update(Notification).where(
                Notification.id == notification_id,
                Notification.acknowledged.is_(False),
            ),
            principal,
        ).values(acknowledged=True)
        result = await db.execute(query)
        if result.rowcount == 0:
            raise NotFoundError(message="Notification not found or not accessible")
        logger.info("Notification %s acknowledged by staff %s", notification_id, principal.id)


observation_service = ObservationService()
notification_service = NotificationService()
