"""
Wildwood Zoo Backend — Animal Service

CRUD over animals. Responses carry the enclosure name, which is read through
an explicit join because relationships are never lazy-loaded under asyncio.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.exceptions import NotFoundError
from wildwood.models.animal import Animal
from wildwood.models.enclosure import Enclosure
from wildwood.schemas.animal import AnimalCreate, AnimalResponse, AnimalUpdate
from wildwood.services.base import apply_changes, get_or_404

logger = logging.getLogger(__name__)


def to_response(animal: Animal, enclosure_name: Optional[str] = None) -> AnimalResponse:
    response = AnimalResponse.model_validate(animal)
    response.enclosure_name = enclosure_name
    return response


class AnimalService:

    def _joined(self):
        return select(Animal, Enclosure.name).join(Enclosure, Animal.enclosure_id == Enclosure.id)

    async def list_animals(self, db: AsyncSession, health_status: Optional[str] = None) -> List[AnimalResponse]:
        query = self._joined().order_by(Animal.name)
        if health_status:
            query = query.where(Animal.health_status == health_status)
        rows = (await db.execute(query)).all()
        return [to_response(animal, enclosure_name) for animal, enclosure_name in rows]

    async def get_animal(self, db: AsyncSession, animal_id: int) -> AnimalResponse:
        row = (await db.execute(self._joined().where(Animal.id == animal_id))).first()
        if row is None:
            raise NotFoundError(resource="animal", resource_id=animal_id)
        return to_response(row[0], row[1])

    async def list_by_enclosure(self, db: AsyncSession, enclosure_id: int) -> List[AnimalResponse]:
        enclosure = await get_or_404(db, Enclosure, enclosure_id, "enclosure")
        result = await db.execute(
            select(Animal).where(Animal.enclosure_id == enclosure_id).order_by(Animal.name)
        )
        return [to_response(a, enclosure.name) for a in result.scalars().all()]

    async def create_animal(self, db: AsyncSession, data: AnimalCreate) -> AnimalResponse:
        enclosure = await get_or_404(db, Enclosure, data.enclosure_id, "enclosure")
        animal = Animal(**data.model_dump())
        db.add(animal)
        await db.flush()
        logger.info("Animal created: %s (id=%s) in enclosure %s", animal.name, animal.id, enclosure.id)
        return to_response(animal, enclosure.name)

    async def update_animal(self, db: AsyncSession, animal_id: int, patch: AnimalUpdate) -> AnimalResponse:
        changes = patch.changes()
        animal = await get_or_404(db, Animal, animal_id, "animal")
        if "enclosure_id" in changes:
            await get_or_404(db, Enclosure, changes["enclosure_id"], "enclosure")
        apply_changes(animal, changes)
        await db.flush()
        logger.info("Animal %s updated: %s", animal_id, sorted(changes))
        return await self.get_animal(db, animal_id)

    async def delete_animal(self, db: AsyncSession, animal_id: int) -> None:
        animal = await get_or_404(db, Animal, animal_id, "animal")
        await db.delete(animal)
        await db.flush()
        logger.info("Animal %s deleted", animal_id)


animal_service = AnimalService()
