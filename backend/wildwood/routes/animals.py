"""
Wildwood Zoo Backend — Animal Route Handlers

Reads are public; writes need a staff token (see POLICY).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.animal import (
    AnimalCreate,
    AnimalCreatedResponse,
    AnimalListResponse,
    AnimalResponse,
    AnimalUpdate,
)
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.services.animal_service import animal_service

router = APIRouter(prefix="/api/animals", tags=["Animals"])


@router.get(
    "",
    response_model=AnimalListResponse,
    responses=error_responses(500),
    summary="List animals",
)
async def list_animals(
    health_status: Optional[str] = Query(default=None, description="Only animals with this health status"),
    db: AsyncSession = Depends(get_db_session),
) -> AnimalListResponse:
    return AnimalListResponse(animals=await animal_service.list_animals(db, health_status))


@router.get(
    "/enclosure/{enclosure_id}",
    response_model=AnimalListResponse,
    responses=error_responses(404, 500),
    summary="List animals in an enclosure",
)
async def list_by_enclosure(
    enclosure_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> AnimalListResponse:
    return AnimalListResponse(animals=await animal_service.list_by_enclosure(db, enclosure_id))


@router.get(
    "/{animal_id}",
    response_model=AnimalResponse,
    responses=error_responses(404, 500),
    summary="Get an animal",
)
async def get_animal(animal_id: int, db: AsyncSession = Depends(get_db_session)) -> AnimalResponse:
    return await animal_service.get_animal(db, animal_id)


@router.post(
    "",
    response_model=AnimalCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Create an animal",
)
async def create_animal(
    body: AnimalCreate,
    _=Depends(Authorize("animals", "create")),
    db: AsyncSession = Depends(get_db_session),
) -> AnimalCreatedResponse:
    animal = await animal_service.create_animal(db, body)
    return AnimalCreatedResponse(message="Animal added successfully", animal=animal)


@router.patch(
    "/{animal_id}",
    response_model=AnimalCreatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Update an animal",
    description="Applies only the fields present in the body; an empty body is a 400.",
)
async def update_animal(
    animal_id: int,
    body: AnimalUpdate,
    _=Depends(Authorize("animals", "update")),
    db: AsyncSession = Depends(get_db_session),
) -> AnimalCreatedResponse:
    animal = await animal_service.update_animal(db, animal_id, body)
    return AnimalCreatedResponse(message="Animal updated successfully", animal=animal)


@router.delete(
    "/{animal_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Delete an animal",
)
async def delete_animal(
    animal_id: int,
    _=Depends(Authorize("animals", "delete")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await animal_service.delete_animal(db, animal_id)
    return MessageResponse(message="Animal deleted successfully")
