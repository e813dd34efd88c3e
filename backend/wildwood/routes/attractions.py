"""
Wildwood Zoo Backend — Attraction Route Handlers

Public list/detail; manager-only writes and staff assignment.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.attraction import (
    AssignedStaffListResponse,
    AssignmentRequest,
    AttractionCreate,
    AttractionCreatedResponse,
    AttractionListResponse,
    AttractionResponse,
    AttractionUpdate,
    StaffAssignmentListResponse,
)
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.services.attraction_service import attraction_service

router = APIRouter(prefix="/api/attractions", tags=["Attractions"])


@router.get("", response_model=AttractionListResponse, summary="List attractions")
async def list_attractions(db: AsyncSession = Depends(get_db_session)) -> AttractionListResponse:
    return AttractionListResponse(attractions=await attraction_service.list_attractions(db))


@router.get(
    "/staff/{staff_id}/assignments",
    response_model=StaffAssignmentListResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Attractions a staff member is assigned to",
)
async def staff_assignments(
    staff_id: int,
    _=Depends(Authorize("attractions", "staff")),
    db: AsyncSession = Depends(get_db_session),
) -> StaffAssignmentListResponse:
    return StaffAssignmentListResponse(assignments=await attraction_service.staff_assignments(db, staff_id))


@router.get(
    "/{attraction_id}",
    response_model=AttractionResponse,
    responses=error_responses(404, 500),
    summary="Get an attraction with its lead staff name",
)
async def get_attraction(attraction_id: int, db: AsyncSession = Depends(get_db_session)) -> AttractionResponse:
    return await attraction_service.get_attraction(db, attraction_id)


@router.post(
    "",
    response_model=AttractionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Create an attraction",
)
async def create_attraction(
    body: AttractionCreate,
    _=Depends(Authorize("attractions", "create")),
    db: AsyncSession = Depends(get_db_session),
) -> AttractionCreatedResponse:
    attraction = await attraction_service.create_attraction(db, body)
    return AttractionCreatedResponse(message="Attraction created successfully", attraction=attraction)


@router.patch(
    "/{attraction_id}",
    response_model=AttractionCreatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Update an attraction",
)
async def update_attraction(
    attraction_id: int,
    body: AttractionUpdate,
    _=Depends(Authorize("attractions", "update")),
    db: AsyncSession = Depends(get_db_session),
) -> AttractionCreatedResponse:
    attraction = await attraction_service.update_attraction(db, attraction_id, body)
    return AttractionCreatedResponse(message="Attraction updated successfully", attraction=attraction)


@router.delete(
    "/{attraction_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Delete an attraction",
)
async def delete_attraction(
    attraction_id: int,
    _=Depends(Authorize("attractions", "delete")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await attraction_service.delete_attraction(db, attraction_id)
    return MessageResponse(message="Attraction deleted successfully")


@router.get(
    "/{attraction_id}/assigned-staff",
    response_model=AssignedStaffListResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Staff assigned to an attraction",
)
async def assigned_staff(
    attraction_id: int,
    _=Depends(Authorize("attractions", "staff")),
    db: AsyncSession = Depends(get_db_session),
) -> AssignedStaffListResponse:
    return AssignedStaffListResponse(staff=await attraction_service.assigned_staff(db, attraction_id))


@router.post(
    "/{attraction_id}/assign-staff",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Assign a staff member",
)
async def assign_staff(
    attraction_id: int,
    body: AssignmentRequest,
    _=Depends(Authorize("attractions", "assign")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await attraction_service.assign_staff(db, attraction_id, body.staff_id)
    return MessageResponse(message="Staff assigned to attraction successfully")


@router.delete(
    "/{attraction_id}/staff/{staff_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Remove a staff assignment",
)
async def unassign_staff(
    attraction_id: int,
    staff_id: int,
    _=Depends(Authorize("attractions", "assign")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await attraction_service.unassign_staff(db, attraction_id, staff_id)
    return MessageResponse(message="Staff removed from attraction successfully")
