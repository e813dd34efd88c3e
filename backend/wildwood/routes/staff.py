"""
Wildwood Zoo Backend — Staff Route Handlers

Managers list and delete staff. A staff member reads and edits their own
record (address only, unless they are a manager) and changes their own
password.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.schemas.staff import (
    PasswordChangeRequest,
    StaffListResponse,
    StaffResponse,
    StaffSummary,
    StaffUpdate,
    StaffUpdatedResponse,
)
from wildwood.security import Principal
from wildwood.services.staff_service import staff_service

router = APIRouter(prefix="/api/staff", tags=["Staff"])


@router.get(
    "",
    response_model=StaffListResponse,
    responses=error_responses(401, 403, 500),
    summary="List staff (managers)",
)
async def list_staff(
    _=Depends(Authorize("staff", "list")),
    db: AsyncSession = Depends(get_db_session),
) -> StaffListResponse:
    staff = await staff_service.list_staff(db)
    return StaffListResponse(staff=[StaffResponse.model_validate(s) for s in staff])


@router.get(
    "/zookeepers",
    response_model=list[StaffSummary],
    responses=error_responses(500),
    summary="List zookeepers",
)
async def list_zookeepers(db: AsyncSession = Depends(get_db_session)) -> list[StaffSummary]:
    return [StaffSummary.model_validate(s) for s in await staff_service.list_zookeepers(db)]


@router.get(
    "/enclosure/{enclosure_id}",
    response_model=list[StaffSummary],
    responses=error_responses(401, 403, 500),
    summary="Staff owning an enclosure",
)
async def list_by_enclosure(
    enclosure_id: int,
    _=Depends(Authorize("staff", "enclosures")),
    db: AsyncSession = Depends(get_db_session),
) -> list[StaffSummary]:
    return [StaffSummary.model_validate(s) for s in await staff_service.list_by_enclosure(db, enclosure_id)]


@router.get(
    "/{staff_id}",
    response_model=StaffResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Get a staff member",
)
async def get_staff(
    staff_id: int,
    _=Depends(Authorize("staff", "read", owner_param="staff_id")),
    db: AsyncSession = Depends(get_db_session),
) -> StaffResponse:
    return StaffResponse.model_validate(await staff_service.get_staff(db, staff_id))


@router.patch(
    "/{staff_id}",
    response_model=StaffUpdatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Update a staff member",
    description="Non-managers may only change their own `address`; other fields are a 403.",
)
async def update_staff(
    staff_id: int,
    body: StaffUpdate,
    principal: Principal = Depends(Authorize("staff", "update", owner_param="staff_id")),
    db: AsyncSession = Depends(get_db_session),
) -> StaffUpdatedResponse:
    staff = await staff_service.update_staff(db, staff_id, body, principal)
    return StaffUpdatedResponse(
        message="Staff member updated successfully",
        staff=StaffResponse.model_validate(staff),
    )


@router.delete(
    "/{staff_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Delete a staff member",
    description="Refused with 400 while the staff member still owns enclosures.",
)
async def delete_staff(
    staff_id: int,
    _=Depends(Authorize("staff", "delete")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await staff_service.delete_staff(db, staff_id)
    return MessageResponse(message="Staff member deleted successfully")


@router.put(
    "/{staff_id}/password",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Change own password",
)
async def change_password(
    staff_id: int,
    body: PasswordChangeRequest,
    _=Depends(Authorize("staff", "password", owner_param="staff_id")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await staff_service.change_password(db, staff_id, body.current_password, body.new_password)
    return MessageResponse(message="Password updated successfully")
