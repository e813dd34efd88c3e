"""
Wildwood Zoo Backend — Enclosure Route Handlers
=================================================

What:  Enclosure list/detail (public), report (staff), and manager-only writes
       including staff assignment.

Route order matters: the static paths (/report, /staff/{id}) are declared
before /{enclosure_id} so they are never parsed as an id.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.schemas.enclosure import (
    AssignStaffRequest,
    EnclosureCreate,
    EnclosureCreatedResponse,
    EnclosureDetailResponse,
    EnclosureReportResponse,
    EnclosureResponse,
    EnclosureUpdate,
)
from wildwood.services.enclosure_service import enclosure_service

router = APIRouter(prefix="/api/enclosures", tags=["Enclosures"])


@router.get(
    "",
    response_model=list[EnclosureResponse],
    responses=error_responses(500),
    summary="List enclosures with animal count and capacity usage",
)
async def list_enclosures(db: AsyncSession = Depends(get_db_session)) -> list[EnclosureResponse]:
    return await enclosure_service.list_enclosures(db)


@router.get(
    "/report",
    response_model=EnclosureReportResponse,
    responses=error_responses(400, 401, 403, 500),
    summary="Enclosure report",
    description=(
        "Per-enclosure animals, health breakdown and capacity usage. "
        "`min_capacity`/`max_capacity` filter on usage percent; "
        "`vet_after`/`vet_before` filter animals by last checkup."
    ),
)
async def enclosure_report(
    type: Optional[str] = Query(default=None, description="Enclosure type"),
    min_capacity: Optional[float] = Query(default=None, ge=0, description="Minimum capacity usage %"),
    max_capacity: Optional[float] = Query(default=None, ge=0, description="Maximum capacity usage %"),
    vet_after: Optional[date] = Query(default=None, description="Last checkup on or after"),
    vet_before: Optional[date] = Query(default=None, description="Last checkup on or before"),
    _=Depends(Authorize("enclosures", "report")),
    db: AsyncSession = Depends(get_db_session),
) -> EnclosureReportResponse:
    return await enclosure_service.report(
        db,
        enclosure_type=type,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        vet_after=vet_after,
        vet_before=vet_before,
    )


@router.get(
    "/staff/{staff_id}",
    response_model=list[EnclosureResponse],
    responses=error_responses(404, 500),
    summary="Enclosures owned by a staff member",
)
async def list_by_staff(staff_id: int, db: AsyncSession = Depends(get_db_session)) -> list[EnclosureResponse]:
    return await enclosure_service.list_by_staff(db, staff_id)


@router.get(
    "/{enclosure_id}",
    response_model=EnclosureDetailResponse,
    responses=error_responses(404, 500),
    summary="Get an enclosure with its animals",
)
async def get_enclosure(enclosure_id: int, db: AsyncSession = Depends(get_db_session)) -> EnclosureDetailResponse:
    return await enclosure_service.get_enclosure(db, enclosure_id)


@router.post(
    "",
    response_model=EnclosureCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Create an enclosure",
)
async def create_enclosure(
    body: EnclosureCreate,
    _=Depends(Authorize("enclosures", "create")),
    db: AsyncSession = Depends(get_db_session),
) -> EnclosureCreatedResponse:
    enclosure = await enclosure_service.create_enclosure(db, body)
    return EnclosureCreatedResponse(message="Enclosure created successfully", enclosure=enclosure)


@router.patch(
    "/{enclosure_id}",
    response_model=EnclosureCreatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Update an enclosure",
)
async def update_enclosure(
    enclosure_id: int,
    body: EnclosureUpdate,
    _=Depends(Authorize("enclosures", "update")),
    db: AsyncSession = Depends(get_db_session),
) -> EnclosureCreatedResponse:
    enclosure = await enclosure_service.update_enclosure(db, enclosure_id, body)
    return EnclosureCreatedResponse(message="Enclosure updated successfully", enclosure=enclosure)


@router.delete(
    "/{enclosure_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Delete an enclosure and its animals",
)
async def delete_enclosure(
    enclosure_id: int,
    _=Depends(Authorize("enclosures", "delete")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await enclosure_service.delete_enclosure(db, enclosure_id)
    return MessageResponse(message="Enclosure deleted successfully")


@router.post(
    "/{enclosure_id}/assign-staff",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Assign the owning staff member",
)
async def assign_staff(
    enclosure_id: int,
    body: AssignStaffRequest,
    _=Depends(Authorize("enclosures", "assign")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await enclosure_service.assign_staff(db, enclosure_id, body.staff_id)
    return MessageResponse(message="Staff assigned successfully")


@router.delete(
    "/{enclosure_id}/assign-staff",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Remove the owning staff member",
)
async def unassign_staff(
    enclosure_id: int,
    _=Depends(Authorize("enclosures", "assign")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await enclosure_service.unassign_staff(db, enclosure_id)
    return MessageResponse(message="Staff unassigned successfully")
