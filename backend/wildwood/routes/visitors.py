"""
Wildwood Zoo Backend — Visitor Route Handlers

Profile endpoints. Password, membership and account deletion are reserved
to the visitor themselves; staff may read and patch profiles.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.schemas.staff import PasswordChangeRequest
from wildwood.schemas.visitor import (
    AccountDeleteRequest,
    MembershipUpdateRequest,
    VisitorListResponse,
    VisitorResponse,
    VisitorUpdate,
    VisitorUpdatedResponse,
)
from wildwood.services.visitor_service import visitor_service

router = APIRouter(prefix="/api/visitors", tags=["Visitors"])


@router.get(
    "",
    response_model=VisitorListResponse,
    responses=error_responses(401, 403, 500),
    summary="List visitors (managers)",
)
async def list_visitors(
    _=Depends(Authorize("visitors", "list")),
    db: AsyncSession = Depends(get_db_session),
) -> VisitorListResponse:
    visitors = await visitor_service.list_visitors(db)
    return VisitorListResponse(visitors=[VisitorResponse.model_validate(v) for v in visitors])


@router.get(
    "/{visitor_id}",
    response_model=VisitorResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Get a visitor",
)
async def get_visitor(
    visitor_id: int,
    _=Depends(Authorize("visitors", "read", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> VisitorResponse:
    return VisitorResponse.model_validate(await visitor_service.get_visitor(db, visitor_id))


@router.patch(
    "/{visitor_id}",
    response_model=VisitorUpdatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Update a visitor profile",
)
async def update_visitor(
    visitor_id: int,
    body: VisitorUpdate,
    _=Depends(Authorize("visitors", "update", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> VisitorUpdatedResponse:
    visitor = await visitor_service.update_visitor(db, visitor_id, body)
    return VisitorUpdatedResponse(
        message="Visitor updated successfully",
        visitor=VisitorResponse.model_validate(visitor),
    )


@router.put(
    "/{visitor_id}/password",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Change own password",
    description="The new password must be at least 6 characters.",
)
async def change_password(
    visitor_id: int,
    body: PasswordChangeRequest,
    _=Depends(Authorize("visitors", "password", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await visitor_service.change_password(db, visitor_id, body.current_password, body.new_password)
    return MessageResponse(message="Password updated successfully")


@router.put(
    "/{visitor_id}/membership",
    response_model=VisitorUpdatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Change membership tier",
)
async def update_membership(
    visitor_id: int,
    body: MembershipUpdateRequest,
    _=Depends(Authorize("visitors", "membership", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> VisitorUpdatedResponse:
    visitor = await visitor_service.update_membership(db, visitor_id, body.membership)
    return VisitorUpdatedResponse(
        message="Membership updated successfully",
        visitor=VisitorResponse.model_validate(visitor),
    )


@router.delete(
    "/{visitor_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Delete own account",
    description="Requires the current password. Personal data is anonymised; purchase history is kept.",
)
async def delete_account(
    visitor_id: int,
    body: AccountDeleteRequest,
    _=Depends(Authorize("visitors", "delete", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await visitor_service.delete_account(db, visitor_id, body.password)
    return MessageResponse(message="Account deleted successfully. All personal data has been removed.")
