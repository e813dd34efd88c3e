"""
Wildwood Zoo Backend — Observation & Notification Route Handlers
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.schemas.observation import (
    NotificationCreate,
    NotificationCreatedResponse,
    NotificationListResponse,
    NotificationResponse,
    ObservationCreate,
    ObservationCreatedResponse,
    ObservationListResponse,
)
from wildwood.security import Principal
from wildwood.services.observation_service import notification_service, observation_service

router = APIRouter(prefix="/api/observations", tags=["Observations"])
notifications_router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


# ══════════════════════════════════════════════════════════════════════════
# Observations
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "",
    response_model=ObservationListResponse,
    responses=error_responses(401, 403, 500),
    summary="List observations",
)
async def list_observations(
    acknowledged: Optional[bool] = Query(default=None),
    _=Depends(Authorize("observations", "read")),
    db: AsyncSession = Depends(get_db_session),
) -> ObservationListResponse:
    return ObservationListResponse(observations=await observation_service.list_observations(db, acknowledged))


@router.get(
    "/animal/{animal_id}",
    response_model=ObservationListResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Observations on one animal",
)
async def list_by_animal(
    animal_id: int,
    _=Depends(Authorize("observations", "read")),
    db: AsyncSession = Depends(get_db_session),
) -> ObservationListResponse:
    return ObservationListResponse(observations=await observation_service.list_by_animal(db, animal_id))


@router.post(
    "",
    response_model=ObservationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Record an observation",
)
async def create_observation(
    body: ObservationCreate,
    principal: Principal = Depends(Authorize("observations", "create")),
    db: AsyncSession = Depends(get_db_session),
) -> ObservationCreatedResponse:
    observation = await observation_service.create_observation(db, body, principal)
    return ObservationCreatedResponse(message="Observation added successfully", observation=observation)


@router.put(
    "/{observation_id}/acknowledge",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Acknowledge an observation",
)
async def acknowledge_observation(
    observation_id: int,
    principal: Principal = Depends(Authorize("observations", "acknowledge")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await observation_service.acknowledge(db, observation_id, principal)
    return MessageResponse(message="Observation acknowledged successfully")


# ══════════════════════════════════════════════════════════════════════════
# Notifications
# ══════════════════════════════════════════════════════════════════════════


@notifications_router.get(
    "",
    response_model=NotificationListResponse,
    responses=error_responses(401, 403, 500),
    summary="Notifications visible to the caller",
)
async def list_notifications(
    principal: Principal = Depends(Authorize("notifications", "read")),
    db: AsyncSession = Depends(get_db_session),
) -> NotificationListResponse:
    notifications = await notification_service.list_notifications(db, principal)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
    )


@notifications_router.post(
    "",
    response_model=NotificationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 500),
    summary="Send a notification (managers)",
)
async def create_notification(
    body: NotificationCreate,
    _=Depends(Authorize("notifications", "create")),
    db: AsyncSession = Depends(get_db_session),
) -> NotificationCreatedResponse:
    notification = await notification_service.create_notification(db, body)
    return NotificationCreatedResponse(
        message="Notification created successfully",
        notification=NotificationResponse.model_validate(notification),
    )


@notifications_router.put(
    "/{notification_id}/acknowledge",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Acknowledge a notification",
)
async def acknowledge_notification(
    notification_id: int,
    principal: Principal = Depends(Authorize("notifications", "acknowledge")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await notification_service.acknowledge(db, notification_id, principal)
    return MessageResponse(message="Notification acknowledged successfully")
