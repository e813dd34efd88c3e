"""
Wildwood Zoo Backend — Observation & Notification Schemas
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ObservationCreate(BaseModel):
    animal_id: int
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)


class ObservationResponse(BaseModel):
    id: int
    staff_id: Optional[int] = None
    animal_id: int
    title: str
    content: str
    created_at: datetime
    acknowledged: bool
    acknowledged_by: Optional[int] = None
    acknowledged_at: Optional[datetime] = None
    staff_name: Optional[str] = None
    animal_name: Optional[str] = None
    acknowledged_by_name: Optional[str] = None

    model_config = {"from_attributes": True}


class ObservationListResponse(BaseModel):
    observations: List[ObservationResponse]


class ObservationCreatedResponse(BaseModel):
    message: str
    observation: ObservationResponse


class NotificationCreate(BaseModel):
    message: str = Field(min_length=1)
    staff_type: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Target staff type; omit to broadcast to everyone",
    )


class NotificationResponse(BaseModel):
    id: int
    message: str
    staff_type: Optional[str] = None
    created_at: datetime
    acknowledged: bool

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]


class NotificationCreatedResponse(BaseModel):
    message: str
    notification: NotificationResponse
