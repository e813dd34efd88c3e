"""
Wildwood Zoo Backend — Attraction Schemas
"""

from datetime import datetime
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, Field, model_validator

from wildwood.schemas.common import PatchModel


class AttractionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=150)
    picture: str = Field(min_length=1)
    start_time: datetime
    end_time: Optional[datetime] = None
    staff_id: Optional[int] = None

    @model_validator(mode="after")
    def end_after_start(self) -> "AttractionCreate":
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class AttractionUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"end_time", "staff_id"})

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1, max_length=150)
    picture: Optional[str] = Field(default=None, min_length=1)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    staff_id: Optional[int] = None


class AttractionResponse(BaseModel):
    id: int
    title: str
    description: str
    location: str
    picture: str
    start_time: datetime
    end_time: Optional[datetime] = None
    staff_id: Optional[int] = None
    staff_name: Optional[str] = None

    model_config = {"from_attributes": True}


class AttractionListResponse(BaseModel):
    attractions: List[AttractionResponse]


class AttractionCreatedResponse(BaseModel):
    message: str
    attraction: AttractionResponse


class AssignmentRequest(BaseModel):
    staff_id: int


class AssignedStaffResponse(BaseModel):
    assignment_id: int
    staff_id: int
    name: str
    role: str
    staff_type: str
    assigned_date: datetime


class AssignedStaffListResponse(BaseModel):
    staff: List[AssignedStaffResponse]


class StaffAssignmentResponse(BaseModel):
    assignment_id: int
    attraction_id: int
    title: str
    location: str
    start_time: datetime
    end_time: Optional[datetime] = None
    assigned_date: datetime


class StaffAssignmentListResponse(BaseModel):
    assignments: List[StaffAssignmentResponse]
