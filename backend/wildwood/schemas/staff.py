"""
Wildwood Zoo Backend — Staff Schemas

SSN and password hash are never part of a response model.
"""

from datetime import date
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, Field

from wildwood.schemas.common import PatchModel


class StaffUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"supervisor_id"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    role: Optional[str] = Field(default=None, min_length=1, max_length=50)
    staff_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    address: Optional[str] = Field(default=None, min_length=1)
    supervisor_id: Optional[int] = None


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, description="At least 6 characters")


class StaffResponse(BaseModel):
    id: int
    name: str
    role: str
    staff_type: str
    birthdate: date
    sex: str
    address: str
    hire_date: date
    supervisor_id: Optional[int] = None
    username: str

    model_config = {"from_attributes": True}


class StaffSummary(BaseModel):
    id: int
    name: str
    role: str
    staff_type: str

    model_config = {"from_attributes": True}


class StaffListResponse(BaseModel):
    staff: List[StaffResponse]


class StaffUpdatedResponse(BaseModel):
    message: str
    staff: StaffResponse
