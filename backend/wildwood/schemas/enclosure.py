"""
Wildwood Zoo Backend — Enclosure Schemas
==========================================

What:  Request bodies and response shapes for enclosures, including the
       report entries (animals, health breakdown, capacity usage %).
"""

from datetime import date
from typing import ClassVar, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field

from wildwood.schemas.animal import AnimalResponse
from wildwood.schemas.common import PatchModel


class EnclosureCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    type: str = Field(min_length=1, max_length=50)
    capacity: int = Field(ge=0)
    location: str = Field(min_length=1, max_length=150)
    staff_id: Optional[int] = None


class EnclosureUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"staff_id"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(default=None, ge=0)
    location: Optional[str] = Field(default=None, min_length=1, max_length=150)
    staff_id: Optional[int] = None


class AssignStaffRequest(BaseModel):
    staff_id: int


class EnclosureResponse(BaseModel):
    id: int
    name: str
    type: str
    capacity: int
    location: str
    staff_id: Optional[int] = None
    staff_name: Optional[str] = None
    animal_count: int = 0
    capacity_usage: float = Field(default=0.0, description="Animals housed / capacity, in percent")

    model_config = {"from_attributes": True}


class EnclosureDetailResponse(EnclosureResponse):
    animals: List[AnimalResponse] = Field(default_factory=list)


class EnclosureCreatedResponse(BaseModel):
    message: str
    enclosure: EnclosureResponse


class EnclosureReportEntry(EnclosureDetailResponse):
    health_breakdown: Dict[str, int] = Field(
        default_factory=dict,
        description="Animal count per health_status",
    )
    last_vet_checkup: Optional[date] = Field(
        default=None,
        description="Most recent checkup among the enclosure's animals",
    )


class EnclosureReportResponse(BaseModel):
    enclosures: List[EnclosureReportEntry]
    total_enclosures: int
    total_animals: int
