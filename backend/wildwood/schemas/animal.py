"""
Wildwood Zoo Backend — Animal Schemas
"""

from datetime import date
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, Field

from wildwood.schemas.common import PatchModel


class AnimalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    species: str = Field(min_length=1, max_length=100)
    date_of_birth: date
    gender: str = Field(min_length=1, max_length=20)
    health_status: str = Field(min_length=1, max_length=50)
    last_vet_checkup: date
    danger_level: str = Field(min_length=1, max_length=50)
    image: Optional[str] = None
    enclosure_id: int


class AnimalUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"image"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    species: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, min_length=1, max_length=20)
    health_status: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_vet_checkup: Optional[date] = None
    danger_level: Optional[str] = Field(default=None, min_length=1, max_length=50)
    image: Optional[str] = None
    enclosure_id: Optional[int] = None


class AnimalResponse(BaseModel):
    id: int
    name: str
    species: str
    date_of_birth: date
    gender: str
    health_status: str
    last_vet_checkup: date
    danger_level: str
    image: Optional[str] = None
    enclosure_id: int
    enclosure_name: Optional[str] = None

    model_config = {"from_attributes": True}


class AnimalCreatedResponse(BaseModel):
    message: str
    animal: AnimalResponse


class AnimalListResponse(BaseModel):
    animals: List[AnimalResponse]
