"""
Wildwood Zoo Backend — Visitor Schemas
"""

from datetime import date, datetime
from typing import ClassVar, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, Field

from wildwood.schemas.common import PatchModel

MembershipTier = Literal["None", "Individual", "Family", "Conservation Club"]


class VisitorUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"billing_address"})

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    billing_address: Optional[str] = None


class MembershipUpdateRequest(BaseModel):
    membership: MembershipTier


class AccountDeleteRequest(BaseModel):
    password: str = Field(min_length=1, description="Current password, to confirm deletion")


class VisitorResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    username: str
    membership: str
    billing_address: Optional[str] = None
    visit_date: date
    created_at: datetime

    model_config = {"from_attributes": True}


class VisitorListResponse(BaseModel):
    visitors: List[VisitorResponse]


class VisitorUpdatedResponse(BaseModel):
    message: str
    visitor: VisitorResponse
