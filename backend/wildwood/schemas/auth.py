"""
Wildwood Zoo Backend — Authentication Schemas

Registration, login and /auth/me payloads. Tokens are returned next to a
small `user` summary the front end stores alongside them.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class VisitorRegisterRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class StaffRegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    role: str = Field(min_length=1, max_length=50, description="Staff role, e.g. Manager or Staff")
    staff_type: str = Field(min_length=1, max_length=50, description="Job function, e.g. Vet")
    ssn: str = Field(min_length=1, max_length=20)
    birthdate: date
    sex: str = Field(min_length=1, max_length=10)
    address: str = Field(min_length=1)
    supervisor_id: Optional[int] = None
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserSummary(BaseModel):
    id: int
    username: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    membership: Optional[str] = None
    name: Optional[str] = None
    staff_role: Optional[str] = None
    staff_type: Optional[str] = None


class TokenResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class StaffRegisteredResponse(BaseModel):
    message: str
    staff_id: int
