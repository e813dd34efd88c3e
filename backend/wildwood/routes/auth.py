"""
Wildwood Zoo Backend — Authentication Route Handlers
======================================================

What:  POST /api/auth/register, /api/auth/register-staff, /api/auth/login and
       GET /api/auth/me.
Who:   Login and registration pages of the front end.

Rate limiting:
    register and login are the credential endpoints covered by
    AuthRateLimitMiddleware (per-IP sliding window).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.schemas.auth import (
    LoginRequest,
    StaffRegisteredResponse,
    StaffRegisterRequest,
    TokenResponse,
    UserSummary,
    VisitorRegisterRequest,
)
from wildwood.schemas.common import error_responses
from wildwood.security import Principal, get_current_principal, get_optional_principal
from wildwood.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 429, 500),
    summary="Register a visitor account",
    description="Creates a visitor and returns a bearer token. Username taken → 400.",
)
async def register_visitor(
    body: VisitorRegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.register_visitor(db, body)


@router.post(
    "/register-staff",
    response_model=StaffRegisteredResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 429, 500),
    summary="Register a staff account",
    description=(
        "Managers only. While no staff account exists the endpoint is open, "
        "so the first manager can be created."
    ),
)
async def register_staff(
    body: StaffRegisterRequest,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: AsyncSession = Depends(get_db_session),
) -> StaffRegisteredResponse:
    return await auth_service.register_staff(db, body, principal)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses=error_responses(400, 401, 404, 429, 500),
    summary="Log in as visitor or staff",
    description="Visitors are matched first, then staff. Unknown user → 404, wrong password → 401.",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.login(db, body)


@router.get(
    "/me",
    response_model=UserSummary,
    responses=error_responses(401, 403, 404),
    summary="Current user",
)
async def me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> UserSummary:
    return await auth_service.current_user(db, principal)
