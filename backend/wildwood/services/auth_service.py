"""
Wildwood Zoo Backend — Authentication Service
===============================================

What:  Visitor and staff registration, login, and current-user lookup.
How:   Passwords are hashed with werkzeug; tokens are signed by security.py.

Login order:
    visitors are checked first, then staff. Unknown username → 404,
    wrong password → 401.

Staff bootstrap:
    Registering staff requires a Manager token, except while the staff table is
    empty: the very first account may be created without one.
"""

import logging
from typing import Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.exceptions import AuthenticationError, NotFoundError, ValidationError
from wildwood.models.staff import Staff
from wildwood.models.visitor import Visitor
from wildwood.policy import authorize
from wildwood.schemas.auth import (
    LoginRequest,
    StaffRegisteredResponse,
    StaffRegisterRequest,
    TokenResponse,
    UserSummary,
    VisitorRegisterRequest,
)
from wildwood.security import (
    STAFF,
    VISITOR,
    Principal,
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


def visitor_principal(visitor: Visitor) -> Principal:
    return Principal(id=visitor.id, username=visitor.username, role=VISITOR)


def staff_principal(staff: Staff) -> Principal:
    return Principal(
        id=staff.id,
        username=staff.username,
        role=STAFF,
        staff_role=staff.role,
        staff_type=staff.staff_type,
    )


def user_summary(user: Union[Visitor, Staff]) -> UserSummary:
    if isinstance(user, Visitor):
        return UserSummary(
            id=user.id,
            username=user.username,
            role=VISITOR,
            first_name=user.first_name,
            last_name=user.last_name,
            membership=user.membership,
        )
    return UserSummary(
        id=user.id,
        username=user.username,
        role=STAFF,
        name=user.name,
        staff_role=user.role,
        staff_type=user.staff_type,
    )


class AuthService:

    async def _username_taken(self, db: AsyncSession, username: str) -> bool:
        # Login resolves visitors before staff, so a name must be unique across both
        for model in (Visitor, Staff):
            found = await db.execute(select(model.id).where(model.username == username))
            if found.first() is not None:
                return True
        return False

    async def register_visitor(self, db: AsyncSession, request: VisitorRegisterRequest) -> TokenResponse:
        if await self._username_taken(db, request.username):
            raise ValidationError(message="Username already taken", field="username")

        visitor = Visitor(
            first_name=request.first_name,
            last_name=request.last_name,
            username=request.username,
            password_hash=hash_password(request.password),
        )
        db.add(visitor)
        await db.flush()
        logger.info("Visitor registered: %s (id=%s)", visitor.username, visitor.id)

        return TokenResponse(
            message="Visitor registered successfully",
            token=create_access_token(visitor_principal(visitor)),
            user=user_summary(visitor),
        )

    async def register_staff(
        self,
        db: AsyncSession,
        request: StaffRegisterRequest,
        principal: Optional[Principal],
    ) -> StaffRegisteredResponse:
        staff_count = (await db.execute(select(func.count(Staff.id)))).scalar_one()
        if staff_count > 0:
            if principal is None:
                raise AuthenticationError(message="Access denied")
            authorize(principal, "staff", "register")
        else:
            logger.warning("Bootstrapping first staff account: %s", request.username)

        if await self._username_taken(db, request.username):
            raise ValidationError(message="Username already taken", field="username")
        if request.supervisor_id is not None and await db.get(Staff, request.supervisor_id) is None:
            raise NotFoundError(resource="supervisor", resource_id=request.supervisor_id)

        staff = Staff(
            name=request.name,
            role=request.role,
            staff_type=request.staff_type,
            ssn=request.ssn,
            birthdate=request.birthdate,
            sex=request.sex,
            address=request.address,
            supervisor_id=request.supervisor_id,
            username=request.username,
            password_hash=hash_password(request.password),
        )
        db.add(staff)
        await db.flush()
        logger.info("Staff registered: %s (id=%s, type=%s)", staff.username, staff.id, staff.staff_type)
        return StaffRegisteredResponse(message="Staff member registered successfully", staff_id=staff.id)

    async def login(self, db: AsyncSession, request: LoginRequest) -> TokenResponse:
        visitor = (await db.execute(
            select(Visitor).where(Visitor.username == request.username)
        )).scalar_one_or_none()
        if visitor is not None:
            if not verify_password(visitor.password_hash, request.password):
                raise AuthenticationError(message="Invalid password")
            return TokenResponse(
                message="Login successful",
                token=create_access_token(visitor_principal(visitor)),
                user=user_summary(visitor),
            )

        staff = (await db.execute(
            select(Staff).where(Staff.username == request.username)
        )).scalar_one_or_none()
        if staff is not None:
            if not verify_password(staff.password_hash, request.password):
                raise AuthenticationError(message="Invalid password")
            return TokenResponse(
                message="Login successful",
                token=create_access_token(staff_principal(staff)),
                user=user_summary(staff),
            )

        raise NotFoundError(resource="user", message="User not found")

    async def current_user(self, db: AsyncSession, principal: Principal) -> UserSummary:
        model = Visitor if principal.is_visitor else Staff
        user = await db.get(model, principal.id)
        if user is None:
            raise NotFoundError(resource="user", message="User not found")
        return user_summary(user)


auth_service = AuthService()
