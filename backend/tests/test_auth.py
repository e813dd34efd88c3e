"""
Wildwood Zoo Backend — Authentication & Authorization Tests
=============================================================

What:  Tests for the bearer-token gate, the policy table, registration/login
       and the credential-endpoint rate limiter.

What we test:
    ✅ No token → 401, bad or expired token → 403
    ✅ Policy rules: role, staff role, staff type and ownership
    ✅ Visitor registration/login and the staff bootstrap rule
    ✅ Usernames are unique across visitors and staff
    ✅ Partial-update bodies reject empty and null patches
    ✅ Login and registration are rate limited per client
"""

from datetime import datetime, timedelta, timezone
from typing import ClassVar, FrozenSet, Optional

import jwt
import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from wildwood.config import settings
from wildwood.exceptions import PermissionDeniedError, ValidationError
from wildwood.middleware.rate_limit import AuthRateLimitMiddleware
from wildwood.policy import POLICY, Authorize, authorize
from wildwood.schemas.common import PatchModel
from wildwood.security import (
    STAFF,
    VISITOR,
    Principal,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

MANAGER = Principal(id=1, username="boss", role=STAFF, staff_role="Manager", staff_type="Admin")
KEEPER = Principal(id=2, username="keeper", role=STAFF, staff_role="Staff", staff_type="Zookeeper")
CLERK = Principal(id=3, username="clerk", role=STAFF, staff_role="Staff", staff_type="Gift Shop Clerk")
SHOP_MANAGER = Principal(id=4, username="shopboss", role=STAFF, staff_role="Manager", staff_type="Gift Shop Clerk")
GUEST = Principal(id=10, username="guest", role=VISITOR)


class TestTokens:

    def test_round_trip_keeps_staff_claims(self):
        principal = decode_access_token(create_access_token(KEEPER))
        assert principal == KEEPER

    def test_visitor_token_has_no_staff_claims(self):
        payload = jwt.decode(create_access_token(GUEST), settings.jwt_secret, algorithms=["HS256"])
        assert payload["role"] == "visitor"
        assert "staffRole" not in payload

    def test_expired_token_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(minutes=settings.jwt_expires_minutes + 5)
        token = create_access_token(GUEST, now=issued)
        with pytest.raises(PermissionDeniedError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.message == "Invalid token"

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"id": 1, "role": "staff"}, "someone-elses-secret-value-000000", algorithm="HS256")
        with pytest.raises(PermissionDeniedError):
            decode_access_token(token)

    def test_missing_claims_rejected(self):
        token = jwt.encode({"username": "nobody"}, settings.jwt_secret, algorithm="HS256")
        with pytest.raises(PermissionDeniedError):
            decode_access_token(token)

    def test_password_hashing(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert verify_password(hashed, "hunter22")
        assert not verify_password(hashed, "hunter23")


class TestPolicy:

    def test_manager_only_actions(self):
        authorize(MANAGER, "enclosures", "create")
        with pytest.raises(PermissionDeniedError):
            authorize(KEEPER, "enclosures", "create")
        with pytest.raises(PermissionDeniedError):
            authorize(GUEST, "enclosures", "create")

    def test_products_need_gift_shop_manager(self):
        authorize(SHOP_MANAGER, "products", "create")
        for principal in (MANAGER, CLERK, GUEST):
            with pytest.raises(PermissionDeniedError):
                authorize(principal, "products", "create")

    def test_ownership(self):
        authorize(GUEST, "visitors", "update", owner_id=GUEST.id)
        authorize(KEEPER, "visitors", "update", owner_id=GUEST.id)
        with pytest.raises(PermissionDeniedError):
            authorize(GUEST, "visitors", "update", owner_id=GUEST.id + 1)
        # Only the owner may change a password, managers included
        with pytest.raises(PermissionDeniedError):
            authorize(MANAGER, "staff", "password", owner_id=KEEPER.id)

    def test_observations_by_type_or_role(self):
        vet_manager = Principal(id=5, username="vetboss", role=STAFF, staff_role="Admin", staff_type="Vet")
        authorize(vet_manager, "observations", "acknowledge")
        with pytest.raises(PermissionDeniedError):
            authorize(vet_manager, "observations", "create")

    def test_unknown_action_denied(self):
        with pytest.raises(PermissionDeniedError):
            authorize(MANAGER, "animals", "teleport")

    def test_dependency_rejects_unlisted_rule(self):
        with pytest.raises(KeyError):
            Authorize("animals", "teleport")

    def test_every_rule_has_requirements(self):
        assert all(len(rule) > 0 for rule in POLICY.values())


class _SampleUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"nickname"})

    name: Optional[str] = None
    nickname: Optional[str] = None


class TestPatchModel:

    def test_changes_only_sent_fields(self):
        assert _SampleUpdate(name="Zuri").changes() == {"name": "Zuri"}

    def test_empty_patch_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            _SampleUpdate().changes()
        assert exc_info.value.message == "No valid fields provided for update"

    def test_unknown_keys_are_an_empty_patch(self):
        with pytest.raises(ValidationError):
            _SampleUpdate.model_validate({"colour": "blue"}).changes()

    def test_null_only_for_nullable_fields(self):
        assert _SampleUpdate(nickname=None).changes() == {"nickname": None}
        with pytest.raises(ValidationError) as exc_info:
            _SampleUpdate(name=None).changes()
        assert exc_info.value.field == "name"


# ══════════════════════════════════════════════════════════════════════════
# HTTP endpoints
# ══════════════════════════════════════════════════════════════════════════

STAFF_BODY = {
    "name": "Mara Okafor",
    "role": "Manager",
    "staff_type": "Admin",
    "ssn": "987-65-4321",
    "birthdate": "1980-02-14",
    "sex": "F",
    "address": "3 Baobab Road",
    "username": "mara",
    "password": "sup3rsecret",
}


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, test_client):
        response = await test_client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "Access denied"
        assert "request_id" in response.json()

    @pytest.mark.asyncio
    async def test_bad_token_is_403(self, test_client):
        response = await test_client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 403
        assert response.json()["error"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_register_then_login(self, test_client):
        register = await test_client.post("/api/auth/register", json={
            "first_name": "Ada", "last_name": "Lovelace", "username": "ada", "password": "engine1",
        })
        assert register.status_code == 201
        assert register.json()["user"]["membership"] == "None"

        login = await test_client.post("/api/auth/login", json={"username": "ada", "password": "engine1"})
        assert login.status_code == 200
        token = login.json()["token"]

        me = await test_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["username"] == "ada"
        assert me.json()["role"] == "visitor"

    @pytest.mark.asyncio
    async def test_login_failures(self, test_client, seed):
        await seed.visitor(username="ada")

        wrong = await test_client.post("/api/auth/login", json={"username": "ada", "password": "nope"})
        assert wrong.status_code == 401
        assert wrong.json()["error"] == "Invalid password"

        unknown = await test_client.post("/api/auth/login", json={"username": "ghost", "password": "x"})
        assert unknown.status_code == 404
        assert unknown.json()["error"] == "User not found"

    @pytest.mark.asyncio
    async def test_staff_login_carries_staff_claims(self, test_client, seed):
        await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")

        login = await test_client.post("/api/auth/login", json={"username": "keeper", "password": "secret123"})

        assert login.status_code == 200
        principal = decode_access_token(login.json()["token"])
        assert (principal.role, principal.staff_role, principal.staff_type) == ("staff", "Staff", "Zookeeper")

    @pytest.mark.asyncio
    async def test_username_unique_across_tables(self, test_client, seed):
        await seed.staff(username="mara")
        response = await test_client.post("/api/auth/register", json={
            "first_name": "Mara", "last_name": "Visitor", "username": "mara", "password": "pw1234",
        })
        assert response.status_code == 400
        assert response.json()["error"] == "Username already taken"

    @pytest.mark.asyncio
    async def test_missing_field_is_400(self, test_client):
        response = await test_client.post("/api/auth/register", json={"username": "half"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_first_staff_account_bootstraps(self, test_client):
        response = await test_client.post("/api/auth/register-staff", json=STAFF_BODY)
        assert response.status_code == 201
        assert response.json()["staff_id"] > 0

    @pytest.mark.asyncio
    async def test_later_staff_registration_needs_manager(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        body = dict(STAFF_BODY, username="newhire", role="Staff", staff_type="Vet")

        anonymous = await test_client.post("/api/auth/register-staff", json=body)
        assert anonymous.status_code == 401

        forbidden = await test_client.post("/api/auth/register-staff", json=body, headers=auth_headers(keeper))
        assert forbidden.status_code == 403

        allowed = await test_client.post(
            "/api/auth/register-staff",
            json=dict(body, supervisor_id=manager.id),
            headers=auth_headers(manager),
        )
        assert allowed.status_code == 201


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_login_limited_per_client(self):
        app = FastAPI()
        app.add_middleware(AuthRateLimitMiddleware, max_requests=2, window_seconds=60)

        @app.post("/api/auth/login")
        async def login():
            return {"message": "ok"}

        @app.get("/api/animals")
        async def animals():
            return {"animals": []}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.post("/api/auth/login")).status_code for _ in range(3)]
            blocked = await client.post("/api/auth/login")
            other = await client.get("/api/animals")

        assert statuses == [200, 200, 429]
        assert int(blocked.headers["Retry-After"]) > 0
        assert other.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/auth/register", "/api/auth/register-staff"])
    async def test_registration_paths_limited(self, path):
        app = FastAPI()
        app.add_middleware(AuthRateLimitMiddleware, max_requests=1, window_seconds=60)

        @app.post(path)
        async def register():
            return {"message": "ok"}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.post(path)
            second = await client.post(path)

        assert (first.status_code, second.status_code) == (200, 429)
