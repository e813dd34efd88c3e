"""
Wildwood Zoo Backend — Declarative Access Policy
==================================================

What:  One table mapping (resource, action) to the alternatives that grant it,
       and the `Authorize` dependency that evaluates it once per request.
How:   A route declares `Depends(Authorize("animals", "create"))`. The
       dependency authenticates the caller (401/403 from the token gate), looks
       up the rule and raises PermissionDeniedError (403) unless at least one
       Requirement is satisfied. Handlers receive the Principal and never
       re-check roles themselves.

Requirement semantics:
    Every non-empty field of a Requirement must match (AND); any one
    Requirement in a rule is enough (OR). `owner=True` means the principal's
    id equals the id in the route's owner path parameter.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from fastapi import Depends, Request

from wildwood.exceptions import PermissionDeniedError
from wildwood.models.staff import MANAGER
from wildwood.security import STAFF, VISITOR, Principal, get_current_principal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requirement:
    roles: FrozenSet[str] = frozenset()
    staff_roles: FrozenSet[str] = frozenset()
    staff_types: FrozenSet[str] = frozenset()
    owner: bool = False

    def satisfied_by(self, principal: Principal, owner_id: Optional[int] = None) -> bool:
        if self.roles and principal.role not in self.roles:
            return False
        if self.staff_roles and principal.staff_role not in self.staff_roles:
            return False
        if self.staff_types and principal.staff_type not in self.staff_types:
            return False
        if self.owner and (owner_id is None or principal.id != owner_id):
            return False
        return True


def require(
    roles=(),
    staff_roles=(),
    staff_types=(),
    owner: bool = False,
) -> Requirement:
    return Requirement(
        roles=frozenset(roles),
        staff_roles=frozenset(staff_roles),
        staff_types=frozenset(staff_types),
        owner=owner,
    )


ANY_STAFF = require(roles=[STAFF])
ANY_VISITOR = require(roles=[VISITOR])
MANAGER_ONLY = require(roles=[STAFF], staff_roles=[MANAGER])
VISITOR_OWNER = require(roles=[VISITOR], owner=True)
STAFF_OWNER = require(roles=[STAFF], owner=True)
GIFT_SHOP_MANAGER = require(roles=[STAFF], staff_roles=[MANAGER], staff_types=["Gift Shop Clerk"])
GIFT_SHOP_CLERK = require(roles=[STAFF], staff_types=["Gift Shop Clerk"])

Rule = Tuple[Requirement, ...]

POLICY: Dict[Tuple[str, str], Rule] = {
    # Animals
    ("animals", "create"): (ANY_STAFF,),
    ("animals", "update"): (ANY_STAFF,),
    ("animals", "delete"): (ANY_STAFF,),
    # Enclosures
    ("enclosures", "create"): (MANAGER_ONLY,),
    ("enclosures", "update"): (MANAGER_ONLY,),
    ("enclosures", "delete"): (MANAGER_ONLY,),
    ("enclosures", "assign"): (MANAGER_ONLY,),
    ("enclosures", "report"): (ANY_STAFF,),
    # Products
    ("products", "create"): (GIFT_SHOP_MANAGER,),
    ("products", "update"): (GIFT_SHOP_MANAGER,),
    ("products", "delete"): (GIFT_SHOP_MANAGER,),
    # Inventory
    ("inventory", "read"): (ANY_STAFF,),
    ("inventory", "write"): (
        require(roles=[STAFF], staff_roles=[MANAGER], staff_types=["Gift Shop Clerk", "Admin"]),
    ),
    # Observations
    ("observations", "read"): (ANY_STAFF,),
    ("observations", "create"): (
        MANAGER_ONLY,
        require(roles=[STAFF], staff_types=["Zookeeper"]),
        require(roles=[STAFF], staff_roles=["Staff"]),
    ),
    ("observations", "acknowledge"): (
        MANAGER_ONLY,
        require(roles=[STAFF], staff_types=["Vet"]),
        require(roles=[STAFF], staff_roles=["Staff"]),
    ),
    # Notifications
    ("notifications", "read"): (ANY_STAFF,),
    ("notifications", "acknowledge"): (ANY_STAFF,),
    ("notifications", "create"): (MANAGER_ONLY,),
    # Staff
    ("staff", "list"): (MANAGER_ONLY,),
    ("staff", "delete"): (MANAGER_ONLY,),
    ("staff", "register"): (MANAGER_ONLY,),
    ("staff", "read"): (STAFF_OWNER, MANAGER_ONLY),
    ("staff", "update"): (STAFF_OWNER, MANAGER_ONLY),
    ("staff", "password"): (STAFF_OWNER,),
    ("staff", "enclosures"): (ANY_STAFF,),
    # Visitors
    ("visitors", "list"): (MANAGER_ONLY,),
    ("visitors", "read"): (VISITOR_OWNER, ANY_STAFF),
    ("visitors", "update"): (VISITOR_OWNER, ANY_STAFF),
    ("visitors", "delete"): (VISITOR_OWNER,),
    ("visitors", "password"): (VISITOR_OWNER,),
    ("visitors", "membership"): (VISITOR_OWNER,),
    # Tickets
    ("tickets", "purchase"): (ANY_VISITOR,),
    ("tickets", "history"): (VISITOR_OWNER, ANY_STAFF),
    ("tickets", "revenue"): (MANAGER_ONLY,),
    # Attractions
    ("attractions", "create"): (MANAGER_ONLY,),
    ("attractions", "update"): (MANAGER_ONLY,),
    ("attractions", "delete"): (MANAGER_ONLY,),
    ("attractions", "assign"): (MANAGER_ONLY,),
    ("attractions", "staff"): (ANY_STAFF,),
    # Gift shop sales
    ("shop", "purchase"): (ANY_VISITOR,),
    ("shop", "transactions"): (ANY_VISITOR, GIFT_SHOP_CLERK, MANAGER_ONLY),
}


def authorize(
    principal: Principal,
    resource: str,
    action: str,
    owner_id: Optional[int] = None,
) -> None:
    """
    Raise PermissionDeniedError unless `principal` may perform the action.

    An action missing from POLICY is denied; every protected route must be
    listed explicitly.
    """
    rule = POLICY.get((resource, action))
    if rule is None:
        logger.error("No policy rule for %s.%s; denying", resource, action)
        raise PermissionDeniedError()
    if any(req.satisfied_by(principal, owner_id) for req in rule):
        return
    logger.info(
        "Denied %s.%s for %s #%s (staff_role=%s, staff_type=%s)",
        resource, action, principal.role, principal.id, principal.staff_role, principal.staff_type,
    )
    raise PermissionDeniedError()


class Authorize:
    """
    FastAPI dependency: authenticate, then check POLICY for (resource, action).

    Usage:
        principal: Principal = Depends(Authorize("staff", "update", owner_param="staff_id"))
    """

    def __init__(self, resource: str, action: str, owner_param: Optional[str] = None):
        if (resource, action) not in POLICY:
            raise KeyError(f"No policy rule for {resource}.{action}")
        self.resource = resource
        self.action = action
        self.owner_param = owner_param

    async def __call__(
        self,
        request: Request,
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        owner_id: Optional[int] = None
        if self.owner_param is not None:
            raw = request.path_params.get(self.owner_param)
            try:
                owner_id = int(raw) if raw is not None else None
            except ValueError:
                owner_id = None
        authorize(principal, self.resource, self.action, owner_id)
        return principal
