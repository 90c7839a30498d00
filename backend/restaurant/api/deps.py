from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional

from fastapi import Depends, Header

from restaurant.services.exceptions import ForbiddenError, NotAuthenticatedError

CUSTOMER_ROLE = "Customer"
ADMIN_ROLE = "Admin"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    roles: FrozenSet[str]


def current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_roles: Optional[str] = Header(None, alias="X-User-Roles"),
) -> CurrentUser:
    """
    Identity is verified upstream (gateway / auth service) and forwarded in
    headers; it is trusted as-is here.
    """
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticatedError()
    roles = frozenset(r.strip() for r in (x_user_roles or "").split(",") if r.strip())
    return CurrentUser(id=x_user_id.strip(), roles=roles)


def require_customer(user: CurrentUser = Depends(current_user)) -> str:
    if CUSTOMER_ROLE not in user.roles:
        raise ForbiddenError("Customer role required")
    return user.id


def require_admin(user: CurrentUser = Depends(current_user)) -> CurrentUser:
    if ADMIN_ROLE not in user.roles:
        raise ForbiddenError("Admin role required")
    return user


def get_clock():
    """Wall clock used for pricing, ready-time estimates and status history; overridden in tests."""
    return datetime.now
