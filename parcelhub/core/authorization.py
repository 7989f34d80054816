"""Route authorization table and the guard that enforces it.

Every route declares a name; ``ROUTE_ROLES`` maps that name to the roles
allowed to call it, or ``None`` for a public route. ``route_guard`` builds
the FastAPI dependency that authenticates the caller and checks the table
before the handler body runs. Handlers receive the resulting ``Principal``
as an explicit parameter.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from parcelhub.core.database import get_db
from parcelhub.models.enums import Role
from parcelhub.models.user import User
from parcelhub.services.auth import CREDENTIALS_EXCEPTION_DETAIL, decode_token

logger = logging.getLogger(__name__)

ADMIN_ONLY = (Role.ADMIN,)
ADMIN_OR_OWNER = (Role.ADMIN, Role.PARCEL_OWNER)
ANY_ROLE = tuple(Role)

ROUTE_ROLES: dict[str, tuple[Role, ...] | None] = {
    "health.check": None,
    "auth.login": None,
    "auth.me": ANY_ROLE,
    "users.create": ADMIN_ONLY,
    "users.list": ADMIN_ONLY,
    "users.get": ADMIN_ONLY,
    "parcels.create": ADMIN_ONLY,
    "parcels.list": ADMIN_ONLY,
    "parcels.get": ADMIN_OR_OWNER,
    "parcels.owners": ADMIN_ONLY,
    "parcels.add_owner": ADMIN_ONLY,
    "parcels.remove_owner": ADMIN_ONLY,
    "meters.create": ADMIN_ONLY,
    "meters.get": ADMIN_OR_OWNER,
    "meters.list_for_parcel": ADMIN_OR_OWNER,
    "readings.create": ADMIN_ONLY,
    "readings.list_for_meter": ADMIN_OR_OWNER,
    "invoices.create": ADMIN_ONLY,
    "invoices.get": ADMIN_OR_OWNER,
    "invoices.list_for_parcel": ADMIN_OR_OWNER,
    "payments.start_transaction": ADMIN_OR_OWNER,
    "payments.commit_transaction": None,
    "payments.create_manual": ADMIN_ONLY,
    "payments.list": ADMIN_ONLY,
    "payments.get": ADMIN_OR_OWNER,
    "payments.list_by_user": ADMIN_OR_OWNER,
    "payments.list_by_invoice": ADMIN_OR_OWNER,
}

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    id: int
    role: Role


def _unauthenticated(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_principal(db: Session, token: str) -> Principal:
    """Resolve a bearer token to a principal, checking the user is still active.

    The role is read from the user row, so role changes apply to tokens
    already issued.
    """
    payload = decode_token(token)
    try:
        user_id = int(payload["sub"])
        token_role = Role(payload["role"])
    except ValueError as exc:
        raise _unauthenticated(CREDENTIALS_EXCEPTION_DETAIL) from exc

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise _unauthenticated(CREDENTIALS_EXCEPTION_DETAIL)

    role = Role(user.role)
    if role != token_role:
        logger.info("User %s role changed from %s to %s", user_id, token_role.value, role.value)
    return Principal(id=user_id, role=role)


def check_role(principal: Principal, allowed: tuple[Role, ...], route_name: str) -> None:
    """Raise 403 when the principal's role is not allowed on the route."""
    if principal.role not in allowed:
        logger.warning(
            "Role %s denied on route %s for user %s",
            principal.role.value,
            route_name,
            principal.id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )


def route_guard(route_name: str):
    """Build the dependency enforcing ``ROUTE_ROLES[route_name]``.

    Checks run in a fixed order: public routes pass with no principal,
    then the bearer token is verified (401), then the role (403).
    """
    allowed = ROUTE_ROLES[route_name]

    def guard(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        db: Session = Depends(get_db),
    ) -> Principal | None:
        if allowed is None:
            return None
        if credentials is None:
            raise _unauthenticated()
        principal = get_principal(db, credentials.credentials)
        check_role(principal, allowed, route_name)
        return principal

    return guard
