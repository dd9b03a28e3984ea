"""
FastAPI dependencies for authentication, role checks and request bodies.

Tokens are issued elsewhere; this module only decodes them into a Principal
and answers "does the principal hold role R?".
"""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, ValidationError as PydanticValidationError
from typing import Callable, FrozenSet, Iterable, Optional, Type, TypeVar
from jose import jwt, JWTError
import logging

from restaurant_app.config import settings
from restaurant_app.exceptions import AuthenticationError, AuthorizationError, ValidationError

logger = logging.getLogger(__name__)

# Missing header yields None; get_current_principal answers 401
security = HTTPBearer(auto_error=False)


class Roles:
    ADMIN = "ADMIN"
    USER = "USER"


class Principal(BaseModel):
    """Authenticated caller."""

    subject: str
    roles: FrozenSet[str] = frozenset()


RoleChecker = Callable[[Principal, str], bool]


def normalize_role(role: str) -> str:
    """Upper-case a role name and drop a Spring style ROLE_ prefix."""
    role = role.strip().upper()
    if role.startswith("ROLE_"):
        role = role[len("ROLE_"):]
    return role


def _claimed_roles(payload: dict) -> Iterable[str]:
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    role = payload.get("role")
    if role:
        roles = [*roles, role]
    return [r for r in roles if isinstance(r, str)]


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Principal:
    """
    Dependency to get the current principal from the bearer token.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise AuthenticationError("Missing bearer token")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"JWT validation error: {e}")
        raise AuthenticationError("Could not validate credentials") from e

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token: missing subject")

    principal = Principal(
        subject=str(subject),
        roles=frozenset(normalize_role(r) for r in _claimed_roles(payload))
    )
    logger.debug(f"Authenticated {principal.subject}", extra={"subject": principal.subject})
    return principal


def has_role(principal: Principal, role: str) -> bool:
    return normalize_role(role) in principal.roles


def get_role_checker() -> RoleChecker:
    """Dependency providing the role capability check."""
    return has_role


def require_any_role(*roles: str):
    """
    Dependency factory admitting principals holding at least one of `roles`.

    Usage:
        router = APIRouter(dependencies=[Depends(require_any_role(Roles.ADMIN, Roles.USER))])
    """
    async def check_roles(
        principal: Principal = Depends(get_current_principal),
        role_checker: RoleChecker = Depends(get_role_checker)
    ) -> Principal:
        if not any(role_checker(principal, role) for role in roles):
            logger.warning(
                f"Access denied for {principal.subject}: requires one of {', '.join(roles)}",
                extra={"subject": principal.subject}
            )
            raise AuthorizationError(
                f"One of the roles {', '.join(roles)} is required",
                details={"required_roles": list(roles)}
            )
        return principal

    return check_roles


BodyModel = TypeVar("BodyModel", bound=BaseModel)


def json_body(model: Type[BodyModel]):
    """
    Dependency factory decoding the JSON request body into `model`.

    Declared as an endpoint parameter, it resolves after the router-level
    role gate, so unauthenticated or forbidden callers never have their
    body read.

    Usage:
        employee_dto: EmployeeDTO = Depends(json_body(EmployeeDTO))
    """
    async def parse_body(request: Request) -> BodyModel:
        try:
            payload = await request.json()
        except ValueError as e:
            raise ValidationError(
                "Malformed JSON body",
                details={"errors": [{"type": "json_invalid", "msg": str(e)}]}
            ) from e

        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                "Request validation failed",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e

    return parse_body
