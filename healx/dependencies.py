"""FastAPI dependencies."""

from collections.abc import Callable
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from healx.core.exceptions import ForbiddenException, UnauthorizedException
from healx.core.redis_client import CacheManager, RateLimiter, get_redis_client
from healx.core.security import decode_access_token
from healx.database import get_db
from healx.schemas.auth import PATIENT_ROLE, Principal, StaffRole

# Security
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """
    Decode the bearer token into the calling principal.

    Args:
        credentials: Bearer token credentials

    Returns:
        Principal carrying the subject id and role

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Could not validate credentials")

    subject = payload.get("sub")
    role = payload.get("role")
    if not isinstance(subject, str) or not isinstance(role, str):
        raise UnauthorizedException("Could not validate credentials")

    try:
        return Principal(id=UUID(subject), role=role)
    except ValueError:
        raise UnauthorizedException("Invalid subject in token")


def require_roles(*roles: str) -> Callable[..., Any]:
    """
    Build a dependency that admits only the given roles.

    Admins pass every role check.
    """
    allowed = set(roles) | {StaffRole.ADMIN.value}

    async def checker(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if principal.role not in allowed:
            raise ForbiddenException("Insufficient permissions")
        return principal

    return checker


def get_cache_manager(redis_client: Annotated[Any, Depends(get_redis_client)]) -> CacheManager:
    """Cache manager over the application's Redis client."""
    return CacheManager(redis_client)


def get_rate_limiter(redis_client: Annotated[Any, Depends(get_redis_client)]) -> RateLimiter:
    """Rate limiter over the application's Redis client."""
    return RateLimiter(redis_client)


_STAFF = tuple(role.value for role in StaffRole)

# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
StaffPrincipal = Annotated[Principal, Depends(require_roles(*_STAFF))]
AdminPrincipal = Annotated[Principal, Depends(require_roles(StaffRole.ADMIN.value))]
FinancePrincipal = Annotated[
    Principal, Depends(require_roles(StaffRole.FINANCIAL_MANAGER.value))
]
PatientPrincipal = Annotated[Principal, Depends(require_roles(PATIENT_ROLE))]
Cache = Annotated[CacheManager, Depends(get_cache_manager)]
Limiter = Annotated[RateLimiter, Depends(get_rate_limiter)]
