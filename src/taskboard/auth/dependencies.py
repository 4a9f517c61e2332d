"""FastAPI dependencies for Supabase JWT authentication."""

import logging
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from taskboard.auth.exceptions import AuthenticationError
from taskboard.auth.identity import IdentityAdapter, get_identity_adapter
from taskboard.auth.models import Principal
from taskboard.services import PostHogService

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

# Global JWT validator instance (initialized in main.py startup)
_jwt_validator = None


def set_jwt_validator(validator):
    """
    Set the global JWT validator instance.

    Called during application startup to initialize the JWT validator.

    Args:
        validator: JWTValidator instance
    """
    global _jwt_validator
    _jwt_validator = validator


def get_jwt_validator():
    """
    Get the global JWT validator instance.

    Raises:
        RuntimeError: If JWT validator not initialized
    """
    if _jwt_validator is None:
        raise RuntimeError(
            "JWT validator not initialized. "
            "Ensure application startup event calls set_jwt_validator()."
        )
    return _jwt_validator


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Return the raw bearer token, or 401 when the header is missing."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    return credentials.credentials


async def get_verified_claims(token: str = Depends(get_bearer_token)) -> dict[str, Any]:
    """
    Verify the bearer token locally against the Supabase JWKS.

    Returns:
        Verified token claims

    Raises:
        HTTPException: 401 if the token is invalid, expired or carries no email
    """
    try:
        claims = await get_jwt_validator().verify_token(token)
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}", extra={"error": str(e)})
        PostHogService().capture(
            distinct_id="anonymous",
            event="authentication_failed",
            properties={"error": "jwt_verification_failed"},
        )
        raise _unauthorized("Invalid authentication credentials")
    except Exception as e:
        logger.error(f"Auth failed: {str(e)}", exc_info=True)
        PostHogService().capture(
            distinct_id="anonymous",
            event="authentication_failed",
            properties={"error": "token_validation_failed"},
        )
        raise _unauthorized("Invalid authentication credentials")

    if not claims.get("email"):
        logger.warning(
            "Auth failed: missing email claim",
            extra={"error_type": "missing_email_claim", "sub": claims.get("sub")},
        )
        raise _unauthorized("Invalid token: missing email")

    return claims


async def get_current_principal(
    request: Request,
    claims: dict[str, Any] = Depends(get_verified_claims),
    identity: IdentityAdapter = Depends(get_identity_adapter),
) -> Principal:
    """
    Resolve the authenticated caller for a request.

    The principal is also stored on ``request.state.user`` so the rate
    limiter can key on it.

    Raises:
        HTTPException: 401 if there is no valid session

    Example:
        @router.get("/tasks")
        async def list_tasks(principal: Principal = Depends(get_current_principal)):
            ...
    """
    try:
        principal = identity.resolve_session(claims)
    except AuthenticationError as e:
        raise _unauthorized(str(e))

    request.state.user = principal
    logger.info(f"User authenticated: {principal.email}")
    PostHogService().capture(
        distinct_id=principal.email,
        event="user_authenticated",
        properties={"user_id": str(principal.user_id) if principal.user_id else None},
    )
    return principal
