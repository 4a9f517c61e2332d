"""API handlers for sign-in, session and sign-out."""

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from taskboard.auth.dependencies import (
    get_bearer_token,
    get_current_principal,
    get_verified_claims,
)
from taskboard.auth.exceptions import AuthenticationError
from taskboard.auth.identity import IdentityAdapter, get_identity_adapter, profile_from_claims
from taskboard.auth.models import Principal, SessionResponse
from taskboard.config import settings
from taskboard.services.rate_limiter import default_rate_limit, write_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
signin_router = APIRouter(tags=["auth"])


@signin_router.get(settings.signin_route, include_in_schema=False)
async def signin_page() -> RedirectResponse:
    """Send the browser to the Supabase OAuth authorize endpoint for the configured provider."""
    query = urlencode(
        {"provider": settings.oauth_provider, "redirect_to": settings.oauth_redirect_url}
    )
    return RedirectResponse(f"{settings.supabase_url}/auth/v1/authorize?{query}")


@router.post("/signin", response_model=SessionResponse)
@write_rate_limit
async def sign_in(
    request: Request,
    claims: dict[str, Any] = Depends(get_verified_claims),
    identity: IdentityAdapter = Depends(get_identity_adapter),
) -> SessionResponse:
    """
    Record a completed OAuth sign-in.

    Called by the client once after the provider redirects back with an
    access token. Creates the local user on first sign-in and returns the
    session with the local user id attached.

    Raises:
        HTTPException: 401 if the token has no usable email
        HTTPException: 500 if the user store fails
    """
    try:
        user = identity.sign_in(profile_from_claims(claims))
        principal = identity.resolve_session(claims)
        if principal.user_id is None:
            principal = principal.model_copy(update={"user_id": user.id})
        return SessionResponse.from_principal(principal)

    except HTTPException:
        raise
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error signing in {claims.get('email')}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign in",
        ) from e


@router.get("/session", response_model=SessionResponse)
@default_rate_limit
async def get_session(
    request: Request,
    principal: Principal = Depends(get_current_principal),
) -> SessionResponse:
    """Return the session for the current access token."""
    return SessionResponse.from_principal(principal)


@router.post("/signout")
async def sign_out(
    token: str = Depends(get_bearer_token),
    principal: Principal = Depends(get_current_principal),
    identity: IdentityAdapter = Depends(get_identity_adapter),
) -> dict[str, str]:
    """Revoke the current session."""
    identity.sign_out(token)
    logger.info(f"User signed out: {principal.email}")
    return {"message": "Signed out"}
