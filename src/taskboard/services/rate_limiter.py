"""Rate limiting service for API endpoints."""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from taskboard.auth.models import Principal
from taskboard.config import settings

logger = logging.getLogger(__name__)


def get_user_key_or_ip(request: Request) -> str:
    """
    Extract the caller's identity from the request or fall back to IP address.

    This function is used as the key_func for rate limiting:
    - Authenticated requests: Rate limited per user (local id, else email)
    - Unauthenticated requests: Rate limited per IP address

    Args:
        request: FastAPI request object

    Returns:
        User key string or IP address
    """
    # Set by the get_current_principal dependency
    user: Principal | None = getattr(request.state, "user", None)

    if user is not None:
        return f"user:{user.user_id or user.email}"

    return f"ip:{get_remote_address(request)}"


# In-memory storage for single-instance deployment
limiter = Limiter(
    key_func=get_user_key_or_ip,
    default_limits=[],
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)


class RateLimitTiers:
    """
    Rate limit tiers for different endpoint categories.

    All limits are per-user for authenticated endpoints.
    """

    # Reads (task list, session lookup)
    DEFAULT = ["100 per minute", "1000 per hour"]

    # State-changing operations (POST/PATCH/DELETE)
    WRITE = ["30 per minute", "200 per hour"]


# Note: These decorators require the endpoint to have a 'request: Request' parameter
default_rate_limit = limiter.limit(";".join(RateLimitTiers.DEFAULT))
write_rate_limit = limiter.limit(";".join(RateLimitTiers.WRITE))
