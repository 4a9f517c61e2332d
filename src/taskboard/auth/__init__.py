"""Authentication module: Supabase JWT verification and the identity adapter."""

from taskboard.auth.dependencies import (
    get_current_principal,
    get_jwt_validator,
    set_jwt_validator,
)
from taskboard.auth.exceptions import AuthenticationError
from taskboard.auth.identity import IdentityAdapter, get_identity_adapter
from taskboard.auth.jwks import JWKSCache
from taskboard.auth.jwt_validator import JWTValidator
from taskboard.auth.models import OAuthProfile, Principal

__all__ = [
    "get_current_principal",
    "get_jwt_validator",
    "set_jwt_validator",
    "get_identity_adapter",
    "IdentityAdapter",
    "JWKSCache",
    "JWTValidator",
    "AuthenticationError",
    "OAuthProfile",
    "Principal",
]
