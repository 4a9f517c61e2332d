"""Local JWT verification using JWKS for signature validation."""

import logging
from typing import Any

from jose import JWTError, jwt

from taskboard.auth.jwks import JWKSCache

logger = logging.getLogger(__name__)


class JWTValidator:
    """
    Verifies Supabase access tokens locally.

    Signature, expiry, issuer and audience are all checked; RS256 and ES256
    signing keys are accepted.

    Attributes:
        jwks_cache: JWKS cache instance for fetching signing keys
        issuer: Expected issuer (iss claim), the Supabase auth endpoint
        audience: Expected audience (aud claim), typically "authenticated"
        leeway: Clock skew tolerance in seconds

    Example:
        >>> validator = JWTValidator(jwks_cache, "https://project.supabase.co/auth/v1")
        >>> claims = await validator.verify_token(access_token)
        >>> claims["email"]
    """

    def __init__(
        self,
        jwks_cache: JWKSCache,
        issuer: str,
        audience: str = "authenticated",
        leeway: int = 10,
    ):
        self.jwks_cache = jwks_cache
        self.issuer = issuer
        self.audience = audience
        self.leeway = leeway

    async def verify_token(self, token: str) -> dict[str, Any]:
        """
        Verify an access token and return its claims.

        Args:
            token: JWT token string (without "Bearer " prefix)

        Returns:
            Verified claims (sub, email, user_metadata, exp, iat, iss, aud, ...)

        Raises:
            JWTError: If token is invalid, expired, or signature verification fails
        """
        try:
            kid = jwt.get_unverified_header(token).get("kid")
            if not kid:
                raise JWTError("JWT header missing 'kid' (key ID)")

            signing_key = await self.jwks_cache.get_signing_key(kid)

            claims = jwt.decode(
                token,
                signing_key,
                algorithms=["RS256", "ES256"],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_iat": True,
                    "verify_aud": True,
                    "verify_iss": True,
                    "require_exp": True,
                    "require_iat": True,
                    "leeway": self.leeway,
                },
            )

            logger.debug(
                "JWT verified",
                extra={"sub": claims.get("sub"), "kid": kid, "exp": claims.get("exp")},
            )
            return claims

        except JWTError as e:
            logger.warning(
                f"JWT verification failed: {e}",
                extra={"error_type": "jwt_verification_failed", "error": str(e)},
            )
            raise

        except Exception as e:
            logger.error(
                f"Unexpected error during JWT verification: {e}",
                exc_info=True,
                extra={"error_type": "jwt_verification_error"},
            )
            raise JWTError(f"JWT verification error: {e}") from e
