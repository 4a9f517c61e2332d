"""JWKS (JSON Web Key Set) fetching and caching for JWT verification."""

import logging
from datetime import datetime, timezone

import httpx
from jose import jwk
from jose.backends.base import Key

logger = logging.getLogger(__name__)

_ALGORITHM_BY_KEY_TYPE = {"EC": "ES256", "RSA": "RS256"}


class JWKSCache:
    """
    In-memory cache of the Supabase Auth signing keys.

    Keys are fetched from the JWKS endpoint and held by key ID (kid) for
    ``cache_ttl`` seconds. An unknown kid forces one refresh so that key
    rotation is picked up without waiting for the TTL.

    Example:
        >>> cache = JWKSCache("https://project.supabase.co/auth/v1/.well-known/jwks.json")
        >>> await cache.refresh_keys()
        >>> key = await cache.get_signing_key("key-id-123")
    """

    def __init__(self, jwks_url: str, cache_ttl: int = 3600):
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self._keys: dict[str, Key] = {}
        self._last_refresh: datetime | None = None
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, read=30.0, connect=10.0, write=10.0)
        )

    async def get_signing_key(self, kid: str) -> Key:
        """
        Get signing key by key ID, refreshing the cache when stale or on a miss.

        Raises:
            ValueError: If key ID not found after refresh
            httpx.HTTPError: If JWKS fetch fails
        """
        if self._needs_refresh():
            await self.refresh_keys()

        key = self._keys.get(kid)

        if key is None:
            logger.warning(
                f"Key ID '{kid}' not found in cache, refreshing JWKS",
                extra={"kid": kid, "cached_kids": list(self._keys.keys())},
            )
            await self.refresh_keys()
            key = self._keys.get(kid)

        if key is None:
            raise ValueError(
                f"Key ID '{kid}' not found in JWKS. Available keys: {list(self._keys.keys())}"
            )

        return key

    async def refresh_keys(self) -> None:
        """
        Fetch the JWKS document and replace the cached keys.

        Raises:
            httpx.HTTPError: If HTTP request fails
            ValueError: If JWKS response is invalid
        """
        try:
            logger.info(f"Fetching JWKS from {self.jwks_url}")
            response = await self._http_client.get(self.jwks_url)
            response.raise_for_status()

            keys_list = response.json().get("keys", [])
            if not keys_list:
                logger.warning(
                    "JWKS response contains no keys, token verification will fail "
                    "until the Supabase project publishes signing keys",
                    extra={"jwks_url": self.jwks_url},
                )

            new_keys: dict[str, Key] = {}
            for key_data in keys_list:
                kid = key_data.get("kid")
                if not kid:
                    logger.warning("JWKS key missing 'kid', skipping")
                    continue

                kty = key_data.get("kty")
                algorithm = _ALGORITHM_BY_KEY_TYPE.get(kty, key_data.get("alg", "RS256"))
                new_keys[kid] = jwk.construct(key_data, algorithm=algorithm)

                logger.debug(
                    f"Loaded key {kid} (type: {kty}, algorithm: {algorithm})",
                    extra={"kid": kid, "kty": kty, "alg": algorithm},
                )

            self._keys = new_keys
            self._last_refresh = datetime.now(timezone.utc)

            logger.info(
                "JWKS cache refreshed",
                extra={"key_count": len(new_keys), "ttl_seconds": self.cache_ttl},
            )

        except httpx.HTTPError as e:
            logger.error(
                f"Failed to fetch JWKS from {self.jwks_url}: {e}",
                exc_info=True,
                extra={"error_type": "jwks_fetch_failed"},
            )
            raise

        except Exception as e:
            logger.error(
                f"Failed to parse JWKS: {e}",
                exc_info=True,
                extra={"error_type": "jwks_parse_failed"},
            )
            raise

    def _needs_refresh(self) -> bool:
        if self._last_refresh is None:
            return True

        age = (datetime.now(timezone.utc) - self._last_refresh).total_seconds()
        return age >= self.cache_ttl

    async def close(self) -> None:
        """Close the HTTP client. Called during application shutdown."""
        await self._http_client.aclose()
        logger.info("JWKS cache closed")
