"""Identity adapter between Supabase Auth sessions and local user records."""

import logging
from typing import Any

from supabase import Client

from taskboard.auth.exceptions import AuthenticationError
from taskboard.auth.models import OAuthProfile, Principal
from taskboard.database.connection import get_supabase_admin_client
from taskboard.database.models import User
from taskboard.database.repositories import UserRepository
from taskboard.services import PostHogService

logger = logging.getLogger(__name__)


def profile_from_claims(claims: dict[str, Any]) -> OAuthProfile:
    """
    Build the external profile from verified token claims.

    Supabase copies the provider profile into ``user_metadata``. GitHub
    exposes ``full_name``/``user_name`` and ``avatar_url``; other providers
    use ``name`` and ``picture``.
    """
    metadata = claims.get("user_metadata") or {}
    return OAuthProfile(
        email=claims.get("email") or metadata.get("email"),
        name=metadata.get("full_name") or metadata.get("name") or metadata.get("user_name"),
        image=metadata.get("avatar_url") or metadata.get("picture"),
    )


class IdentityAdapter:
    """
    Keeps a local ``users`` row for every account that signs in.

    ``sign_in`` is the create-if-absent upsert that runs once per external
    login; ``resolve_session`` runs on every authenticated request and attaches
    the local user id to the principal when one exists.
    """

    def __init__(
        self,
        users: UserRepository | None = None,
        auth_client: Client | None = None,
        analytics: PostHogService | None = None,
    ) -> None:
        self.users = users or UserRepository()
        self._auth_client = auth_client
        self.analytics = analytics or PostHogService()

    def sign_in(self, profile: OAuthProfile) -> User:
        """
        Ensure a local user exists for the signed-in profile.

        Idempotent: an existing user with the same email is returned unchanged.

        Raises:
            AuthenticationError: If the profile carries no email
        """
        if not profile.email:
            logger.warning("Sign-in rejected: profile has no email")
            raise AuthenticationError("Sign-in profile is missing an email address")

        user = self.users.ensure_user(name=profile.name, email=profile.email, image=profile.image)

        self.analytics.identify(
            distinct_id=profile.email,
            properties={"name": user.name, "user_id": str(user.id)},
        )
        self.analytics.capture(
            distinct_id=profile.email,
            event="user_signed_in",
            properties={"user_id": str(user.id)},
        )
        return user

    def resolve_session(self, claims: dict[str, Any]) -> Principal:
        """
        Materialize the principal for a verified token.

        A missing local user, or a failed lookup, leaves ``user_id`` unset
        rather than failing the request.

        Raises:
            AuthenticationError: If the claims carry no email
        """
        profile = profile_from_claims(claims)
        if not profile.email:
            raise AuthenticationError("Session has no email")

        user_id = None
        try:
            user = self.users.get_by_email(profile.email)
            if user is not None:
                user_id = user.id
        except Exception as e:
            logger.warning(f"Could not resolve local user for {profile.email}: {e}")

        return Principal(
            email=profile.email,
            user_id=user_id,
            subject=claims.get("sub"),
            name=profile.name,
            image=profile.image,
        )

    def sign_out(self, access_token: str) -> None:
        """Revoke the Supabase session behind ``access_token``; failures are logged only."""
        client = self._auth_client or get_supabase_admin_client()
        try:
            client.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.warning(f"Supabase sign-out failed: {e}")


def get_identity_adapter() -> IdentityAdapter:
    """FastAPI dependency returning the identity adapter."""
    return IdentityAdapter()
