"""Data models for authentication."""

from uuid import UUID

from pydantic import BaseModel


class Principal(BaseModel):
    """
    The authenticated caller of an API operation.

    Built from a verified Supabase access token. ``user_id`` is the local
    ``users`` row id and is None when no local user exists for the email yet.

    Attributes:
        email: Email from the token's 'email' claim
        user_id: Local user id resolved by email, if any
        subject: Supabase auth user id from the 'sub' claim
        name: Display name from OAuth metadata
        image: Avatar URL from OAuth metadata

    Example:
        >>> principal = Principal(email="user@example.com", name="Jane")
    """

    email: str
    user_id: UUID | None = None
    subject: str | None = None
    name: str | None = None
    image: str | None = None


class OAuthProfile(BaseModel):
    """External profile delivered by the OAuth provider on sign-in."""

    email: str | None = None
    name: str | None = None
    image: str | None = None


class SessionUser(BaseModel):
    """User section of the session payload."""

    id: UUID | None = None
    name: str | None = None
    email: str
    image: str | None = None


class SessionResponse(BaseModel):
    """Response model for the current session."""

    user: SessionUser

    @classmethod
    def from_principal(cls, principal: Principal) -> "SessionResponse":
        return cls(
            user=SessionUser(
                id=principal.user_id,
                name=principal.name,
                email=principal.email,
                image=principal.image,
            )
        )
