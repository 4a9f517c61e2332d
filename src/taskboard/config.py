"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    api_prefix: str = "/api"
    debug: bool = False
    cors_origins: str = "http://localhost:3000"
    rate_limit_enabled: bool = True

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_service_role_key: str = "test-service-role-key"

    # JWT Verification Configuration
    use_local_jwt_verification: bool = True
    jwks_cache_ttl_seconds: int = 3600  # 1 hour
    jwt_audience: str = "authenticated"
    jwt_leeway_seconds: int = 10  # Clock skew tolerance

    # OAuth sign-in (provider client id/secret live in the Supabase project)
    oauth_provider: str = "github"
    oauth_redirect_url: str = "http://localhost:3000/"
    signin_route: str = "/auth/signin"

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"

    @property
    def auth_issuer(self) -> str:
        """Issuer claim expected on Supabase access tokens."""
        return f"{self.supabase_url}/auth/v1"

    @property
    def jwks_url(self) -> str:
        """Supabase JWKS endpoint."""
        return f"{self.supabase_url}/auth/v1/.well-known/jwks.json"


settings = Settings()
