"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from taskboard.auth import JWKSCache, JWTValidator, set_jwt_validator
from taskboard.auth.handlers import router as auth_router
from taskboard.auth.handlers import signin_router
from taskboard.config import settings
from taskboard.features.tasks import router as tasks_router
from taskboard.services.rate_limiter import limiter

logger = logging.getLogger(__name__)

# Global JWKS cache instance for cleanup
_jwks_cache = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    global _jwks_cache

    if settings.use_local_jwt_verification:
        try:
            logger.info("Initializing JWT validator with local verification")

            _jwks_cache = JWKSCache(
                jwks_url=settings.jwks_url, cache_ttl=settings.jwks_cache_ttl_seconds
            )
            await _jwks_cache.refresh_keys()

            set_jwt_validator(
                JWTValidator(
                    jwks_cache=_jwks_cache,
                    issuer=settings.auth_issuer,
                    audience=settings.jwt_audience,
                    leeway=settings.jwt_leeway_seconds,
                )
            )

            logger.info(
                "JWT validator initialized successfully",
                extra={"jwks_url": settings.jwks_url, "issuer": settings.auth_issuer},
            )

        except Exception as e:
            logger.error(
                f"Failed to initialize JWT validator: {e}",
                exc_info=True,
                extra={"error_type": "jwt_validator_init_failed"},
            )
            raise
    else:
        logger.info("Local JWT verification disabled, validator must be set externally")

    yield

    if _jwks_cache is not None:
        try:
            await _jwks_cache.close()
            logger.info("JWT validator cleanup completed")
        except Exception as e:
            logger.error(f"Error during JWT validator cleanup: {e}", exc_info=True)


app = FastAPI(
    title="Taskboard API",
    description="Multi-user task list backed by Supabase",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

origins = settings.cors_origins.split(",")
logger.info(f"Origins : {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 instead of FastAPI's default 422."""
    logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(tasks_router, prefix=settings.api_prefix)
app.include_router(signin_router)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
