"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.firebase.app import close_firebase_app

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks.

    Firebase clients are created lazily by the dependency factories on first
    use and released here on shutdown.
    """
    logger.info("app_started", environment=settings.app_env)
    if not settings.firebase_web_api_key:
        logger.warning(
            "verification_email_disabled",
            reason="FIREBASE_WEB_API_KEY is not set",
        )
    yield
    close_firebase_app()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Career Saathi API\n\n"
            "Account and profile backend for the Career Saathi career-guidance app.\n\n"
            "### Features\n"
            "- **Signup**: creates the Firebase account and its Firestore profile together\n"
            "- **Profiles**: partial updates, self-healing for accounts without a profile\n"
            "- **Admin**: user listing, email search and admin claim management\n\n"
            "### Authentication\n"
            "All endpoints except `/health` and `/api/auth/signup` require a Firebase "
            "ID token in the Authorization header:\n"
            "```\nAuthorization: Bearer <firebase_id_token>\n```\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- PUT/POST/DELETE: 10 requests/minute\n"
            "- Signup: 5 requests/minute"
        ),
        version="1.0.0",
        debug=settings.debug,
        contact={
            "name": "Career Saathi Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "auth",
                "description": "Signup and session operations",
            },
            {
                "name": "users",
                "description": "Profile and admin user operations",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
