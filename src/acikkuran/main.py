"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Building the app also builds the TokenVerifier, so a missing
JWT secret fails the process here, at startup, not on the first write.
Error handlers turn every AppError (and pydantic validation errors) into
the `{"error": "<code>"}` bodies the frontend expects.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from acikkuran import __version__
from acikkuran.api import api_router
from acikkuran.auth.jwt import TokenVerifier
from acikkuran.config import Settings, settings
from acikkuran.errors import AppError, AuthError, ClientInputError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    app_settings = app.state.settings
    logger.info(
        "acikkuran.starting",
        version=__version__,
        environment=app_settings.environment,
        port=app_settings.port,
    )

    yield

    logger.info("acikkuran.shutdown")

    from acikkuran.db.engine import engine
    await engine.dispose()


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code},
        headers=headers,
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("request.invalid_params", errors=len(exc.errors()))
    return JSONResponse(
        status_code=ClientInputError.status_code,
        content={"error": ClientInputError.code},
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Açık Kuran User Translations",
        description="Read and write users' own verse translations and footnotes",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    # Raises ServerMisconfigured when the secret is missing
    app.state.token_verifier = TokenVerifier(app_settings.jwt_secret)

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from acikkuran.middleware.request_id import RequestIdMiddleware
    from acikkuran.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: acikkuran.main:app)
app = create_app()
