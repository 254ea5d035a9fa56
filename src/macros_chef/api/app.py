"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from macros_chef.api.account import router as account_router
from macros_chef.api.analysis import router as analysis_router
from macros_chef.api.meals import router as meals_router
from macros_chef.api.planning import router as planning_router
from macros_chef.app_logging import configure_logging
from macros_chef.config import parse_cors_origins
from macros_chef.containers import AppContainer
from macros_chef.domain.errors import (
    AnalysisFailedError,
    AuthenticationError,
    ConflictError,
    InvalidArgumentError,
    InvalidMealDataError,
    MacrosChefError,
    NotFoundError,
)

_ERROR_STATUS: tuple[tuple[type[MacrosChefError], int], ...] = (
    (InvalidArgumentError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidMealDataError, 422),
    (AnalysisFailedError, 502),
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MacrosChefError)
    async def handle_domain_error(
        request: Request, exc: MacrosChefError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        message = _format_error(request.app.state.container, exc)
        return JSONResponse(status_code=status_code, content={"error": message})

    app.include_router(analysis_router)
    app.include_router(meals_router)
    app.include_router(planning_router)
    app.include_router(account_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: MacrosChefError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _format_error(state_container: AppContainer, exc: MacrosChefError) -> str:
    """Return a user-facing error message with local debug info."""
    message = str(exc)
    if (
        isinstance(exc, AnalysisFailedError)
        and exc.detail
        and state_container.settings.environment == "local"
    ):
        return f"{message} (debug: {exc.detail})"
    return message
