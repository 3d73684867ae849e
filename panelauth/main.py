"""FastAPI application factory. No business logic; only wiring, middleware and error rendering.

Run with:
  uvicorn panelauth.main:create_app --factory
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from panelauth.api.v1 import router as api_router
from panelauth.core.config import Settings, get_settings
from panelauth.core.database import Database
from panelauth.core.errors import PanelAuthError
from panelauth.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting panelauth (env=%s)", app.state.settings.APP_ENV)
    yield
    app.state.db.dispose()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PanelAuthError)
    async def handle_panel_auth_error(_request: Request, exc: PanelAuthError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Submitted values (passwords included) are never echoed back.
        issues = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid input", "issues": issues},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )


def _register_middleware(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CLIENT_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timeout(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                call_next(request), timeout=settings.REQUEST_TIMEOUT_SEC
            )
        except asyncio.TimeoutError:
            logger.error(
                "Request timed out: %s %s after %.1fs",
                request.method,
                request.url.path,
                settings.REQUEST_TIMEOUT_SEC,
            )
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={"message": "Request timed out"},
            )
        elapsed = time.perf_counter() - start
        logger.debug("%s %s %s %.3fs", request.method, request.url.path, response.status_code, elapsed)
        return response


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the application.

    settings defaults to the environment-derived cached Settings. database
    defaults to one built from settings; it is disposed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Panel Auth API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database or Database.from_settings(settings)

    _register_middleware(app, settings)
    _register_error_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Panel Auth API"}

    return app
