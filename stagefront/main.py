"""FastAPI application entrypoint. No business logic; only wiring, lifecycle and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from stagefront.api.v1 import router as v1_router
from stagefront.api.v1.auth import NotAuthenticatedError
from stagefront.core.config import get_settings
from stagefront.core.context import AppContext, build_context

logger = logging.getLogger(__name__)


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Build the application. With no context, one is created from settings at
    startup and disposed at shutdown; a supplied context is owned by the caller.
    """
    settings = context.settings if context is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if context is not None:
            yield
            return
        app.state.context = build_context(settings)
        logger.info("Application context ready", extra={"environment": settings.APP_ENV})
        try:
            yield
        finally:
            app.state.context.close()

    app = FastAPI(
        title="Stagefront",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    @app.exception_handler(NotAuthenticatedError)
    async def redirect_to_login(request: Request, exc: NotAuthenticatedError) -> RedirectResponse:
        return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)

    app.include_router(v1_router)
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Stagefront"}

    return app
