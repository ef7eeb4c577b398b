"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roles_permissions.api.error_handlers import register_exception_handlers
from roles_permissions.api.routers import get_api_router
from roles_permissions.core.config import AppSettings, get_settings
from roles_permissions.core.database import create_schema, session_scope
from roles_permissions.core.logging import configure_logging
from roles_permissions.services.seeding import seed_system_roles


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: D401
    """Application lifespan context for startup/shutdown hooks."""

    settings: AppSettings = app.state.settings
    if settings.create_schema:
        create_schema()
    if settings.seed_system_roles:
        with session_scope() as session:
            seed_system_roles(session)

    logging.getLogger("roles_permissions.main").info(
        "service_started",
        extra={"environment": settings.environment},
    )
    yield


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Application factory."""

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Roles & Permissions Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(get_api_router())
    return app


app = create_app()
