import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from json_post_type.config import settings
from json_post_type import database
from json_post_type.exception_handlers import register_exception_handlers
from json_post_type.middleware.logging import RequestLoggingMiddleware, setup_logging
from json_post_type.plugins import plugin_registry
from json_post_type.plugins.loader import initialize_plugins, shutdown_plugins
from json_post_type.routes import admin, auth, rest
from json_post_type.services.auth_service import ensure_admin_user
from json_post_type.services.capability_service import ensure_capabilities, seed_default_roles

logger = logging.getLogger(__name__)


async def bootstrap() -> None:
    """Create tables, seed roles and the bootstrap administrator, load plugins."""
    await database.create_tables()
    async with database.AsyncSessionLocal() as db:
        await seed_default_roles(db)
        await ensure_admin_user(settings.admin_email, settings.admin_password, db)

    await initialize_plugins(plugin_registry, settings.extra_plugins)

    if settings.grant_capabilities_on_startup:
        async with database.AsyncSessionLocal() as db:
            await ensure_capabilities(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up the application...")
    await bootstrap()
    yield
    logger.info("Shutting down the application...")
    await shutdown_plugins(plugin_registry)


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Arbitrary JSON documents with an admin JSON editor and a REST endpoint",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    rest_prefix = "{}/{}".format(settings.rest_prefix.rstrip("/"), settings.rest_namespace.strip("/"))
    app.include_router(rest.router, prefix=rest_prefix, tags=["REST"])
    app.include_router(auth.router, tags=["Auth"])
    app.include_router(admin.router, tags=["Admin"])

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse("/admin/json")

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app


setup_logging(settings.log_level, settings.log_json)

app = create_app()
