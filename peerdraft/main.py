"""
Peerdraft Settings - FastAPI Application
Local settings and subscription state for the Peerdraft collaboration plugin
"""
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from peerdraft.api.routes import health, settings as settings_routes, subscription
from peerdraft.config import Settings, settings
from peerdraft.core.exceptions import SettingsNotMigratedError
from peerdraft.core.logger import configure_logging, get_logger
from peerdraft.services.settings_store import SettingsStore
from peerdraft.services.subscription import SubscriptionClient, SubscriptionReconciler
from peerdraft.storage import DataStore, JsonFileDataStore

logger = get_logger(__name__)


def create_app(
    config: Optional[Settings] = None,
    data_store: Optional[DataStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Migrate settings before serving; release the HTTP client on shutdown."""
        configure_logging(config.log_level)
        logger.info("Starting %s (%s)", config.app_name, config.app_env)

        store = SettingsStore(data_store or JsonFileDataStore(config.data_file), config)
        client = SubscriptionClient(http_client, timeout=config.http_timeout_seconds)
        app.state.config = config
        app.state.settings_store = store
        app.state.reconciler = SubscriptionReconciler(store, client)

        await store.migrate()
        logger.info("Settings migrated, serving requests")
        yield
        await client.close()
        logger.info("Shutting down %s", config.app_name)

    app = FastAPI(
        title=config.app_name,
        description="Local settings and subscription state for Peerdraft",
        version="1.0.0",
        debug=config.app_debug,
        lifespan=lifespan,
    )

    @app.exception_handler(SettingsNotMigratedError)
    async def not_migrated_handler(request: Request, exc: SettingsNotMigratedError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})

    app.include_router(health.router, prefix=config.api_v1_prefix, tags=["Health"])
    app.include_router(settings_routes.router, prefix=f"{config.api_v1_prefix}/settings", tags=["Settings"])
    app.include_router(
        subscription.router,
        prefix=f"{config.api_v1_prefix}/subscription",
        tags=["Subscription"],
    )
    return app


app = create_app()


def run() -> None:
    uvicorn.run("peerdraft.main:app", host="127.0.0.1", port=8765, log_level=settings.log_level.lower())
