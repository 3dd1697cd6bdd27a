"""JawaStock API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map JawaStockError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The store is chosen once at startup: app.state.store holds the in-memory
      store, or is None and each request opens a SQL session

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - Admin seed runs on startup for both backends, mirroring the marketplace's
      bootstrap account
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jawastock.api.error_handlers import register_error_handlers
from jawastock.api.routes import admin, assets, auth, cart, health, purchases, users
from jawastock.config import Settings, get_settings
from jawastock.infrastructure import database
from jawastock.infrastructure.memory_store import InMemoryMarketplaceStore
from jawastock.infrastructure.observability import setup_logging
from jawastock.infrastructure.sql_store import SqlMarketplaceStore
from jawastock.services.user_service import ensure_admin

logger = logging.getLogger(__name__)


async def _seed_admin(settings: Settings, store) -> None:
    admin_user = await ensure_admin(
        store, settings.admin_username, settings.admin_email, settings.admin_password,
    )
    logger.info("Admin account ready", extra={"user_id": admin_user.id})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if settings.storage_backend == "sql":
        manager = database.init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_create_tables:
            await manager.create_all()
        app.state.store = None
        if settings.seed_admin:
            async with manager.session() as session:
                await _seed_admin(settings, SqlMarketplaceStore(session))
    else:
        app.state.store = InMemoryMarketplaceStore()
        if settings.seed_admin:
            await _seed_admin(settings, app.state.store)

    logger.info(f"JawaStock API started ({settings.storage_backend} store)")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("JawaStock API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="JawaStock API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(assets.router)
    app.include_router(admin.router)
    app.include_router(cart.router)
    app.include_router(purchases.router)

    register_error_handlers(app)
    return app


app = create_app()
