"""
ClassBeyond Badge Engine Application
- Serves the badge catalog, student progress and the activity endpoints
  that trigger badge evaluation.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from classbeyond.apps.api.routes import activity_router, badges_router
from classbeyond.badges.definitions import (
    BadgeCatalog,
    initialize_badges,
    load_definitions,
)
from classbeyond.badges.processor import BadgeService
from classbeyond.core.data import database
from classbeyond.core.error_handlers import register_error_handlers
from classbeyond.logging_config import setup_logging

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app_: FastAPI):
    """Create tables, seed the catalog once and snapshot it for the service"""
    definitions = load_definitions()
    db = database.SessionLocal()
    try:
        database.Base.metadata.create_all(bind=db.get_bind())
        initialize_badges(db, definitions)
        catalog = BadgeCatalog.from_db(db, version=definitions.version)
    finally:
        db.close()

    app_.state.badge_service = BadgeService(catalog)
    logger.info("Badge service ready with %d badges", len(catalog))
    yield


app = FastAPI(
    title="ClassBeyond Badges",
    description="Badge catalog, progress ledger and rule evaluation for ClassBeyond",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

app.include_router(badges_router)
app.include_router(activity_router)


@app.get("/health")
async def health(request: Request):
    """Database connectivity and catalog status"""
    db_info = database.get_database_info()
    service = getattr(request.app.state, "badge_service", None)
    return {
        "status": "healthy" if db_info["connected"] else "degraded",
        "database": db_info,
        "badges": len(service.catalog) if service else 0,
        "catalog_version": service.catalog.version if service else None,
    }
