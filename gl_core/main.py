"""
GL Posting Core: FastAPI application.

Entry point for the HTTP adapter. All routers are registered here.
"""

from fastapi import FastAPI

from gl_core.config import get_settings
from gl_core.logging_config import configure_logging
from gl_core.api.health import router as health_router
from gl_core.api.postings import router as postings_router
from gl_core.api.journals import router as journals_router
from gl_core.api.fx import router as fx_router
from gl_core.api.periods import router as periods_router

settings = get_settings()
configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry general ledger posting core",
)

# Register routers
app.include_router(health_router)
app.include_router(postings_router)
app.include_router(journals_router)
app.include_router(fx_router)
app.include_router(periods_router)
