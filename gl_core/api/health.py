"""
Health check endpoint.

Reports whether the posting core can reach its database, plus
the running version and environment for deploy checks.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gl_core.config import get_settings
from gl_core.logging_config import get_logger
from gl_core.models.base import get_db

router = APIRouter(tags=["Health"])
logger = get_logger("api.health")


def database_reachable(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("health_database_unreachable", exc_info=True)
        return False
    return True


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    settings = get_settings()
    db_status = "healthy" if database_reachable(db) else "unhealthy"
    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "gl-posting-core",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": db_status,
    }
