"""
Health check endpoint.

Used by load balancers and monitoring to verify the
application is running and can reach its database.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vehicle_listing.config import get_settings
from vehicle_listing.models.base import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Report service status and database connectivity.

    An unreachable database reports the service as degraded
    instead of failing the request.
    """
    settings = get_settings()
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Health check could not reach the database: %s", e)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "vehicle-listing",
        "version": settings.APP_VERSION,
        "database": db_status,
    }
