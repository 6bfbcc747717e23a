"""
Vehicle Listing: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from vehicle_listing.config import get_settings
from vehicle_listing.api.health import router as health_router
from vehicle_listing.api.admin import router as admin_router
from vehicle_listing.api.seo import router as seo_router

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Vehicle listing backend: admin audit trail and SEO structured data",
)

# Register routers
app.include_router(health_router)
app.include_router(admin_router)
app.include_router(seo_router)
