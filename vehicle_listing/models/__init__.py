"""
Database models package.

All models must be imported here so that every table is
registered on Base.metadata before create_all() runs.
"""

from vehicle_listing.models.base import Base
from vehicle_listing.models.enums import AuditEventType, RelatedEventType
from vehicle_listing.models.admin_audit_log import (
    AdminAuditLog,
    AdminAuditRelatedLog,
)
from vehicle_listing.models.make import Make, CarModel
from vehicle_listing.models.model_year import (
    ModelYear,
    ModelYearColour,
    ModelYearImage,
)
from vehicle_listing.models.vehicle import Vehicle, VehicleType, Transmission
from vehicle_listing.models.review import Review

__all__ = [
    "Base",
    "AuditEventType",
    "RelatedEventType",
    "AdminAuditLog",
    "AdminAuditRelatedLog",
    "Make",
    "CarModel",
    "ModelYear",
    "ModelYearColour",
    "ModelYearImage",
    "Vehicle",
    "VehicleType",
    "Transmission",
    "Review",
]
