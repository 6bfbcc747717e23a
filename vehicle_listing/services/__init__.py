"""Business logic services."""

from vehicle_listing.services.audit_service import AuditService
from vehicle_listing.services.catalog_service import CatalogService
from vehicle_listing.services.structured_data import StructuredDataBuilder

__all__ = ["AuditService", "CatalogService", "StructuredDataBuilder"]
