"""
Pydantic schemas for the admin audit report.
"""

from datetime import datetime

from pydantic import BaseModel

from vehicle_listing.models.enums import AuditEventType, RelatedEventType


class AuditRelatedLogResponse(BaseModel):
    id: int
    ref_id: int | None
    main_table: str
    name: str
    event_type: RelatedEventType
    old_value: str | None
    new_value: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogResponse(BaseModel):
    """One audit entry as listed in the admin report."""
    id: int
    user_id: int
    event_type: AuditEventType
    event_description: str | None
    section: str | None
    main_table: str | None
    ref_id: int | None
    changeset_json: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogDetailResponse(AuditLogResponse):
    related_logs: list[AuditRelatedLogResponse]
