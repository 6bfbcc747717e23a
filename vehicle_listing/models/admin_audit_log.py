"""
Admin audit log models.

Admins have enough freedom to break listing data: wrong vehicle
descriptions, broken images, bad prices. Every admin interaction
is recorded here as a readable report of what changed.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vehicle_listing.models.base import Base
from vehicle_listing.models.enums import (
    AuditEventType,
    RelatedEventType,
    enum_values,
)


class AdminAuditLog(Base):
    """
    Immutable record of one admin action.

    Audit logs are append-only. The changeset is stored as
    compact JSON text; no changes means NULL, never "".
    """

    __tablename__ = "admin_audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(nullable=False, index=True)
    event_type: Mapped[AuditEventType] = mapped_column(
        SAEnum(
            AuditEventType,
            name="audit_event_type_enum",
            values_callable=enum_values,
        ),
        nullable=False,
    )
    event_description: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )
    section: Mapped[str | None] = mapped_column(String(100), nullable=True)
    main_table: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    ref_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    changeset_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    related_logs: Mapped[list["AdminAuditRelatedLog"]] = relationship(
        back_populates="parent_log",
        order_by="AdminAuditRelatedLog.id",
    )

    def __repr__(self) -> str:
        return (
            f"<AdminAuditLog {self.event_type.value} "
            f"{self.main_table}#{self.ref_id} by {self.user_id}>"
        )


class AdminAuditRelatedLog(Base):
    """
    One changed related record (a colour, an image, a spec row)
    belonging to a parent audit log entry.
    """

    __tablename__ = "admin_audit_related_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    parent_log_id: Mapped[int | None] = mapped_column(
        ForeignKey("admin_audit_logs.id"), nullable=True, index=True
    )
    ref_id: Mapped[int | None] = mapped_column(nullable=True)
    main_table: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    event_type: Mapped[RelatedEventType] = mapped_column(
        SAEnum(
            RelatedEventType,
            name="related_event_type_enum",
            values_callable=enum_values,
        ),
        nullable=False,
    )
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    parent_log: Mapped["AdminAuditLog | None"] = relationship(
        back_populates="related_logs"
    )

    def __repr__(self) -> str:
        return (
            f"<AdminAuditRelatedLog {self.name} "
            f"{self.event_type.value} #{self.ref_id}>"
        )
