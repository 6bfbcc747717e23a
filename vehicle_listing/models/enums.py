"""
Shared enumerations for database models.

Values are stored lower-case, exactly as the admin panel
and the audit report expect to read them back.
"""

import enum


class AuditEventType(str, enum.Enum):
    """Kinds of admin interaction recorded in the audit trail."""
    INDEX = "index"
    SHOW = "show"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    DOWNLOADED = "downloaded"


class RelatedEventType(str, enum.Enum):
    """What happened to a single related record."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def enum_values(enum_cls) -> list[str]:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
