"""
Request-scoped audit context and ORM change tracking.

Everything the audit writer needs to know about the current
request travels in an AuditContext built by the endpoint: who
is acting, which admin section and table are involved, the
parent log id for related rows, and the tracked model changes.
Nothing is kept in module-level state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.orm import InstanceState


@dataclass
class TrackedChanges:
    """
    Attribute changes of the model being saved.

    original holds the committed values, updated the pending
    ones. At most one of the creating/updating/deleting flags
    is set.
    """
    original: dict = field(default_factory=dict)
    updated: dict = field(default_factory=dict)
    creating: bool = False
    updating: bool = False
    deleting: bool = False

    @property
    def active(self) -> bool:
        return self.creating or self.updating or self.deleting


@dataclass
class AuditContext:
    user_id: int | None
    section: str | None = None
    main_table: str | None = None
    parent_log_id: int | None = None
    tracked: TrackedChanges | None = None


def is_mapped_instance(value: Any) -> bool:
    return isinstance(inspect(value, raiseerr=False), InstanceState)


def snapshot(instance) -> dict:
    """Column name -> current value for a mapped instance."""
    state = inspect(instance)
    return {
        attr.key: getattr(instance, attr.key)
        for attr in state.mapper.column_attrs
    }


def to_record(value: Any) -> dict:
    """Normalise an audit payload (row, schema or mapping) to a dict."""
    if value is None:
        return {}
    if is_mapped_instance(value):
        return snapshot(value)
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Cannot audit a value of type {type(value).__name__}")


def track_created(instance) -> TrackedChanges:
    """
    Track a newly inserted row.

    Call after flush so that server and column defaults
    are part of the snapshot.
    """
    return TrackedChanges(updated=snapshot(instance), creating=True)


def track_deleted(instance) -> TrackedChanges:
    """Track a row about to be deleted. Call before flush."""
    return TrackedChanges(original=snapshot(instance), deleting=True)


def track_updated(instance) -> TrackedChanges:
    """
    Track pending attribute changes of a persistent row.

    Reads SQLAlchemy's attribute history, so it must run before
    the session is flushed. A value whose previous state was never
    loaded is reported as None.
    """
    state = inspect(instance)
    original, updated = {}, {}

    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        original[attr.key] = history.deleted[0] if history.deleted else None
        updated[attr.key] = history.added[0] if history.added else None

    return TrackedChanges(
        original=original,
        updated=updated,
        updating=bool(updated),
    )


def track_changes(instance) -> TrackedChanges:
    """Pick create, delete or update tracking from the instance state."""
    state = inspect(instance)
    if state.transient or state.pending:
        return track_created(instance)
    if state.deleted or (
        state.session is not None and instance in state.session.deleted
    ):
        return track_deleted(instance)
    return track_updated(instance)
