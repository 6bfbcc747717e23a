"""
Admin audit service.

Writes a readable report of what an admin did: which section,
which row, and which fields changed from what to what.

Auditing is best-effort. A failed audit write is logged and
dropped; it never breaks the admin action being audited. Every
write runs inside a SAVEPOINT so a failing insert rolls back on
its own and leaves the caller's transaction usable.
"""

import json
import logging
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel
from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vehicle_listing.models.admin_audit_log import (
    AdminAuditLog,
    AdminAuditRelatedLog,
)
from vehicle_listing.models.enums import AuditEventType, RelatedEventType
from vehicle_listing.services.audit_context import (
    AuditContext,
    is_mapped_instance,
    to_record,
)
from vehicle_listing.services.record_diff import (
    IDENTITY_FIELD,
    diff_records,
    diff_tracked_changes,
    is_truthy,
)
from vehicle_listing.services.related_diff import (
    RelatedDiff,
    diff_related_collections,
    diff_related_models,
)

logger = logging.getLogger(__name__)

# Set by HTML forms to spoof PUT/DELETE; not part of the record
METHOD_FIELD = "_method"


def _json_default(value: Any):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def dump_json(value: Any) -> str:
    """Compact JSON, as stored in the changeset columns."""
    return json.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )


def coerce_ref_id(ref_id: Any) -> int | None:
    """Integer id of the audited row; 0 and junk mean no row."""
    if ref_id is None or isinstance(ref_id, bool):
        return None
    try:
        ref_id = int(ref_id)
    except (TypeError, ValueError):
        return None
    return ref_id or None


def normalize_description(description: Any) -> str | None:
    """
    Structured descriptions are stored as compact JSON with empty
    entries dropped. Nothing left means no description.
    """
    if description is None:
        return None
    if isinstance(description, Mapping):
        kept = {k: v for k, v in description.items() if is_truthy(v)}
        return dump_json(kept) if kept else None
    if isinstance(description, (list, tuple)):
        kept = [v for v in description if is_truthy(v)]
        return dump_json(kept) if kept else None
    return str(description) or None


def _error_details(error: SQLAlchemyError) -> tuple[Any, str]:
    orig = getattr(error, "orig", None)
    code = (
        getattr(orig, "pgcode", None)
        or getattr(orig, "sqlite_errorname", None)
        or error.code
    )
    return code, str(orig if orig is not None else error)


def _split_identity(record: Mapping) -> tuple[int | None, dict]:
    payload = dict(record)
    return coerce_ref_id(payload.pop(IDENTITY_FIELD, None)), payload


class AuditService:
    """
    Records admin activity.

    Like every service in this codebase it takes the request's
    session and never commits; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_logs(
        self,
        limit: int = 50,
        offset: int = 0,
        main_table: str | None = None,
    ) -> list[AdminAuditLog]:
        """Audit entries, newest first."""
        query = select(AdminAuditLog)
        if main_table:
            query = query.where(AdminAuditLog.main_table == main_table)
        logs = self.db.execute(
            query.order_by(AdminAuditLog.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        return list(logs)

    def get_log(self, log_id: int) -> AdminAuditLog:
        log = self.db.get(AdminAuditLog, log_id)
        if not log:
            raise ValueError(f"Audit log {log_id} not found")
        return log

    def _changeset(self, changeset: Any) -> Mapping:
        if changeset is None:
            return {}
        if not isinstance(changeset, Mapping):
            logger.warning(
                "Ignoring audit changeset of type %s", type(changeset).__name__
            )
            return {}
        return changeset

    def _payload(self, value: Any, side: str) -> dict:
        try:
            return to_record(value)
        except TypeError as e:
            logger.warning("Ignoring %s audit payload: %s", side, e)
            return {}

    def record(
        self,
        context: AuditContext,
        event_type: str | AuditEventType,
        changeset: Mapping | None = None,
        ref_id: Any = None,
        description: Any = None,
    ) -> AdminAuditLog | None:
        """
        Record one admin action and return the stored log entry.

        Returns None without writing anything when the event type
        is unknown, when a "show" has no row id, or when the entry
        cannot be serialised or inserted.

        changeset may carry "old" and "new" payloads (mappings,
        pydantic schemas or model instances). When they yield no
        difference, the model changes tracked on the context are
        used instead.
        """
        try:
            event = AuditEventType(event_type)
        except ValueError:
            return None

        ref_id = coerce_ref_id(ref_id)
        if event == AuditEventType.SHOW and not ref_id:
            return None

        changeset = self._changeset(changeset)
        old_data = self._payload(changeset.get("old"), "old")
        new_data = self._payload(changeset.get("new"), "new")
        new_data.pop(METHOD_FIELD, None)

        diff = (
            diff_records(new_data, old_data)
            or diff_tracked_changes(event, context.tracked)
        )

        try:
            entry = AdminAuditLog(
                user_id=context.user_id,
                event_type=event,
                event_description=normalize_description(description),
                section=context.section,
                main_table=context.main_table,
                ref_id=ref_id,
                changeset_json=dump_json(diff) if diff else None,
            )
        except (TypeError, ValueError) as e:
            logger.warning("Unable to serialise admin activity: %s", e)
            return None

        # Caller's pending work is flushed outside the savepoint
        self.db.flush()
        try:
            with self.db.begin_nested():
                self.db.add(entry)
                self.db.flush()
        except SQLAlchemyError as e:
            code, message = _error_details(e)
            logger.warning(
                "Unable to log admin activity: code=%s message=%s",
                code, message,
            )
            return None

        return entry

    def record_related(
        self,
        context: AuditContext,
        table: str,
        name: str,
        changeset: Mapping | None = None,
    ) -> None:
        """
        Record changes to the related rows of the audited record.

        A single mapping or model instance on either side is diffed
        field by field; lists of rows are diffed row by row. Each
        changed related row becomes one AdminAuditRelatedLog linked
        to context.parent_log_id, with its id moved to ref_id.
        """
        changeset = self._changeset(changeset)
        old_data = changeset.get("old")
        new_data = changeset.get("new")

        if _is_single(old_data) or _is_single(new_data):
            diff = diff_related_models(
                self._payload(new_data, "new"),
                self._payload(old_data, "old"),
            )
        else:
            try:
                diff = diff_related_collections(new_data, old_data)
            except TypeError as e:
                logger.warning("Ignoring related audit payload: %s", e)
                return

        try:
            rows = self._related_rows(context, table, name, diff)
        except (TypeError, ValueError) as e:
            logger.warning("Unable to serialise admin related activity: %s", e)
            return
        if not rows:
            return

        self.db.flush()
        try:
            with self.db.begin_nested():
                self.db.execute(insert(AdminAuditRelatedLog), rows)
        except SQLAlchemyError as e:
            code, message = _error_details(e)
            logger.warning(
                "Unable to log admin related activity: code=%s message=%s",
                code, message,
            )

    def _related_rows(
        self,
        context: AuditContext,
        table: str,
        name: str,
        diff: RelatedDiff,
    ) -> list[dict]:
        def row(event, ref_id, old_value, new_value):
            return {
                "parent_log_id": context.parent_log_id,
                "ref_id": ref_id,
                "main_table": table,
                "name": name,
                "event_type": event,
                "old_value": dump_json(old_value) if old_value else None,
                "new_value": dump_json(new_value) if new_value else None,
            }

        rows = []
        for record in diff.created:
            ref_id, payload = _split_identity(record)
            rows.append(row(RelatedEventType.CREATE, ref_id, None, payload))

        for old_record, new_record in diff.updated:
            ref_id, old_payload = _split_identity(old_record)
            _, new_payload = _split_identity(new_record)
            rows.append(
                row(RelatedEventType.UPDATE, ref_id, old_payload, new_payload)
            )

        for record in diff.deleted:
            ref_id, payload = _split_identity(record)
            rows.append(row(RelatedEventType.DELETE, ref_id, payload, None))

        return rows


def _is_single(value: Any) -> bool:
    return isinstance(value, (Mapping, BaseModel)) or is_mapped_instance(value)
