"""
Diffs of related records: the colours of a model year, the
images of a gallery, a one-to-one spec row.

Two modes:

- single record: one related row before and after the change,
  classified field by field (diff_related_models)
- collection: the related rows before and after, classified
  row by row and matched on their id (diff_related_collections)

Both produce a RelatedDiff whose records have skip fields
removed (except the id) and sensitive fields masked.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from vehicle_listing.services.audit_context import to_record
from vehicle_listing.services.masking import mask_value
from vehicle_listing.services.record_diff import (
    IDENTITY_FIELD,
    SKIP_FIELDS,
    is_blank,
    loosely_equal,
)


@dataclass
class RelatedDiff:
    created: list[dict] = field(default_factory=list)
    updated: list[tuple[dict, dict]] = field(default_factory=list)
    deleted: list[dict] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.created or self.updated or self.deleted)


def _skipped(key: Any) -> bool:
    return key in SKIP_FIELDS and key != IDENTITY_FIELD


def strip_skipped(record: Mapping) -> dict:
    """Drop skip fields (but not the id) at every nesting level."""
    stripped = {}
    for key, value in record.items():
        if _skipped(key):
            continue
        if isinstance(value, Mapping):
            value = strip_skipped(value)
        elif isinstance(value, (list, tuple)):
            value = [
                strip_skipped(item) if isinstance(item, Mapping) else item
                for item in value
            ]
        stripped[key] = value
    return stripped


def clean_record(record: Mapping) -> dict:
    """Strip skip fields and mask sensitive values, recursively."""
    return {
        key: mask_value(key, value)
        for key, value in strip_skipped(record).items()
    }


def diff_related_models(new: Mapping | None, old: Mapping | None) -> RelatedDiff:
    """
    Classify the changed fields of a single related record.

    - a value appears where there was none: create
    - a value disappears: delete
    - a value is replaced by a different one: update

    Each bucket collects at most one record, carrying the id of
    the related row on both of its sides.
    """
    new = new or {}
    old = old or {}
    # event -> (old side, new side)
    buckets = {"create": ({}, {}), "update": ({}, {}), "delete": ({}, {})}

    def put(event, identity, key, old_value, new_value):
        old_side, new_side = buckets[event]
        old_side.setdefault(IDENTITY_FIELD, identity)
        new_side.setdefault(IDENTITY_FIELD, identity)
        old_side[key] = mask_value(key, old_value)
        new_side[key] = mask_value(key, new_value)

    identity = new.get(IDENTITY_FIELD)
    for key, new_value in new.items():
        if _skipped(key):
            continue
        if key not in old:
            put("create", identity, key, None, new_value)
            continue

        old_value = old[key]
        if is_blank(old_value) and not is_blank(new_value):
            put("create", identity, key, None, new_value)
        elif is_blank(new_value) and not is_blank(old_value):
            put("delete", identity, key, old_value, None)
        elif not loosely_equal(old_value, new_value):
            put("update", identity, key, old_value, new_value)

    identity = old.get(IDENTITY_FIELD)
    for key, old_value in old.items():
        if _skipped(key) or key in new:
            continue
        put("delete", identity, key, old_value, None)

    diff = RelatedDiff()
    if buckets["create"][1]:
        diff.created.append(buckets["create"][1])
    if buckets["update"][0]:
        diff.updated.append(buckets["update"])
    if buckets["delete"][0]:
        diff.deleted.append(buckets["delete"][0])
    return diff


def _prepare(items: Iterable | None) -> list[dict]:
    """Records without skip fields; empties and duplicates dropped."""
    records = []
    for item in items or []:
        if item is None:
            continue
        record = strip_skipped(to_record(item))
        if record and record not in records:
            records.append(record)
    return records


def _find_by_identity(candidates: list[dict], record: dict, taken: set) -> int | None:
    identity = record.get(IDENTITY_FIELD)
    if identity is None:
        return None
    for index, candidate in enumerate(candidates):
        if index in taken or candidate.get(IDENTITY_FIELD) is None:
            continue
        if loosely_equal(candidate[IDENTITY_FIELD], identity):
            return index
    return None


def diff_related_collections(new: Iterable | None, old: Iterable | None) -> RelatedDiff:
    """
    Classify related rows into created, updated and deleted.

    Rows are first compared whole: a row found unchanged on both
    sides is dropped. Of what remains, an old row and a new row
    sharing the same id form an update; unmatched new rows are
    created and unmatched old rows deleted. Output order follows
    the input collections.
    """
    new_records = _prepare(new)
    old_records = _prepare(old)

    added = [record for record in new_records if record not in old_records]
    removed = [record for record in old_records if record not in new_records]

    diff = RelatedDiff()
    matched = set()
    for record in removed:
        index = _find_by_identity(added, record, matched)
        if index is None:
            diff.deleted.append(clean_record(record))
            continue
        matched.add(index)
        diff.updated.append((clean_record(record), clean_record(added[index])))

    diff.created = [
        clean_record(record)
        for index, record in enumerate(added)
        if index not in matched
    ]
    return diff
