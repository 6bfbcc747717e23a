"""
Field-level diff of two flat records.

The admin forms post strings ("5", "12.50", "") while the
database hands back ints, Decimals and NULLs. Comparing those
strictly would flag every untouched field as changed, so values
are compared loosely: numbers and numeric strings compare by
numeric value and NULL equals the empty string. See
loosely_equal() for the full rules.
"""

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from vehicle_listing.models.enums import AuditEventType
from vehicle_listing.services.masking import mask_value


# Never diffed. The identity field is kept only when diffing
# related records, where it is the join key.
SKIP_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at"})
IDENTITY_FIELD = "id"

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def is_truthy(value: Any) -> bool:
    """Form-value truthiness: "0" counts as empty, like 0 and ""."""
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def is_blank(value: Any) -> bool:
    """A field has no value: NULL, "" or an empty container."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (Mapping, list, tuple)):
        return not value
    return False


def _as_number(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, Decimal)):
            return Decimal(str(value))
        if isinstance(value, str) and _NUMERIC.match(value):
            return Decimal(value.strip())
    except InvalidOperation:
        return None
    return None


def loosely_equal(left: Any, right: Any) -> bool:
    """
    Compare two field values the way a submitted form relates to
    the stored row.

    - numbers and numeric strings compare numerically ("10" == 10.0)
    - None equals "" (an emptied text input)
    - None or a bool against any other non-string compares truthiness
    - mappings need the same keys and loosely equal values
    - sequences need the same length and loosely equal items
    - anything else uses ==
    """
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            loosely_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(map(loosely_equal, left, right))

    if left is None and isinstance(right, str):
        return right == ""
    if right is None and isinstance(left, str):
        return left == ""
    if (
        left is None or right is None
        or isinstance(left, bool) or isinstance(right, bool)
    ):
        return is_truthy(left) == is_truthy(right)

    left_number, right_number = _as_number(left), _as_number(right)
    if left_number is not None and right_number is not None:
        return left_number == right_number

    return left == right


def _change(field: str, old_value: Any, new_value: Any) -> dict:
    return {
        "old_value": mask_value(field, old_value),
        "new_value": mask_value(field, new_value),
    }


def diff_records(new: Mapping | None, old: Mapping | None) -> dict:
    """
    Return {field: {"old_value", "new_value"}} for every field
    that changed between old and new.

    A field present on one side only is always a change. Fields
    that are loosely equal are left out, as are SKIP_FIELDS.
    """
    new = new or {}
    old = old or {}
    diff = {}

    for field, new_value in new.items():
        if field in SKIP_FIELDS:
            continue
        if field not in old:
            diff[field] = _change(field, None, new_value)
        elif not loosely_equal(old[field], new_value):
            diff[field] = _change(field, old[field], new_value)

    # Fields dropped from the new payload
    for field, old_value in old.items():
        if field in SKIP_FIELDS or field in new:
            continue
        diff[field] = _change(field, old_value, None)

    return diff


def diff_tracked_changes(event_type: AuditEventType, tracked) -> dict:
    """
    Build a diff from ORM change tracking when the caller passed
    no explicit before/after payload.

    Only create, update and delete are backed by a model change,
    and only while the tracker reports one.
    """
    if event_type not in (
        AuditEventType.CREATE,
        AuditEventType.UPDATE,
        AuditEventType.DELETE,
    ):
        return {}
    if tracked is None or not tracked.active:
        return {}

    diff = {}
    if event_type == AuditEventType.DELETE:
        for field, value in tracked.original.items():
            if field in SKIP_FIELDS:
                continue
            diff[field] = _change(field, value, None)
    else:
        for field, value in tracked.updated.items():
            if field in SKIP_FIELDS:
                continue
            diff[field] = _change(field, tracked.original.get(field), value)

    return diff
