"""
Tests for flat record diffing.

Covers:
- Only changed fields are reported
- Fields added or removed on one side
- Skip fields (id and timestamps)
- Loose comparison of form values against stored values
- Masking of sensitive fields
- Fallback diff from tracked model changes
"""

from decimal import Decimal

from vehicle_listing.models.enums import AuditEventType
from vehicle_listing.services.audit_context import TrackedChanges
from vehicle_listing.services.record_diff import (
    diff_records,
    diff_tracked_changes,
    is_blank,
    loosely_equal,
)


class TestLooselyEqual:

    def test_numeric_string_equals_number(self):
        assert loosely_equal("5", 5)
        assert loosely_equal(5, "5")
        assert loosely_equal("12.50", Decimal("12.5"))
        assert loosely_equal("1e3", 1000)

    def test_different_numbers_are_not_equal(self):
        assert not loosely_equal("5", 6)

    def test_none_equals_empty_string(self):
        assert loosely_equal(None, "")
        assert loosely_equal("", None)

    def test_none_does_not_equal_zero_string(self):
        assert not loosely_equal(None, "0")

    def test_bool_compares_by_truthiness(self):
        assert loosely_equal(True, 1)
        assert loosely_equal(False, 0)
        assert loosely_equal(True, "yes")
        assert not loosely_equal(False, "yes")

    def test_non_numeric_strings_compare_exactly(self):
        assert loosely_equal("Camry", "Camry")
        assert not loosely_equal("Camry", "camry")
        assert not loosely_equal("abc", 0)

    def test_nested_structures(self):
        assert loosely_equal({"seats": "5"}, {"seats": 5})
        assert not loosely_equal({"seats": 5}, {"doors": 5})
        assert loosely_equal(["1", 2], [1, "2"])
        assert not loosely_equal([1], [1, 2])


class TestIsBlank:

    def test_blank_values(self):
        for value in (None, "", [], {}):
            assert is_blank(value)

    def test_values_that_are_not_blank(self):
        for value in (0, False, "0", " ", [0]):
            assert not is_blank(value)


class TestDiffRecords:

    def test_only_changed_fields_reported(self):
        old = {"name": "Camry", "seats": 5, "fuel_type": "petrol"}
        new = {"name": "Camry LE", "seats": 5, "fuel_type": "petrol"}

        assert diff_records(new, old) == {
            "name": {"old_value": "Camry", "new_value": "Camry LE"},
        }

    def test_identical_records_give_empty_diff(self):
        record = {"name": "Camry", "seats": 5}
        assert diff_records(dict(record), dict(record)) == {}

    def test_both_empty(self):
        assert diff_records({}, {}) == {}
        assert diff_records(None, None) == {}

    def test_field_only_in_new(self):
        assert diff_records({"description": "New"}, {}) == {
            "description": {"old_value": None, "new_value": "New"},
        }

    def test_field_only_in_old(self):
        assert diff_records({}, {"description": "Gone"}) == {
            "description": {"old_value": "Gone", "new_value": None},
        }

    def test_skip_fields_ignored(self):
        old = {"id": 1, "created_at": "a", "updated_at": "b", "deleted_at": None}
        new = {"id": 2, "created_at": "c", "updated_at": "d", "deleted_at": "e"}
        assert diff_records(new, old) == {}

    def test_form_strings_equal_stored_numbers(self):
        old = {"seats": 5, "msrp": Decimal("26420.00"), "description": None}
        new = {"seats": "5", "msrp": "26420", "description": ""}
        assert diff_records(new, old) == {}

    def test_sensitive_values_masked(self):
        diff = diff_records({"password": "newpass1"}, {"password": "old"})
        assert diff == {
            "password": {"old_value": "***", "new_value": "********"},
        }

    def test_is_pure(self):
        old = {"name": "A", "token": "abc"}
        new = {"name": "B", "token": "abcd"}
        assert diff_records(new, old) == diff_records(new, old)
        assert old == {"name": "A", "token": "abc"}


class TestDiffTrackedChanges:

    def test_update_uses_original_and_updated(self):
        tracked = TrackedChanges(
            original={"seats": 5},
            updated={"seats": 7, "updated_at": "now"},
            updating=True,
        )
        assert diff_tracked_changes(AuditEventType.UPDATE, tracked) == {
            "seats": {"old_value": 5, "new_value": 7},
        }

    def test_create_has_no_old_values(self):
        tracked = TrackedChanges(
            updated={"id": 3, "name": "Camry", "token": "abc"},
            creating=True,
        )
        assert diff_tracked_changes(AuditEventType.CREATE, tracked) == {
            "name": {"old_value": None, "new_value": "Camry"},
            "token": {"old_value": None, "new_value": "***"},
        }

    def test_delete_reports_original_values(self):
        tracked = TrackedChanges(
            original={"id": 3, "name": "Camry"},
            deleting=True,
        )
        assert diff_tracked_changes(AuditEventType.DELETE, tracked) == {
            "name": {"old_value": "Camry", "new_value": None},
        }

    def test_inactive_tracker_ignored(self):
        tracked = TrackedChanges(updated={"name": "Camry"})
        assert diff_tracked_changes(AuditEventType.UPDATE, tracked) == {}

    def test_missing_tracker_ignored(self):
        assert diff_tracked_changes(AuditEventType.UPDATE, None) == {}

    def test_read_events_ignored(self):
        tracked = TrackedChanges(updated={"name": "Camry"}, updating=True)
        assert diff_tracked_changes(AuditEventType.SHOW, tracked) == {}
        assert diff_tracked_changes(AuditEventType.INDEX, tracked) == {}
