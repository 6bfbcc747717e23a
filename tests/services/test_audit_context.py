"""
Tests for payload normalisation and ORM change tracking.
"""

import pytest

from vehicle_listing.schemas.catalog import ColourPayload
from vehicle_listing.services.audit_context import (
    TrackedChanges,
    is_mapped_instance,
    snapshot,
    to_record,
    track_changes,
    track_created,
    track_deleted,
    track_updated,
)


class TestToRecord:

    def test_none_is_empty(self):
        assert to_record(None) == {}

    def test_mapping_copied(self):
        source = {"name": "Red"}
        record = to_record(source)
        assert record == {"name": "Red"}
        assert record is not source

    def test_pydantic_schema_dumped(self):
        record = to_record(ColourPayload(name="Red"))
        assert record == {"id": None, "name": "Red", "url_large": None}

    def test_mapped_instance_snapshotted(self, catalog):
        colour = catalog.camry_2024.colours[0]
        record = to_record(colour)
        assert record["id"] == colour.id
        assert record["name"] == "Red"
        assert record["model_year_id"] == catalog.camry_2024.id

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError):
            to_record("not a record")


class TestIsMappedInstance:

    def test_model_instance(self, catalog):
        assert is_mapped_instance(catalog.camry_le)

    def test_plain_values(self):
        assert not is_mapped_instance({"id": 1})
        assert not is_mapped_instance(None)


class TestTracking:

    def test_tracked_changes_inactive_by_default(self):
        assert not TrackedChanges().active

    def test_track_updated_reads_pending_changes(self, db_session, catalog):
        vehicle = catalog.camry_le
        assert vehicle.seats == 5
        vehicle.seats = 7
        vehicle.variant = "2.5 LE Plus"

        tracked = track_updated(vehicle)

        assert tracked.updating
        assert tracked.original == {"seats": 5, "variant": "2.5 LE"}
        assert tracked.updated == {"seats": 7, "variant": "2.5 LE Plus"}

    def test_track_updated_without_changes_is_inactive(self, catalog):
        tracked = track_updated(catalog.camry_le)
        assert not tracked.active
        assert tracked.updated == {}

    def test_track_created_after_flush(self, db_session, catalog):
        from vehicle_listing.models import Vehicle

        vehicle = Vehicle(
            model_year_id=catalog.camry_2024.id,
            vehicle_type_id=catalog.sedan.id,
            name="Camry XSE",
            variant="XSE",
        )
        db_session.add(vehicle)
        db_session.flush()

        tracked = track_created(vehicle)

        assert tracked.creating
        assert tracked.updated["id"] == vehicle.id
        assert tracked.updated["status"] is True

    def test_track_deleted_keeps_original(self, catalog):
        tracked = track_deleted(catalog.rav4_adventure)
        assert tracked.deleting
        assert tracked.original["variant"] == "Adventure"
        assert tracked.updated == {}

    def test_track_changes_picks_mode(self, db_session, catalog):
        from vehicle_listing.models import Transmission

        assert track_changes(Transmission(name="Manual")).creating

        catalog.camry_le.seats = 4
        assert track_changes(catalog.camry_le).updating

        db_session.delete(catalog.rav4_adventure)
        assert track_changes(catalog.rav4_adventure).deleting

    def test_snapshot_has_every_column(self, catalog):
        record = snapshot(catalog.camry_le)
        assert set(record) >= {
            "id", "model_year_id", "vehicle_type_id", "transmission_id",
            "name", "variant", "fuel_type", "seats", "engine_capacity",
            "msrp", "status", "created_at", "updated_at",
        }
