"""
Catalog service: model years, vehicles and their reviews.

Admin edits go through this service so that every change is
audited the same way. Model year edits are audited from
explicit before/after snapshots (including the colours edited
inline); vehicle edits are audited from SQLAlchemy's change
tracking. The caller controls the commit.
"""

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from vehicle_listing.models.enums import AuditEventType
from vehicle_listing.models.model_year import ModelYear, ModelYearColour
from vehicle_listing.models.review import Review
from vehicle_listing.models.vehicle import Vehicle
from vehicle_listing.schemas.catalog import (
    ColourPayload,
    ModelYearUpdate,
    VehicleCreate,
    VehicleUpdate,
)
from vehicle_listing.schemas.seo import ReviewRatings
from vehicle_listing.services.audit_context import (
    AuditContext,
    snapshot,
    track_changes,
    track_created,
)
from vehicle_listing.services.audit_service import AuditService
from vehicle_listing.services.structured_data import SIMILAR_LIMIT


class CatalogService:

    def __init__(self, db: Session):
        self.db = db
        self.audit_service = AuditService(db)

    # --- Lookups ---

    def get_model_year(self, model_year_id: int) -> ModelYear:
        model_year = self.db.get(ModelYear, model_year_id)
        if not model_year:
            raise ValueError(f"Model year {model_year_id} not found")
        return model_year

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = self.db.get(Vehicle, vehicle_id)
        if not vehicle:
            raise ValueError(f"Vehicle {vehicle_id} not found")
        return vehicle

    def similar_model_years(
        self, model_year: ModelYear, limit: int = SIMILAR_LIMIT
    ) -> list[ModelYear]:
        """Other model years sold with at least one of the same body types."""
        body_type_ids = {v.vehicle_type_id for v in model_year.vehicles}
        if not body_type_ids:
            return []

        similar = self.db.execute(
            select(ModelYear)
            .join(Vehicle, Vehicle.model_year_id == ModelYear.id)
            .where(
                Vehicle.vehicle_type_id.in_(body_type_ids),
                Vehicle.status.is_(True),
                ModelYear.id != model_year.id,
            )
            .distinct()
            .order_by(ModelYear.id)
            .limit(limit)
        ).scalars().all()
        return list(similar)

    def similar_variants(self, vehicle: Vehicle) -> list[Vehicle]:
        """Active sibling variants of the same model year."""
        siblings = self.db.execute(
            select(Vehicle)
            .where(
                Vehicle.model_year_id == vehicle.model_year_id,
                Vehicle.id != vehicle.id,
                Vehicle.status.is_(True),
            )
            .order_by(Vehicle.id)
        ).scalars().all()
        return list(siblings)

    def reviews(self, model_year_id: int) -> list[Review]:
        """Reviews of a model year, newest first."""
        reviews = self.db.execute(
            select(Review)
            .where(Review.model_year_id == model_year_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        ).scalars().all()
        return list(reviews)

    def review_ratings(self, model_year_ids: list[int]) -> dict[int, ReviewRatings]:
        """Average rating and review count per model year that has reviews."""
        if not model_year_ids:
            return {}

        rows = self.db.execute(
            select(
                Review.model_year_id,
                func.avg(Review.overall_rating),
                func.count(Review.id),
            )
            .where(Review.model_year_id.in_(model_year_ids))
            .group_by(Review.model_year_id)
        ).all()

        return {
            model_year_id: ReviewRatings(
                average=round(float(average), 1), total=total
            )
            for model_year_id, average, total in rows
        }

    # --- Audited admin operations ---

    def show_model_year(
        self, model_year_id: int, context: AuditContext
    ) -> ModelYear:
        model_year = self.get_model_year(model_year_id)
        self.audit_service.record(
            context, AuditEventType.SHOW, ref_id=model_year.id
        )
        return model_year

    def _sync_colours(
        self, model_year: ModelYear, payloads: list[ColourPayload]
    ) -> None:
        """Replace the colour list; colours left out are deleted."""
        existing = {colour.id: colour for colour in model_year.colours}
        colours = []
        for payload in payloads:
            colour = existing.get(payload.id) if payload.id is not None else None
            if colour is None:
                colour = ModelYearColour(name=payload.name)
            colour.name = payload.name
            colour.url_large = payload.url_large
            colours.append(colour)
        model_year.colours = colours

    def update_model_year(
        self,
        model_year_id: int,
        request: ModelYearUpdate,
        context: AuditContext,
    ) -> ModelYear:
        """
        Apply an admin edit to a model year and its colours.

        The audit entry compares full row snapshots taken before
        and after the edit; colour changes are recorded as related
        rows of that entry.
        """
        model_year = self.get_model_year(model_year_id)
        old = snapshot(model_year)
        old_colours = [snapshot(colour) for colour in model_year.colours]

        changes = request.model_dump(exclude_unset=True, exclude={"colours"})
        for field, value in changes.items():
            setattr(model_year, field, value)
        if request.colours is not None:
            self._sync_colours(model_year, request.colours)

        self.db.flush()

        entry = self.audit_service.record(
            context,
            AuditEventType.UPDATE,
            {"old": old, "new": snapshot(model_year)},
            ref_id=model_year.id,
            description={"name": model_year.name},
        )

        if entry is not None and request.colours is not None:
            context.parent_log_id = entry.id
            self.audit_service.record_related(
                context,
                ModelYearColour.__tablename__,
                "colours",
                {
                    "old": old_colours,
                    "new": [snapshot(colour) for colour in model_year.colours],
                },
            )

        return model_year

    def create_vehicle(
        self, request: VehicleCreate, context: AuditContext
    ) -> Vehicle:
        self.get_model_year(request.model_year_id)

        vehicle = Vehicle(**request.model_dump())
        self.db.add(vehicle)
        self.db.flush()

        context.tracked = track_created(vehicle)
        self.audit_service.record(
            context, AuditEventType.CREATE, ref_id=vehicle.id
        )
        return vehicle

    def update_vehicle(
        self,
        vehicle_id: int,
        request: VehicleUpdate,
        context: AuditContext,
    ) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(vehicle, field, value)

        # History is gone once flushed
        context.tracked = track_changes(vehicle)
        self.db.flush()

        self.audit_service.record(
            context, AuditEventType.UPDATE, ref_id=vehicle.id
        )
        return vehicle

    def delete_vehicle(self, vehicle_id: int, context: AuditContext) -> None:
        vehicle = self.get_vehicle(vehicle_id)

        self.db.delete(vehicle)
        context.tracked = track_changes(vehicle)
        self.db.flush()

        self.audit_service.record(
            context, AuditEventType.DELETE, ref_id=vehicle_id
        )
