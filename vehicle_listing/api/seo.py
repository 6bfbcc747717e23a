"""
Structured data endpoints.

The page templates fetch these documents and embed them in
<script type="application/ld+json"> blocks.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from vehicle_listing.models.base import get_db
from vehicle_listing.services.catalog_service import CatalogService
from vehicle_listing.services.structured_data import StructuredDataBuilder

router = APIRouter(prefix="/seo", tags=["SEO"])


def get_builder() -> StructuredDataBuilder:
    return StructuredDataBuilder()


@router.get("/model-years/{model_year_id}/breadcrumbs")
def model_year_breadcrumbs(
    model_year_id: int,
    schema_type: str = Query(default="BreadcrumbList", alias="type"),
    db: Session = Depends(get_db),
    builder: StructuredDataBuilder = Depends(get_builder),
):
    try:
        model_year = CatalogService(db).get_model_year(model_year_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return builder.model_year_breadcrumbs(schema_type, model_year)


@router.get("/model-years/{model_year_id}/product")
def model_year_product(
    model_year_id: int,
    schema_type: str = Query(default="Product", alias="type"),
    db: Session = Depends(get_db),
    builder: StructuredDataBuilder = Depends(get_builder),
):
    """Product markup with similar cars, ratings and reviews."""
    service = CatalogService(db)
    try:
        model_year = service.get_model_year(model_year_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    similar = service.similar_model_years(model_year)
    ratings = service.review_ratings(
        [model_year.id] + [other.id for other in similar]
    )

    return builder.model_year_product(
        schema_type,
        model_year,
        images=model_year.images,
        similar=similar,
        reviews=service.reviews(model_year.id),
        ratings=ratings.get(model_year.id),
        similar_ratings=ratings,
    )


@router.get("/vehicles/{vehicle_id}/breadcrumbs")
def vehicle_breadcrumbs(
    vehicle_id: int,
    schema_type: str = Query(default="BreadcrumbList", alias="type"),
    db: Session = Depends(get_db),
    builder: StructuredDataBuilder = Depends(get_builder),
):
    try:
        vehicle = CatalogService(db).get_vehicle(vehicle_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return builder.vehicle_breadcrumbs(schema_type, vehicle)


@router.get("/vehicles/{vehicle_id}/product")
def vehicle_product(
    vehicle_id: int,
    schema_type: str = Query(default="Product", alias="type"),
    db: Session = Depends(get_db),
    builder: StructuredDataBuilder = Depends(get_builder),
):
    service = CatalogService(db)
    try:
        vehicle = service.get_vehicle(vehicle_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return builder.vehicle_product(
        schema_type,
        vehicle,
        images=vehicle.model_year.images,
        similar_vehicles=service.similar_variants(vehicle),
    )
