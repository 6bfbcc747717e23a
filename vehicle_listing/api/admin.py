"""
Admin API endpoints.

Every endpoint here is audited. The acting admin is identified
by the X-Admin-User-Id header set by the admin gateway; each
request builds its own AuditContext and hands it to the service.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response
from sqlalchemy.orm import Session

from vehicle_listing.models.admin_audit_log import AdminAuditLog
from vehicle_listing.models.base import get_db
from vehicle_listing.models.enums import AuditEventType
from vehicle_listing.models.model_year import ModelYear
from vehicle_listing.models.vehicle import Vehicle
from vehicle_listing.schemas.audit import AuditLogResponse, AuditLogDetailResponse
from vehicle_listing.schemas.catalog import (
    ModelYearUpdate,
    ModelYearResponse,
    VehicleCreate,
    VehicleUpdate,
    VehicleResponse,
)
from vehicle_listing.services.audit_context import AuditContext
from vehicle_listing.services.audit_service import AuditService
from vehicle_listing.services.catalog_service import CatalogService

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_user_id(
    x_admin_user_id: int | None = Header(default=None),
) -> int | None:
    return x_admin_user_id


# --- Audit report ---

@router.get("/audit-logs", response_model=list[AuditLogResponse])
def list_audit_logs(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    main_table: str | None = None,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_admin_user_id),
):
    """List audit entries, newest first. Viewing the list is audited too."""
    service = AuditService(db)
    logs = service.list_logs(limit=limit, offset=offset, main_table=main_table)

    context = AuditContext(
        user_id=user_id,
        section="audit_logs",
        main_table=AdminAuditLog.__tablename__,
    )
    service.record(context, AuditEventType.INDEX)
    db.commit()
    return logs


@router.get("/audit-logs/{log_id}", response_model=AuditLogDetailResponse)
def get_audit_log(log_id: int, db: Session = Depends(get_db)):
    """A single audit entry with its related-row changes."""
    try:
        return AuditService(db).get_log(log_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


# --- Model years ---

def model_year_context(user_id: int | None) -> AuditContext:
    return AuditContext(
        user_id=user_id,
        section="model_years",
        main_table=ModelYear.__tablename__,
    )


@router.get("/model-years/{model_year_id}", response_model=ModelYearResponse)
def show_model_year(
    model_year_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_admin_user_id),
):
    service = CatalogService(db)
    try:
        model_year = service.show_model_year(
            model_year_id, model_year_context(user_id)
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return model_year


@router.put("/model-years/{model_year_id}", response_model=ModelYearResponse)
def update_model_year(
    model_year_id: int,
    request: ModelYearUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_admin_user_id),
):
    """
    Update a model year and, when given, replace its colours.

    Colours omitted from the list are deleted.
    """
    service = CatalogService(db)
    try:
        model_year = service.update_model_year(
            model_year_id, request, model_year_context(user_id)
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return model_year


# --- Vehicles ---

def vehicle_context(user_id: int | None) -> AuditContext:
    return AuditContext(
        user_id=user_id,
        section="vehicles",
        main_table=Vehicle.__tablename__,
    )


@router.post("/vehicles", response_model=VehicleResponse, status_code=201)
def create_vehicle(
    request: VehicleCreate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_admin_user_id),
):
    service = CatalogService(db)
    try:
        vehicle = service.create_vehicle(request, vehicle_context(user_id))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return vehicle


@router.put("/vehicles/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: int,
    request: VehicleUpdate,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_admin_user_id),
):
    service = CatalogService(db)
    try:
        vehicle = service.update_vehicle(
            vehicle_id, request, vehicle_context(user_id)
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return vehicle


@router.delete("/vehicles/{vehicle_id}", status_code=204)
def delete_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_admin_user_id),
):
    service = CatalogService(db)
    try:
        service.delete_vehicle(vehicle_id, vehicle_context(user_id))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return Response(status_code=204)
