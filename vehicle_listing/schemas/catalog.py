"""
Pydantic schemas for admin catalog operations.

These define the API contract. They are separate from the
database models because the form shape and the storage shape
differ: colours are edited inline with their model year.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# --- Request Schemas ---

class ColourPayload(BaseModel):
    """A colour as submitted with the model year form. No id means new."""
    id: int | None = None
    name: str = Field(min_length=1, max_length=100)
    url_large: str | None = Field(default=None, max_length=500)


class ModelYearUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    search_image_thumb_url: str | None = Field(default=None, max_length=500)
    banner_image_original_url: str | None = Field(default=None, max_length=500)
    calculated_price_upon_request: bool | None = None
    colours: list[ColourPayload] | None = None


class VehicleCreate(BaseModel):
    model_year_id: int
    vehicle_type_id: int
    transmission_id: int | None = None
    name: str = Field(min_length=1, max_length=255)
    variant: str = Field(min_length=1, max_length=255)
    fuel_type: str | None = Field(default=None, max_length=50)
    seats: int | None = Field(default=None, gt=0)
    engine_capacity: int | None = Field(default=None, gt=0)
    msrp: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    status: bool = True


class VehicleUpdate(BaseModel):
    vehicle_type_id: int | None = None
    transmission_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    variant: str | None = Field(default=None, min_length=1, max_length=255)
    fuel_type: str | None = Field(default=None, max_length=50)
    seats: int | None = Field(default=None, gt=0)
    engine_capacity: int | None = Field(default=None, gt=0)
    msrp: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    status: bool | None = None


# --- Response Schemas ---

class ColourResponse(BaseModel):
    id: int
    name: str
    url_large: str | None

    model_config = {"from_attributes": True}


class ModelYearResponse(BaseModel):
    id: int
    make_id: int
    car_model_id: int
    year: int
    name: str
    description: str | None
    search_image_thumb_url: str | None
    banner_image_original_url: str | None
    calculated_price_upon_request: bool
    colours: list[ColourResponse]
    updated_at: datetime

    model_config = {"from_attributes": True}


class VehicleResponse(BaseModel):
    id: int
    model_year_id: int
    vehicle_type_id: int
    transmission_id: int | None
    name: str
    variant: str
    fuel_type: str | None
    seats: int | None
    engine_capacity: int | None
    msrp: Decimal | None
    status: bool

    model_config = {"from_attributes": True}
