"""
Model year model.

The page-level entity of the listing: "2024 Toyota Camry".
Holds the marketing copy and imagery, while prices and specs
live on the individual vehicles (variants).
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vehicle_listing.models.base import Base


class ModelYear(Base):
    __tablename__ = "model_years"

    id: Mapped[int] = mapped_column(primary_key=True)
    make_id: Mapped[int] = mapped_column(
        ForeignKey("makes.id"), nullable=False, index=True
    )
    car_model_id: Mapped[int] = mapped_column(
        ForeignKey("car_models.id"), nullable=False, index=True
    )
    year: Mapped[int] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    search_image_thumb_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    banner_image_original_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    calculated_price_upon_request: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    make: Mapped["Make"] = relationship()
    car_model: Mapped["CarModel"] = relationship()
    vehicles: Mapped[list["Vehicle"]] = relationship(
        back_populates="model_year", order_by="Vehicle.id"
    )
    colours: Mapped[list["ModelYearColour"]] = relationship(
        back_populates="model_year",
        order_by="ModelYearColour.id",
        cascade="all, delete-orphan",
    )
    images: Mapped[list["ModelYearImage"]] = relationship(
        order_by="ModelYearImage.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<ModelYear {self.name}>"


class ModelYearColour(Base):
    __tablename__ = "model_year_colours"

    id: Mapped[int] = mapped_column(primary_key=True)
    model_year_id: Mapped[int] = mapped_column(
        ForeignKey("model_years.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    url_large: Mapped[str | None] = mapped_column(String(500), nullable=True)

    model_year: Mapped["ModelYear"] = relationship(back_populates="colours")


class ModelYearImage(Base):
    """Exterior and interior gallery images."""

    __tablename__ = "model_year_images"

    id: Mapped[int] = mapped_column(primary_key=True)
    model_year_id: Mapped[int] = mapped_column(
        ForeignKey("model_years.id"), nullable=False, index=True
    )
    url_large: Mapped[str | None] = mapped_column(String(500), nullable=True)
