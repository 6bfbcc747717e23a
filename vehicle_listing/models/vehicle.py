"""
Vehicle (variant) model.

A vehicle is one purchasable trim of a model year, e.g.
"2024 Toyota Camry 2.5 SE". It carries the price and the
technical specification.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Boolean, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vehicle_listing.models.base import Base


class VehicleType(Base):
    """Body type: Sedan, SUV, Hatchback..."""

    __tablename__ = "vehicle_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Transmission(Base):
    __tablename__ = "transmissions"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True)
    model_year_id: Mapped[int] = mapped_column(
        ForeignKey("model_years.id"), nullable=False, index=True
    )
    vehicle_type_id: Mapped[int] = mapped_column(
        ForeignKey("vehicle_types.id"), nullable=False
    )
    transmission_id: Mapped[int | None] = mapped_column(
        ForeignKey("transmissions.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    variant: Mapped[str] = mapped_column(String(255), nullable=False)
    fuel_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    seats: Mapped[int | None] = mapped_column(nullable=True)
    engine_capacity: Mapped[int | None] = mapped_column(nullable=True)
    msrp: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    status: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    model_year: Mapped["ModelYear"] = relationship(back_populates="vehicles")
    vehicle_type: Mapped["VehicleType"] = relationship()
    transmission: Mapped["Transmission | None"] = relationship()

    def __repr__(self) -> str:
        return f"<Vehicle {self.name}>"
