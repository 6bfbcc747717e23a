"""
Make and model models.

A make (manufacturer) has many models; a model is released
as one model year per year.
"""

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vehicle_listing.models.base import Base


class Make(Base):
    __tablename__ = "makes"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False
    )

    car_models: Mapped[list["CarModel"]] = relationship(back_populates="make")

    def __repr__(self) -> str:
        return f"<Make {self.slug}>"


class CarModel(Base):
    __tablename__ = "car_models"

    id: Mapped[int] = mapped_column(primary_key=True)
    make_id: Mapped[int] = mapped_column(
        ForeignKey("makes.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)

    make: Mapped["Make"] = relationship(back_populates="car_models")

    def __repr__(self) -> str:
        return f"<CarModel {self.slug}>"
