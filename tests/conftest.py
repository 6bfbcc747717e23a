"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Each test gets a fresh schema and a
session that rolls back after the test.
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from vehicle_listing.main import app
from vehicle_listing.models import (
    Base,
    CarModel,
    Make,
    ModelYear,
    ModelYearColour,
    ModelYearImage,
    Review,
    Transmission,
    Vehicle,
    VehicleType,
)
from vehicle_listing.models.base import enable_sqlite_savepoints, get_db


# SQLite keeps the suite free of database infrastructure
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
enable_sqlite_savepoints(engine)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses
    the test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(db_session):
    """
    A small committed catalog.

    Toyota Camry 2024 (two sedan variants, one colour, one
    gallery image, two reviews) and Toyota RAV4 2024 (one SUV
    variant and one sedan-bodied variant, so it is "similar").
    """
    toyota = Make(name="Toyota", slug="toyota")
    camry = CarModel(make=toyota, name="Camry", slug="camry")
    rav4 = CarModel(make=toyota, name="RAV4", slug="rav4")
    sedan = VehicleType(name="Sedan")
    suv = VehicleType(name="SUV")
    automatic = Transmission(name="Automatic")

    camry_2024 = ModelYear(
        make=toyota,
        car_model=camry,
        year=2024,
        name="2024 Toyota Camry",
        description="The midsize sedan.",
        search_image_thumb_url="images/camry-thumb.jpg",
        banner_image_original_url="images/camry-banner.jpg",
        updated_at=datetime(2024, 1, 1),
    )
    camry_2024.colours = [
        ModelYearColour(name="Red", url_large="images/camry-red.jpg"),
    ]
    camry_2024.images = [ModelYearImage(url_large="images/camry-side.jpg")]

    camry_le = Vehicle(
        model_year=camry_2024,
        vehicle_type=sedan,
        transmission=automatic,
        name="Camry 2.5 LE",
        variant="2.5 LE",
        fuel_type="petrol",
        seats=5,
        engine_capacity=2500,
        msrp=Decimal("26420.00"),
    )
    camry_hybrid = Vehicle(
        model_year=camry_2024,
        vehicle_type=sedan,
        transmission=automatic,
        name="Camry 2.5 Hybrid SE",
        variant="2.5 Hybrid SE",
        fuel_type="hybrid",
        seats=5,
        engine_capacity=2500,
        msrp=Decimal("31120.50"),
    )

    rav4_2024 = ModelYear(
        make=toyota,
        car_model=rav4,
        year=2024,
        name="2024 Toyota RAV4",
        search_image_thumb_url="images/rav4-thumb.jpg",
    )
    rav4_xle = Vehicle(
        model_year=rav4_2024,
        vehicle_type=sedan,
        transmission=automatic,
        name="RAV4 XLE",
        variant="XLE",
        fuel_type="petrol",
        seats=5,
        engine_capacity=2500,
        msrp=Decimal("30000.00"),
    )
    rav4_adventure = Vehicle(
        model_year=rav4_2024,
        vehicle_type=suv,
        name="RAV4 Adventure",
        variant="Adventure",
        fuel_type="petrol",
        seats=5,
        engine_capacity=2500,
        msrp=Decimal("34000.00"),
    )

    reviews = [
        Review(
            name=" Sam ",
            title=" Great car ",
            details=" Smooth and quiet. ",
            overall_rating=5,
            created_at=datetime(2024, 3, 1, 12, 0, 0),
        ),
        Review(
            name="Alex",
            title="Solid",
            details="Does the job.",
            overall_rating=4,
            created_at=datetime(2024, 2, 1, 9, 30, 0),
        ),
    ]

    db_session.add_all([
        camry_2024, rav4_2024,
        camry_le, camry_hybrid, rav4_xle, rav4_adventure,
    ])
    db_session.flush()
    for review in reviews:
        review.model_year_id = camry_2024.id
    db_session.add_all(reviews)
    db_session.commit()

    return SimpleNamespace(
        make=toyota,
        sedan=sedan,
        suv=suv,
        automatic=automatic,
        camry_2024=camry_2024,
        rav4_2024=rav4_2024,
        camry_le=camry_le,
        camry_hybrid=camry_hybrid,
        rav4_xle=rav4_xle,
        rav4_adventure=rav4_adventure,
        reviews=reviews,
    )
