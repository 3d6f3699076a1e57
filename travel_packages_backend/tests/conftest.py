from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from travel_packages.api.main import create_app
from travel_packages.core.settings import Settings
from travel_packages.schemas.packages import PackageCreate

ALLOWED_ORIGIN = "https://packages.example.com"

# In-memory SQLite: the engine uses a StaticPool, so every session inside one
# app shares the same database, and every app gets a fresh one.
TEST_DATABASE_URL = "sqlite://"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": TEST_DATABASE_URL,
        "session_secret": "test-secret",
        "cors_origins": (ALLOWED_ORIGIN,),
        "session_same_site": "lax",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    return make_settings()


@pytest.fixture(name="app")
def app_fixture(settings: Settings):
    return create_app(settings)


@pytest.fixture(name="client")
def client_fixture(app):
    """Test client with the app's lifespan running and all tables created."""
    with TestClient(app) as client:
        client.app.state.context.database.create_all()
        yield client


@pytest.fixture(name="db")
def db_fixture(client: TestClient):
    """A SQLAlchemy session on the same database the client talks to."""
    with client.app.state.context.database.session() as session:
        yield session


def make_package(**overrides) -> PackageCreate:
    """A fully populated package payload (camelCase, as it arrives from JSON)."""
    document = {
        "destination": "Bali",
        "name": "Bali Escape",
        "duration": "5 Nights / 6 Days",
        "flights": {
            "details": "Return economy",
            "flightNumber": "GA-401",
            "departureDate": datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc).isoformat(),
            "returnDate": datetime(2026, 3, 7, 18, 0, tzinfo=timezone.utc).isoformat(),
        },
        "hotels": {
            "details": "Sea view room",
            "name": "Ubud Retreat",
            "address": "Jl. Raya Ubud 1",
            "checkIn": datetime(2026, 3, 1, 14, 0, tzinfo=timezone.utc).isoformat(),
            "checkOut": datetime(2026, 3, 7, 11, 0, tzinfo=timezone.utc).isoformat(),
            "bookingDetails": "Breakfast included",
        },
        "transfers": "Private airport transfers",
        "activities": [
            {"name": "Temple tour", "img": "temple.jpg", "description": "Uluwatu at sunset"},
            {"name": "Rice terraces", "img": "rice.jpg", "description": "Tegallalang walk"},
            {"name": "Snorkelling", "img": "reef.jpg", "description": "Blue Lagoon"},
        ],
        "meals": "Breakfast",
        "price": "1299",
        "img": "cover.jpg",
        "imgUrls": ["one.jpg", "two.jpg", "three.jpg"],
        "policies": [
            {"title": "Cancellation", "description": "Free until 30 days before"},
            {"title": "Payment", "description": "Deposit on booking"},
        ],
        "itinerary": [
            {"day": 1, "hotel": "Ubud Retreat", "hotelStars": "4", "car": "Sedan", "sightseeing": "Arrival"},
            {"day": 2, "hotel": "Ubud Retreat", "hotelStars": "4", "car": "Sedan", "sightseeing": "Temples"},
            {"day": 3, "hotel": "Seminyak Beach", "hotelStars": "5", "car": "SUV", "sightseeing": "Beach day"},
        ],
    }
    document.update(overrides)
    return PackageCreate.model_validate(document)
