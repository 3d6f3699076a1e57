import uuid
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from tests.conftest import make_package
from travel_packages.db.models import Package
from travel_packages.services import catalog


def test_get_package_returns_full_document(client: TestClient, db):
    created = catalog.create_package(db, make_package())

    response = client.get(f"/api/package/{created.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(created.id)
    assert data["destination"] == "Bali"
    assert data["flights"]["flightNumber"] == "GA-401"
    assert datetime.fromisoformat(data["flights"]["departureDate"].replace("Z", "+00:00")) == datetime(
        2026, 3, 1, 9, 30, tzinfo=timezone.utc
    )
    assert data["hotels"]["name"] == "Ubud Retreat"
    assert data["hotels"]["bookingDetails"] == "Breakfast included"
    assert data["imgUrls"] == ["one.jpg", "two.jpg", "three.jpg"]


def test_nested_sequences_keep_order_and_values(client: TestClient, db):
    payload = make_package()
    created = catalog.create_package(db, payload)

    data = client.get(f"/api/package/{created.id}").json()

    assert data["activities"] == [
        {"name": a.name, "img": a.img, "description": a.description} for a in payload.activities
    ]
    assert [p["title"] for p in data["policies"]] == ["Cancellation", "Payment"]
    assert [d["day"] for d in data["itinerary"]] == [1, 2, 3]
    assert data["itinerary"][2] == {
        "day": 3,
        "date": None,
        "hotel": "Seminyak Beach",
        "hotelStars": "5",
        "car": "SUV",
        "sightseeing": "Beach day",
    }


def test_get_package_unknown_id_is_404(client: TestClient):
    response = client.get(f"/api/package/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"message": "Package not found"}


def test_get_package_malformed_id_is_generic_500(client: TestClient):
    response = client.get("/api/package/not-a-uuid")

    assert response.status_code == 500
    assert response.text == "Something went wrong!"


def test_list_by_destination_is_exact_and_case_sensitive(client: TestClient, db):
    catalog.create_package(db, make_package(name="Bali Escape"))
    catalog.create_package(db, make_package(name="Bali Deluxe"))
    catalog.create_package(db, make_package(destination="Paris", name="Paris Weekend"))

    bali = client.get("/api/packages/Bali")
    lower = client.get("/api/packages/bali")
    partial = client.get("/api/packages/Bal")

    assert bali.status_code == 200
    assert sorted(p["name"] for p in bali.json()) == ["Bali Deluxe", "Bali Escape"]
    assert lower.status_code == 200
    assert lower.json() == []
    assert partial.json() == []


def test_list_unknown_destination_is_empty(client: TestClient):
    response = client.get("/api/packages/Atlantis")

    assert response.status_code == 200
    assert response.json() == []


def test_catalog_needs_no_session(client: TestClient, db):
    created = catalog.create_package(db, make_package())

    assert client.get("/api/packages/Bali").status_code == 200
    assert client.get(f"/api/package/{created.id}").status_code == 200


def test_backend_failure_is_generic_500(client: TestClient):
    Package.__table__.drop(client.app.state.context.database.engine)

    response = client.get("/api/packages/Bali")

    assert response.status_code == 500
    assert response.text == "Something went wrong!"


def test_dates_keep_their_instant_across_offsets(client: TestClient, db):
    ist = timezone(timedelta(hours=5, minutes=30))
    local = datetime(2026, 3, 1, 9, 30, tzinfo=ist)
    payload = make_package(
        itinerary=[{"day": 1, "date": local.isoformat(), "hotel": "Ubud Retreat"}],
        hotels={"name": "Ubud Retreat", "checkIn": local.isoformat()},
    )
    created = catalog.create_package(db, payload)

    # Served by the app's own session, so the values come back from the store.
    data = client.get(f"/api/package/{created.id}").json()

    day_date = datetime.fromisoformat(data["itinerary"][0]["date"].replace("Z", "+00:00"))
    check_in = datetime.fromisoformat(data["hotels"]["checkIn"].replace("Z", "+00:00"))
    assert day_date == local
    assert check_in == local
    assert day_date.utcoffset() == timedelta(0)
