"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from seat_ledger.api.dependencies import get_db_manager
from seat_ledger.api.server import app


@pytest.fixture
def client(db_manager):
    """Test client whose endpoints use the temporary database."""
    app.dependency_overrides[get_db_manager] = lambda: db_manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Seat Ledger API"}


class TestCatalogEndpoints:
    """Test teams, seasons, seats and holders over HTTP."""

    def test_create_and_list(self, client):
        team = client.post("/api/teams", json={"name": "Hornets"}).json()
        season = client.post("/api/seasons", json={"team_id": team["id"], "year": 2024})
        seat = client.post(
            "/api/seats",
            json={"team_id": team["id"], "section": "101", "row": "A", "number": "1", "license_cost": "9996.39"},
        )

        assert season.status_code == 201
        assert seat.status_code == 201
        assert seat.json()["license_cost"] == "9996.39"
        assert seat.json()["label"] == "Sec 101, Row A, Seat 1"
        assert len(client.get("/api/seats", params={"team_id": team["id"]}).json()["seats"]) == 1

    def test_unknown_team_is_404(self, client):
        response = client.post("/api/seasons", json={"team_id": 404, "year": 2024})

        assert response.status_code == 404
        assert response.json()["detail"]["entity"] == "Team"

    def test_holder_by_email(self, client, seeded):
        response = client.get("/api/ticket-holders/by-email", params={"email": "Cale@example.com"})

        assert response.status_code == 200
        assert response.json()["id"] == seeded.cale.id


class TestOwnershipEndpoints:
    """Test ownership assignment over HTTP."""

    def test_conflicting_assignment_is_409(self, client, seeded):
        body = {"seat_id": seeded.seats[0].id, "season_id": seeded.season.id, "ticket_holder_id": seeded.cale.id}

        first = client.post("/api/ownership", json=body)
        second = client.post("/api/ownership", json={**body, "ticket_holder_id": seeded.dana.id})

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["detail"]["current_owner_id"] == seeded.cale.id

    def test_available_seats(self, client, seeded):
        client.post(
            "/api/ownership",
            json={"seat_id": seeded.seats[0].id, "season_id": seeded.season.id, "ticket_holder_id": seeded.cale.id},
        )

        response = client.get(f"/api/seasons/{seeded.season.id}/available-seats")

        assert [seat["id"] for seat in response.json()["seats"]] == [seeded.seats[1].id, seeded.seats[2].id]

    def test_owner_lookup(self, client, seeded):
        response = client.get(f"/api/ownership/{seeded.season.id}/{seeded.seats[0].id}")

        assert response.json()["assigned"] is False
        assert response.json()["ticket_holder_id"] is None


class TestPricingAndReports:
    """Test pricing writes and the report endpoints."""

    def test_pricing_then_reports(self, client, seeded):
        game, seat = seeded.games[0], seeded.seats[1]
        client.post(
            "/api/ownership",
            json={"seat_id": seat.id, "season_id": seeded.season.id, "ticket_holder_id": seeded.cale.id},
        )

        response = client.put(f"/api/games/{game.id}/pricing/{seat.id}", json={"cost": "450"})
        assert response.status_code == 200
        assert response.json()["sold_price"] is None

        financials = client.get(f"/api/reports/games/{game.id}/financials").json()
        assert financials["profit"] == "-450.00"
        assert financials["seatsWithPricing"] == 1

        owners = client.get(f"/api/reports/seasons/{seeded.season.id}/owner-profits").json()
        assert owners == [
            {"holderId": seeded.cale.id, "name": "Cale", "cost": "450.00", "revenue": "0.00", "profit": "-450.00"}
        ]

        summary = client.get(f"/api/reports/seasons/{seeded.season.id}/financial-summary").json()
        assert summary[0]["balance"] == "5000.00"
        assert summary[0]["headlineBalance"] == "+$5,000"

    def test_too_many_decimals_is_422(self, client, seeded):
        response = client.put(
            f"/api/games/{seeded.games[0].id}/pricing/{seeded.seats[0].id}", json={"cost": "12.345"}
        )

        assert response.status_code == 422

    def test_unknown_season_report_is_404(self, client):
        assert client.get("/api/reports/seasons/9999/totals").status_code == 404

    def test_completed_transfer_moves_cash(self, client, seeded):
        created = client.post(
            "/api/transfers",
            json={
                "from_ticket_holder_id": seeded.cale.id,
                "to_ticket_holder_id": seeded.dana.id,
                "seat_id": seeded.seats[0].id,
                "game_id": seeded.games[0].id,
                "amount": "120.00",
                "date": "2024-10-20",
            },
        )
        assert created.status_code == 201
        assert created.json()["status"] == "pending"
        assert client.get("/api/reports/cash-positions").json() == []

        client.patch(f"/api/transfers/{created.json()['id']}/status", json={"status": "completed"})

        positions = {p["name"]: p["net"] for p in client.get("/api/reports/cash-positions").json()}
        assert positions == {"Cale": "-120.00", "Dana": "120.00"}

    def test_payment_without_season(self, client, seeded):
        response = client.post(
            "/api/payments",
            json={
                "amount": "5000",
                "type": "from_owner",
                "date": "2023-05-01",
                "ticket_holder_id": seeded.cale.id,
                "category": "seat_license",
            },
        )

        assert response.status_code == 201
        assert response.json()["season_id"] is None


def test_stats_and_lookups(client, seeded):
    stats = client.get("/api/stats").json()

    assert stats["seats"] == 3
    assert stats["games"] == 2
    assert client.get(f"/api/seats/{seeded.seats[0].id}").json()["section"] == "101"
    assert client.get("/api/seats/9999").status_code == 404
    assert client.get("/api/transfers/9999").status_code == 404


def test_oversized_amount_is_422(client, seeded):
    response = client.put(
        f"/api/games/{seeded.games[0].id}/pricing/{seeded.seats[0].id}", json={"cost": "1e30"}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "cost"


def test_owner_balances_endpoint(client, seeded):
    client.post(
        "/api/ownership",
        json={"seat_id": seeded.seats[0].id, "season_id": seeded.season.id, "ticket_holder_id": seeded.cale.id},
    )

    balances = client.get("/api/reports/owner-balances").json()

    assert [(b["name"], b["balance"]) for b in balances] == [("Cale", "-5000.00")]
