"""
Integration tests for Tournaments API endpoints
"""

from datetime import datetime, timedelta, timezone

import pytest

from tests.conftest import ADDRESS_A, ADDRESS_B, VITALIK_MIXED_CASE


TOURNAMENT_BODY = {
    "name": "Weekend Warriors",
    "description": "Best score over the weekend",
    "duration": 48,
    "prize": "5 ETH",
    "rules": ["No wash trading"],
}


async def _create(client, **overrides):
    response = await client.post("/api/tournaments", json={**TOURNAMENT_BODY, **overrides})
    assert response.status_code == 201
    return response.json()


class TestTournamentEndpoints:
    """Test suite for /api/tournaments."""

    @pytest.mark.asyncio
    async def test_create(self, client):
        data = await _create(client, maxParticipants=10)

        assert data["name"] == "Weekend Warriors"
        assert data["prizePool"] == "5 ETH"
        assert data["status"] == "active"
        assert data["maxParticipants"] == 10
        assert data["participants"] == []
        assert data["rules"] == ["No wash trading"]

    @pytest.mark.asyncio
    async def test_create_missing_fields(self, client):
        response = await client.post("/api/tournaments", json={"name": "Incomplete"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELDS"

    @pytest.mark.asyncio
    async def test_list_and_filter(self, client):
        await _create(client, name="Now")
        start = (datetime.now(timezone.utc) + timedelta(days=2)).isoformat()
        await _create(client, name="Later", startDate=start)

        everything = (await client.get("/api/tournaments")).json()
        upcoming = (await client.get("/api/tournaments", params={"status": "upcoming"})).json()

        assert [t["name"] for t in everything["tournaments"]] == ["Now", "Later"]
        assert everything["pagination"]["total"] == 2
        assert [t["name"] for t in upcoming["tournaments"]] == ["Later"]

    @pytest.mark.asyncio
    async def test_get_unknown(self, client):
        response = await client.get("/api/tournaments/does-not-exist")

        assert response.status_code == 404
        assert response.json()["code"] == "TOURNAMENT_NOT_FOUND"


class TestJoinTournament:
    """Test suite for POST /api/tournaments/{id}/join."""

    @pytest.mark.asyncio
    async def test_join(self, client):
        tournament = await _create(client, maxParticipants=5)

        response = await client.post(
            f"/api/tournaments/{tournament['id']}/join",
            json={"walletAddress": VITALIK_MIXED_CASE},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "participants": 1, "maxParticipants": 5}
        detail = (await client.get(f"/api/tournaments/{tournament['id']}")).json()
        assert detail["participants"] == [VITALIK_MIXED_CASE.lower()]

    @pytest.mark.asyncio
    async def test_join_twice(self, client):
        tournament = await _create(client)
        url = f"/api/tournaments/{tournament['id']}/join"
        await client.post(url, json={"walletAddress": ADDRESS_A})

        response = await client.post(url, json={"walletAddress": ADDRESS_A})

        assert response.status_code == 400
        assert response.json()["code"] == "ALREADY_JOINED"

    @pytest.mark.asyncio
    async def test_join_full(self, client):
        tournament = await _create(client, maxParticipants=1)
        url = f"/api/tournaments/{tournament['id']}/join"
        await client.post(url, json={"walletAddress": ADDRESS_A})

        response = await client.post(url, json={"walletAddress": ADDRESS_B})

        assert response.status_code == 400
        assert response.json()["code"] == "TOURNAMENT_FULL"

    @pytest.mark.asyncio
    async def test_join_upcoming(self, client):
        start = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
        tournament = await _create(client, startDate=start)

        response = await client.post(
            f"/api/tournaments/{tournament['id']}/join",
            json={"walletAddress": ADDRESS_A},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "TOURNAMENT_INACTIVE"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body,code", [
        ({}, "MISSING_ADDRESS"),
        ({"walletAddress": "0xabc"}, "INVALID_ADDRESS"),
    ])
    async def test_join_bad_address(self, client, body, code):
        tournament = await _create(client)

        response = await client.post(f"/api/tournaments/{tournament['id']}/join", json=body)

        assert response.status_code == 400
        assert response.json()["code"] == code

    @pytest.mark.asyncio
    async def test_join_unknown(self, client):
        response = await client.post("/api/tournaments/nope/join", json={"walletAddress": ADDRESS_A})

        assert response.status_code == 404
        assert response.json()["code"] == "TOURNAMENT_NOT_FOUND"
