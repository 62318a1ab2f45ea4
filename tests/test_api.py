"""End-to-end tests for the FastAPI application with in-memory backends."""

import httpx
import pytest
from fastapi.testclient import TestClient

from iffl_companion.api.dependencies import ClientManager
from iffl_companion.clients.sheets import SheetsClient
from iffl_companion.clients.store import MemoryDocumentStore
from iffl_companion.main import create_app
from tests.conftest import MASTER_ROWS, TRADE_ROWS, sheets_payload

# A slash in the name must survive the URL path.
API_MASTER_ROWS = MASTER_ROWS + [["Foley", "RB", "K. Walker/Hunt", "$7"]]

JARED = {"X-User-Id": "uid-jared", "X-User-Email": "Jared@example.com"}
ABAD = {"X-User-Id": "uid-abad", "X-User-Email": "Abad@example.com"}


def spreadsheet(request: httpx.Request) -> httpx.Response:
    if "Master List" in request.url.path:
        return httpx.Response(200, json=sheets_payload(API_MASTER_ROWS))
    if "Trades" in request.url.path:
        return httpx.Response(200, json=sheets_payload(TRADE_ROWS))
    return httpx.Response(400)


@pytest.fixture
def client(settings, notifier):
    ClientManager.configure(
        sheets=SheetsClient(settings, transport=httpx.MockTransport(spreadsheet)),
        store=MemoryDocumentStore(),
        notifier=notifier,
    )
    with TestClient(create_app()) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAssets:
    def test_search_sorted_by_price(self, client):
        response = client.get("/api/assets", params={"positions": "WR"})

        assert response.status_code == 200
        assert [a["name"] for a in response.json()] == ["A. St. Brown", "J. Chase"]

    def test_search_picks_lowest_first(self, client):
        response = client.get("/api/assets", params={"positions": "Picks", "sort": "Lowest"})

        names = [a["name"] for a in response.json()]
        assert names == ["2026 2nd Pick", "2026 1st Pick"]
        assert all(a["is_pick"] for a in response.json())

    def test_team_roster(self, client):
        response = client.get("/api/assets/teams/jar")
        assert [a["name"] for a in response.json()] == ["J. Allen", "2026 1st Pick"]

    def test_asset_detail(self, client):
        player = client.get("/api/assets/JaredJ. Allen").json()
        assert player["kind"] == "player"
        assert player["purchase_year"] == "2023"

        pick = client.get("/api/assets/Jared2026 1st Pick").json()
        assert pick["kind"] == "pick"
        assert pick["pick"]["trade_history"] == "From Bill (2024)"

        assert client.get("/api/assets/WayneNobody").status_code == 404

    def test_refresh_reports_skipped_rows(self, client):
        response = client.post("/api/assets/refresh")
        assert response.status_code == 200
        assert response.json()["skipped_rows"] == [6]


class TestTrades:
    def test_history_year(self, client):
        response = client.get("/api/trades/years/24")

        body = response.json()
        assert body["count"] == 1
        assert body["trades"][0]["team1_receives"] == ["Player A"]
        assert body["trades"][0]["team2_receives"] == ["Pick B"]

    def test_search(self, client):
        response = client.get("/api/trades/search", params={"q": "pick b"})
        assert list(response.json()) == ["24"]


class TestInterests:
    def test_requires_user(self, client):
        response = client.post("/api/interests/AbadJ. Chase/toggle")
        assert response.status_code == 401

    def test_toggle_and_list(self, client):
        toggled = client.post("/api/interests/AbadJ. Chase/toggle", headers=JARED)
        assert toggled.json() == {"asset_id": "AbadJ. Chase", "interested": True}

        listed = client.get("/api/interests", headers=JARED)
        assert [a["name"] for a in listed.json()] == ["J. Chase"]
        assert client.get("/api/interests", headers=ABAD).json() == []

        untoggled = client.post("/api/interests/AbadJ. Chase/toggle", headers=JARED)
        assert untoggled.json()["interested"] is False


class TestProposals:
    def test_lifecycle(self, client, notifier):
        created = client.post(
            "/api/proposals",
            headers=JARED,
            json={
                "recipient": "Abad",
                "offered_ids": ["JaredJ. Allen"],
                "requested_ids": ["AbadJ. Chase"],
            },
        )
        assert created.status_code == 201
        proposal = created.json()
        assert proposal["proposer"] == "Jared"
        assert proposal["status"] == "pending"
        assert notifier.sent[0][0] == "Abad"

        pending = client.get("/api/proposals/pending", headers=ABAD)
        assert [p["proposal_id"] for p in pending.json()] == [proposal["proposal_id"]]

        answered = client.post(
            f"/api/proposals/{proposal['proposal_id']}/respond",
            headers=ABAD,
            json={"response": "yes"},
        )
        assert answered.json()["status"] == "accepted"
        assert client.get("/api/proposals/pending", headers=ABAD).json() == []

        again = client.post(
            f"/api/proposals/{proposal['proposal_id']}/respond",
            headers=ABAD,
            json={"response": "no"},
        )
        assert again.status_code == 409

    def test_empty_request_rejected(self, client):
        response = client.post(
            "/api/proposals",
            headers=JARED,
            json={"recipient": "Abad", "offered_ids": ["JaredJ. Allen"], "requested_ids": []},
        )
        assert response.status_code == 422

    def test_unknown_proposal(self, client):
        response = client.post(
            "/api/proposals/missing/respond", headers=ABAD, json={"response": "yes"}
        )
        assert response.status_code == 404


class TestMessages:
    def test_post_and_list(self, client):
        posted = client.post("/api/messages", headers=JARED, json={"text": "Anyone need a TE?"})
        assert posted.status_code == 201
        assert posted.json()["team"] == "Jared"

        messages = client.get("/api/messages").json()
        assert [m["text"] for m in messages] == ["Anyone need a TE?"]

    def test_blank_message(self, client):
        response = client.post("/api/messages", headers=JARED, json={"text": "  "})
        assert response.status_code == 422


class TestLeague:
    def test_me(self, client):
        assert client.get("/api/league/me", headers=ABAD).json()["team"] == "Abad"
        assert client.get("/api/league/me").status_code == 401


class TestSlashInAssetId:
    def test_detail_and_toggle(self, client):
        detail = client.get("/api/assets/FoleyK. Walker/Hunt")
        assert detail.status_code == 200
        assert detail.json()["asset"]["name"] == "K. Walker/Hunt"

        toggled = client.post("/api/interests/FoleyK. Walker/Hunt/toggle", headers=JARED)
        assert toggled.json() == {"asset_id": "FoleyK. Walker/Hunt", "interested": True}


def unreachable_spreadsheet(request: httpx.Request) -> httpx.Response:
    return httpx.Response(403, json={"error": {"status": "PERMISSION_DENIED"}})


@pytest.fixture
def offline_client(settings, notifier):
    ClientManager.configure(
        sheets=SheetsClient(settings, transport=httpx.MockTransport(unreachable_spreadsheet)),
        store=MemoryDocumentStore(),
        notifier=notifier,
    )
    with TestClient(create_app()) as test_client:
        yield test_client


class TestSpreadsheetOutage:
    def test_assets_report_bad_gateway(self, offline_client):
        assert offline_client.get("/api/assets").status_code == 502

    def test_proposals_work_without_the_sheet(self, offline_client, notifier):
        created = offline_client.post(
            "/api/proposals",
            headers=JARED,
            json={
                "recipient": "Bill",
                "offered_ids": ["JaredJ. Allen"],
                "requested_ids": ["BillB. Robinson"],
            },
        )
        assert created.status_code == 201
        proposal_id = created.json()["proposal_id"]
        # names fall back to raw asset ids
        assert "JaredJ. Allen" in notifier.sent[0][2]

        pending = offline_client.get("/api/proposals/pending", params={"team": "Bill"})
        assert pending.status_code == 200
        assert [p["proposal_id"] for p in pending.json()] == [proposal_id]

        answered = offline_client.post(
            f"/api/proposals/{proposal_id}/respond",
            headers={"X-User-Id": "uid-bill", "X-User-Email": "Bill@example.com"},
            json={"response": "maybe"},
        )
        assert answered.status_code == 200
        assert answered.json()["status"] == "pending"
