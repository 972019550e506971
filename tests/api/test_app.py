"""Tests for the FastAPI application."""

import httpx
import pytest
from fastapi.testclient import TestClient

from truthstamp.api.app import app
from truthstamp.infrastructure.dependencies import ServiceContainer, get_service_container

ADMIN = "GADMIN"
SUBMITTER = "GSUBMITTER"
ALICE = "GALICE"
BOB = "GBOB"
CAROL = "GCAROL"


def as_account(address: str) -> dict:
    return {"X-Account-Address": address}


@pytest.fixture
def api_container(container: ServiceContainer):
    """Serve the test container instead of the global one."""
    app.dependency_overrides[get_service_container] = lambda: container
    yield container
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(api_container) -> TestClient:
    """Create a test client."""
    return TestClient(app)


def submit_claim(client: TestClient, submitter: str = SUBMITTER) -> int:
    response = client.post(
        "/claims",
        json={"text": "The Eiffel Tower is 330m tall", "category": "Science", "sources": []},
        headers=as_account(submitter),
    )
    assert response.status_code == 201
    return response.json()["claim_id"]


def register_expert(client: TestClient, address: str, stake_amount: int = 1_000_000_000):
    return client.post(
        "/experts",
        json={
            "name": f"Expert {address}",
            "bio": "Fact checker",
            "expertise_categories": ["Science"],
            "stake_amount": stake_amount,
        },
        headers=as_account(address),
    )


def submit_review(client: TestClient, expert: str, claim_id: int, verdict: str, stake_amount: int, confidence: int = 80):
    return client.post(
        "/reviews",
        json={
            "claim_id": claim_id,
            "verdict": verdict,
            "reasoning": "My analysis",
            "confidence": confidence,
            "stake_amount": stake_amount,
        },
        headers=as_account(expert),
    )


def test_health_check(test_client: TestClient):
    """Test health check endpoint."""
    response = test_client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["claim_store"] == {"initialized": True, "claims": 0}
    assert data["expert_registry"]["initialized"]
    assert data["review_consensus"]["reviews"] == 0


def test_submit_and_list_claims(test_client: TestClient):
    """Test claim submission, lookup and pagination."""
    claim_id = submit_claim(test_client)
    submit_claim(test_client, submitter="GOTHER")

    response = test_client.get(f"/claims/{claim_id}")
    assert response.status_code == 200
    assert response.json()["status"] == "pending"
    assert response.json()["stake_pool"] == 5_000_000

    response = test_client.get("/claims", params={"start": 1, "limit": 5})
    data = response.json()
    assert data["total"] == 2
    assert [c["id"] for c in data["claims"]] == [2]

    response = test_client.get(f"/claims/by-submitter/{SUBMITTER}")
    assert [c["id"] for c in response.json()] == [claim_id]

    response = test_client.get("/claims", params={"status": "pending", "start": 1})
    assert response.json()["total"] == 2
    assert [c["id"] for c in response.json()["claims"]] == [2]
    assert test_client.get("/claims", params={"status": "true"}).json() == {"total": 0, "start": 0, "claims": []}
    assert test_client.get("/claims", params={"status": "maybe"}).status_code == 422


def test_full_review_flow(test_client: TestClient):
    """Test registration, review, consensus and distribution over HTTP."""
    claim_id = submit_claim(test_client)
    for expert, stake in ((ALICE, 5_000_000_000), (BOB, 5_000_000_000), (CAROL, 1_000_000_000)):
        assert register_expert(test_client, expert, stake_amount=stake).status_code == 201

    assert submit_review(test_client, ALICE, claim_id, "true", 2_000_000_000).json()["consensus"] is None
    submit_review(test_client, BOB, claim_id, "true", 1_500_000_000)
    response = submit_review(test_client, CAROL, claim_id, "false", 500_000_000)

    assert response.status_code == 201
    consensus = response.json()["consensus"]
    assert consensus["final_verdict"] == "true"
    assert consensus["confidence_percentage"] == 87
    assert test_client.get(f"/claims/{claim_id}").json()["status"] == "true"
    assert test_client.get(f"/claims/{claim_id}/consensus").json()["total_stake_true"] == 3_500_000_000
    assert len(test_client.get(f"/claims/{claim_id}/reviews").json()) == 3

    response = test_client.post(f"/claims/{claim_id}/distribute", headers=as_account(ADMIN))
    assert response.status_code == 200
    assert response.json()["total_reward_pool"] == 3_200_000_000

    alice = test_client.get(f"/experts/{ALICE}").json()
    assert alice["total_earnings"] == 1_828_571_428
    assert alice["reputation_points"] == 10

    accuracy = test_client.get(f"/experts/{CAROL}/accuracy").json()
    assert accuracy == {"address": CAROL, "accuracy": 0, "total_reviews": 1, "correct_reviews": 0}
    assert test_client.get(f"/experts/{CAROL}").json()["staked_amount"] == 950_000_000

    topics = [e["topic"] for e in test_client.get("/events").json()]
    assert topics[-1] == "rewards_distributed"
    assert test_client.get("/events", params={"topic": "consensus_reached"}).json()[0]["subject"] == str(claim_id)


def test_missing_account_header(test_client: TestClient):
    """Test write endpoints need a caller identity."""
    response = test_client.post("/claims", json={"text": "Claim", "category": "Science"})
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": {"code": "AUTH_MISSING_ADDRESS", "message": "X-Account-Address header is required"},
    }

    response = test_client.post("/claims/1/distribute", headers=as_account(""))
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_MISSING_ADDRESS"


def test_error_codes(test_client: TestClient):
    """Test protocol errors map to HTTP status codes and one error body."""
    claim_id = submit_claim(test_client)
    register_expert(test_client, ALICE)

    response = test_client.get("/claims/99")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"code": "NOT_FOUND_RESOURCE", "message": "Claim #99 not found"},
    }

    assert register_expert(test_client, ALICE).status_code == 409
    assert register_expert(test_client, BOB, stake_amount=1).status_code == 400

    response = submit_review(test_client, ALICE, claim_id, "true", 1, confidence=101)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_INVALID_VALUE"
    assert submit_review(test_client, ALICE, claim_id, "true", 10 ** 18).status_code == 400

    submit_review(test_client, ALICE, claim_id, "true", 1)
    assert submit_review(test_client, ALICE, claim_id, "false", 1).status_code == 400

    response = test_client.post(f"/claims/{claim_id}/distribute", headers=as_account("GMALLORY"))
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN_NOT_AUTHORIZED"

    assert test_client.post(f"/claims/{claim_id}/distribute", headers=as_account(ADMIN)).status_code == 404
    assert test_client.get(f"/claims/{claim_id}/consensus").status_code == 404


def test_add_stake_only_by_expert(test_client: TestClient):
    """Test stake top-ups are authorized by the expert only."""
    register_expert(test_client, ALICE)

    response = test_client.post(f"/experts/{ALICE}/stake", json={"amount": 4_000_000_000}, headers=as_account(BOB))
    assert response.status_code == 403

    response = test_client.post(f"/experts/{ALICE}/stake", json={"amount": 4_000_000_000}, headers=as_account(ALICE))
    assert response.status_code == 200
    assert response.json()["expert_level"] == "specialized"
    assert test_client.get("/experts/count").json() == {"count": 1}


@pytest.mark.asyncio
async def test_async_client(api_container):
    """Test the application over an async ASGI transport."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/claims",
            json={"text": "Water boils at 100C at sea level", "category": "Science"},
            headers=as_account(SUBMITTER),
        )
        assert response.status_code == 201

        response = await client.get("/transfers")
        assert response.status_code == 200
        assert response.json()[0]["amount"] == 5_000_000
        assert response.json()[0]["destination"] == "claim-registry"
