"""Tests for API endpoints."""

import time
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

import api.routes.game as game_routes
import api.session as session_module
from api.main import app
from api.session import delete_session
from config import config


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session(client):
    """Headers for a fresh game session."""
    response = await client.post("/api/game/new")
    return {"X-Session-ID": response.json()["session_id"]}


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_new_game(client):
    """Test creating a new game."""
    response = await client.post("/api/game/new")
    assert response.status_code == 200
    data = response.json()
    assert "session_id" in data


@pytest.mark.asyncio
async def test_game_state(client, session):
    """A new session waits for a bet with a full deck."""
    response = await client.get("/api/game/state", headers=session)
    assert response.status_code == 200
    data = response.json()

    assert data["round_state"] == "BETTING"
    assert data["chips"] == 1000
    assert data["current_bet"] == 0
    assert data["cards_remaining"] == 52
    assert data["player_hand"]["cards"] == []
    assert data["can_deal"] is False


@pytest.mark.asyncio
async def test_place_bet(client, session):
    """Bets accumulate on the table."""
    await client.post("/api/game/bet", json={"amount": 10}, headers=session)
    response = await client.post("/api/game/bet", json={"amount": 50}, headers=session)

    assert response.status_code == 200
    data = response.json()
    assert data["round_state"] == "BETTING"
    assert data["current_bet"] == 60
    assert data["chips"] == 940
    assert data["can_deal"] is True


@pytest.mark.asyncio
async def test_bet_over_chips_rejected(client, session):
    """Test betting more than the chips held."""
    response = await client.post("/api/game/bet", json={"amount": 10000}, headers=session)

    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "INSUFFICIENT_FUNDS"

    state = await client.get("/api/game/state", headers=session)
    assert state.json()["chips"] == 1000


@pytest.mark.asyncio
async def test_invalid_bet_amount(client, session):
    """Zero bets fail request validation."""
    response = await client.post("/api/game/bet", json={"amount": 0}, headers=session)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_deal_hides_dealer_hole_card(client, session):
    """The first dealer card and the dealer total stay hidden during the player's turn."""
    await client.post("/api/game/bet", json={"amount": 100}, headers=session)
    response = await client.post("/api/game/deal", headers=session)

    assert response.status_code == 200
    data = response.json()
    assert data["round_state"] == "PLAYER_TURN"
    assert data["cards_remaining"] == 48
    assert len(data["player_hand"]["cards"]) == 2

    hole, up = data["dealer_hand"]["cards"]
    assert hole["hidden"] is True
    assert hole["rank"] is None
    assert up["hidden"] is False
    assert up["rank"] is not None
    assert data["dealer_hand"]["value"] is None


@pytest.mark.asyncio
async def test_deal_without_bet_rejected(client, session):
    """Test dealing with nothing on the table."""
    response = await client.post("/api/game/deal", headers=session)

    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "NO_BET_PLACED"


@pytest.mark.asyncio
async def test_stand_settles_round(client, session):
    """Standing plays the dealer out and reveals every card."""
    await client.post("/api/game/bet", json={"amount": 100}, headers=session)
    await client.post("/api/game/deal", headers=session)

    response = await client.post("/api/game/action", json={"action": "stand"}, headers=session)

    assert response.status_code == 200
    data = response.json()
    assert data["round_state"] == "GAME_OVER"
    assert data["result_message"]
    assert data["current_bet"] == 0
    assert data["chips"] == 900 + data["payout"]
    assert all(not c["hidden"] for c in data["dealer_hand"]["cards"])
    assert data["dealer_hand"]["value"] is not None
    assert data["can_start_new_round"] is True


@pytest.mark.asyncio
async def test_hit_adds_card(client, session):
    """Test hitting once."""
    await client.post("/api/game/bet", json={"amount": 10}, headers=session)
    await client.post("/api/game/deal", headers=session)

    response = await client.post("/api/game/action", json={"action": "hit"}, headers=session)

    assert response.status_code == 200
    data = response.json()
    assert len(data["player_hand"]["cards"]) == 3
    assert data["round_state"] in ("PLAYER_TURN", "GAME_OVER")


@pytest.mark.asyncio
async def test_unknown_action_rejected(client, session):
    """Test an action outside hit and stand."""
    response = await client.post("/api/game/action", json={"action": "double"}, headers=session)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_action_in_wrong_phase(client, session):
    """Test hitting before the deal."""
    response = await client.post("/api/game/action", json={"action": "hit"}, headers=session)

    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "INVALID_PHASE"


@pytest.mark.asyncio
async def test_new_round(client, session):
    """A new round keeps the chips and reshuffles."""
    await client.post("/api/game/bet", json={"amount": 100}, headers=session)
    await client.post("/api/game/deal", headers=session)
    settled = await client.post("/api/game/action", json={"action": "stand"}, headers=session)
    chips = settled.json()["chips"]

    response = await client.post("/api/game/round", headers=session)

    assert response.status_code == 200
    data = response.json()
    assert data["round_state"] == "BETTING"
    assert data["chips"] == chips
    assert data["cards_remaining"] == 52
    assert data["result_message"] == ""


@pytest.mark.asyncio
async def test_new_round_refused_mid_round(client, session):
    await client.post("/api/game/bet", json={"amount": 100}, headers=session)
    await client.post("/api/game/deal", headers=session)

    response = await client.post("/api/game/round", headers=session)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bad_session_token(client):
    """Tokens that fail verification are refused."""
    response = await client.get("/api/game/state", headers={"X-Session-ID": "forged-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sessions_are_independent(client):
    """Each session owns its own table."""
    first = {"X-Session-ID": (await client.post("/api/game/new")).json()["session_id"]}
    second = {"X-Session-ID": (await client.post("/api/game/new")).json()["session_id"]}

    await client.post("/api/game/bet", json={"amount": 100}, headers=first)

    assert (await client.get("/api/game/state", headers=first)).json()["chips"] == 900
    assert (await client.get("/api/game/state", headers=second)).json()["chips"] == 1000


@pytest.mark.asyncio
async def test_deleted_session_is_refused_and_evicted(client, session):
    """A session gone from the store loses its cached game and gets 401."""
    token = session["X-Session-ID"]
    assert token in game_routes._games

    await delete_session(token)
    response = await client.get("/api/game/state", headers=session)

    assert response.status_code == 401
    assert token not in game_routes._games


@pytest.mark.asyncio
async def test_new_game_prunes_cached_games(client):
    """Opening a session drops cached games whose sessions are gone."""
    tokens = [(await client.post("/api/game/new")).json()["session_id"] for _ in range(20)]
    for token in tokens:
        await delete_session(token)

    await client.post("/api/game/new")

    assert not any(token in game_routes._games for token in tokens)


@pytest.mark.asyncio
async def test_new_game_prunes_expired_sessions(client, session):
    """Expired sessions are removed from the store and the game cache."""
    token = session["X-Session-ID"]
    store = await session_module.get_session_store()
    later = time.time() + 2 * config.session_ttl

    with patch("time.time", return_value=later):
        await client.post("/api/game/new")

    assert token not in game_routes._games
    assert token not in store._sessions
