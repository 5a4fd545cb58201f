"""Test the FastAPI endpoints."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
import api.app as api_app
from api.app import app


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await api_app.shutdown()
    api_app.runner = None


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Scorched Engine API"


@pytest.mark.asyncio
async def test_state_before_start(client):
    response = await client.get("/match/local/state")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_start_match(client):
    """Test starting a new match."""
    response = await client.post("/match/start", json={"seed": 123})
    assert response.status_code == 200
    data = response.json()
    assert data["match_id"] == "local"
    assert data["current_player"] in (0, 1)


@pytest.mark.asyncio
async def test_start_match_too_narrow(client):
    response = await client.post("/match/start", json={"seed": 1, "width": 300})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_state(client):
    """Test getting match state."""
    await client.post("/match/start", json={"seed": 42, "width": 1000})
    response = await client.get("/match/local/state")

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "awaiting_angle"
    assert len(data["heightmap"]) == 1000
    assert len(data["emplacements"]) == 2
    assert data["winner"] is None
    assert data["projectile"] is None


@pytest.mark.asyncio
async def test_invalid_inputs_rejected(client):
    await client.post("/match/start", json={"seed": 42})

    response = await client.post("/match/local/angle", json={"value": -1})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["field"] == "angle"
    assert detail["bounds"] == [0.0, 90.0]

    response = await client.post("/match/local/angle", json={"value": "steep"})
    assert response.status_code == 422
    assert response.json()["detail"]["value"] == "steep"

    state = (await client.get("/match/local/state")).json()
    assert state["phase"] == "awaiting_angle"

    response = await client.post("/match/local/power", json={"value": 100})
    assert response.status_code == 409

    await client.post("/match/local/angle", json={"value": 45})
    response = await client.post("/match/local/power", json={"value": 600})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "power"


@pytest.mark.asyncio
async def test_fire_and_poll_events(client):
    """A shot is flown by the tick loop and shows up in the event log."""
    await client.post("/match/start", json={"seed": 42})
    await client.post("/match/local/time-control", params={"time_compression": 1000})

    response = await client.post("/match/local/angle", json={"value": "45"})
    assert response.json()["phase"] == "awaiting_power"
    response = await client.post("/match/local/power", json={"value": 250})
    assert response.status_code == 200
    assert response.json()["phase"] == "firing"

    await api_app.runner.wait_landed(timeout=10)

    state = (await client.get("/match/local/state")).json()
    assert state["phase"] in ("awaiting_angle", "round_over")
    assert state["last_outcome"] is not None

    response = await client.get("/match/local/events?since=0")
    assert response.status_code == 200
    data = response.json()
    kinds = [e["kind"] for e in data["events"]]
    assert kinds[0] == "MatchStarted"
    assert "ShotFired" in kinds
    assert "Impact" in kinds
    assert data["next_offset"] == len(data["events"])

    first_match = data["match_no"]
    await client.post("/match/start", json={"seed": 43})
    data = (await client.get("/match/local/events?since=0")).json()
    assert data["match_no"] == first_match + 1
    assert "ShotFired" not in [e["kind"] for e in data["events"]]


@pytest.mark.asyncio
async def test_time_control(client):
    await client.post("/match/start", json={"seed": 42})
    response = await client.post("/match/local/time-control", params={"time_compression": 4})
    assert response.json() == {"time_compression": 4.0}
    response = await client.get("/match/local/time-control")
    assert response.json() == {"time_compression": 4.0}
