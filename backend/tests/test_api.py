"""
API Tests

Tests for the FastAPI endpoints:
- Games CRUD
- Joint moves and AI moves
- AI search endpoints
"""

import pytest

from fastapi.testclient import TestClient
from skirmish.api.main import app


# =============================================================================
# Test Client
# =============================================================================

client = TestClient(app)


def create(**overrides):
    body = {"difficulty": "easy", "seed": 11}
    body.update(overrides)
    response = client.post("/api/games/", json=body)
    assert response.status_code == 200
    return response.json()


# =============================================================================
# Root Endpoint Tests
# =============================================================================

def test_root_endpoint():
    """Test root endpoint returns welcome message"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "Grid Skirmish" in data["message"]
    assert data["search_limits"] == {"max_tree_nodes": 250_000, "max_snapshot_units": 16}
    print("✓ Root endpoint works")


def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    print("✓ Health check works")


# =============================================================================
# Game Endpoint Tests
# =============================================================================

def test_create_game():
    """Test creating a new game"""
    data = create()

    assert "game_id" in data
    assert data["turn_number"] == 0
    assert data["current_player"] == "MAX"
    assert data["human_player"] == "MIN"
    assert (data["x_extent"], data["y_extent"]) == (8, 8)
    assert len(data["units"]) == 4
    assert len(data["board"]) == 8
    assert data["game_over"] is False
    print(f"✓ Game created with ID: {data['game_id'][:8]}...")


def test_create_game_with_overrides():
    """Test explicit map size and turn limit"""
    data = create(width=6, height=5, max_turns=3, layout="open")
    assert (data["x_extent"], data["y_extent"]) == (6, 5)
    assert data["max_turns"] == 3
    assert data["obstacles"] == []


def test_create_game_rejects_tiny_map():
    """Test request validation on map size"""
    response = client.post("/api/games/", json={"width": 3})
    assert response.status_code == 422


def test_list_games():
    """Test listing games"""
    game_id = create()["game_id"]

    response = client.get("/api/games/")
    assert response.status_code == 200
    data = response.json()
    assert isinstance(data, list)
    assert game_id in [g["game_id"] for g in data]
    print(f"✓ Listed {len(data)} games")


def test_get_game():
    """Test getting a specific game"""
    game_id = create()["game_id"]

    response = client.get(f"/api/games/{game_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["game_id"] == game_id
    print("✓ Get game works")


def test_get_nonexistent_game():
    """Test getting a game that doesn't exist"""
    response = client.get("/api/games/nonexistent-id")
    assert response.status_code == 404
    assert response.json() == {"error": "Game not found", "status_code": 404}
    print("✓ Nonexistent game returns 404")


def test_delete_game():
    """Test deleting a game"""
    game_id = create()["game_id"]

    response = client.delete(f"/api/games/{game_id}")
    assert response.status_code == 200

    get_response = client.get(f"/api/games/{game_id}")
    assert get_response.status_code == 404
    print("✓ Delete game works")


# =============================================================================
# Move Tests
# =============================================================================

def test_submit_moves():
    """Test submitting a joint move for the side to move"""
    state = create(human_player="max")
    footman = next(u for u in state["units"] if u["player"] == "MAX")

    response = client.post(f"/api/games/{state['game_id']}/moves", json={
        "moves": {str(footman["id"]): "south"}
    })
    assert response.status_code == 200
    data = response.json()
    assert data["game_state"]["turn_number"] == 1
    assert data["game_state"]["current_player"] == "MIN"
    assert set(data["applied"]) | set(data["rejected"]) == {str(footman["id"])}
    print(f"✓ Moves submitted: {data['message']}")


def test_submit_invalid_direction():
    """Test unknown direction names"""
    game_id = create()["game_id"]
    response = client.post(f"/api/games/{game_id}/moves", json={"moves": {"0": "up"}})
    assert response.status_code == 400
    assert "Invalid direction" in response.json()["error"]


def test_ai_move_then_human_turn():
    """Test the AI moves for its side and refuses the human's turn"""
    game_id = create(human_player="min")["game_id"]

    response = client.post(f"/api/games/{game_id}/ai-move")
    assert response.status_code == 200
    data = response.json()
    assert data["game_state"]["turn_number"] == 1
    assert data["message"].startswith("AI (minmax")

    response = client.post(f"/api/games/{game_id}/ai-move")
    assert response.status_code == 400
    assert response.json()["error"] == "Not AI's turn"
    print("✓ AI move works")


def test_ai_move_rejects_bad_depth():
    game_id = create()["game_id"]
    response = client.post(f"/api/games/{game_id}/ai-move", params={"search_depth": 0})
    assert response.status_code == 422


def test_get_game_history():
    """Test getting game history"""
    game_id = create(human_player="none")["game_id"]
    client.post(f"/api/games/{game_id}/ai-move")
    client.post(f"/api/games/{game_id}/ai-move")

    response = client.get(f"/api/games/{game_id}/history")
    assert response.status_code == 200
    data = response.json()
    assert [h["player"] for h in data] == ["MAX", "MIN"]
    assert [h["index"] for h in data] == [0, 1]
    print("✓ Get history works")


def test_moves_after_game_over():
    """Test a finished game refuses further moves"""
    game_id = create(max_turns=1, human_player="none")["game_id"]
    response = client.post(f"/api/games/{game_id}/moves", json={"moves": {}})
    assert response.json()["game_state"]["game_over"] is True
    assert response.json()["game_state"]["winner"] == "MIN"

    response = client.post(f"/api/games/{game_id}/moves", json={"moves": {}})
    assert response.status_code == 400


# =============================================================================
# AI Endpoint Tests
# =============================================================================

SNAPSHOT = {
    "x_extent": 10,
    "y_extent": 10,
    "units": [
        {"id": 0, "player": "MAX", "x": 1, "y": 1},
        {"id": 1, "player": "MIN", "x": 8, "y": 8}
    ],
    "obstacles": [],
    "player_to_move": "MAX"
}


def test_list_agents():
    """Test listing available AI agents"""
    response = client.get("/api/ai/agents")
    assert response.status_code == 200
    data = response.json()
    assert [a["type"] for a in data] == ["minmax"]
    print(f"✓ Listed {len(data)} AI agents")


def test_get_agent_info():
    """Test getting info about specific agent"""
    response = client.get("/api/ai/agents/minmax")
    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "minmax"
    assert "parameters" in data

    assert client.get("/api/ai/agents/deeprl").status_code == 404
    print("✓ Get agent info works")


def test_search_move():
    """Test a one-off search on a snapshot"""
    response = client.post("/api/ai/move", json={"snapshot": SNAPSHOT, "depth": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["player"] == "MAX"
    assert data["moves"] == {"0": "EAST"}
    assert data["value"] == pytest.approx(100 / 49 + 100)
    assert data["nodes_searched"] == 5
    print(f"✓ MinMax suggested: {data['moves']}")


def test_search_rejects_non_positive_depth():
    response = client.post("/api/ai/move", json={"snapshot": SNAPSHOT, "depth": 0})
    assert response.status_code == 422


def test_search_rejects_overlapping_units():
    snapshot = dict(SNAPSHOT, units=[
        {"id": 0, "player": "MAX", "x": 1, "y": 1},
        {"id": 1, "player": "MIN", "x": 1, "y": 1}
    ])
    response = client.post("/api/ai/move", json={"snapshot": snapshot, "depth": 1})
    assert response.status_code == 400
    assert "Invalid snapshot" in response.json()["error"]


def test_search_refuses_oversized_tree():
    """Three units a side at depth 4 is over a million unpruned nodes"""
    snapshot = dict(SNAPSHOT, units=[
        {"id": 0, "player": "MAX", "x": 1, "y": 1},
        {"id": 1, "player": "MAX", "x": 1, "y": 3},
        {"id": 2, "player": "MAX", "x": 3, "y": 1},
        {"id": 3, "player": "MIN", "x": 8, "y": 8},
        {"id": 4, "player": "MIN", "x": 8, "y": 6},
        {"id": 5, "player": "MIN", "x": 6, "y": 8}
    ])
    response = client.post("/api/ai/move", json={"snapshot": snapshot, "depth": 4})
    assert response.status_code == 400
    assert "Search too large" in response.json()["error"]

    response = client.post("/api/ai/move", json={"snapshot": snapshot, "depth": 2})
    assert response.status_code == 200


def test_search_rejects_oversized_roster():
    units = [
        {"id": i, "player": "MAX" if i % 2 else "MIN", "x": i % 10, "y": i // 10}
        for i in range(17)
    ]
    response = client.post("/api/ai/move", json={"snapshot": dict(SNAPSHOT, units=units), "depth": 1})
    assert response.status_code == 422


def test_search_reports_infinite_value_as_null():
    """A cornered archer saturates the utility"""
    snapshot = dict(SNAPSHOT, units=[
        {"id": 0, "player": "MAX", "x": 1, "y": 1},
        {"id": 1, "player": "MIN", "x": 9, "y": 9}
    ])
    response = client.post("/api/ai/move", json={"snapshot": snapshot, "depth": 1})
    assert response.status_code == 200
    assert response.json()["value"] is None
    assert response.json()["root_utility"] is None


def test_match():
    """Test a short AI vs AI match"""
    response = client.post("/api/ai/match", json={
        "difficulty": "easy",
        "seed": 2,
        "max_turns": 4
    })

    assert response.status_code == 200
    data = response.json()
    assert data["winner"] in ("MAX", "MIN")
    assert data["total_turns"] <= 4
    print(f"✓ Match: winner = {data['winner']}")
