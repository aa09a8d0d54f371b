"""Integration tests for the FastAPI layer."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from eos.api.app import create_app
from eos.api.runtime import ApiState
from eos.config import Settings
from eos.repository import GameID, JsonGameRepository


def _make_app(tmp_path):
    def factory() -> ApiState:
        settings = Settings(data_dir=tmp_path, database_url="sqlite://")
        return ApiState(settings=settings)

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


async def _create_game(client: AsyncClient) -> int:
    response = await client.post("/games", json={})
    assert response.status_code == 201
    payload = response.json()
    assert payload["state"]["turn_phase"] == "select"
    assert len(payload["state"]["board"]) == 34
    return payload["id"]


@pytest.mark.asyncio
async def test_health_and_rules(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["database"] is True

        response = await client.get("/rules")
        assert response.status_code == 200
        rules = response.json()
        assert rules["pieces"]["Archer"]["attack_rules"]["range"] == [1, 2, 3]
        assert rules["pieces"]["Steward"]["passes_home_row"] is False
        assert rules["piece_values"]["Supremo"] == 7
        assert rules["capturable_pieces"] == 17


@pytest.mark.asyncio
async def test_game_lifecycle_via_api(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        game_id = await _create_game(client)

        response = await client.get("/games")
        assert response.status_code == 200
        assert [game["id"] for game in response.json()] == [game_id]

        response = await client.post(f"/games/{game_id}/select", json={"piece_id": "p1-supremo"})
        assert response.status_code == 200
        assert response.json()["phase"] == "action"

        response = await client.post(f"/games/{game_id}/move", json={"cell": "I3"})
        assert response.status_code == 200
        moved = response.json()
        assert moved["phase"] == "locked"
        assert moved["state"]["board"]["p1-supremo"] == "I3"
        assert moved["state"]["move_log"][0]["from"] == "I1"

        response = await client.post(f"/games/{game_id}/end-turn")
        assert response.status_code == 200
        assert response.json()["state"]["current_turn"] == "player2"

        response = await client.post(f"/games/{game_id}/end-turn")
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "illegal_action"

        response = await client.post(f"/games/{game_id}/select", json={"piece_id": "p2-supremo"})
        assert response.status_code == 200

        response = await client.post(f"/games/{game_id}/move", json={"cell": "Z9"})
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "invalid_coordinate"

        response = await client.post(f"/games/{game_id}/attack", json={"cell": "I11"})
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "no_target_at_cell"

        response = await client.get(f"/games/{game_id}")
        assert response.status_code == 200
        assert response.json()["state"]["active_piece"] == "p2-supremo"

    stored = JsonGameRepository(tmp_path).load(GameID(game_id))
    assert stored.current_turn == "player2"
    assert stored.board["p1-supremo"] == "I3"


@pytest.mark.asyncio
async def test_result_score_and_archive_via_api(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        game_id = await _create_game(client)

        response = await client.post(
            f"/games/{game_id}/result",
            json={"winner": "player2", "condition": "resignation"},
        )
        assert response.status_code == 200
        assert response.json()["winner"] == "player2"

        response = await client.get(f"/games/{game_id}/score")
        assert response.status_code == 200
        scores = response.json()
        assert scores["player2"]["final"] == 10
        assert scores["player1"]["final"] == 0

        response = await client.get("/matches")
        assert response.status_code == 200
        matches = response.json()
        assert len(matches) == 1
        assert matches[0]["match_id"] == str(game_id)
        assert matches[0]["win_condition"] == "resignation"

        response = await client.post(f"/games/{game_id}/select", json={"piece_id": "p1-supremo"})
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "game_over"


@pytest.mark.asyncio
async def test_unknown_game_is_404(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/games/99")
        assert response.status_code == 404

        response = await client.post("/games/99/select", json={"piece_id": "p1-supremo"})
        assert response.status_code == 404

        response = await client.post("/games/99/result", json={"winner": "nobody"})
        assert response.status_code == 422
