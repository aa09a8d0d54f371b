"""Tests for API runtime helpers (game service and shared state)."""

from __future__ import annotations

import json

import pytest

from eos.api.runtime import ApiState, GameService
from eos.config import Settings
from eos.database import create_db_engine, get_session_factory, init_db
from eos.domain.enums import ActionError, Side, TurnPhase, WinCondition, Winner
from eos.domain.rules_config import DEFAULT_RULE_TABLE
from eos.repository import GameID, JsonGameRepository, MatchArchive, dump_rule_table


@pytest.fixture
def service(tmp_path):
    engine = create_db_engine("sqlite://", echo=False)
    init_db(engine)
    archive = MatchArchive(get_session_factory(engine))
    yield GameService(JsonGameRepository(tmp_path), archive)
    engine.dispose()


def test_create_and_list_games(service):
    first_id, _ = service.create_game()
    second_id, game = service.create_game(first_turn=Side.PLAYER2)

    assert (first_id, second_id) == (1, 2)
    assert game.current_turn is Side.PLAYER2
    listed = service.list_games()
    assert [game_id for game_id, _ in listed] == [1, 2]
    summary = service.to_summary_dict(*listed[1])
    assert summary["current_turn"] == "player2"
    assert summary["pieces_on_board"] == {"player1": 17, "player2": 17}


def test_accepted_actions_are_persisted(service):
    game_id, _ = service.create_game()

    result, _ = service.act(game_id, "select", "p1-supremo")
    assert result.ok
    result, _ = service.act(game_id, "move", "I3")
    assert result.phase is TurnPhase.LOCKED

    reloaded = service.get_game(game_id)
    assert reloaded.turn_phase is TurnPhase.LOCKED
    assert len(reloaded.move_log) == 1


def test_rejected_actions_are_not_persisted(service):
    game_id, _ = service.create_game()

    result, _ = service.act(game_id, "select", "p2-supremo")

    assert result.error is ActionError.ILLEGAL_ACTION
    assert service.get_game(game_id).turn_phase is TurnPhase.SELECT


def test_unknown_game_raises(service):
    with pytest.raises(FileNotFoundError):
        service.get_game(GameID(99))


def test_finished_games_are_archived_once(service):
    game_id, _ = service.create_game()

    result, game = service.declare_result(game_id, Winner.PLAYER1, WinCondition.OPPONENT_QUIT)
    assert result.ok
    again, _ = service.declare_result(game_id, Winner.PLAYER2, WinCondition.TIMEOUT)
    assert again.error is ActionError.GAME_OVER

    scores = service.score(game)
    assert scores[Side.PLAYER1].final == 10
    assert scores[Side.PLAYER2].final == 0


def test_api_state_loads_configured_rule_table(tmp_path):
    rules_path = tmp_path / "rules.json"
    rules_path.write_text(json.dumps(dump_rule_table(DEFAULT_RULE_TABLE)), encoding="utf-8")
    settings = Settings(
        data_dir=tmp_path / "games",
        rules_path=rules_path,
        database_url="sqlite://",
    )

    state = ApiState(settings=settings)

    assert dict(state.rule_table.entries) == dict(DEFAULT_RULE_TABLE.entries)
    assert state.archive.list_matches() == []
