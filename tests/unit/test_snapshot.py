"""Tests for the turn-sync snapshot message."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from eos.domain.enums import Side, TurnPhase
from eos.domain.models import PieceID
from eos.domain.turn import Game
from eos.snapshot import TurnSyncMessage, export_snapshot, import_snapshot
from eos.utils.lattice import parse


def _played_game() -> Game:
    game = Game()
    game.select("p1-supremo")
    game.move("I3")
    game.end_turn()
    game.select("p2-archer-a")
    return game


def test_export_reflects_state():
    message = export_snapshot(_played_game())

    assert message.board["p1-supremo"] == "I3"
    assert len(message.board) == 34
    assert len(message.pieces) == 34
    assert message.current_turn is Side.PLAYER2
    assert message.turn_phase is TurnPhase.ACTION
    assert message.active_piece == "p2-archer-a"
    assert message.candidate_advance == sorted(
        message.candidate_advance, key=lambda name: parse(name)
    )
    assert message.move_log[0].from_cell == "I1"


def test_import_restores_an_equivalent_game():
    game = _played_game()

    wire = export_snapshot(game).model_dump_json()

    restored = import_snapshot(TurnSyncMessage.model_validate_json(wire))

    assert restored.board == game.board
    assert restored.current_turn is game.current_turn
    assert restored.turn_phase is game.turn_phase
    assert restored.legal_moves == game.legal_moves
    assert restored.move_log == game.move_log
    assert restored.board.piece(PieceID("p1-supremo")).has_moved


def test_restored_game_continues_play():
    restored = import_snapshot(export_snapshot(_played_game()))

    result = restored.move("E11")

    assert result.ok
    assert restored.board.position_of(PieceID("p2-archer-a")) == parse("E11")


def test_captured_pieces_survive_the_round_trip():
    from eos.domain.enums import PieceType
    from eos.domain.layout import placement

    game = Game(
        layout={
            PieceID("p1-supremo"): placement(PieceType.SUPREMO, Side.PLAYER1, "E5"),
            PieceID("p2-steward"): placement(PieceType.STEWARD, Side.PLAYER2, "F6"),
            PieceID("p2-supremo"): placement(PieceType.SUPREMO, Side.PLAYER2, "Q13"),
        }
    )
    game.select("p1-supremo")
    game.attack("F6")

    message = export_snapshot(game)
    restored = import_snapshot(message)

    assert "p2-steward" not in message.board
    assert restored.board.piece(PieceID("p2-steward")) is not None
    assert not restored.board.is_on_board(PieceID("p2-steward"))
    assert restored.state.captured_by[Side.PLAYER1] == [PieceType.STEWARD]


def test_move_records_use_wire_aliases():
    payload = export_snapshot(_played_game()).model_dump(mode="json", by_alias=True)

    assert payload["move_log"][0]["from"] == "I1"
    assert payload["move_log"][0]["to"] == "I3"


def test_message_rejects_shared_cells():
    payload = export_snapshot(Game()).model_dump(mode="json", by_alias=True)
    payload["board"]["p1-supremo"] = payload["board"]["p1-chancellor"]

    with pytest.raises(ValidationError):
        TurnSyncMessage.model_validate(payload)


def test_message_rejects_off_lattice_cells():
    payload = export_snapshot(Game()).model_dump(mode="json", by_alias=True)
    payload["board"]["p1-supremo"] = "A2"

    with pytest.raises(ValidationError):
        TurnSyncMessage.model_validate(payload)


def test_import_rejects_unknown_pieces():
    message = export_snapshot(Game())
    message.board["p3-ghost"] = "I7"

    with pytest.raises(ValueError, match="unknown pieces"):
        import_snapshot(message)
