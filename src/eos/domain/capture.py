"""Capture execution and win detection."""

from __future__ import annotations

from dataclasses import dataclass

from eos.domain.enums import ActionError, PieceType, Side, WinCondition, Winner
from eos.domain.models import Board, PieceID
from eos.utils.lattice import Cell, format_cell


@dataclass(slots=True)
class CaptureResult:
    """Outcome of a capture attempt.

    On success ``board`` is a new board with the defender removed; the
    board passed in is never modified.
    """

    ok: bool
    board: Board | None = None
    captured_piece_id: PieceID | None = None
    captured_type: PieceType | None = None
    winner: Winner | None = None
    win_condition: WinCondition | None = None
    error: ActionError | None = None
    detail: str | None = None


def execute_capture(attacker_id: PieceID, target_cell: Cell, board: Board) -> CaptureResult:
    """Remove the defender on ``target_cell``; the attacker does not move."""

    attacker = board.piece(attacker_id)
    if attacker is None or not board.is_on_board(attacker_id):
        return _no_target(f"attacker {attacker_id} is not on the board")

    defender = board.piece_at(target_cell)
    if defender is None:
        return _no_target(f"no piece at {format_cell(target_cell)}")
    if defender.owner == attacker.owner:
        return _no_target(f"{format_cell(target_cell)} holds a friendly piece")

    new_board = board.clone()
    new_board.remove(defender.id)
    winner, condition = check_winner(new_board)
    return CaptureResult(
        ok=True,
        board=new_board,
        captured_piece_id=defender.id,
        captured_type=defender.type,
        winner=winner,
        win_condition=condition,
    )


def check_winner(board: Board) -> tuple[Winner | None, WinCondition | None]:
    """Evaluate the win condition of a board.

    Losing the Supremo is checked first: both gone is a draw, one gone
    hands the game to the opponent.  A side with no pieces left loses.
    """

    supremo_alive = {side: False for side in Side}
    remaining = {side: 0 for side in Side}
    for piece, _ in board.pieces_on_board():
        remaining[piece.owner] += 1
        if piece.type is PieceType.SUPREMO:
            supremo_alive[piece.owner] = True

    if not any(supremo_alive.values()):
        return Winner.DRAW, WinCondition.DRAW
    for side in Side:
        if not supremo_alive[side]:
            condition = (
                WinCondition.SOLITUDE if remaining[side] == 0 else WinCondition.SUPREMO_CAPTURE
            )
            return Winner.of(side.opponent), condition

    for side in Side:
        if remaining[side] == 0:
            return Winner.of(side.opponent), WinCondition.SOLITUDE
    return None, None


def _no_target(detail: str) -> CaptureResult:
    return CaptureResult(ok=False, error=ActionError.NO_TARGET_AT_CELL, detail=detail)
