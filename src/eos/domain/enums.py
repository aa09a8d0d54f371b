"""Enumerations used across the EOS rules layer."""

from __future__ import annotations

from enum import StrEnum


class Side(StrEnum):
    """The two players."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"

    @property
    def opponent(self) -> Side:
        return Side.PLAYER2 if self is Side.PLAYER1 else Side.PLAYER1


class PieceType(StrEnum):
    """The seven piece types; values double as rule table keys."""

    SUPREMO = "Supremo"
    CHANCELLOR = "Chancellor"
    VICE_ROY = "Vice Roy"
    ARCHER = "Archer"
    DEACON = "Deacon"
    MINISTER = "Minister"
    STEWARD = "Steward"


class TurnPhase(StrEnum):
    """Turn state machine phases."""

    SELECT = "select"
    ACTION = "action"
    MANDATORY_MOVE = "mandatory_move"
    LOCKED = "locked"


class AttackMode(StrEnum):
    """Whether attacks are evaluated before or after the piece moved."""

    PRE_MOVE = "pre-move"
    POST_MOVE = "post-move"


class Winner(StrEnum):
    """Terminal game result."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"
    DRAW = "draw"

    @classmethod
    def of(cls, side: Side) -> Winner:
        return cls(side.value)


class WinCondition(StrEnum):
    """How a game ended."""

    SUPREMO_CAPTURE = "supremo_capture"
    SOLITUDE = "solitude"
    RESIGNATION = "resignation"
    OPPONENT_QUIT = "opponent_quit"
    TIMEOUT = "timeout"
    DRAW = "draw"


class ActionError(StrEnum):
    """Reasons a player action is rejected."""

    ILLEGAL_ACTION = "illegal_action"
    INVALID_COORDINATE = "invalid_coordinate"
    NO_TARGET_AT_CELL = "no_target_at_cell"
    GAME_OVER = "game_over"
