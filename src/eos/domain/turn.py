"""Turn state machine for a single EOS game.

A :class:`Game` owns exactly one :class:`~eos.domain.models.GameState` and
is its only mutator.  Players interact through four verbs:

* ``select(piece_id)`` - choose the piece to act with (``select`` phase,
  or re-choose while still in ``action``).
* ``move(cell)`` - move the active piece to a candidate destination.
* ``attack(cell)`` - capture the enemy on a candidate target cell.
* ``end_turn()`` - hand control to the opponent once the turn is locked.

Phase flow::

    select -> action -> mandatory_move (while captures/forced moves remain)
                     -> locked -> end_turn -> select

Every verb returns an :class:`ActionResult`.  A rejected call leaves the
state untouched; it is an expected, recoverable outcome rather than an
exception.  The session layer may also end the game directly via
:meth:`Game.declare_result` (resignation, timeout, disconnect).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from eos.domain.attack import generate_attacks
from eos.domain.capture import execute_capture
from eos.domain.enums import ActionError, AttackMode, Side, TurnPhase, WinCondition, Winner
from eos.domain.layout import INITIAL_LAYOUT, Layout, build_board
from eos.domain.models import (
    Board,
    BoardInvariantError,
    GameState,
    MoveLogEntry,
    Piece,
    PieceID,
)
from eos.domain.movement import generate_mandatory_moves, generate_moves
from eos.domain.rules_config import (
    DEFAULT_RULE_TABLE,
    DEFAULT_RULES,
    RuleEntry,
    RulesConfig,
    RuleTable,
)
from eos.utils.lattice import Cell, InvalidCoordinate, format_cell, parse

logger = logging.getLogger(__name__)

CellInput = Cell | str


@dataclass(slots=True)
class ActionResult:
    """Outcome of a player action."""

    ok: bool
    phase: TurnPhase
    error: ActionError | None = None
    detail: str | None = None
    captured_piece_id: PieceID | None = None
    winner: Winner | None = None


class Game:
    """Authoritative rules engine instance for one match."""

    def __init__(
        self,
        state: GameState | None = None,
        *,
        layout: Layout = INITIAL_LAYOUT,
        rule_table: RuleTable = DEFAULT_RULE_TABLE,
        rules: RulesConfig = DEFAULT_RULES,
        first_turn: Side = Side.PLAYER1,
    ) -> None:
        self._rule_table = rule_table
        self._rules = rules
        self._state = state or GameState(board=build_board(layout), current_turn=first_turn)

    # --- Read access -----------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> Board:
        return self._state.board

    @property
    def rule_table(self) -> RuleTable:
        return self._rule_table

    @property
    def rules(self) -> RulesConfig:
        return self._rules

    @property
    def current_turn(self) -> Side:
        return self._state.current_turn

    @property
    def turn_phase(self) -> TurnPhase:
        return self._state.turn_phase

    @property
    def winner(self) -> Winner | None:
        return self._state.winner

    @property
    def move_log(self) -> list[MoveLogEntry]:
        return list(self._state.move_log)

    @property
    def legal_moves(self) -> frozenset[Cell]:
        return self._state.candidate_moves | self._state.candidate_advance

    @property
    def legal_attacks(self) -> frozenset[Cell]:
        return self._state.candidate_attacks

    def rule_entry(self, piece: Piece) -> RuleEntry | None:
        """Entry for the piece's name, else for its type."""
        entry = self._rule_table.get(piece.name)
        return entry if entry is not None else self._rule_table.get(piece.type.value)

    # --- Verbs -----------------------------------------------------------------

    def select(self, piece_id: str) -> ActionResult:
        """Make ``piece_id`` the active piece and compute its candidates."""

        state = self._state
        if state.is_over:
            return self._reject(ActionError.GAME_OVER, "the game is over")
        if state.turn_phase not in (TurnPhase.SELECT, TurnPhase.ACTION):
            return self._reject(
                ActionError.ILLEGAL_ACTION, f"cannot select during {state.turn_phase}"
            )

        piece = state.board.piece(PieceID(piece_id))
        position = state.board.position_of(PieceID(piece_id))
        if piece is None or position is None:
            return self._reject(ActionError.ILLEGAL_ACTION, f"{piece_id} is not on the board")
        if piece.owner != state.current_turn:
            return self._reject(
                ActionError.ILLEGAL_ACTION, f"{piece_id} does not belong to {state.current_turn}"
            )

        entry = self.rule_entry(piece)
        first_move = not piece.has_moved
        moves = generate_moves(piece, entry, first_move, state.board, rules=self._rules)
        attacks = generate_attacks(
            piece, entry, position, state.board, AttackMode.PRE_MOVE, first_move, rules=self._rules
        )
        if not moves and not attacks:
            return self._reject(ActionError.ILLEGAL_ACTION, f"{piece_id} has no legal action")

        state.active_piece = piece.id
        state.candidate_moves = moves.normal
        state.candidate_advance = moves.advance
        state.candidate_attacks = attacks
        state.turn_phase = TurnPhase.ACTION
        logger.debug("%s selected %s at %s", state.current_turn, piece.id, format_cell(position))
        return self._accept()

    def move(self, to: CellInput) -> ActionResult:
        """Move the active piece to one of its candidate destinations."""

        state = self._state
        rejection = self._check_acting_phase()
        if rejection is not None:
            return rejection
        try:
            target = _coerce_cell(to)
        except InvalidCoordinate as exc:
            return self._reject(ActionError.INVALID_COORDINATE, str(exc))
        if target not in self.legal_moves:
            return self._reject(ActionError.ILLEGAL_ACTION, f"{to} is not a legal destination")

        piece = self._active()
        origin = state.board.move_piece(piece.id, target)
        piece.has_moved = True
        piece.move_count += 1
        state.mandatory_move_used = True
        state.move_log.append(
            MoveLogEntry(
                player=state.current_turn,
                piece_id=piece.id,
                piece_type_name=piece.name,
                piece_type=piece.type,
                from_cell=origin,
                to_cell=target,
                turn_number=len(state.move_log) + 1,
            )
        )
        logger.debug(
            "%s moved %s %s -> %s",
            state.current_turn,
            piece.id,
            format_cell(origin),
            format_cell(target),
        )

        attacks = generate_attacks(
            piece,
            self.rule_entry(piece),
            target,
            state.board,
            AttackMode.POST_MOVE,
            False,
            rules=self._rules,
        )
        self._continue_or_lock(frozenset(), attacks)
        return self._accept()

    def attack(self, target: CellInput) -> ActionResult:
        """Capture the enemy on ``target`` without moving the active piece."""

        state = self._state
        rejection = self._check_acting_phase()
        if rejection is not None:
            return rejection
        try:
            cell = _coerce_cell(target)
        except InvalidCoordinate as exc:
            return self._reject(ActionError.INVALID_COORDINATE, str(exc))

        piece = self._active()
        if cell not in state.candidate_attacks:
            defender = state.board.piece_at(cell)
            if defender is None or defender.owner == piece.owner:
                return self._reject(
                    ActionError.NO_TARGET_AT_CELL, f"no enemy piece at {format_cell(cell)}"
                )
            return self._reject(ActionError.ILLEGAL_ACTION, f"{target} is not a legal target")

        result = execute_capture(piece.id, cell, state.board)
        if not result.ok or result.board is None or result.captured_type is None:
            return self._reject(result.error or ActionError.NO_TARGET_AT_CELL, result.detail)

        origin = state.board.position_of(piece.id)
        if origin is None:
            msg = f"attack({piece.id}, {format_cell(cell)}): attacker is not on the board"
            raise BoardInvariantError(msg)
        state.board = result.board
        state.captured_by[state.current_turn].append(result.captured_type)
        state.move_log.append(
            MoveLogEntry(
                player=state.current_turn,
                piece_id=piece.id,
                piece_type_name=piece.name,
                piece_type=piece.type,
                from_cell=origin,
                to_cell=cell,
                turn_number=len(state.move_log) + 1,
                is_capture=True,
                captured_piece_type=result.captured_type,
                captured_piece_id=result.captured_piece_id,
            )
        )
        logger.debug(
            "%s captured %s at %s with %s",
            state.current_turn,
            result.captured_piece_id,
            format_cell(cell),
            piece.id,
        )

        if result.winner is not None:
            self._finish(result.winner, result.win_condition or WinCondition.SUPREMO_CAPTURE)
            return self._accept(captured=result.captured_piece_id)

        attacker = self._active()
        entry = self.rule_entry(attacker)
        attacks = generate_attacks(
            attacker,
            entry,
            origin,
            state.board,
            AttackMode.POST_MOVE,
            False,
            rules=self._rules,
        )
        moves = (
            frozenset()
            if state.mandatory_move_used
            else generate_mandatory_moves(attacker, entry, state.board)
        )
        self._continue_or_lock(moves, attacks)
        return self._accept(captured=result.captured_piece_id)

    def end_turn(self) -> ActionResult:
        """Pass control to the opponent; only legal once the turn is locked."""

        state = self._state
        if state.is_over:
            return self._reject(ActionError.GAME_OVER, "the game is over")
        if state.turn_phase is not TurnPhase.LOCKED:
            return self._reject(
                ActionError.ILLEGAL_ACTION, f"cannot end the turn during {state.turn_phase}"
            )

        state.current_turn = state.current_turn.opponent
        state.turn_phase = TurnPhase.SELECT
        state.active_piece = None
        state.mandatory_move_used = False
        state.clear_candidates()
        logger.debug("turn passed to %s", state.current_turn)
        return self._accept()

    def declare_result(self, winner: Winner, condition: WinCondition) -> ActionResult:
        """Session-level terminal setter; bypasses the normal transitions."""

        if self._state.is_over:
            return self._reject(ActionError.GAME_OVER, "the game is already over")
        self._finish(winner, condition)
        return self._accept()

    def apply(self, action: str, argument: str | None = None) -> ActionResult:
        """Dispatch a verb by name; unknown verbs are rejected."""

        handlers: dict[str, Callable[[str], ActionResult]] = {
            "select": self.select,
            "move": self.move,
            "attack": self.attack,
        }
        if action in ("end_turn", "end-turn"):
            return self.end_turn()
        handler = handlers.get(action)
        if handler is None or argument is None:
            return self._reject(ActionError.ILLEGAL_ACTION, f"unsupported action: {action}")
        return handler(argument)

    # --- Internals -------------------------------------------------------------

    def _check_acting_phase(self) -> ActionResult | None:
        state = self._state
        if state.is_over:
            return self._reject(ActionError.GAME_OVER, "the game is over")
        if state.active_piece is None or state.turn_phase not in (
            TurnPhase.ACTION,
            TurnPhase.MANDATORY_MOVE,
        ):
            return self._reject(
                ActionError.ILLEGAL_ACTION, f"no piece can act during {state.turn_phase}"
            )
        return None

    def _active(self) -> Piece:
        state = self._state
        if state.active_piece is None:
            raise BoardInvariantError("active piece requested while none is selected")
        piece = state.board.piece(state.active_piece)
        if piece is None:
            raise BoardInvariantError(f"active piece {state.active_piece} missing from the arena")
        return piece

    def _continue_or_lock(self, moves: frozenset[Cell], attacks: frozenset[Cell]) -> None:
        state = self._state
        state.candidate_moves = moves
        state.candidate_advance = frozenset()
        state.candidate_attacks = attacks
        state.turn_phase = TurnPhase.MANDATORY_MOVE if moves or attacks else TurnPhase.LOCKED

    def _finish(self, winner: Winner, condition: WinCondition) -> None:
        state = self._state
        state.winner = winner
        state.win_condition = condition
        state.turn_phase = TurnPhase.LOCKED
        state.clear_candidates()
        logger.info("game over: %s (%s)", winner, condition)

    def _accept(self, *, captured: PieceID | None = None) -> ActionResult:
        return ActionResult(
            ok=True,
            phase=self._state.turn_phase,
            captured_piece_id=captured,
            winner=self._state.winner,
        )

    def _reject(self, error: ActionError, detail: str | None) -> ActionResult:
        logger.debug("rejected action (%s): %s", error, detail)
        return ActionResult(
            ok=False,
            phase=self._state.turn_phase,
            error=error,
            detail=detail,
            winner=self._state.winner,
        )


def _coerce_cell(value: CellInput) -> Cell:
    return value if isinstance(value, Cell) else parse(value)
