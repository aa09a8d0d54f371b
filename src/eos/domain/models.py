"""Dataclasses describing the EOS game state.

The board is kept as an arena of :class:`Piece` records addressed by a
stable string id, plus two indexes maintained together: piece id to cell
and cell to piece id.  Every mutation goes through :class:`Board` so the
two indexes can never disagree; an attempted mutation that would break
the one-piece-per-cell invariant raises :class:`BoardInvariantError`
naming the offending operation.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import NewType

from eos.utils.lattice import Cell, format_cell, is_valid

from .enums import PieceType, Side, TurnPhase, WinCondition, Winner

PieceID = NewType("PieceID", str)


class BoardInvariantError(RuntimeError):
    """Raised when a board mutation would corrupt the occupancy invariant."""


@dataclass(slots=True)
class Piece:
    """A single piece; ``id`` never changes and is never reused."""

    id: PieceID
    owner: Side
    type: PieceType
    name: str
    has_moved: bool = False
    move_count: int = 0


@dataclass(frozen=True, slots=True)
class MoveLogEntry:
    """Append-only history record; the sole input to scoring."""

    player: Side
    piece_id: PieceID
    piece_type_name: str
    piece_type: PieceType
    from_cell: Cell
    to_cell: Cell
    turn_number: int
    is_capture: bool = False
    captured_piece_type: PieceType | None = None
    captured_piece_id: PieceID | None = None


class Board:
    """Piece arena plus the two occupancy indexes."""

    def __init__(self) -> None:
        self._pieces: dict[PieceID, Piece] = {}
        self._positions: dict[PieceID, Cell] = {}
        self._occupancy: dict[Cell, PieceID] = {}

    def clone(self) -> Board:
        """Return an independent copy, including copies of every piece record."""
        board = Board()
        board._pieces = {pid: replace(piece) for pid, piece in self._pieces.items()}
        board._positions = dict(self._positions)
        board._occupancy = dict(self._occupancy)
        return board

    # --- Mutations -------------------------------------------------------------

    def place(self, piece: Piece, cell: Cell) -> None:
        """Add a new piece to the arena and put it on ``cell``."""
        if piece.id in self._pieces:
            raise BoardInvariantError(f"place({piece.id}): piece id already exists")
        if not is_valid(cell):
            raise BoardInvariantError(f"place({piece.id}): {cell!r} is not a lattice cell")
        self._check_free(cell, f"place({piece.id}, {format_cell(cell)})")
        self._pieces[piece.id] = piece
        self._positions[piece.id] = cell
        self._occupancy[cell] = piece.id

    def move_piece(self, piece_id: PieceID, to: Cell) -> Cell:
        """Relocate an on-board piece and return the cell it left."""
        if not is_valid(to):
            raise BoardInvariantError(f"move_piece({piece_id}): {to!r} is not a lattice cell")
        label = f"move_piece({piece_id}, {format_cell(to)})"
        origin = self._positions.get(piece_id)
        if origin is None:
            raise BoardInvariantError(f"{label}: piece is not on the board")
        self._check_free(to, label)
        del self._occupancy[origin]
        self._positions[piece_id] = to
        self._occupancy[to] = piece_id
        return origin

    def remove(self, piece_id: PieceID) -> Cell:
        """Take a piece off the board; its record stays in the arena."""
        origin = self._positions.pop(piece_id, None)
        if origin is None:
            raise BoardInvariantError(f"remove({piece_id}): piece is not on the board")
        del self._occupancy[origin]
        return origin

    def restore_captured(self, piece: Piece) -> None:
        """Add an already-captured piece to the arena without placing it."""
        if piece.id in self._pieces:
            raise BoardInvariantError(f"restore_captured({piece.id}): piece id already exists")
        self._pieces[piece.id] = piece

    def _check_free(self, cell: Cell, label: str) -> None:
        occupant = self._occupancy.get(cell)
        if occupant is not None:
            raise BoardInvariantError(f"{label}: cell already holds {occupant}")

    # --- Queries ---------------------------------------------------------------

    def piece(self, piece_id: PieceID) -> Piece | None:
        return self._pieces.get(piece_id)

    def position_of(self, piece_id: PieceID) -> Cell | None:
        return self._positions.get(piece_id)

    def piece_at(self, cell: Cell) -> Piece | None:
        piece_id = self._occupancy.get(cell)
        return self._pieces[piece_id] if piece_id is not None else None

    def is_occupied(self, cell: Cell) -> bool:
        return cell in self._occupancy

    def is_on_board(self, piece_id: PieceID) -> bool:
        return piece_id in self._positions

    def occupied_cells(self) -> frozenset[Cell]:
        return frozenset(self._occupancy)

    def pieces_on_board(self, side: Side | None = None) -> Iterator[tuple[Piece, Cell]]:
        """Iterate over on-board pieces, optionally filtered by owner."""
        for piece_id, cell in self._positions.items():
            piece = self._pieces[piece_id]
            if side is None or piece.owner == side:
                yield piece, cell

    def all_pieces(self) -> list[Piece]:
        """Every piece ever placed, captured ones included."""
        return list(self._pieces.values())

    def positions(self) -> dict[PieceID, Cell]:
        return dict(self._positions)

    def count(self, side: Side) -> int:
        return sum(1 for _ in self.pieces_on_board(side))

    def __len__(self) -> int:
        return len(self._positions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._pieces == other._pieces and self._positions == other._positions

    def __repr__(self) -> str:
        return f"Board({len(self._positions)} pieces)"


@dataclass(slots=True)
class GameState:
    """Everything one game instance owns; mutated only by the turn machine."""

    board: Board
    current_turn: Side = Side.PLAYER1
    turn_phase: TurnPhase = TurnPhase.SELECT
    move_log: list[MoveLogEntry] = field(default_factory=list)
    captured_by: dict[Side, list[PieceType]] = field(
        default_factory=lambda: {Side.PLAYER1: [], Side.PLAYER2: []}
    )
    winner: Winner | None = None
    win_condition: WinCondition | None = None
    active_piece: PieceID | None = None
    mandatory_move_used: bool = False
    candidate_moves: frozenset[Cell] = frozenset()
    candidate_advance: frozenset[Cell] = frozenset()
    candidate_attacks: frozenset[Cell] = frozenset()

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def clear_candidates(self) -> None:
        self.candidate_moves = frozenset()
        self.candidate_advance = frozenset()
        self.candidate_attacks = frozenset()
