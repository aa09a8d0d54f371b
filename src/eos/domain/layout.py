"""Piece catalog and the fixed starting layout.

Player 1 sets up on rows 1-2 and player 2 mirrors on rows 13-12.  Each
side has 17 pieces: nine on the home row and eight Stewards in front of
it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from eos.utils.lattice import Cell, parse

from .enums import PieceType, Side
from .models import Board, Piece, PieceID


@dataclass(frozen=True, slots=True)
class Placement:
    """Starting record for one piece."""

    type: PieceType
    owner: Side
    cell: Cell
    name: str


Layout = Mapping[PieceID, Placement]

_HOME_ROW: tuple[tuple[str, PieceType, str], ...] = (
    ("A", PieceType.MINISTER, "a"),
    ("C", PieceType.DEACON, "a"),
    ("E", PieceType.ARCHER, "a"),
    ("G", PieceType.ARCHER, ""),
    ("I", PieceType.SUPREMO, ""),
    ("K", PieceType.CHANCELLOR, ""),
    ("M", PieceType.DEACON, ""),
    ("O", PieceType.VICE_ROY, ""),
    ("Q", PieceType.MINISTER, ""),
)
_STEWARD_COLUMNS = "BDFHJLNP"


def _side_layout(side: Side, home_row: int, steward_row: int) -> dict[PieceID, Placement]:
    number = 1 if side is Side.PLAYER1 else 2
    prefix = "p1" if side is Side.PLAYER1 else "p2"
    placements: dict[PieceID, Placement] = {}

    for column, piece_type, clone in _HOME_ROW:
        slug = piece_type.value.lower().replace(" ", "-")
        piece_id = PieceID(f"{prefix}-{slug}-{clone}" if clone else f"{prefix}-{slug}")
        placements[piece_id] = Placement(
            type=piece_type,
            owner=side,
            cell=parse(f"{column}{home_row}"),
            name=f"{piece_type.value} {number}{clone}",
        )

    for index, column in enumerate(_STEWARD_COLUMNS, start=1):
        placements[PieceID(f"{prefix}-steward-{index}")] = Placement(
            type=PieceType.STEWARD,
            owner=side,
            cell=parse(f"{column}{steward_row}"),
            name=f"{PieceType.STEWARD.value} {number}",
        )
    return placements


INITIAL_LAYOUT: Layout = {
    **_side_layout(Side.PLAYER1, home_row=1, steward_row=2),
    **_side_layout(Side.PLAYER2, home_row=13, steward_row=12),
}


def placement(
    piece_type: PieceType, owner: Side, cell: str | Cell, name: str | None = None
) -> Placement:
    """Convenience constructor for custom layouts."""
    target = parse(cell) if isinstance(cell, str) else cell
    return Placement(type=piece_type, owner=owner, cell=target, name=name or piece_type.value)


def build_board(layout: Layout = INITIAL_LAYOUT) -> Board:
    """Create a fresh board holding every piece of ``layout``."""
    board = Board()
    for piece_id, spot in layout.items():
        board.place(Piece(id=piece_id, owner=spot.owner, type=spot.type, name=spot.name), spot.cell)
    return board
