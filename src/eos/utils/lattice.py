"""
Diagonal lattice coordinate system for the EOS board.

The board is a 17-column x 13-row grid of which only half the cells are
playable: a cell is on the lattice when ``column + row`` is odd.  This
produces the alternating pattern of 9-cell and 8-cell rows seen on the
physical board.  Pieces only ever travel along the four diagonals, and a
diagonal step always preserves the parity of ``column + row``, so a piece
standing on the lattice can never step off it.

Coordinate Systems:
-------------------
We use two representations:

1. Cell strings ("A1", "Q13") - for storage and the wire format
   - column letter A-Q
   - row number 1-13

2. Integer pairs (column, row) - for arithmetic
   - column: 0..16
   - row: 1..13
   - Used in the Cell dataclass
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

COLUMNS = "ABCDEFGHIJKLMNOPQ"
COLUMN_COUNT = len(COLUMNS)
MIN_ROW = 1
MAX_ROW = 13

Direction = tuple[int, int]

# The four diagonals, in the order every generator scans them
DIRECTIONS: tuple[Direction, ...] = (
    (1, 1),
    (-1, 1),
    (1, -1),
    (-1, -1),
)


class InvalidCoordinate(ValueError):
    """Raised for malformed or out-of-bounds cell strings."""


@dataclass(frozen=True, slots=True, order=True)
class Cell:
    """
    A lattice position addressed by integer column and row.

    Attributes:
        col: Column index, 0 for "A" through 16 for "Q"
        row: Row number, 1 through 13

    Example:
        >>> Cell(col=8, row=1)
        Cell(col=8, row=1)
        >>> format_cell(Cell(col=8, row=1))
        'I1'
    """

    col: int
    row: int

    def __str__(self) -> str:
        return format_cell(self)


def in_bounds(col: int, row: int) -> bool:
    """Check whether a column/row pair lies inside the 17x13 grid."""
    return 0 <= col < COLUMN_COUNT and MIN_ROW <= row <= MAX_ROW


def is_valid(cell: Cell) -> bool:
    """
    Check whether a cell lies on the playable diamond lattice.

    Args:
        cell: The cell to check

    Returns:
        True only if the cell is within grid bounds and ``col + row`` is odd

    Example:
        >>> is_valid(Cell(col=0, row=1))
        True
        >>> is_valid(Cell(col=0, row=2))
        False
    """
    return in_bounds(cell.col, cell.row) and (cell.col + cell.row) % 2 == 1


def parse(value: str) -> Cell:
    """
    Parse a cell string such as ``"A1"`` or ``"Q13"``.

    Parsing only checks the grid bounds.  Use :func:`is_valid` to check
    whether the result is a playable lattice cell.

    Args:
        value: Column letter followed by a row number

    Returns:
        The parsed Cell

    Raises:
        InvalidCoordinate: If the column is outside A-Q, the row is not a
            number, or the row is outside 1-13

    Example:
        >>> parse("Q13")
        Cell(col=16, row=13)
    """
    if not isinstance(value, str) or len(value) < 2:
        msg = f"Malformed cell string: {value!r}"
        raise InvalidCoordinate(msg)

    letter, digits = value[0], value[1:]
    col = COLUMNS.find(letter)
    if col == -1:
        msg = f"Column must be one of A-Q, got {letter!r}"
        raise InvalidCoordinate(msg)
    if not (digits.isascii() and digits.isdigit()) or digits.startswith("0"):
        msg = f"Row must be a number without leading zeros, got {digits!r}"
        raise InvalidCoordinate(msg)

    row = int(digits)
    if not MIN_ROW <= row <= MAX_ROW:
        msg = f"Row must be between {MIN_ROW} and {MAX_ROW}, got {row}"
        raise InvalidCoordinate(msg)
    return Cell(col=col, row=row)


def format_cell(cell: Cell) -> str:
    """
    Format a cell as its external string form.

    Raises:
        InvalidCoordinate: If the cell is outside the grid
    """
    if not in_bounds(cell.col, cell.row):
        msg = f"Cell ({cell.col}, {cell.row}) is outside the board"
        raise InvalidCoordinate(msg)
    return f"{COLUMNS[cell.col]}{cell.row}"


def step(cell: Cell, direction: Direction, distance: int = 1) -> Cell | None:
    """
    Move ``distance`` lattice steps from ``cell`` along a diagonal.

    Args:
        cell: Starting cell
        direction: One of :data:`DIRECTIONS`
        distance: Number of diagonal steps (non-negative)

    Returns:
        The destination cell, or None if it falls outside the grid.  There
        is no wraparound.

    Raises:
        ValueError: If direction is not a diagonal or distance is negative

    Example:
        >>> step(Cell(col=0, row=1), (1, 1), 2)
        Cell(col=2, row=3)
        >>> step(Cell(col=0, row=1), (-1, 1)) is None
        True
    """
    if direction not in DIRECTIONS:
        msg = f"Direction must be a diagonal, got {direction}"
        raise ValueError(msg)
    if distance < 0:
        msg = f"Distance must be non-negative, got {distance}"
        raise ValueError(msg)

    dcol, drow = direction
    col = cell.col + dcol * distance
    row = cell.row + drow * distance
    if not in_bounds(col, row):
        return None
    return Cell(col=col, row=row)


def neighbors(cell: Cell) -> list[Cell]:
    """Return the in-bounds diagonal neighbours of a cell."""
    result = []
    for direction in DIRECTIONS:
        neighbor = step(cell, direction)
        if neighbor is not None:
            result.append(neighbor)
    return result


def cells_between(origin: Cell, direction: Direction, distance: int) -> list[Cell]:
    """
    Return the cells strictly between ``origin`` and the cell ``distance``
    steps away along ``direction``.

    The list is empty for distances of 0 or 1.  Cells that would fall off
    the grid are omitted.
    """
    result = []
    for d in range(1, distance):
        cell = step(origin, direction, d)
        if cell is not None:
            result.append(cell)
    return result


def all_cells() -> Iterator[Cell]:
    """Yield every playable lattice cell, row by row."""
    for row in range(MIN_ROW, MAX_ROW + 1):
        for col in range(COLUMN_COUNT):
            cell = Cell(col=col, row=row)
            if is_valid(cell):
                yield cell
