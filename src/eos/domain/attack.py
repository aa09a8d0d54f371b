"""Ranged attack resolution for EOS pieces.

Every permitted range distance along each diagonal is evaluated on its
own, and finding a target does not stop the scan of that diagonal.  A
distance is blocked when any cell strictly between the attacker and the
target holds a piece.  Distances missing from a sparse range such as
``{1, 3}`` are skipped, but the cells they cover still have to be empty.
"""

from __future__ import annotations

from eos.domain.enums import AttackMode, PieceType
from eos.domain.models import Board, Piece
from eos.domain.rules_config import DEFAULT_RULES, RuleEntry, RulesConfig
from eos.utils.lattice import DIRECTIONS, Cell, cells_between, step


def effective_range(
    piece: Piece,
    rule_entry: RuleEntry,
    mode: AttackMode,
    is_first_move_context: bool,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> frozenset[int]:
    """Return the range set actually used for ``piece``.

    Stewards ignore the table: they reach two cells before their first
    move and one cell otherwise.
    """

    if piece.type is PieceType.STEWARD:
        if mode is AttackMode.PRE_MOVE and is_first_move_context:
            return rules.attack.steward_first_move_range
        return rules.attack.steward_range
    return rule_entry.attack_range


def generate_attacks(
    piece: Piece,
    rule_entry: RuleEntry | None,
    position: Cell,
    board: Board,
    mode: AttackMode,
    is_first_move_context: bool,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> frozenset[Cell]:
    """Return the enemy-occupied cells ``piece`` can capture from ``position``.

    A missing rule entry means the piece has no attacks at all.
    """

    if rule_entry is None:
        return frozenset()

    ranges = effective_range(piece, rule_entry, mode, is_first_move_context, rules=rules)
    targets: set[Cell] = set()

    for direction in DIRECTIONS:
        for distance in ranges:
            if distance <= 0:
                continue
            target = step(position, direction, distance)
            if target is None:
                continue
            if any(board.is_occupied(cell) for cell in cells_between(position, direction, distance)):
                continue
            defender = board.piece_at(target)
            if defender is not None and defender.owner != piece.owner:
                targets.add(target)

    return frozenset(targets)
