"""Move generation for EOS pieces."""

from __future__ import annotations

from collections import deque
from collections.abc import Collection
from dataclasses import dataclass

from eos.domain.models import Board, Piece
from eos.domain.rules_config import DEFAULT_RULES, RuleEntry, RulesConfig
from eos.utils.lattice import Cell, neighbors


@dataclass(frozen=True, slots=True)
class MoveOptions:
    """Reachable destinations for one piece."""

    normal: frozenset[Cell]
    advance: frozenset[Cell]

    @property
    def all(self) -> frozenset[Cell]:
        return self.normal | self.advance

    def __bool__(self) -> bool:
        return bool(self.normal or self.advance)


def generate_moves(
    piece: Piece,
    rule_entry: RuleEntry | None,
    is_first_move: bool,
    board: Board,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveOptions:
    """Compute the normal and advance destinations of an on-board piece.

    On a piece's very first move every distance up to the development
    ceiling that is not a normal step becomes an advance destination.
    Afterwards, pieces whose longest step is below the advance ceiling
    keep a standing advance range up to that ceiling.
    """

    origin = board.position_of(piece.id)
    if origin is None:
        return MoveOptions(frozenset(), frozenset())

    entry = rule_entry if rule_entry is not None else RuleEntry.fallback()
    movement = rules.movement
    steps = entry.move_steps
    max_step = entry.max_step

    if is_first_move:
        advance_steps = {
            d for d in range(1, movement.development_max_distance + 1) if d not in steps
        }
    elif max_step < movement.advance_ceiling:
        advance_steps = set(range(max_step + 1, movement.advance_ceiling + 1))
    else:
        advance_steps = set()

    normal, advance = _expand(
        board,
        origin,
        normal_steps=steps,
        advance_steps=advance_steps,
        pass_through=is_first_move and entry.passes_home_row,
    )
    return MoveOptions(normal, advance)


def generate_mandatory_moves(
    piece: Piece,
    rule_entry: RuleEntry | None,
    board: Board,
) -> frozenset[Cell]:
    """Destinations for the forced follow-up move after a capture.

    Only the ``mandatory_move`` distances count; occupied cells always block
    and neither the development nor the advance bonus applies.
    """

    origin = board.position_of(piece.id)
    if origin is None or rule_entry is None or not rule_entry.mandatory_move:
        return frozenset()
    normal, _ = _expand(
        board,
        origin,
        normal_steps=rule_entry.mandatory_move,
        advance_steps=(),
        pass_through=False,
    )
    return normal


# ---------------------------------------------------------------------------
# Helpers


def _expand(
    board: Board,
    origin: Cell,
    *,
    normal_steps: Collection[int],
    advance_steps: Collection[int],
    pass_through: bool,
) -> tuple[frozenset[Cell], frozenset[Cell]]:
    bound = max(max(normal_steps, default=0), max(advance_steps, default=0))
    normal: set[Cell] = set()
    advance: set[Cell] = set()

    queue: deque[tuple[Cell, int]] = deque([(origin, 0)])
    visited = {origin}

    while queue:
        cell, dist = queue.popleft()
        if dist >= bound:
            continue

        for nxt in neighbors(cell):
            if nxt in visited:
                continue
            visited.add(nxt)
            next_dist = dist + 1

            if board.is_occupied(nxt):
                # Occupied cells are never destinations; an untouched
                # home-row piece may still travel through them.
                if pass_through:
                    queue.append((nxt, next_dist))
                continue

            queue.append((nxt, next_dist))
            if next_dist in normal_steps:
                normal.add(nxt)
            elif next_dist in advance_steps:
                advance.add(nxt)

    return frozenset(normal), frozenset(advance)
