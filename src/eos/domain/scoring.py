"""Point totals derived from a finished move history.

Scores are reported outward only; nothing here feeds back into the rules.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from eos.domain.enums import PieceType, Side, WinCondition
from eos.domain.models import MoveLogEntry
from eos.domain.rules_config import DEFAULT_RULES, RulesConfig


@dataclass(frozen=True, slots=True)
class CaptureSummary:
    """Capture points and capture count for one side."""

    points: int
    count: int


def piece_value(piece_type: PieceType | None, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    if piece_type is None:
        return 0
    return rules.scoring.piece_values.get(piece_type, 0)


def capture_summary(
    move_log: Iterable[MoveLogEntry], side: Side, *, rules: RulesConfig = DEFAULT_RULES
) -> CaptureSummary:
    """Fold the log into capture points (captor value + defender value)."""

    points = 0
    count = 0
    for entry in move_log:
        if entry.player != side or not entry.is_capture:
            continue
        points += piece_value(entry.piece_type, rules=rules)
        points += piece_value(entry.captured_piece_type, rules=rules)
        count += 1
    return CaptureSummary(points=points, count=count)


def score(
    move_log: Iterable[MoveLogEntry], side: Side, *, rules: RulesConfig = DEFAULT_RULES
) -> int:
    """Capture points earned by ``side``."""

    return capture_summary(move_log, side, rules=rules).points


def win_bonus(condition: WinCondition | None, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    if condition is WinCondition.SOLITUDE:
        return rules.scoring.solitude_bonus
    if condition in (
        WinCondition.SUPREMO_CAPTURE,
        WinCondition.OPPONENT_QUIT,
        WinCondition.RESIGNATION,
    ):
        return rules.scoring.decisive_bonus
    return 0


def final_score(
    move_log: Iterable[MoveLogEntry],
    side: Side,
    condition: WinCondition | None,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """End-of-game total: capture points + win bonus + capture ratio bonus.

    The ratio bonus is ``count / capturable_pieces * capture_ratio_weight``.
    Halves round up.
    """

    summary = capture_summary(move_log, side, rules=rules)
    scoring = rules.scoring
    ratio = summary.count / scoring.capturable_pieces * scoring.capture_ratio_weight
    total = summary.points + win_bonus(condition, rules=rules) + ratio
    return math.floor(total + 0.5)
