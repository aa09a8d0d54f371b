"""Declarative rule configuration for the EOS rules engine.

Two kinds of configuration live here:

* :class:`RuleTable` - the per-piece-type movement and attack data.  It is
  loaded once (see :mod:`eos.repository.rule_store`) and passed by
  reference into every generator call; the engine never computes it.
* :class:`RulesConfig` - fixed engine constants grouped per subsystem.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .enums import PieceType

# "Archer 2a" -> "Archer", "Steward 1" -> "Steward"
_NAME_SUFFIX = re.compile(r"\s+\d+[a-z]?$")


def base_type_name(name: str) -> str:
    """Strip clone and numeric suffixes from a piece name."""
    return _NAME_SUFFIX.sub("", name.strip())


@dataclass(frozen=True, slots=True)
class RuleEntry:
    """Movement and attack data for one base piece type."""

    move_steps: frozenset[int]
    attack_range: frozenset[int] = frozenset()
    mandatory_move: frozenset[int] = frozenset()
    attack_type: str = "ranged"
    passes_home_row: bool = True

    @classmethod
    def build(
        cls,
        move_steps: Iterable[int],
        attack_range: Iterable[int] = (),
        mandatory_move: int | Iterable[int] = (),
        *,
        attack_type: str = "ranged",
        passes_home_row: bool = True,
    ) -> RuleEntry:
        if isinstance(mandatory_move, int):
            mandatory_move = (mandatory_move,)
        return cls(
            move_steps=frozenset(move_steps),
            attack_range=frozenset(attack_range),
            mandatory_move=frozenset(mandatory_move),
            attack_type=attack_type,
            passes_home_row=passes_home_row,
        )

    @classmethod
    def fallback(cls) -> RuleEntry:
        """Entry used for types missing from the table: one step, no attacks."""
        return cls(move_steps=frozenset({1}), passes_home_row=False)

    @property
    def max_step(self) -> int:
        return max(self.move_steps, default=0)


@dataclass(frozen=True, slots=True)
class RuleTable:
    """Immutable mapping of base type name to :class:`RuleEntry`."""

    entries: Mapping[str, RuleEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, name: str) -> RuleEntry | None:
        """Return the entry for a piece name or type, or None when missing."""
        return self.entries.get(base_type_name(str(name)))

    def entry_for(self, name: str) -> RuleEntry:
        """Return the entry for a piece name, degrading to :meth:`RuleEntry.fallback`."""
        entry = self.get(name)
        return entry if entry is not None else RuleEntry.fallback()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and base_type_name(name) in self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class MovementRules:
    """Distance ceilings for the development and advance bonuses."""

    development_max_distance: int = 4
    advance_ceiling: int = 3


@dataclass(frozen=True, slots=True)
class AttackRules:
    """Steward range substitution."""

    steward_first_move_range: frozenset[int] = frozenset({1, 2})
    steward_range: frozenset[int] = frozenset({1})


def _default_piece_values() -> dict[PieceType, int]:
    return {
        PieceType.SUPREMO: 7,
        PieceType.CHANCELLOR: 6,
        PieceType.VICE_ROY: 5,
        PieceType.ARCHER: 4,
        PieceType.DEACON: 3,
        PieceType.MINISTER: 2,
        PieceType.STEWARD: 1,
    }


@dataclass(frozen=True, slots=True)
class ScoringRules:
    """Piece values and end-of-game bonuses."""

    piece_values: Mapping[PieceType, int] = field(default_factory=_default_piece_values)
    solitude_bonus: int = 5
    decisive_bonus: int = 10
    capturable_pieces: int = 17
    capture_ratio_weight: int = 10


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    movement: MovementRules = MovementRules()
    attack: AttackRules = AttackRules()
    scoring: ScoringRules = ScoringRules()


DEFAULT_RULES = RulesConfig()

DEFAULT_RULE_TABLE = RuleTable(
    {
        PieceType.SUPREMO.value: RuleEntry.build([1, 2], [1, 2], 1),
        PieceType.CHANCELLOR.value: RuleEntry.build([1, 2], [1, 2, 3], [1, 2]),
        PieceType.VICE_ROY.value: RuleEntry.build([1, 2], [1, 2], [1, 2]),
        PieceType.ARCHER.value: RuleEntry.build([1], [1, 2, 3], 1),
        PieceType.DEACON.value: RuleEntry.build([1], [1, 2], 1),
        PieceType.MINISTER.value: RuleEntry.build([1, 2], [1], [1, 2]),
        PieceType.STEWARD.value: RuleEntry.build([1], [1], 1, passes_home_row=False),
    }
)
