"""Load the per-piece-type rule table from external JSON data.

Expected shape, keyed by base piece type name::

    {
      "Archer": {
        "move_steps": [1],
        "attack_rules": {"range": [1, 2, 3], "mandatory_move": 1, "type": "ranged"}
      }
    }

``passes_home_row`` may be given per type; when omitted every type except
the Steward may travel through occupied cells on its first move.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, PositiveInt, TypeAdapter

from eos.domain.enums import PieceType
from eos.domain.rules_config import RuleEntry, RuleTable, base_type_name

logger = logging.getLogger(__name__)


class AttackRulesPayload(BaseModel):
    range: list[PositiveInt] = Field(default_factory=list)
    mandatory_move: PositiveInt | list[PositiveInt] = Field(default_factory=list)
    type: str = "ranged"


class RuleEntryPayload(BaseModel):
    move_steps: list[PositiveInt] = Field(default_factory=lambda: [1], min_length=1)
    attack_rules: AttackRulesPayload | None = None
    passes_home_row: bool | None = None


RULE_TABLE_ADAPTER: TypeAdapter[dict[str, RuleEntryPayload]] = TypeAdapter(
    dict[str, RuleEntryPayload]
)


def rule_table_from_mapping(data: Mapping[str, Any]) -> RuleTable:
    """Validate raw rule data and build an immutable :class:`RuleTable`."""

    payload = RULE_TABLE_ADAPTER.validate_python(dict(data))
    entries: dict[str, RuleEntry] = {}
    for raw_name, item in payload.items():
        name = base_type_name(raw_name)
        attack = item.attack_rules or AttackRulesPayload()
        passes = (
            item.passes_home_row
            if item.passes_home_row is not None
            else name != PieceType.STEWARD.value
        )
        entries[name] = RuleEntry.build(
            item.move_steps,
            attack.range,
            attack.mandatory_move,
            attack_type=attack.type,
            passes_home_row=passes,
        )
    return RuleTable(entries)


def load_rule_table(path: Path | str) -> RuleTable:
    """Read and validate a JSON rule table from ``path``."""

    source = Path(path)
    payload = RULE_TABLE_ADAPTER.validate_json(source.read_bytes())
    table = rule_table_from_mapping({name: item.model_dump() for name, item in payload.items()})
    logger.info("loaded %d rule entries from %s", len(table), source)
    return table


def dump_rule_table(table: RuleTable) -> dict[str, dict[str, Any]]:
    """Return the JSON-compatible form of a rule table."""

    return {
        name: {
            "move_steps": sorted(entry.move_steps),
            "attack_rules": {
                "range": sorted(entry.attack_range),
                "mandatory_move": sorted(entry.mandatory_move),
                "type": entry.attack_type,
            },
            "passes_home_row": entry.passes_home_row,
        }
        for name, entry in table.entries.items()
    }
