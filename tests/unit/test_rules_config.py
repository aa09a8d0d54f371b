"""Tests for the rule table, its loader and the engine constants."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from eos.domain.rules_config import (
    DEFAULT_RULE_TABLE,
    DEFAULT_RULES,
    RuleEntry,
    base_type_name,
)
from eos.repository.rule_store import dump_rule_table, load_rule_table, rule_table_from_mapping


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Archer 1a", "Archer"),
        ("Archer 2", "Archer"),
        ("Vice Roy 1", "Vice Roy"),
        ("Steward 2", "Steward"),
        ("Supremo", "Supremo"),
    ],
)
def test_base_type_name_strips_suffixes(name: str, expected: str) -> None:
    assert base_type_name(name) == expected


def test_builtin_table_values():
    archer = DEFAULT_RULE_TABLE.get("Archer 2a")
    assert archer is not None
    assert archer.move_steps == frozenset({1})
    assert archer.attack_range == frozenset({1, 2, 3})
    assert archer.mandatory_move == frozenset({1})

    chancellor = DEFAULT_RULE_TABLE.entry_for("Chancellor 1")
    assert chancellor.attack_range == frozenset({1, 2, 3})
    assert chancellor.mandatory_move == frozenset({1, 2})

    assert len(DEFAULT_RULE_TABLE) == 7
    assert "Vice Roy 2" in DEFAULT_RULE_TABLE


def test_only_steward_is_held_back_on_first_move():
    passing = {name for name, entry in DEFAULT_RULE_TABLE.entries.items() if entry.passes_home_row}
    assert "Steward" not in passing
    assert len(passing) == 6


def test_missing_entry_degrades_to_fallback():
    assert DEFAULT_RULE_TABLE.get("Dragon") is None
    entry = DEFAULT_RULE_TABLE.entry_for("Dragon 1")
    assert entry == RuleEntry.fallback()
    assert entry.move_steps == frozenset({1})
    assert not entry.attack_range
    assert not entry.mandatory_move


def test_scoring_constants():
    scoring = DEFAULT_RULES.scoring
    assert scoring.capturable_pieces == 17
    assert scoring.solitude_bonus == 5
    assert scoring.decisive_bonus == 10
    assert sum(scoring.piece_values.values()) == 28


def test_rule_table_from_mapping_accepts_scalar_mandatory_move():
    table = rule_table_from_mapping(
        {
            "Archer": {
                "move_steps": [1],
                "attack_rules": {"range": [1, 2, 3], "mandatory_move": 1, "type": "ranged"},
            },
            "Steward": {"move_steps": [1], "attack_rules": {"range": [1], "mandatory_move": [1]}},
            "Minister 2": {"move_steps": [1, 2], "passes_home_row": False},
        }
    )

    assert table.entry_for("Archer").mandatory_move == frozenset({1})
    assert table.entry_for("Archer").passes_home_row is True
    assert table.entry_for("Steward").passes_home_row is False
    minister = table.entry_for("Minister")
    assert minister.passes_home_row is False
    assert not minister.attack_range


def test_rule_table_rejects_non_positive_distances():
    with pytest.raises(ValidationError):
        rule_table_from_mapping({"Archer": {"move_steps": [0]}})


def test_rule_table_rejects_empty_move_steps():
    with pytest.raises(ValidationError):
        rule_table_from_mapping({"Archer": {"move_steps": []}})


def test_load_rule_table_round_trips_builtin_data(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(dump_rule_table(DEFAULT_RULE_TABLE)), encoding="utf-8")

    loaded = load_rule_table(path)

    assert dict(loaded.entries) == dict(DEFAULT_RULE_TABLE.entries)


def test_load_rule_table_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rule_table(tmp_path / "absent.json")
