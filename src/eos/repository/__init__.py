"""Persistence adapters for EOS."""

from eos.repository.json_store import GameID, JsonGameRepository
from eos.repository.match_archive import MatchArchive, MatchSummary
from eos.repository.rule_store import dump_rule_table, load_rule_table, rule_table_from_mapping

__all__ = [
    "GameID",
    "JsonGameRepository",
    "MatchArchive",
    "MatchSummary",
    "dump_rule_table",
    "load_rule_table",
    "rule_table_from_mapping",
]
