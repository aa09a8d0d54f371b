"""Runtime primitives backing the EOS HTTP API.

The server is authoritative: every action is replayed against the rules
engine, and only accepted actions are persisted.  Games live on disk as
turn-sync snapshots; finished games are additionally archived in SQL.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from dataclasses import dataclass

from sqlalchemy.engine import Engine

from eos.config import Settings, get_settings
from eos.database import create_db_engine, get_session_factory, init_db
from eos.domain.enums import Side, WinCondition, Winner
from eos.domain.rules_config import DEFAULT_RULE_TABLE, DEFAULT_RULES, RulesConfig, RuleTable
from eos.domain.scoring import capture_summary, final_score
from eos.domain.turn import ActionResult, Game
from eos.repository import GameID, JsonGameRepository, MatchArchive, load_rule_table
from eos.snapshot import TurnSyncMessage, export_snapshot, import_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SideScore:
    captures: int
    points: int
    final: int


class GameService:
    """Load, mutate and persist games through the rules engine."""

    def __init__(
        self,
        repository: JsonGameRepository,
        archive: MatchArchive,
        *,
        rule_table: RuleTable = DEFAULT_RULE_TABLE,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self._repository = repository
        self._archive = archive
        self._rule_table = rule_table
        self._rules = rules

    def create_game(self, *, first_turn: Side = Side.PLAYER1) -> tuple[GameID, Game]:
        """Set up a fresh game on the standard layout and persist it."""

        game_id = self._repository.next_identifier()
        game = Game(rule_table=self._rule_table, rules=self._rules, first_turn=first_turn)
        self._repository.save(game_id, export_snapshot(game))
        logger.info("created game %s (%s moves first)", int(game_id), first_turn)
        return game_id, game

    def list_games(self) -> list[tuple[GameID, Game]]:
        """Return every persisted game ordered by identifier."""

        games: list[tuple[GameID, Game]] = []
        for game_id in self._repository.list_games():
            with suppress(FileNotFoundError):
                games.append((game_id, self.get_game(game_id)))
        return games

    def get_game(self, game_id: GameID) -> Game:
        """Load a single game or raise ``FileNotFoundError``."""

        message = self._repository.load(game_id)
        return import_snapshot(message, rule_table=self._rule_table, rules=self._rules)

    def act(
        self, game_id: GameID, action: str, argument: str | None = None
    ) -> tuple[ActionResult, Game]:
        """Apply one player verb; only accepted actions are saved."""

        game = self.get_game(game_id)
        result = game.apply(action, argument)
        if result.ok:
            self._commit(game_id, game)
        return result, game

    def declare_result(
        self, game_id: GameID, winner: Winner, condition: WinCondition
    ) -> tuple[ActionResult, Game]:
        """End a game from the session layer (resignation, timeout, quit)."""

        game = self.get_game(game_id)
        result = game.declare_result(winner, condition)
        if result.ok:
            self._commit(game_id, game)
        return result, game

    def score(self, game: Game) -> dict[Side, SideScore]:
        """Capture points and provisional final score for both sides."""

        state = game.state
        scores: dict[Side, SideScore] = {}
        for side in Side:
            summary = capture_summary(state.move_log, side, rules=self._rules)
            won = state.winner is not None and state.winner == Winner.of(side)
            condition = state.win_condition if won else None
            scores[side] = SideScore(
                captures=summary.count,
                points=summary.points,
                final=final_score(state.move_log, side, condition, rules=self._rules),
            )
        return scores

    def _commit(self, game_id: GameID, game: Game) -> None:
        self._repository.save(game_id, export_snapshot(game))
        if game.winner is not None and self._archive.get(str(int(game_id))) is None:
            self._archive.record(str(int(game_id)), game)

    @staticmethod
    def to_summary_dict(game_id: GameID, game: Game) -> dict[str, object]:
        """Return a JSON-friendly overview of a game."""

        state = game.state
        return {
            "id": int(game_id),
            "current_turn": str(state.current_turn),
            "turn_phase": str(state.turn_phase),
            "winner": str(state.winner) if state.winner is not None else None,
            "win_condition": str(state.win_condition) if state.win_condition else None,
            "move_count": len(state.move_log),
            "pieces_on_board": {str(side): state.board.count(side) for side in Side},
        }

    @staticmethod
    def snapshot(game: Game) -> TurnSyncMessage:
        return export_snapshot(game)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        engine: Engine | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.rule_table = (
            load_rule_table(self.settings.rules_path)
            if self.settings.rules_path is not None
            else DEFAULT_RULE_TABLE
        )
        self.engine = engine or create_db_engine(
            self.settings.database_url, echo=self.settings.database_echo
        )
        init_db(self.engine)
        self.repository = JsonGameRepository(self.settings.data_dir)
        self.archive = MatchArchive(get_session_factory(self.engine))
        self.games = GameService(
            self.repository,
            self.archive,
            rule_table=self.rule_table,
            rules=rules,
        )

    async def shutdown(self) -> None:
        self.engine.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
