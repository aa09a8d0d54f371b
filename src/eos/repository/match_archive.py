"""SQLAlchemy-backed history of finished matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from eos.domain.enums import Side, WinCondition, Winner
from eos.domain.scoring import final_score
from eos.domain.turn import Game
from eos.models import MatchRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchSummary:
    """Detached view of an archived match."""

    match_id: str
    winner: Winner
    win_condition: WinCondition
    player1_score: int
    player2_score: int
    move_count: int
    finished_at: datetime


class MatchArchive:
    """Writes one row per finished game and reads them back."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def record(self, match_id: str, game: Game) -> MatchSummary:
        """Archive a finished game.

        Raises:
            ValueError: If the game has no winner yet or was already archived
        """

        state = game.state
        if state.winner is None:
            msg = f"match {match_id} is still in progress"
            raise ValueError(msg)
        condition = state.win_condition or WinCondition.DRAW
        scores = {
            side: final_score(
                state.move_log,
                side,
                _condition_for(state.winner, side, condition),
                rules=game.rules,
            )
            for side in Side
        }
        row = MatchRecord(
            match_id=match_id,
            winner=state.winner.value,
            win_condition=condition.value,
            player1_score=scores[Side.PLAYER1],
            player2_score=scores[Side.PLAYER2],
            move_count=len(state.move_log),
        )
        with self._session_factory() as session:
            existing = session.scalar(select(MatchRecord).where(MatchRecord.match_id == match_id))
            if existing is not None:
                msg = f"match {match_id} is already archived"
                raise ValueError(msg)
            session.add(row)
            session.commit()
            session.refresh(row)
            summary = _summary(row)
        logger.info(
            "archived match %s: %s (%s) %d-%d",
            match_id,
            summary.winner,
            summary.win_condition,
            summary.player1_score,
            summary.player2_score,
        )
        return summary

    def get(self, match_id: str) -> MatchSummary | None:
        with self._session_factory() as session:
            row = session.scalar(select(MatchRecord).where(MatchRecord.match_id == match_id))
            return _summary(row) if row is not None else None

    def list_matches(self) -> list[MatchSummary]:
        """Every archived match, most recent first."""
        with self._session_factory() as session:
            rows = session.scalars(
                select(MatchRecord).order_by(MatchRecord.finished_at.desc(), MatchRecord.id.desc())
            ).all()
            return [_summary(row) for row in rows]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _condition_for(winner: Winner, side: Side, condition: WinCondition) -> WinCondition | None:
    # Only the winning side collects the win bonus.
    return condition if winner == Winner.of(side) else None


def _summary(row: MatchRecord) -> MatchSummary:
    return MatchSummary(
        match_id=row.match_id,
        winner=Winner(row.winner),
        win_condition=WinCondition(row.win_condition),
        player1_score=row.player1_score,
        player2_score=row.player2_score,
        move_count=row.move_count,
        finished_at=row.finished_at,
    )
