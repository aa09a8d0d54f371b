"""Archived result of a finished match.

One row is written per game when it ends, whether by capture, solitude or
a session-level declaration (resignation, timeout, opponent quit).
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utc_now


class MatchRecord(Base):
    """Final outcome and scores of one match.

    Attributes:
        id: Primary key
        match_id: Session-level identifier of the game (unique)
        winner: ``player1``, ``player2`` or ``draw``
        win_condition: How the game ended
        player1_score: Final score of player 1, bonuses included
        player2_score: Final score of player 2, bonuses included
        move_count: Number of move log entries, captures included
        finished_at: When the result was recorded
    """

    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    match_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    winner: Mapped[str] = mapped_column(String, nullable=False)
    win_condition: Mapped[str] = mapped_column(String, nullable=False)

    player1_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    player2_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    move_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    finished_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        CheckConstraint("winner IN ('player1', 'player2', 'draw')", name="ck_matches_winner"),
        CheckConstraint("player1_score >= 0", name="ck_matches_player1_score"),
        CheckConstraint("player2_score >= 0", name="ck_matches_player2_score"),
        CheckConstraint("move_count >= 0", name="ck_matches_move_count"),
    )

    def __repr__(self) -> str:
        return f"<MatchRecord(match_id={self.match_id!r}, winner={self.winner!r})>"
