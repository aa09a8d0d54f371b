"""SQLAlchemy models for EOS match history."""

from .base import Base, utc_now
from .match import MatchRecord

__all__ = [
    "Base",
    "MatchRecord",
    "utc_now",
]
