"""SQLAlchemy models for the card battle store."""

from .base import Base, TimestampMixin
from .battle import BattleCardRow, BattleRow, CardRow

__all__ = [
    "Base",
    "BattleCardRow",
    "BattleRow",
    "CardRow",
    "TimestampMixin",
]
