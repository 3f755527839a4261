"""SQL rows backing the battle and card stores.

The engine's dataclasses are stored whole in a JSON ``payload`` column; the
scalar columns next to it exist for filtering and for the optimistic version
check.
"""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class BattleRow(Base, TimestampMixin):
    """One battle aggregate.

    Attributes:
        id: Opaque battle identifier
        player_one_id: Challenger
        player_two_id: Opponent, null until the battle is joined
        state: Lifecycle state (requested/active/completed)
        version: Optimistic concurrency counter managed by SQLAlchemy
        payload: Full serialized battle
    """

    __tablename__ = "battles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    player_one_id: Mapped[str] = mapped_column(String, nullable=False)
    player_two_id: Mapped[str | None] = mapped_column(String, nullable=True)
    state: Mapped[str] = mapped_column(String, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __mapper_args__ = {"version_id_col": version}  # noqa: RUF012

    __table_args__ = (
        CheckConstraint(
            "state IN ('requested', 'active', 'completed')", name="ck_battles_state"
        ),
        Index("idx_battles_player_one", "player_one_id"),
        Index("idx_battles_player_two", "player_two_id"),
    )

    def __repr__(self) -> str:
        return f"<BattleRow(id='{self.id}', state='{self.state}', version={self.version})>"


class CardRow(Base, TimestampMixin):
    """One normalized catalog card."""

    __tablename__ = "cards"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<CardRow(id='{self.id}', name='{self.name}')>"


class BattleCardRow(Base):
    """Maps a battle card id to the battle holding it.

    Rows are written alongside the battle payload; rosters only ever grow, so
    entries are never updated or removed.
    """

    __tablename__ = "battle_cards"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    battle_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("battles.id", ondelete="CASCADE"), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<BattleCardRow(id='{self.id}', battle_id='{self.battle_id}')>"
