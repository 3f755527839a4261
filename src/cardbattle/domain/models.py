"""Dataclasses describing the battle engine's entities.

The engine works purely on these in-memory types.  Persistence adapters
translate them to and from storage (JSON snapshots, SQL rows), so nothing in
the rules layer depends on a particular storage technology.  Identifiers are
opaque strings compared by value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import NewType
from uuid import uuid4

from .enums import BattleState, RoundOutcome

# --- Strongly typed identifiers -------------------------------------------------

CardID = NewType("CardID", str)
BattleID = NewType("BattleID", str)
BattleCardID = NewType("BattleCardID", str)
PlayerID = NewType("PlayerID", str)


def new_battle_id() -> BattleID:
    return BattleID(uuid4().hex)


def new_battle_card_id() -> BattleCardID:
    return BattleCardID(uuid4().hex)


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- Catalog --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Attack:
    """The single canonical attack of a card."""

    name: str
    damage: int


@dataclass(frozen=True, slots=True)
class Card:
    """Battle-eligible catalog card (immutable once normalized)."""

    id: CardID
    name: str
    level: int
    hp: int
    attack: Attack
    rarity: str | None = None
    images: dict[str, object] | None = None


# --- Battle aggregate -----------------------------------------------------------


@dataclass(slots=True)
class BattleCard:
    """Battle-scoped copy of a card with its own hit points."""

    id: BattleCardID
    card_id: CardID
    name: str
    level: int
    hp: int
    attack: Attack
    current_hp: int
    rarity: str | None = None
    images: dict[str, object] | None = None

    @property
    def eliminated(self) -> bool:
        return self.current_hp <= 0

    @classmethod
    def from_card(cls, card: Card, battle_card_id: BattleCardID | None = None) -> BattleCard:
        """Copy a catalog card into a fresh battle card at full hp."""

        return cls(
            id=battle_card_id or new_battle_card_id(),
            card_id=card.id,
            name=card.name,
            level=card.level,
            hp=card.hp,
            attack=card.attack,
            current_hp=card.hp,
            rarity=card.rarity,
            images=dict(card.images) if card.images is not None else None,
        )


@dataclass(frozen=True, slots=True)
class RoundRecord:
    """One resolved exchange between a card from each roster."""

    index: int
    player_one_card_id: BattleCardID
    player_two_card_id: BattleCardID
    damage_to_player_one: int
    damage_to_player_two: int
    outcome: RoundOutcome


@dataclass(slots=True)
class Battle:
    """Aggregate root for a two-player battle."""

    id: BattleID
    player_one_id: PlayerID
    player_one_cards: list[BattleCard]
    state: BattleState = BattleState.REQUESTED
    player_two_id: PlayerID | None = None
    player_two_cards: list[BattleCard] = field(default_factory=list)
    rounds: list[RoundRecord] = field(default_factory=list)
    winner_id: PlayerID | None = None
    pending: dict[PlayerID, BattleCardID] = field(default_factory=dict)
    version: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def current_round_index(self) -> int:
        return len(self.rounds)

    @property
    def players(self) -> tuple[PlayerID, ...]:
        if self.player_two_id is None:
            return (self.player_one_id,)
        return (self.player_one_id, self.player_two_id)

    def involves(self, player_id: PlayerID) -> bool:
        return player_id in self.players


# --- Partial updates ------------------------------------------------------------
#
# Each transition changes a fixed set of fields.  The update types below name
# exactly those fields so a half-applied transition cannot be expressed.


@dataclass(frozen=True, slots=True)
class RosterJoin:
    """Opponent joins: sets player two and their roster."""

    player_two_id: PlayerID
    player_two_cards: tuple[BattleCard, ...]


@dataclass(frozen=True, slots=True)
class CardSubmission:
    """One player designates their card for the current round."""

    player_id: PlayerID
    battle_card_id: BattleCardID


@dataclass(frozen=True, slots=True)
class RoundAppend:
    """Round resolved: one new round plus the new hp of both cards."""

    round: RoundRecord
    player_one_hp: int
    player_two_hp: int


@dataclass(frozen=True, slots=True)
class Completion:
    """Terminal transition; ``winner_id`` is ``None`` for a draw."""

    winner_id: PlayerID | None


BattleUpdate = RosterJoin | CardSubmission | RoundAppend | Completion
