"""Roster lookups within a single battle."""

from __future__ import annotations

from cardbattle.domain.errors import NotFoundError, ValidationError
from cardbattle.domain.models import Battle, BattleCard, BattleCardID, PlayerID


def find_battle_card(battle: Battle, battle_card_id: BattleCardID) -> BattleCard | None:
    """Return the card with ``battle_card_id`` from either roster, player one first."""

    for card in (*battle.player_one_cards, *battle.player_two_cards):
        if card.id == battle_card_id:
            return card
    return None


def require_battle_card(battle: Battle, battle_card_id: BattleCardID) -> BattleCard:
    card = find_battle_card(battle, battle_card_id)
    if card is None:
        raise NotFoundError(f"battle card {battle_card_id} not found in battle {battle.id}")
    return card


def roster_for(battle: Battle, player_id: PlayerID) -> list[BattleCard]:
    """Return the roster committed by ``player_id``."""

    if player_id == battle.player_one_id:
        return battle.player_one_cards
    if battle.player_two_id is not None and player_id == battle.player_two_id:
        return battle.player_two_cards
    raise ValidationError(f"player {player_id} is not part of battle {battle.id}")


def resolve_submission(
    battle: Battle, player_id: PlayerID, battle_card_id: BattleCardID
) -> BattleCard:
    """Validate that ``player_id`` may field ``battle_card_id`` this round.

    The card must belong to the submitting player's own roster and must not be
    eliminated.  Foreign or eliminated cards are rejected, never substituted.
    """

    roster = roster_for(battle, player_id)
    card = find_battle_card(battle, battle_card_id)
    if card is None:
        raise ValidationError(f"battle card {battle_card_id} is not part of battle {battle.id}")
    if not any(own.id == card.id for own in roster):
        raise ValidationError(f"battle card {battle_card_id} does not belong to player {player_id}")
    if card.eliminated:
        raise ValidationError(f"battle card {battle_card_id} has been eliminated")
    return card


def roster_alive(cards: list[BattleCard]) -> bool:
    """Return ``True`` while at least one card in the roster can still fight."""

    return any(not card.eliminated for card in cards)
