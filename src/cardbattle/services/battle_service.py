"""Battle orchestration service.

Every public operation is a single read / transition / conditional-write
cycle against the battle repository.  If another request saved the same
battle in between, the write fails with ``ConflictError`` and nothing is
persisted; retrying is left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from cardbattle.domain import lifecycle
from cardbattle.domain.models import (
    Battle,
    BattleCard,
    BattleCardID,
    BattleID,
    Card,
    CardID,
    PlayerID,
)
from cardbattle.domain.roster import require_battle_card
from cardbattle.domain.rules_config import DEFAULT_RULES, RulesConfig
from cardbattle.interfaces import IBattleRepository, ICardCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Battle state after a submission plus what the submission triggered."""

    battle: Battle
    result: lifecycle.SubmissionResult


class BattleService:
    """Service exposing the battle engine's operations."""

    def __init__(
        self,
        battles: IBattleRepository,
        catalog: ICardCatalog,
        *,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self.battles = battles
        self.catalog = catalog
        self.rules = rules

    def create_battle(self, player_one_id: PlayerID, card_ids: Sequence[CardID]) -> Battle:
        """Open a battle with player one's roster.

        Args:
            player_one_id: Challenging player
            card_ids: Catalog cards making up the roster, in order

        Returns:
            The persisted battle in ``REQUESTED`` state
        """
        cards = self.catalog.get_many(card_ids)
        battle = lifecycle.create_battle(player_one_id, cards)
        self.battles.add(battle)
        logger.info(
            "battle %s requested by %s with %d cards", battle.id, player_one_id, len(cards)
        )
        return battle

    def join_battle(
        self, battle_id: BattleID, player_two_id: PlayerID, card_ids: Sequence[CardID]
    ) -> Battle:
        """Commit the opponent's roster and activate the battle."""
        battle = self.battles.get(battle_id)
        cards = self.catalog.get_many(card_ids)
        lifecycle.join_battle(battle, player_two_id, cards)
        self.battles.save(battle)
        logger.info("battle %s joined by %s; now %s", battle.id, player_two_id, battle.state)
        return battle

    def submit_round(
        self,
        battle_id: BattleID,
        player_id: PlayerID,
        battle_card_id: BattleCardID,
        round_index: int,
    ) -> SubmissionOutcome:
        """Designate a card for ``round_index``; resolves the round once both players are in."""
        battle = self.battles.get(battle_id)
        result = lifecycle.submit_card(
            battle, player_id, battle_card_id, round_index, rules=self.rules.battle
        )
        if result.duplicate:
            logger.info(
                "battle %s: repeated submission by %s for round %s ignored",
                battle.id,
                player_id,
                round_index,
            )
            return SubmissionOutcome(battle=battle, result=result)

        self.battles.save(battle)
        if result.round is not None:
            logger.info(
                "battle %s: round %s resolved (%s)",
                battle.id,
                result.round.index,
                result.round.outcome,
            )
        if result.completion is not None:
            logger.info(
                "battle %s completed; winner %s",
                battle.id,
                result.completion.winner_id or "none (draw)",
            )
        return SubmissionOutcome(battle=battle, result=result)

    def get_battle(self, battle_id: BattleID) -> Battle:
        return self.battles.get(battle_id)

    def list_player_battles(self, player_id: PlayerID) -> list[Battle]:
        return self.battles.list_for_player(player_id)

    def find_battle_card(self, battle_id: BattleID, battle_card_id: BattleCardID) -> BattleCard:
        """Resolve a battle card within a known battle."""
        return require_battle_card(self.battles.get(battle_id), battle_card_id)

    def get_battle_card(self, battle_card_id: BattleCardID) -> tuple[Battle, BattleCard]:
        """Resolve a battle card without knowing its battle."""
        battle = self.battles.find_by_battle_card(battle_card_id)
        return battle, require_battle_card(battle, battle_card_id)

    def get_card(self, card_id: CardID) -> Card:
        return self.catalog.get(card_id)

    def list_cards(self) -> list[Card]:
        return self.catalog.list_cards()
