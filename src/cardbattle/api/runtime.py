"""Runtime primitives backing the card battle HTTP API."""

from __future__ import annotations

import logging

from cardbattle.config import Settings, get_settings
from cardbattle.domain import models as dm
from cardbattle.factory import Stores, create_battle_service, create_catalog_importer, create_stores
from cardbattle.services import BattleService, CatalogImporter, ImportReport

logger = logging.getLogger(__name__)


def card_to_dict(card: dm.Card) -> dict[str, object]:
    return {
        "id": card.id,
        "name": card.name,
        "level": card.level,
        "hp": card.hp,
        "attack": {"name": card.attack.name, "damage": card.attack.damage},
        "rarity": card.rarity,
        "images": card.images,
    }


def battle_card_to_dict(card: dm.BattleCard) -> dict[str, object]:
    return {
        "id": card.id,
        "card_id": card.card_id,
        "name": card.name,
        "level": card.level,
        "hp": card.hp,
        "current_hp": card.current_hp,
        "eliminated": card.eliminated,
        "attack": {"name": card.attack.name, "damage": card.attack.damage},
        "rarity": card.rarity,
        "images": card.images,
    }


def round_to_dict(record: dm.RoundRecord) -> dict[str, object]:
    return {
        "index": record.index,
        "player_one_card_id": record.player_one_card_id,
        "player_two_card_id": record.player_two_card_id,
        "damage_to_player_one": record.damage_to_player_one,
        "damage_to_player_two": record.damage_to_player_two,
        "outcome": str(record.outcome),
    }


def battle_to_dict(battle: dm.Battle) -> dict[str, object]:
    """Return a JSON-friendly view of a battle.

    Pending submissions only reveal *who* has submitted, never which card,
    so the opponent cannot react to a choice before committing their own.
    """

    return {
        "id": battle.id,
        "state": str(battle.state),
        "player_one_id": battle.player_one_id,
        "player_two_id": battle.player_two_id,
        "player_one_cards": [battle_card_to_dict(card) for card in battle.player_one_cards],
        "player_two_cards": [battle_card_to_dict(card) for card in battle.player_two_cards],
        "rounds": [round_to_dict(record) for record in battle.rounds],
        "current_round_index": battle.current_round_index,
        "submitted_players": sorted(battle.pending),
        "winner_id": battle.winner_id,
        "version": battle.version,
        "created_at": battle.created_at.isoformat(),
        "updated_at": battle.updated_at.isoformat(),
    }


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.stores: Stores = create_stores(self.settings)
        self.battles: BattleService = create_battle_service(self.settings, self.stores)
        self.importer: CatalogImporter = create_catalog_importer(self.settings, self.stores)

    def import_catalog(self) -> list[ImportReport]:
        """Import every catalog file named in the settings."""

        reports = self.importer.import_files(self.settings.catalog_files)
        for report in reports:
            if report.file_error:
                logger.warning("catalog import of %s failed: %s", report.source, report.file_error)
        return reports

    async def shutdown(self) -> None:
        logger.info("card battle API shutting down")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
