"""Service layer for the card battle engine.

Services depend on the protocol interfaces in :mod:`cardbattle.interfaces`,
never on a concrete store:

- BattleService: battle creation, joining, round submission and lookups
- CatalogImporter: raw catalog ingestion through the card normalizer

Production Usage:
    from cardbattle.factory import create_battle_service
    service = create_battle_service(settings)
    battle = service.create_battle(player_id, card_ids)

Testing Usage:
    from cardbattle.repository import JsonBattleRepository, JsonCardCatalog
    from cardbattle.services import BattleService

    service = BattleService(JsonBattleRepository(tmp_path), JsonCardCatalog(tmp_path))
"""

from cardbattle.services.battle_service import BattleService, SubmissionOutcome
from cardbattle.services.catalog_service import CatalogImporter, ImportReport

__all__ = [
    "BattleService",
    "CatalogImporter",
    "ImportReport",
    "SubmissionOutcome",
]
