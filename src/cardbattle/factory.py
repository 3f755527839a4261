"""Service Factory for the card battle engine.

This module wires repositories and services from :class:`Settings`.  Use
these functions in production code; tests construct services directly around
temporary stores or protocol-based fakes.

Example:
    # Production usage
    from cardbattle.factory import create_battle_service
    service = create_battle_service(get_settings())

    # Testing usage
    from cardbattle.repository import JsonBattleRepository, JsonCardCatalog
    from cardbattle.services import BattleService

    service = BattleService(JsonBattleRepository(tmp_path), JsonCardCatalog(tmp_path))
"""

from dataclasses import dataclass

from cardbattle.config import Settings
from cardbattle.database import create_db_engine, create_session_factory, init_db
from cardbattle.interfaces import IBattleRepository, ICardCatalog
from cardbattle.repository import (
    JsonBattleRepository,
    JsonCardCatalog,
    SqlBattleRepository,
    SqlCardCatalog,
)
from cardbattle.services.battle_service import BattleService
from cardbattle.services.catalog_service import CatalogImporter


@dataclass(slots=True)
class Stores:
    """The two persistence collaborators, sharing one backend."""

    battles: IBattleRepository
    catalog: ICardCatalog


def create_stores(settings: Settings) -> Stores:
    """Create the battle and card stores selected by ``settings``.

    Args:
        settings: Application settings; ``database_url`` selects SQL storage

    Returns:
        Stores backed by SQLAlchemy when a database URL is configured,
        otherwise JSON snapshots under ``data_dir``
    """
    if settings.database_url:
        engine = create_db_engine(settings.database_url, echo=settings.database_echo)
        init_db(engine)
        session_factory = create_session_factory(engine)
        return Stores(
            battles=SqlBattleRepository(session_factory),
            catalog=SqlCardCatalog(session_factory),
        )
    return Stores(
        battles=JsonBattleRepository(settings.data_dir / "battles"),
        catalog=JsonCardCatalog(settings.data_dir),
    )


def create_battle_service(settings: Settings, stores: Stores | None = None) -> BattleService:
    """Create a BattleService with all dependencies."""
    stores = stores or create_stores(settings)
    return BattleService(stores.battles, stores.catalog, rules=settings.rules())


def create_catalog_importer(settings: Settings, stores: Stores | None = None) -> CatalogImporter:
    """Create a CatalogImporter writing into the configured card store."""
    stores = stores or create_stores(settings)
    return CatalogImporter(stores.catalog, rules=settings.rules().catalog)
