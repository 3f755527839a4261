"""Persistence protocols consumed by the battle engine.

Any store that satisfies these protocols can back
:class:`~cardbattle.services.battle_service.BattleService`; the repository
package ships JSON-snapshot and SQLAlchemy implementations.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from cardbattle.domain.models import Battle, BattleCardID, BattleID, Card, CardID, PlayerID


class IBattleRepository(Protocol):
    """Storage for battle aggregates with conditional writes."""

    def add(self, battle: Battle) -> Battle:
        """Persist a new battle.

        Raises:
            ConflictError: if a battle with the same id already exists
        """
        ...

    def get(self, battle_id: BattleID) -> Battle:
        """Load a battle.

        Raises:
            NotFoundError: if the battle does not exist
        """
        ...

    def save(self, battle: Battle) -> Battle:
        """Write the battle's full state if the stored version equals ``battle.version``.

        On success the version is bumped on both the stored copy and ``battle``.

        Raises:
            ConflictError: if another writer saved the battle since it was read
            NotFoundError: if the battle does not exist
        """
        ...

    def list_for_player(self, player_id: PlayerID) -> list[Battle]:
        """Return every battle in which the player takes part."""
        ...

    def find_by_battle_card(self, battle_card_id: BattleCardID) -> Battle:
        """Return the battle that owns the given battle card.

        Raises:
            NotFoundError: if no battle contains the card
        """
        ...


class ICardCatalog(Protocol):
    """Read/write access to normalized catalog cards."""

    def get(self, card_id: CardID) -> Card:
        """Load a card or raise ``NotFoundError``."""
        ...

    def get_many(self, card_ids: Sequence[CardID]) -> list[Card]:
        """Load cards in request order, repeating duplicates.

        Raises:
            NotFoundError: listing every id that does not resolve
        """
        ...

    def list_cards(self) -> list[Card]:
        """Return every card ordered by id."""
        ...

    def upsert_many(self, cards: Iterable[Card]) -> int:
        """Insert or replace cards by id and return how many were written."""
        ...
