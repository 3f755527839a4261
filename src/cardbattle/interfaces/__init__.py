"""Protocol-based interfaces for the engine's collaborators.

This module exports the persistence protocols, providing a clear contract for
storage implementations and enabling dependency injection in tests.
"""

from cardbattle.interfaces.battle import IBattleRepository, ICardCatalog

__all__ = [
    "IBattleRepository",
    "ICardCatalog",
]
