"""Declarative rule configuration for the battle engine."""

from __future__ import annotations

from dataclasses import dataclass

CREATURE_CATEGORY = "Pokémon"


@dataclass(frozen=True, slots=True)
class CatalogRules:
    """Eligibility constants for raw catalog records."""

    creature_category: str = CREATURE_CATEGORY


@dataclass(frozen=True, slots=True)
class BattleRules:
    """Round and completion constants."""

    max_rounds: int = 50

    def __post_init__(self) -> None:
        if self.max_rounds <= 0:
            raise ValueError("max_rounds must be positive")


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for the engine."""

    catalog: CatalogRules = CatalogRules()
    battle: BattleRules = BattleRules()


DEFAULT_RULES = RulesConfig()
