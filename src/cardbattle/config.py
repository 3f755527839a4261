"""Application settings for the card battle engine."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardbattle.domain.rules_config import (
    CREATURE_CATEGORY,
    BattleRules,
    CatalogRules,
    RulesConfig,
)


class Settings(BaseSettings):
    """Runtime settings, read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="CARDBATTLE_", env_file=".env", env_file_encoding="utf-8"
    )

    data_dir: Path = Field(default=Path("data"), description="Where JSON snapshots live")
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL; when set, battles and cards are stored in SQL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")
    max_rounds: int = Field(
        default=50, gt=0, description="Rounds after which a battle ends in a draw"
    )
    creature_category: str = Field(
        default=CREATURE_CATEGORY, description="Catalog supertype eligible for battle"
    )
    catalog_files: list[Path] = Field(
        default_factory=list, description="Raw card files imported on API startup"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:8080", "http://127.0.0.1:8080"],
        description="Origins allowed to call the HTTP API",
    )

    def rules(self) -> RulesConfig:
        """Build the domain rule configuration from these settings."""

        return RulesConfig(
            catalog=CatalogRules(creature_category=self.creature_category),
            battle=BattleRules(max_rounds=self.max_rounds),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
