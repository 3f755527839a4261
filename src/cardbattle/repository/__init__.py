"""Persistence adapters for battles and catalog cards."""

from cardbattle.repository.json_store import JsonBattleRepository, JsonCardCatalog
from cardbattle.repository.sql_store import SqlBattleRepository, SqlCardCatalog

__all__ = [
    "JsonBattleRepository",
    "JsonCardCatalog",
    "SqlBattleRepository",
    "SqlCardCatalog",
]
