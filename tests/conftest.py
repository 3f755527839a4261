"""Pytest configuration shared by unit and integration tests.

Adds the `src/` directory to `sys.path` so tests can import the
`cardbattle` package without requiring an editable install, and provides
small builders for catalog cards and raw catalog records.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from cardbattle.domain import models as dm  # noqa: E402


def make_card(card_id: str, *, hp: int = 60, damage: int = 20, name: str | None = None) -> dm.Card:
    return dm.Card(
        id=dm.CardID(card_id),
        name=name or card_id.title(),
        level=12,
        hp=hp,
        attack=dm.Attack(name="Tackle", damage=damage),
        rarity="Common",
        images={"small": f"https://images.example/{card_id}.png"},
    )


def raw_record(card_id: str = "base1-4", **overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "id": card_id,
        "name": "Charizard",
        "supertype": "Pokémon",
        "level": "76",
        "hp": "120",
        "attacks": [
            {"name": "Energy Burn", "damage": ""},
            {"name": "Fire Spin", "damage": "100"},
        ],
        "rarity": "Rare Holo",
        "images": {"small": "https://images.example/base1-4.png"},
    }
    record.update(overrides)
    return record


@pytest.fixture
def cards() -> dict[str, dm.Card]:
    return {
        "x": make_card("x", hp=60, damage=20),
        "y": make_card("y", hp=50, damage=30),
        "brute": make_card("brute", hp=60, damage=40),
        "weakling": make_card("weakling", hp=50, damage=10),
        "glass": make_card("glass", hp=10, damage=30),
    }


@pytest.fixture
def card_factory():
    return make_card


@pytest.fixture
def raw_factory():
    return raw_record
