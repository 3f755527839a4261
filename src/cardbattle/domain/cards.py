"""Card normalization rules.

A raw catalog record is battle-eligible when its ``supertype`` is the creature
category and at least one of its attacks carries a non-blank ``damage``.
Eligible records are projected to :class:`~cardbattle.domain.models.Card`
with the first such attack as the canonical one.  Ineligible records (trainer
and energy cards, attack-less creatures) are dropped silently; eligible records
with unusable numbers raise :class:`CardDataError`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from cardbattle.domain.errors import CardDataError
from cardbattle.domain.models import Attack, Card, CardID
from cardbattle.domain.rules_config import CREATURE_CATEGORY

# Catalog damage strings carry modifiers such as "30+" or "20×".
_LEADING_INT = re.compile(r"^\s*(\d+)")


@dataclass(slots=True)
class NormalizedBatch:
    """Outcome of normalizing a batch of raw records."""

    cards: list[Card] = field(default_factory=list)
    skipped: int = 0
    errors: list[CardDataError] = field(default_factory=list)


def is_eligible(raw: Mapping[str, Any], *, creature_category: str = CREATURE_CATEGORY) -> bool:
    """Return ``True`` if the record is a creature with at least one damaging attack."""

    if raw.get("supertype") != creature_category:
        return False
    return _first_damaging_attack(raw) is not None


def normalize(
    raw: Mapping[str, Any], *, creature_category: str = CREATURE_CATEGORY
) -> Card | None:
    """Project a raw catalog record to a battle card, or ``None`` if ineligible."""

    if raw.get("supertype") != creature_category:
        return None
    raw_attack = _first_damaging_attack(raw)
    if raw_attack is None:
        return None

    record_id = raw.get("id")
    if record_id is None or not str(record_id).strip():
        raise CardDataError(record_id, "id", "is missing")
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise CardDataError(record_id, "name", "is missing")

    attack = Attack(
        name=str(raw_attack.get("name") or ""),
        damage=_parse_int(record_id, "attack.damage", raw_attack.get("damage")),
    )

    hp = _parse_int(record_id, "hp", raw.get("hp"))
    if hp <= 0:
        raise CardDataError(record_id, "hp", f"must be positive, got {hp}")

    rarity = raw.get("rarity")
    if rarity is not None and not isinstance(rarity, str):
        raise CardDataError(record_id, "rarity", f"is not text: {rarity!r}")
    images = raw.get("images")
    if images is not None and not isinstance(images, Mapping):
        raise CardDataError(record_id, "images", f"is not a mapping: {images!r}")

    return Card(
        id=CardID(str(record_id)),
        name=name,
        level=_parse_int(record_id, "level", raw.get("level")),
        hp=hp,
        attack=attack,
        rarity=rarity,
        images={str(key): value for key, value in images.items()} if images is not None else None,
    )


def normalize_catalog(
    records: Iterable[Mapping[str, Any]], *, creature_category: str = CREATURE_CATEGORY
) -> NormalizedBatch:
    """Normalize a batch; malformed records are collected, not raised."""

    batch = NormalizedBatch()
    for raw in records:
        try:
            card = normalize(raw, creature_category=creature_category)
        except CardDataError as exc:
            batch.errors.append(exc)
            continue
        if card is None:
            batch.skipped += 1
        else:
            batch.cards.append(card)
    return batch


def _first_damaging_attack(raw: Mapping[str, Any]) -> Mapping[str, Any] | None:
    attacks = raw.get("attacks")
    if not isinstance(attacks, list):
        return None
    for attack in attacks:
        if not isinstance(attack, Mapping):
            continue
        damage = attack.get("damage")
        if damage is not None and str(damage).strip():
            return attack
    return None


def _parse_int(record_id: object, field_name: str, value: object) -> int:
    if value is None:
        raise CardDataError(record_id, field_name, "is missing")
    if isinstance(value, bool):
        raise CardDataError(record_id, field_name, f"is not numeric: {value!r}")
    if isinstance(value, int):
        parsed = value
    else:
        match = _LEADING_INT.match(str(value))
        if match is None:
            raise CardDataError(record_id, field_name, f"is not numeric: {value!r}")
        parsed = int(match.group(1))
    if parsed < 0:
        raise CardDataError(record_id, field_name, f"must not be negative, got {parsed}")
    return parsed
