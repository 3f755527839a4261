"""Unit tests for card normalization."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cardbattle.domain import cards
from cardbattle.domain.errors import CardDataError, ValidationError


def test_first_damaging_attack_becomes_canonical(raw_factory):
    card = cards.normalize(raw_factory())

    assert card is not None
    assert card.id == "base1-4"
    assert card.attack.name == "Fire Spin"
    assert card.attack.damage == 100
    assert card.hp == 120
    assert card.level == 76
    assert card.rarity == "Rare Holo"
    assert card.images == {"small": "https://images.example/base1-4.png"}


def test_damage_modifiers_are_stripped(raw_factory):
    raw = raw_factory(attacks=[{"name": "Scratch", "damage": "30+"}])
    assert cards.normalize(raw).attack.damage == 30

    raw = raw_factory(attacks=[{"name": "Double Kick", "damage": "20×"}])
    assert cards.normalize(raw).attack.damage == 20


@pytest.mark.parametrize("supertype", ["Trainer", "Energy", None])
def test_non_creature_records_are_dropped(raw_factory, supertype):
    assert cards.normalize(raw_factory(supertype=supertype)) is None


@pytest.mark.parametrize(
    "attacks",
    [
        None,
        [],
        [{"name": "Growl", "damage": ""}],
        [{"name": "Growl", "damage": "   "}, {"name": "Leer"}],
    ],
)
def test_creatures_without_damaging_attack_are_dropped(raw_factory, attacks):
    assert cards.normalize(raw_factory(attacks=attacks)) is None


def test_custom_creature_category(raw_factory):
    raw = raw_factory(supertype="Monster")
    assert cards.normalize(raw) is None
    assert cards.normalize(raw, creature_category="Monster") is not None


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"hp": None}, "hp"),
        ({"hp": "lots"}, "hp"),
        ({"hp": "0"}, "hp"),
        ({"level": None}, "level"),
        ({"level": "X"}, "level"),
        ({"attacks": [{"name": "Splash", "damage": "?"}]}, "attack.damage"),
        ({"name": ""}, "name"),
        ({"images": "https://images.example/base1-4.png"}, "images"),
        ({"rarity": 3}, "rarity"),
    ],
)
def test_malformed_eligible_records_raise(raw_factory, overrides, field):
    with pytest.raises(CardDataError) as excinfo:
        cards.normalize(raw_factory(**overrides))

    assert excinfo.value.field == field
    assert excinfo.value.record_id == "base1-4"
    assert isinstance(excinfo.value, ValidationError)


def test_normalize_catalog_reports_per_record(raw_factory):
    batch = cards.normalize_catalog(
        [
            raw_factory("base1-1"),
            raw_factory("base1-2", supertype="Trainer"),
            raw_factory("base1-3", hp="??"),
            raw_factory("base1-5"),
        ]
    )

    assert [card.id for card in batch.cards] == ["base1-1", "base1-5"]
    assert batch.skipped == 1
    assert len(batch.errors) == 1
    assert batch.errors[0].record_id == "base1-3"


_attack = st.fixed_dictionaries(
    {
        "name": st.text(max_size=8),
        "damage": st.one_of(
            st.none(),
            st.just(""),
            st.just("  "),
            st.integers(min_value=0, max_value=300).map(str),
            st.integers(min_value=0, max_value=300).map(lambda n: f"{n}+"),
        ),
    }
)


@given(
    supertype=st.sampled_from(["Pokémon", "Trainer", "Energy"]),
    attacks=st.lists(_attack, max_size=4),
)
def test_accepts_iff_creature_with_damaging_attack(supertype, attacks):
    raw = {
        "id": "prop-1",
        "name": "Prop",
        "supertype": supertype,
        "level": "10",
        "hp": "40",
        "attacks": attacks,
    }
    expected = supertype == "Pokémon" and any(
        attack["damage"] is not None and attack["damage"].strip() for attack in attacks
    )

    card = cards.normalize(raw)

    assert (card is not None) == expected
    assert cards.is_eligible(raw) == expected
    if card is not None:
        assert isinstance(card.attack.damage, int)
        assert card.attack.damage >= 0
