"""Integration tests for the SQL-backed stores.

Each test runs against a fresh SQLite file under ``tmp_path`` so the
version column and constraints behave as they would in production.
"""

import pytest
from sqlalchemy import func, inspect, select

from cardbattle.database import (
    check_database_health,
    create_db_engine,
    create_session_factory,
    init_db,
)
from cardbattle.domain import lifecycle
from cardbattle.domain import models as dm
from cardbattle.domain.enums import BattleState
from cardbattle.domain.errors import ConflictError, NotFoundError
from cardbattle.models import BattleCardRow
from cardbattle.repository import SqlBattleRepository, SqlCardCatalog

ASH = dm.PlayerID("ash")
GARY = dm.PlayerID("gary")


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'battles.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def battles(session_factory):
    return SqlBattleRepository(session_factory)


@pytest.fixture
def catalog(session_factory):
    return SqlCardCatalog(session_factory)


def test_schema_created(engine):
    tables = set(inspect(engine).get_table_names())

    assert {"battles", "battle_cards", "cards"} <= tables
    assert check_database_health(engine)


def test_add_and_get_battle(battles, cards):
    battle = lifecycle.create_battle(ASH, [cards["x"], cards["y"]])

    battles.add(battle)

    loaded = battles.get(battle.id)
    assert loaded.id == battle.id
    assert loaded.state == BattleState.REQUESTED
    assert loaded.player_one_cards == battle.player_one_cards
    assert loaded.version == battle.version == 1


def test_add_duplicate_battle_conflicts(battles, cards):
    battle = lifecycle.create_battle(ASH, [cards["x"]])
    battles.add(battle)

    with pytest.raises(ConflictError):
        battles.add(lifecycle.create_battle(ASH, [cards["x"]], battle_id=battle.id))


def test_get_missing_battle(battles):
    with pytest.raises(NotFoundError):
        battles.get(dm.BattleID("missing"))


def test_save_round_trip(battles, cards):
    battle = battles.add(lifecycle.create_battle(ASH, [cards["brute"]]))
    lifecycle.join_battle(battle, GARY, [cards["weakling"]])
    battles.save(battle)

    lifecycle.submit_card(battle, ASH, battle.player_one_cards[0].id, 0)
    lifecycle.submit_card(battle, GARY, battle.player_two_cards[0].id, 0)
    battles.save(battle)

    loaded = battles.get(battle.id)
    assert loaded.version == 3
    assert len(loaded.rounds) == 1
    assert loaded.player_two_cards[0].current_hp == 10
    assert loaded.pending == {}


def test_concurrent_writers_conflict(battles, cards):
    battle = battles.add(lifecycle.create_battle(ASH, [cards["x"]]))
    first = battles.get(battle.id)
    second = battles.get(battle.id)

    lifecycle.join_battle(first, GARY, [cards["y"]])
    battles.save(first)

    lifecycle.join_battle(second, dm.PlayerID("misty"), [cards["glass"]])
    with pytest.raises(ConflictError):
        battles.save(second)

    stored = battles.get(battle.id)
    assert stored.player_two_id == GARY
    assert stored.version == 2


def test_list_for_player_and_find_card(battles, cards):
    mine = battles.add(lifecycle.create_battle(ASH, [cards["x"]]))
    theirs = lifecycle.create_battle(GARY, [cards["y"]])
    lifecycle.join_battle(theirs, ASH, [cards["brute"]])
    battles.add(theirs)
    battles.add(lifecycle.create_battle(dm.PlayerID("misty"), [cards["glass"]]))

    assert {battle.id for battle in battles.list_for_player(ASH)} == {mine.id, theirs.id}
    assert battles.find_by_battle_card(theirs.player_two_cards[0].id).id == theirs.id
    with pytest.raises(NotFoundError):
        battles.find_by_battle_card(dm.BattleCardID("nope"))


def test_catalog_store(catalog, cards, card_factory):
    assert catalog.upsert_many(cards.values()) == len(cards)
    catalog.upsert_many([card_factory("x", hp=99)])

    assert catalog.get(dm.CardID("x")).hp == 99
    assert [card.id for card in catalog.get_many([dm.CardID("y"), dm.CardID("y")])] == ["y", "y"]
    assert [card.id for card in catalog.list_cards()] == sorted(cards)
    with pytest.raises(NotFoundError, match="ghost"):
        catalog.get_many([dm.CardID("x"), dm.CardID("ghost")])


def test_battle_cards_are_indexed_as_rosters_grow(battles, session_factory, cards):
    battle = battles.add(lifecycle.create_battle(ASH, [cards["x"], cards["x"]]))
    lifecycle.join_battle(battle, GARY, [cards["y"]])
    battles.save(battle)
    lifecycle.submit_card(battle, GARY, battle.player_two_cards[0].id, 0)
    battles.save(battle)

    with session_factory() as session:
        indexed = session.scalar(
            select(func.count())
            .select_from(BattleCardRow)
            .where(BattleCardRow.battle_id == battle.id)
        )
    assert indexed == 3

    found = battles.find_by_battle_card(battle.player_two_cards[0].id)
    assert found.id == battle.id
    assert found.pending == {GARY: battle.player_two_cards[0].id}
