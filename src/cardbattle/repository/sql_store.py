"""SQLAlchemy-backed repositories for battles and catalog cards."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pydantic import TypeAdapter
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from cardbattle.domain import models as dm
from cardbattle.domain.errors import ConflictError, NotFoundError
from cardbattle.models import BattleCardRow, BattleRow, CardRow

logger = logging.getLogger(__name__)

BATTLE_ADAPTER: TypeAdapter[dm.Battle] = TypeAdapter(dm.Battle)
CARD_ADAPTER: TypeAdapter[dm.Card] = TypeAdapter(dm.Card)


class SqlBattleRepository:
    """Store battles as rows whose ``version`` column guards every update."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _to_domain(row: BattleRow) -> dm.Battle:
        battle = BATTLE_ADAPTER.validate_python(row.payload)
        battle.version = row.version
        return battle

    @staticmethod
    def _fill_row(row: BattleRow, battle: dm.Battle) -> None:
        row.player_one_id = battle.player_one_id
        row.player_two_id = battle.player_two_id
        row.state = str(battle.state)
        row.payload = BATTLE_ADAPTER.dump_python(battle, mode="json")

    @staticmethod
    def _index_cards(session: Session, battle: dm.Battle, known: Iterable[str] = ()) -> None:
        indexed = set(known)
        for card in (*battle.player_one_cards, *battle.player_two_cards):
            if card.id not in indexed:
                session.add(BattleCardRow(id=card.id, battle_id=battle.id))

    def add(self, battle: dm.Battle) -> dm.Battle:
        with self._session_factory() as session:
            row = BattleRow(id=battle.id)
            self._fill_row(row, battle)
            session.add(row)
            self._index_cards(session, battle)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError(f"battle {battle.id} already exists") from exc
            battle.version = row.version
        return battle

    def get(self, battle_id: dm.BattleID) -> dm.Battle:
        with self._session_factory() as session:
            row = session.get(BattleRow, battle_id)
            if row is None:
                raise NotFoundError(f"battle {battle_id} not found")
            return self._to_domain(row)

    def save(self, battle: dm.Battle) -> dm.Battle:
        with self._session_factory() as session:
            row = session.get(BattleRow, battle.id)
            if row is None:
                raise NotFoundError(f"battle {battle.id} not found")
            if row.version != battle.version:
                logger.warning(
                    "battle %s: write at version %s lost to version %s",
                    battle.id,
                    battle.version,
                    row.version,
                )
                raise ConflictError(
                    f"battle {battle.id} changed since it was read "
                    f"(read version {battle.version}, stored {row.version})"
                )
            self._fill_row(row, battle)
            known = session.scalars(
                select(BattleCardRow.id).where(BattleCardRow.battle_id == battle.id)
            )
            self._index_cards(session, battle, known)
            try:
                session.commit()
            except StaleDataError as exc:
                session.rollback()
                logger.warning("battle %s: concurrent update detected on commit", battle.id)
                raise ConflictError(f"battle {battle.id} changed while saving") from exc
            battle.version = row.version
        return battle

    def list_for_player(self, player_id: dm.PlayerID) -> list[dm.Battle]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(BattleRow)
                .where(
                    or_(BattleRow.player_one_id == player_id, BattleRow.player_two_id == player_id)
                )
                .order_by(BattleRow.created_at, BattleRow.id)
            ).all()
            return [self._to_domain(row) for row in rows]

    def find_by_battle_card(self, battle_card_id: dm.BattleCardID) -> dm.Battle:
        with self._session_factory() as session:
            row = session.scalars(
                select(BattleRow)
                .join(BattleCardRow, BattleCardRow.battle_id == BattleRow.id)
                .where(BattleCardRow.id == battle_card_id)
            ).first()
            if row is None:
                raise NotFoundError(f"no battle contains battle card {battle_card_id}")
            return self._to_domain(row)


class SqlCardCatalog:
    """Store normalized catalog cards in the ``cards`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, card_id: dm.CardID) -> dm.Card:
        with self._session_factory() as session:
            row = session.get(CardRow, card_id)
            if row is None:
                raise NotFoundError(f"card {card_id} not found")
            return CARD_ADAPTER.validate_python(row.payload)

    def get_many(self, card_ids: Sequence[dm.CardID]) -> list[dm.Card]:
        with self._session_factory() as session:
            rows = session.scalars(select(CardRow).where(CardRow.id.in_(set(card_ids)))).all()
            cards = {row.id: CARD_ADAPTER.validate_python(row.payload) for row in rows}
        missing = sorted({card_id for card_id in card_ids if card_id not in cards})
        if missing:
            raise NotFoundError(f"cards not found: {', '.join(missing)}")
        return [cards[card_id] for card_id in card_ids]

    def list_cards(self) -> list[dm.Card]:
        with self._session_factory() as session:
            rows = session.scalars(select(CardRow).order_by(CardRow.id)).all()
            return [CARD_ADAPTER.validate_python(row.payload) for row in rows]

    def upsert_many(self, cards: Iterable[dm.Card]) -> int:
        written = 0
        with self._session_factory() as session:
            for card in cards:
                session.merge(
                    CardRow(
                        id=card.id,
                        name=card.name,
                        payload=CARD_ADAPTER.dump_python(card, mode="json"),
                    )
                )
                written += 1
            session.commit()
        return written
