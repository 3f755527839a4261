"""JSON-based repositories for battles and catalog cards."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import TypeAdapter

from cardbattle.domain import models as dm
from cardbattle.domain.errors import ConflictError, NotFoundError
from cardbattle.domain.roster import find_battle_card

logger = logging.getLogger(__name__)


def _write_atomic(path: Path, payload: bytes) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_bytes(payload)
    tmp.replace(path)


class JsonBattleRepository:
    """Persist battles as JSON snapshots on disk, one file per battle.

    Writes are conditional on the stored ``version``; the compare and the write
    happen under a lock so two savers in this process cannot both win.
    """

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[dm.Battle] = TypeAdapter(dm.Battle)
        self._lock = threading.Lock()

    def _path_for(self, battle_id: dm.BattleID) -> Path:
        return self.base_path / f"battle_{battle_id}.json"

    def _read(self, battle_id: dm.BattleID) -> dm.Battle:
        path = self._path_for(battle_id)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(f"battle {battle_id} not found") from exc
        return self._adapter.validate_json(data)

    def _write(self, battle: dm.Battle) -> Path:
        path = self._path_for(battle.id)
        _write_atomic(path, self._adapter.dump_json(battle, indent=2))
        return path

    def add(self, battle: dm.Battle) -> dm.Battle:
        """Persist a new battle snapshot."""

        with self._lock:
            if self._path_for(battle.id).exists():
                raise ConflictError(f"battle {battle.id} already exists")
            self._write(battle)
        return battle

    def get(self, battle_id: dm.BattleID) -> dm.Battle:
        """Load a previously saved battle snapshot."""

        return self._read(battle_id)

    def save(self, battle: dm.Battle) -> dm.Battle:
        """Write the battle if nobody else saved it since it was read."""

        with self._lock:
            stored = self._read(battle.id)
            if stored.version != battle.version:
                logger.warning(
                    "battle %s: write at version %s lost to version %s",
                    battle.id,
                    battle.version,
                    stored.version,
                )
                raise ConflictError(
                    f"battle {battle.id} changed since it was read "
                    f"(read version {battle.version}, stored {stored.version})"
                )
            battle.version += 1
            try:
                self._write(battle)
            except OSError:
                battle.version -= 1
                raise
        return battle

    def list_battles(self) -> list[dm.Battle]:
        """Return every persisted battle ordered by creation time."""

        battles: list[dm.Battle] = []
        for path in self.base_path.glob("battle_*.json"):
            try:
                battles.append(self._adapter.validate_json(path.read_bytes()))
            except FileNotFoundError:  # pragma: no cover - removed while listing
                continue
        return sorted(battles, key=lambda battle: (battle.created_at, battle.id))

    def list_for_player(self, player_id: dm.PlayerID) -> list[dm.Battle]:
        return [battle for battle in self.list_battles() if battle.involves(player_id)]

    def find_by_battle_card(self, battle_card_id: dm.BattleCardID) -> dm.Battle:
        for battle in self.list_battles():
            if find_battle_card(battle, battle_card_id) is not None:
                return battle
        raise NotFoundError(f"no battle contains battle card {battle_card_id}")


class JsonCardCatalog:
    """Persist normalized catalog cards in a single JSON document."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[dict[str, dm.Card]] = TypeAdapter(dict[str, dm.Card])
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self.base_path / "cards.json"

    def _load_all(self) -> dict[str, dm.Card]:
        if not self.path.exists():
            return {}
        return self._adapter.validate_json(self.path.read_bytes())

    def get(self, card_id: dm.CardID) -> dm.Card:
        card = self._load_all().get(card_id)
        if card is None:
            raise NotFoundError(f"card {card_id} not found")
        return card

    def get_many(self, card_ids: Sequence[dm.CardID]) -> list[dm.Card]:
        cards = self._load_all()
        missing = sorted({card_id for card_id in card_ids if card_id not in cards})
        if missing:
            raise NotFoundError(f"cards not found: {', '.join(missing)}")
        return [cards[card_id] for card_id in card_ids]

    def list_cards(self) -> list[dm.Card]:
        cards = self._load_all()
        return [cards[card_id] for card_id in sorted(cards)]

    def upsert_many(self, cards: Iterable[dm.Card]) -> int:
        with self._lock:
            stored = self._load_all()
            written = 0
            for card in cards:
                stored[card.id] = card
                written += 1
            _write_atomic(self.path, self._adapter.dump_json(stored, indent=2))
        return written
