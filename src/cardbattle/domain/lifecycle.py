"""Battle lifecycle rules.

``REQUESTED`` battles hold player one's roster and wait for an opponent.
Joining moves the battle to ``ACTIVE``; each round needs one card from each
player, in either order.  After every resolved round the battle completes if a
roster is wiped out or the round cap is reached.  ``COMPLETED`` is terminal.

All mutations go through :func:`apply_update`, which re-checks the state for
every update type so a transition can never be half applied.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from cardbattle.domain.enums import BattleState, RoundOutcome
from cardbattle.domain.errors import (
    InvalidTransitionError,
    StaleSubmissionError,
    ValidationError,
)
from cardbattle.domain.models import (
    Battle,
    BattleCard,
    BattleCardID,
    BattleID,
    BattleUpdate,
    Card,
    CardSubmission,
    Completion,
    PlayerID,
    RosterJoin,
    RoundAppend,
    RoundRecord,
    new_battle_id,
    utc_now,
)
from cardbattle.domain.roster import (
    require_battle_card,
    resolve_submission,
    roster_alive,
    roster_for,
)
from cardbattle.domain.rounds import Side, resolve_round
from cardbattle.domain.rules_config import DEFAULT_RULES, BattleRules

_OUTCOMES = {
    Side.A: RoundOutcome.PLAYER_ONE,
    Side.B: RoundOutcome.PLAYER_TWO,
    None: RoundOutcome.TIE,
}


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """What a single submission changed."""

    round: RoundRecord | None = None
    completion: Completion | None = None
    duplicate: bool = False

    @property
    def resolved(self) -> bool:
        return self.round is not None


def build_roster(cards: Sequence[Card]) -> list[BattleCard]:
    """Copy catalog cards into fresh battle cards, preserving order."""

    return [BattleCard.from_card(card) for card in cards]


def create_battle(
    player_one_id: PlayerID,
    cards: Sequence[Card],
    *,
    battle_id: BattleID | None = None,
) -> Battle:
    """Create a ``REQUESTED`` battle holding player one's roster."""

    if not cards:
        raise ValidationError("player one roster must contain at least one card")
    return Battle(
        id=battle_id or new_battle_id(),
        player_one_id=player_one_id,
        player_one_cards=build_roster(cards),
    )


def join_battle(battle: Battle, player_two_id: PlayerID, cards: Sequence[Card]) -> RosterJoin:
    """Commit the opponent's roster and activate the battle."""

    _require_state(battle, BattleState.REQUESTED, "join")
    if player_two_id == battle.player_one_id:
        raise ValidationError("a player cannot join their own battle")
    if not cards:
        raise ValidationError("player two roster must contain at least one card")

    update = RosterJoin(player_two_id=player_two_id, player_two_cards=tuple(build_roster(cards)))
    apply_update(battle, update)
    return update


def submit_card(
    battle: Battle,
    player_id: PlayerID,
    battle_card_id: BattleCardID,
    round_index: int,
    *,
    rules: BattleRules = DEFAULT_RULES.battle,
) -> SubmissionResult:
    """Record a player's card for ``round_index`` and resolve the round when both are in."""

    _require_state(battle, BattleState.ACTIVE, "submit a round")
    roster_for(battle, player_id)

    current = battle.current_round_index
    if round_index < current:
        raise StaleSubmissionError(f"round {round_index} of battle {battle.id} is already resolved")
    if round_index > current:
        raise ValidationError(f"round {round_index} is not open; current round is {current}")

    card = resolve_submission(battle, player_id, battle_card_id)
    existing = battle.pending.get(player_id)
    if existing is not None:
        if existing == card.id:
            return SubmissionResult(duplicate=True)
        raise ValidationError(f"player {player_id} already submitted a card for round {current}")

    apply_update(battle, CardSubmission(player_id=player_id, battle_card_id=card.id))
    if len(battle.pending) < 2:
        return SubmissionResult()

    record = _resolve_pending(battle)
    completion = evaluate_completion(battle, rules)
    if completion is not None:
        apply_update(battle, completion)
    return SubmissionResult(round=record, completion=completion)


def evaluate_completion(
    battle: Battle, rules: BattleRules = DEFAULT_RULES.battle
) -> Completion | None:
    """Return the terminal update the battle has earned, if any."""

    if battle.state != BattleState.ACTIVE or battle.player_two_id is None:
        return None

    one_alive = roster_alive(battle.player_one_cards)
    two_alive = roster_alive(battle.player_two_cards)
    if not one_alive and not two_alive:
        return Completion(winner_id=None)
    if not one_alive:
        return Completion(winner_id=battle.player_two_id)
    if not two_alive:
        return Completion(winner_id=battle.player_one_id)
    if len(battle.rounds) >= rules.max_rounds:
        return Completion(winner_id=None)
    return None


def apply_update(battle: Battle, update: BattleUpdate) -> None:
    """Apply a single partial update, enforcing the state it requires."""

    if isinstance(update, RosterJoin):
        _require_state(battle, BattleState.REQUESTED, "join")
        battle.player_two_id = update.player_two_id
        battle.player_two_cards = list(update.player_two_cards)
        battle.state = BattleState.ACTIVE
    elif isinstance(update, CardSubmission):
        _require_state(battle, BattleState.ACTIVE, "submit a round")
        battle.pending[update.player_id] = update.battle_card_id
    elif isinstance(update, RoundAppend):
        _require_state(battle, BattleState.ACTIVE, "append a round")
        _apply_round(battle, update)
    elif isinstance(update, Completion):
        _require_state(battle, BattleState.ACTIVE, "complete")
        if update.winner_id is not None and update.winner_id not in battle.players:
            raise ValidationError(f"winner {update.winner_id} is not part of battle {battle.id}")
        battle.winner_id = update.winner_id
        battle.state = BattleState.COMPLETED
    else:  # pragma: no cover - exhaustive over BattleUpdate
        raise TypeError(f"unsupported update {update!r}")
    battle.updated_at = utc_now()


def _resolve_pending(battle: Battle) -> RoundRecord:
    if battle.player_two_id is None:
        raise InvalidTransitionError(f"battle {battle.id} has no opponent yet")
    one_card = require_battle_card(battle, battle.pending[battle.player_one_id])
    two_card = require_battle_card(battle, battle.pending[battle.player_two_id])

    result = resolve_round(one_card, two_card)
    record = RoundRecord(
        index=battle.current_round_index,
        player_one_card_id=one_card.id,
        player_two_card_id=two_card.id,
        damage_to_player_one=result.damage_to_a,
        damage_to_player_two=result.damage_to_b,
        outcome=_OUTCOMES[result.winner],
    )
    apply_update(
        battle,
        RoundAppend(round=record, player_one_hp=result.hp_after_a, player_two_hp=result.hp_after_b),
    )
    return record


def _apply_round(battle: Battle, update: RoundAppend) -> None:
    record = update.round
    if record.index != battle.current_round_index:
        raise StaleSubmissionError(
            f"round {record.index} does not follow round count {battle.current_round_index}"
        )
    one_card = require_battle_card(battle, record.player_one_card_id)
    two_card = require_battle_card(battle, record.player_two_card_id)
    for card, hp in ((one_card, update.player_one_hp), (two_card, update.player_two_hp)):
        if not 0 <= hp <= card.current_hp:
            raise ValidationError(f"hp {hp} out of range for battle card {card.id}")

    one_card.current_hp = update.player_one_hp
    two_card.current_hp = update.player_two_hp
    battle.rounds.append(record)
    battle.pending.clear()


def _require_state(battle: Battle, expected: BattleState, action: str) -> None:
    if battle.state != expected:
        raise InvalidTransitionError(
            f"cannot {action} battle {battle.id} in state {battle.state}; expected {expected}"
        )
