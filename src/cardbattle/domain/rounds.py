"""Round resolution rules.

Both cards strike at the same time: each side's damage is computed from the
pre-round hit points, so the result does not depend on argument order.  The
round goes to the card left standing with more hit points; equal remainders,
including a double knockout, are a tie.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from cardbattle.domain.models import BattleCard


class Side(StrEnum):
    """Argument position in :func:`resolve_round`."""

    A = "a"
    B = "b"


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Damage and survivors of a single simultaneous exchange."""

    damage_to_a: int
    damage_to_b: int
    hp_after_a: int
    hp_after_b: int
    winner: Side | None

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    def swapped(self) -> RoundResult:
        """Return the same result viewed from the other side."""

        winner = None
        if self.winner is Side.A:
            winner = Side.B
        elif self.winner is Side.B:
            winner = Side.A
        return RoundResult(
            damage_to_a=self.damage_to_b,
            damage_to_b=self.damage_to_a,
            hp_after_a=self.hp_after_b,
            hp_after_b=self.hp_after_a,
            winner=winner,
        )


def resolve_round(card_a: BattleCard, card_b: BattleCard) -> RoundResult:
    """Resolve one exchange without mutating either card."""

    damage_to_a = min(card_b.attack.damage, card_a.current_hp)
    damage_to_b = min(card_a.attack.damage, card_b.current_hp)
    hp_after_a = card_a.current_hp - damage_to_a
    hp_after_b = card_b.current_hp - damage_to_b

    # A lone survivor always has more hp left; a double knockout is 0 == 0.
    if hp_after_a > hp_after_b:
        winner: Side | None = Side.A
    elif hp_after_b > hp_after_a:
        winner = Side.B
    else:
        winner = None

    return RoundResult(
        damage_to_a=damage_to_a,
        damage_to_b=damage_to_b,
        hp_after_a=hp_after_a,
        hp_after_b=hp_after_b,
        winner=winner,
    )
