"""Enumerations used by the battle engine."""

from __future__ import annotations

from enum import StrEnum


class BattleState(StrEnum):
    """Battle lifecycle states."""

    REQUESTED = "requested"
    ACTIVE = "active"
    COMPLETED = "completed"


class RoundOutcome(StrEnum):
    """Local winner of a single resolved round."""

    PLAYER_ONE = "player_one"
    PLAYER_TWO = "player_two"
    TIE = "tie"
