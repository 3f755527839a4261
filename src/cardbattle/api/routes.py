"""HTTP routes for the card battle API.

The caller's identity arrives already authenticated in the ``X-Player-Id``
header; token handling happens upstream of this service.  Engine errors are
translated to HTTP responses by the handlers in :mod:`cardbattle.api.errors`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from pydantic import BaseModel, Field

from cardbattle.api.runtime import (
    ApiState,
    battle_card_to_dict,
    battle_to_dict,
    card_to_dict,
    round_to_dict,
)
from cardbattle.domain import models as dm

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


def get_player_id(x_player_id: Annotated[str, Header(min_length=1)]) -> dm.PlayerID:
    return dm.PlayerID(x_player_id)


ApiStateDep = Annotated[ApiState, Depends(get_state)]
PlayerDep = Annotated[dm.PlayerID, Depends(get_player_id)]


class AttackSummary(BaseModel):
    name: str
    damage: int


class CardSummary(BaseModel):
    id: str
    name: str
    level: int
    hp: int
    attack: AttackSummary
    rarity: str | None
    images: dict[str, object] | None


class BattleCardSummary(CardSummary):
    card_id: str
    current_hp: int
    eliminated: bool


class RoundSummary(BaseModel):
    index: int
    player_one_card_id: str
    player_two_card_id: str
    damage_to_player_one: int
    damage_to_player_two: int
    outcome: str


class BattleDetail(BaseModel):
    id: str
    state: str
    player_one_id: str
    player_two_id: str | None
    player_one_cards: list[BattleCardSummary]
    player_two_cards: list[BattleCardSummary]
    rounds: list[RoundSummary]
    current_round_index: int
    submitted_players: list[str]
    winner_id: str | None
    version: int
    created_at: str
    updated_at: str


class RosterRequest(BaseModel):
    card_ids: list[str]


class RoundSubmissionRequest(BaseModel):
    battle_card_id: str = Field(min_length=1)
    round_index: int = Field(ge=0)


class RoundSubmissionResponse(BaseModel):
    battle: BattleDetail
    resolved_round: RoundSummary | None
    completed: bool
    duplicate: bool


class BattleCardLookup(BaseModel):
    battle_id: str
    battle_card: BattleCardSummary


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "storage": "sql" if state.settings.database_url else "json",
        "max_rounds": state.settings.max_rounds,
    }


@router.get("/cards", response_model=list[CardSummary])
async def list_cards(state: ApiStateDep) -> list[CardSummary]:
    return [CardSummary.model_validate(card_to_dict(card)) for card in state.battles.list_cards()]


@router.get("/cards/{card_id}", response_model=CardSummary)
async def get_card(card_id: str, state: ApiStateDep) -> CardSummary:
    card = state.battles.get_card(dm.CardID(card_id))
    return CardSummary.model_validate(card_to_dict(card))


@router.post("/battles", response_model=BattleDetail, status_code=status.HTTP_201_CREATED)
async def create_battle(
    request: RosterRequest, player_id: PlayerDep, state: ApiStateDep
) -> BattleDetail:
    battle = state.battles.create_battle(player_id, [dm.CardID(cid) for cid in request.card_ids])
    return BattleDetail.model_validate(battle_to_dict(battle))


@router.get("/battles/{battle_id}", response_model=BattleDetail)
async def get_battle(battle_id: str, state: ApiStateDep) -> BattleDetail:
    battle = state.battles.get_battle(dm.BattleID(battle_id))
    return BattleDetail.model_validate(battle_to_dict(battle))


@router.post("/battles/{battle_id}/join", response_model=BattleDetail)
async def join_battle(
    battle_id: str, request: RosterRequest, player_id: PlayerDep, state: ApiStateDep
) -> BattleDetail:
    battle = state.battles.join_battle(
        dm.BattleID(battle_id), player_id, [dm.CardID(cid) for cid in request.card_ids]
    )
    return BattleDetail.model_validate(battle_to_dict(battle))


@router.post("/battles/{battle_id}/rounds", response_model=RoundSubmissionResponse)
async def submit_round(
    battle_id: str,
    request: RoundSubmissionRequest,
    player_id: PlayerDep,
    state: ApiStateDep,
) -> RoundSubmissionResponse:
    outcome = state.battles.submit_round(
        dm.BattleID(battle_id),
        player_id,
        dm.BattleCardID(request.battle_card_id),
        request.round_index,
    )
    detail = battle_to_dict(outcome.battle)
    resolved = outcome.result.round
    return RoundSubmissionResponse(
        battle=BattleDetail.model_validate(detail),
        resolved_round=(
            RoundSummary.model_validate(round_to_dict(resolved))
            if resolved is not None
            else None
        ),
        completed=outcome.result.completion is not None,
        duplicate=outcome.result.duplicate,
    )


@router.get("/players/{player_id}/battles", response_model=list[BattleDetail])
async def list_player_battles(player_id: str, state: ApiStateDep) -> list[BattleDetail]:
    battles = state.battles.list_player_battles(dm.PlayerID(player_id))
    return [BattleDetail.model_validate(battle_to_dict(battle)) for battle in battles]


@router.get("/battle-cards/{battle_card_id}", response_model=BattleCardLookup)
async def get_battle_card(battle_card_id: str, state: ApiStateDep) -> BattleCardLookup:
    battle, card = state.battles.get_battle_card(dm.BattleCardID(battle_card_id))
    return BattleCardLookup(
        battle_id=battle.id,
        battle_card=BattleCardSummary.model_validate(battle_card_to_dict(card)),
    )
