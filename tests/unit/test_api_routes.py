"""Tests for the FastAPI layer over JSON storage."""

from __future__ import annotations

import json

import pytest
from httpx import ASGITransport, AsyncClient

from cardbattle.api.app import create_app
from cardbattle.api.runtime import ApiState
from cardbattle.config import Settings

ASH = {"X-Player-Id": "ash"}
GARY = {"X-Player-Id": "gary"}


def _make_app(tmp_path, raw_factory, **overrides):
    catalog_file = tmp_path / "base1.json"
    catalog_file.write_text(
        json.dumps(
            [
                raw_factory("base1-4"),
                raw_factory(
                    "base1-2",
                    name="Blastoise",
                    hp="60",
                    attacks=[{"name": "Hydro Pump", "damage": "30+"}],
                ),
                raw_factory("base1-91", name="Bill", supertype="Trainer", attacks=None),
            ]
        ),
        encoding="utf-8",
    )

    def factory() -> ApiState:
        settings = Settings(
            data_dir=tmp_path / "data", catalog_files=[catalog_file], **overrides
        )
        return ApiState(settings=settings)

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


async def _create_battle(client: AsyncClient, card_ids: list[str]) -> dict:
    response = await client.post("/battles", json={"card_ids": card_ids}, headers=ASH)
    assert response.status_code == 201
    payload = response.json()
    assert payload["state"] == "requested"
    assert payload["player_one_id"] == "ash"
    return payload


async def _submit(client: AsyncClient, battle_id: str, headers, card_id: str, index: int):
    return await client.post(
        f"/battles/{battle_id}/rounds",
        json={"battle_card_id": card_id, "round_index": index},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_battle_lifecycle_via_api(tmp_path, raw_factory):
    app, transport = _make_app(tmp_path, raw_factory)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["storage"] == "json"

        response = await client.get("/cards")
        assert [card["id"] for card in response.json()] == ["base1-2", "base1-4"]

        response = await client.get("/cards/base1-2")
        assert response.json()["attack"] == {"name": "Hydro Pump", "damage": 30}

        battle = await _create_battle(client, ["base1-4"])
        battle_id = battle["id"]

        response = await client.post(
            f"/battles/{battle_id}/join",
            json={"card_ids": ["base1-2", "base1-2"]},
            headers=GARY,
        )
        assert response.status_code == 200
        battle = response.json()
        assert battle["state"] == "active"
        ash_card = battle["player_one_cards"][0]["id"]
        gary_first, gary_second = (card["id"] for card in battle["player_two_cards"])
        assert gary_first != gary_second

        response = await _submit(client, battle_id, GARY, gary_first, 0)
        assert response.status_code == 200
        payload = response.json()
        assert payload["resolved_round"] is None
        assert payload["battle"]["submitted_players"] == ["gary"]
        assert "pending" not in payload["battle"]

        response = await _submit(client, battle_id, ASH, ash_card, 0)
        payload = response.json()
        assert payload["resolved_round"] == {
            "index": 0,
            "player_one_card_id": ash_card,
            "player_two_card_id": gary_first,
            "damage_to_player_one": 30,
            "damage_to_player_two": 60,
            "outcome": "player_one",
        }
        assert payload["completed"] is False
        assert payload["battle"]["current_round_index"] == 1
        assert payload["battle"]["submitted_players"] == []

        response = await _submit(client, battle_id, GARY, gary_first, 1)
        assert response.status_code == 422

        await _submit(client, battle_id, GARY, gary_second, 1)
        response = await _submit(client, battle_id, ASH, ash_card, 1)
        payload = response.json()
        assert payload["completed"] is True
        assert payload["battle"]["state"] == "completed"
        assert payload["battle"]["winner_id"] == "ash"
        assert payload["battle"]["player_one_cards"][0]["current_hp"] == 60

        response = await client.get(f"/battles/{battle_id}")
        assert response.json()["rounds"][1]["index"] == 1

        response = await client.get("/players/gary/battles")
        assert [item["id"] for item in response.json()] == [battle_id]

        response = await client.get(f"/battle-cards/{gary_second}")
        lookup = response.json()
        assert lookup["battle_id"] == battle_id
        assert lookup["battle_card"]["eliminated"] is True


@pytest.mark.asyncio
async def test_engine_errors_map_to_http(tmp_path, raw_factory):
    app, transport = _make_app(tmp_path, raw_factory)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post("/battles", json={"card_ids": ["base1-4"]})
        assert response.status_code == 422

        response = await client.post("/battles", json={"card_ids": []}, headers=ASH)
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

        response = await client.post(
            "/battles", json={"card_ids": ["base1-4", "ghost"]}, headers=ASH
        )
        assert response.status_code == 404
        assert "ghost" in response.json()["detail"]

        battle_id = (await _create_battle(client, ["base1-4"]))["id"]
        battle = (await client.get(f"/battles/{battle_id}")).json()
        ash_card = battle["player_one_cards"][0]["id"]

        response = await _submit(client, battle_id, ASH, ash_card, 0)
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

        response = await client.post(
            f"/battles/{battle_id}/join", json={"card_ids": ["base1-2"]}, headers=ASH
        )
        assert response.status_code == 422

        response = await client.post(
            f"/battles/{battle_id}/join", json={"card_ids": []}, headers=GARY
        )
        assert response.status_code == 422
        assert (await client.get(f"/battles/{battle_id}")).json()["state"] == "requested"

        response = await client.post(
            f"/battles/{battle_id}/join", json={"card_ids": ["base1-2"]}, headers=GARY
        )
        gary_card = response.json()["player_two_cards"][0]["id"]

        response = await _submit(client, battle_id, ASH, gary_card, 0)
        assert response.status_code == 422

        response = await _submit(client, battle_id, ASH, ash_card, 3)
        assert response.status_code == 422

        response = await _submit(client, battle_id, {"X-Player-Id": "misty"}, ash_card, 0)
        assert response.status_code == 422

        await _submit(client, battle_id, ASH, ash_card, 0)
        response = await _submit(client, battle_id, ASH, ash_card, 0)
        assert response.status_code == 200
        assert response.json()["duplicate"] is True

        response = await _submit(client, battle_id, GARY, gary_card, 0)
        assert response.json()["completed"] is True

        response = await _submit(client, battle_id, ASH, ash_card, 0)
        assert response.status_code == 409

        response = await client.get("/battles/missing")
        assert response.status_code == 404
        assert response.json()["retryable"] is False

        response = await client.get("/battle-cards/missing")
        assert response.status_code == 404

        response = await client.get("/cards/missing")
        assert response.status_code == 404
