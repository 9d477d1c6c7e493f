"""Tests for the dice HTTP routes."""

from __future__ import annotations

from httpx import AsyncClient

from dicebox.dependencies import get_dice_config
from dicebox.dice.types import DEFAULT_DICE_CONFIG
from dicebox.main import app


async def test_index(client: AsyncClient) -> None:
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Dicebox"


class TestRoll:
    async def test_roll_midpoint(self, client: AsyncClient) -> None:
        resp = await client.post("/dice/roll", json={"expression": "2d6+3"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 11
        assert [r["value"] for r in data["rolls"]] == [4, 4]
        assert data["roll_type"] == "normal"
        assert data["summary"] == "2d6+3 = [4, 4]+3 = 11"
        assert data["expression"]["dice"] == [{"count": 2, "sides": 6}]

    async def test_roll_with_advantage(self, client: AsyncClient) -> None:
        resp = await client.post("/dice/roll", json={"expression": "1d8", "roll_type": "advantage"})
        data = resp.json()
        assert data["rolls"][-1]["origin"] == "advantage_bonus"
        assert data["rolls"][-1]["sides"] == -6
        assert data["breakdown"][-1]["die_spec"] == "advantage"

    async def test_seed_replays(self, client: AsyncClient) -> None:
        body = {"expression": "5d20", "seed": 1234}
        first = (await client.post("/dice/roll", json=body)).json()
        second = (await client.post("/dice/roll", json=body)).json()
        assert first["rolls"] == second["rolls"]

    async def test_invalid_expression(self, client: AsyncClient) -> None:
        resp = await client.post("/dice/roll", json={"expression": "2 dice"})
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert detail["error"] == "INVALID_EXPRESSION"
        assert '"2 dice"' in detail["message"]
        assert any("instead of words" in s for s in detail["suggestions"])

    async def test_limit_from_config(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_dice_config] = lambda: DEFAULT_DICE_CONFIG.with_overrides(
            max_dice_count=2
        )
        try:
            resp = await client.post("/dice/roll", json={"expression": "3d6"})
        finally:
            app.dependency_overrides.pop(get_dice_config, None)
        assert resp.status_code == 422
        assert resp.json()["detail"]["message"] == "Too many dice (3). Maximum allowed is 2"

    async def test_unknown_roll_type(self, client: AsyncClient) -> None:
        resp = await client.post("/dice/roll", json={"expression": "1d6", "roll_type": "lucky"})
        assert resp.status_code == 422


class TestApply:
    async def _roll(self, client: AsyncClient, expression: str) -> dict:
        return (await client.post("/dice/roll", json={"expression": expression})).json()

    async def test_critical(self, client: AsyncClient) -> None:
        previous = await self._roll(client, "2d6")
        resp = await client.post("/dice/apply", json={"result": previous, "roll_type": "critical"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["roll_type"] == "critical"
        assert data["total"] == 8 + 12
        assert data["breakdown"][-1] == {"die_spec": "critical", "values": [6, 6], "subtotal": 12}

    async def test_critical_rejected_on_d20(self, client: AsyncClient) -> None:
        previous = await self._roll(client, "1d20+2")
        resp = await client.post("/dice/apply", json={"result": previous, "roll_type": "critical"})
        data = resp.json()
        assert data["roll_type"] == "normal"
        assert data["total"] == previous["total"]

    async def test_switch_advantage_to_disadvantage(self, client: AsyncClient) -> None:
        previous = await self._roll(client, "1d12")
        adv = (
            await client.post("/dice/apply", json={"result": previous, "roll_type": "advantage"})
        ).json()
        dis = (
            await client.post("/dice/apply", json={"result": adv, "roll_type": "disadvantage"})
        ).json()
        assert len(dis["rolls"]) == 2
        assert dis["total"] == 7 - 4

    async def test_oversized_expression_rejected(self, client: AsyncClient) -> None:
        previous = await self._roll(client, "1d6")
        previous["expression"]["dice"] = [{"count": 500, "sides": 6}]
        resp = await client.post("/dice/apply", json={"result": previous, "roll_type": "critical"})
        assert resp.status_code == 422
        assert resp.json()["detail"]["error"] == "INVALID_DIE_COUNT"

    async def test_error_message_quotes_enforced_limit(self, client: AsyncClient) -> None:
        previous = await self._roll(client, "1d6")
        previous["expression"]["dice"] = [{"count": 3, "sides": 6}]
        app.dependency_overrides[get_dice_config] = lambda: DEFAULT_DICE_CONFIG.with_overrides(
            max_dice_count=2
        )
        try:
            resp = await client.post(
                "/dice/apply", json={"result": previous, "roll_type": "advantage"}
            )
        finally:
            app.dependency_overrides.pop(get_dice_config, None)
        assert resp.status_code == 422
        assert resp.json()["detail"]["message"] == "Too many dice (3). Maximum allowed is 2"


class TestHelpers:
    async def test_validate_batch(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/dice/validate", json={"expressions": ["2d6", "1d20+5", "invalid"]}
        )
        items = resp.json()
        assert [i["is_valid"] for i in items] == [True, True, False]
        assert items[1]["parsed"]["modifier"] == 5
        assert items[2]["error"] == "INVALID_EXPRESSION"

    async def test_analyze(self, client: AsyncClient) -> None:
        resp = await client.get("/dice/analyze", params={"expression": "2d6-3"})
        data = resp.json()
        assert (data["min"], data["max"]) == (-1, 9)
        assert data["average"] == 4.0
        assert data["canonical"] == "2d6-3"
        assert data["can_apply_critical"] is True
        assert data["safety"]["is_safe"] is True

    async def test_analyze_invalid(self, client: AsyncClient) -> None:
        resp = await client.get("/dice/analyze", params={"expression": "2d0"})
        assert resp.status_code == 422
        assert resp.json()["detail"]["error"] == "INVALID_DIE_SIDES"

    async def test_sanitize(self, client: AsyncClient) -> None:
        resp = await client.post("/dice/sanitize", json={"text": "2 x 6 ++ 3"})
        data = resp.json()
        assert data["sanitized"] == "2d6+3"
        assert data["is_valid"] is True

    async def test_extract(self, client: AsyncClient) -> None:
        resp = await client.post("/dice/extract", json={"text": "Deal 2d8+1 fire damage."})
        assert resp.json() == {"expressions": ["2d8+1"]}

    async def test_standard(self, client: AsyncClient) -> None:
        data = (await client.get("/dice/standard")).json()
        assert data["standard_dice"][0] == {"sides": 4, "name": "d4", "common": True}
        assert data["common_rolls"][0]["expression"] == "2d12"
