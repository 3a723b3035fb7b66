"""API tests for insight endpoints."""

import pytest
from httpx import AsyncClient


class TestInsightsAPI:
    @pytest.mark.parametrize(
        "path",
        [
            "/api/insights/low-stock",
            "/api/insights/dead-stock",
            "/api/insights/top-skus",
            "/api/insights/category-breakdown",
            "/api/insights/fast-moving",
        ],
    )
    async def test_empty_lists(self, client: AsyncClient, db, path: str):
        response = await client.get(path)

        assert response.status_code == 200
        assert response.json() == []

    async def test_dashboard(self, client: AsyncClient, stocked_material: dict):
        response = await client.get("/api/insights/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["total_materials"] == 1
        assert data["total_quantity"] == 100
        assert data["total_value"] == 45000.0
        assert data["dead_stock_count"] == 1

    async def test_low_stock_after_sale(self, client: AsyncClient, stocked_material: dict):
        await client.post("/api/sales", json={"sku": "TILE-001", "quantity": 80})

        response = await client.get("/api/insights/low-stock")

        alerts = response.json()
        assert [a["material"]["sku"] for a in alerts] == ["TILE-001"]
        assert alerts[0]["urgency"] == "critical"
        assert alerts[0]["days_until_stockout"] == 1

    async def test_dead_stock(self, client: AsyncClient, stocked_material: dict):
        response = await client.get("/api/insights/dead-stock")

        items = response.json()
        assert items[0]["tied_up_capital"] == 45000.0
        assert items[0]["days_inactive"] == 30

    async def test_damaged_inventory(self, client: AsyncClient, stocked_material: dict):
        await client.post(
            "/api/stock-movements/damage",
            json={"material_id": stocked_material["id"], "quantity": 4},
        )

        response = await client.get("/api/insights/damaged-inventory")

        data = response.json()
        assert data["total_quantity"] == 4
        assert data["total_value"] == 1800.0

    async def test_fast_moving_invalid_days(self, client: AsyncClient, db):
        response = await client.get("/api/insights/fast-moving", params={"days": 0})

        assert response.status_code == 400
        assert response.json()["message"] == "Days must be greater than 0"

    async def test_fast_moving_window_too_long(self, client: AsyncClient, db):
        response = await client.get("/api/insights/fast-moving", params={"days": 1000000})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_top_skus_invalid_limit(self, client: AsyncClient, db):
        response = await client.get("/api/insights/top-skus", params={"limit": "x"})

        assert response.status_code == 400

    async def test_comprehensive(self, client: AsyncClient, stocked_material: dict):
        for _ in range(5):
            await client.post("/api/sales", json={"sku": "TILE-001", "quantity": 19})

        response = await client.get("/api/insights/comprehensive")

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["fast_moving_count"] == 1
        assert data["summary"]["dead_stock_count"] == 0
        assert data["summary"]["low_stock_count"] == 1
        assert data["fast_moving_items"][0]["urgency"] == "critical"
        assert data["summary"]["total_issues"] == 2
