"""Fixtures for API tests: the real app over a temporary database."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from stockbook.api.dependencies import get_insights, get_ledger, get_registry, get_sales
from stockbook.api.main import create_app


@pytest.fixture
async def client(registry, ledger, sales, insights) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_sales] = lambda: sales
    app.dependency_overrides[get_insights] = lambda: insights

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def material_payload() -> dict:
    return {
        "sku": "TILE-001",
        "name": "Ceramic Floor Tile 60x60",
        "category": "Tiles",
        "supplier": "Supreme Ceramics",
        "unit_price": 450,
        "reorder_level": 50,
    }


@pytest.fixture
async def stocked_material(client: AsyncClient, material_payload: dict) -> dict:
    """TILE-001 with 100 units received."""
    response = await client.post("/api/materials", json=material_payload)
    material = response.json()
    await client.post(
        "/api/stock-movements",
        json={
            "material_id": material["id"],
            "movement_type": "INWARD",
            "quantity": 100,
            "reason": "Purchase",
        },
    )
    return material
