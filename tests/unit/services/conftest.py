"""Shared fixtures for service unit tests.

Stores are AsyncMocks, so nothing here touches SQLite.
"""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def material_store() -> AsyncMock:
    store = AsyncMock()
    store.get_material.return_value = None
    store.get_material_by_sku.return_value = None
    store.list_materials.return_value = []
    return store


@pytest.fixture
def ledger_store() -> AsyncMock:
    store = AsyncMock()
    store.find_movements.return_value = []
    store.aggregate_movements.return_value = []
    return store
