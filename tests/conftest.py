from collections.abc import Iterator

import pytest

from orderflow import EngineConfig
from orderflow.catalog import CatalogView
from orderflow.shop import ShopSettings, settings_from_record
from orderflow.store import MemoryStore

from tests.factories import ADDON_CATEGORIES, COUPONS, NOW, PRODUCTS, SETTINGS, seed


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(seed())


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig().with_clock(lambda: NOW)


@pytest.fixture
def catalog() -> CatalogView:
    return CatalogView.from_records(PRODUCTS, ADDON_CATEGORIES, COUPONS)


@pytest.fixture
def settings() -> ShopSettings:
    return settings_from_record(SETTINGS)


@pytest.fixture
def sqlite_url(tmp_path) -> Iterator[str]:
    yield f"sqlite+aiosqlite:///{tmp_path / 'orderflow.db'}"
