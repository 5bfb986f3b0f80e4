"""共通フィクスチャ"""
import pytest
from fastapi.testclient import TestClient

from civic_api.main import app
from civic_api.services.catalog import get_catalog, TYSONS_CATALOG
from civic_api.services.location import LocationProvider, get_location_provider


@pytest.fixture
def provider():
    return LocationProvider()


@pytest.fixture
def client(provider):
    # 組み込みカタログ＋テストごとに新しい現在地
    app.dependency_overrides[get_catalog] = lambda: TYSONS_CATALOG
    app.dependency_overrides[get_location_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()
