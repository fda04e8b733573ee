from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from photo_clusters import create_app
from photo_clusters.core.config import Config
from photo_clusters.domain.sources.memory import InMemoryAssetSource
from photo_clusters.schemas.asset import Asset
from photo_clusters.services.catalog import ClusterStore


def local_ms(*args) -> float:
    """Epoch milliseconds of a naive local datetime."""
    return datetime(*args).timestamp() * 1000


@pytest.fixture
def make_asset():
    def _make(asset_id: str, creation_time: float) -> Asset:
        return Asset(id=asset_id, uri=f"file:///photos/{asset_id}.jpg", creation_time=creation_time)
    return _make


@pytest.fixture
def test_config():
    return Config(
        _env_file=None,
        TIME_GAP_MINUTES=180,
        MIN_CLUSTER_SIZE=3,
        MAX_ASSETS=2500,
        PAGE_SIZE=200,
        MOMENT_EDGE_PADDING_MINUTES=2,
        MOMENT_STRATEGY="auto",
        ASSET_SOURCE_TYPE="memory",
    )


@pytest.fixture
def library(make_asset):
    """Two outings on one day and a single photo a week earlier."""
    return [
        make_asset("a1", local_ms(2024, 5, 10, 18, 0)),
        make_asset("a2", local_ms(2024, 5, 10, 17, 30)),
        make_asset("a3", local_ms(2024, 5, 10, 17, 0)),
        make_asset("b1", local_ms(2024, 5, 10, 9, 20)),
        make_asset("b2", local_ms(2024, 5, 10, 9, 0)),
        make_asset("c1", local_ms(2024, 5, 3, 12, 0) / 1000),
    ]


@pytest.fixture
def memory_source(library):
    return InMemoryAssetSource(assets=library)


@pytest.fixture
def store(memory_source, test_config):
    return ClusterStore(memory_source, config=test_config)


@pytest_asyncio.fixture
async def client(store) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
