from contextlib import AsyncExitStack

import pytest
from httpx import ASGITransport, AsyncClient

from projectadmin import api
from projectadmin.api.dependencies import get_asset_store, get_metadata_store
from projectadmin.cascade import CascadeEngine
from projectadmin.connections import projectadmin_connections
from projectadmin.elastic.indices import create_or_update_indices, delete_indices
from tests.tools import MemoryAssetStore, MemoryMetadataStore, projectadmin_settings


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def metadata() -> MemoryMetadataStore:
    return MemoryMetadataStore()


@pytest.fixture()
def assets() -> MemoryAssetStore:
    return MemoryAssetStore()


@pytest.fixture()
def engine(metadata, assets) -> CascadeEngine:
    return CascadeEngine(metadata, assets, concurrency=3)


@pytest.fixture()
async def client(metadata, assets):
    """API client running against the in-memory stores"""
    api.app.dependency_overrides[get_metadata_store] = lambda: metadata
    api.app.dependency_overrides[get_asset_store] = lambda: assets
    try:
        async with AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test", follow_redirects=False) as client:
            yield client
    finally:
        api.app.dependency_overrides.clear()


@pytest.fixture(scope="session")
async def connections():
    """
    Connections to the real elasticsearch (and S3, if configured) with separate test indices and bucket.
    Tests using this fixture are skipped if elasticsearch is not available.
    """
    with projectadmin_settings(use_test_db=True):
        async with AsyncExitStack() as stack:
            try:
                await stack.enter_async_context(projectadmin_connections())
            except ConnectionError as e:
                pytest.skip(f"Elasticsearch not available, skipping integration tests ({e})")
            await create_or_update_indices()
            yield
            await delete_indices()
