import pytest

from projectadmin.connections import s3_enabled
from projectadmin.models import AssetOutcome
from projectadmin.objectstorage.s3bucket import add_s3_object, get_bucket
from projectadmin.paths import project_asset_prefix
from projectadmin.stores import S3AssetStore

if not s3_enabled():
    pytest.skip("S3 not configured, skipping asset store tests", allow_module_level=True)


@pytest.fixture()
async def assets(connections):
    store = S3AssetStore()
    yield store
    await store.destroy_prefix("")


@pytest.mark.anyio
async def test_destroy(assets):
    bucket = await get_bucket()
    await add_s3_object(bucket, "gallery/kitchen.jpg", b"bytes")
    assert await assets.list_by_prefix("gallery/") == ["gallery/kitchen.jpg"]

    assert await assets.destroy("gallery/kitchen.jpg") == AssetOutcome.DELETED
    assert await assets.list_by_prefix("gallery/") == []
    # S3 does not report missing keys, deleting again is simply a success
    assert (await assets.destroy("gallery/kitchen.jpg")).ok


@pytest.mark.anyio
async def test_destroy_prefix(assets):
    bucket = await get_bucket()
    prefix = project_asset_prefix("p1")
    keys = [f"{prefix}02_Photos__Before/{i}.jpg" for i in range(3)]
    for key in keys:
        await add_s3_object(bucket, key, b"bytes")
    other = f"{project_asset_prefix('p10')}a.jpg"
    await add_s3_object(bucket, other, b"bytes")

    outcomes = await assets.destroy_prefix(prefix)

    assert outcomes == {key: AssetOutcome.DELETED for key in keys}
    assert await assets.list_by_prefix(prefix) == []
    assert await assets.list_by_prefix(project_asset_prefix("p10")) == [other]
    assert await assets.destroy_prefix(prefix) == {}


@pytest.mark.anyio
async def test_delete_many(assets):
    bucket = await get_bucket()
    await add_s3_object(bucket, "catalog/a.pdf", b"bytes")
    outcomes = await assets.delete_many(["catalog/a.pdf", "catalog/missing.pdf"])
    assert all(o.ok for o in outcomes.values())
    assert set(outcomes) == {"catalog/a.pdf", "catalog/missing.pdf"}
