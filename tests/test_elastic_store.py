import pytest
from elasticsearch import BadRequestError

from projectadmin.cascade import CascadeEngine
from projectadmin.catalog import create_catalog_entry, create_catalog_folder
from projectadmin.connections import es
from projectadmin.elastic.indices import MAPPINGS, index_name
from projectadmin.models import Collection, Folder, Project, ProjectFile
from projectadmin.paths import folder_storage_key
from projectadmin.stores import ElasticMetadataStore, UnconfiguredAssetStore


@pytest.fixture()
async def store(connections):
    yield ElasticMetadataStore()
    for collection in MAPPINGS:
        await es().delete_by_query(index=index_name(collection), query={"match_all": {}}, refresh=True)


@pytest.mark.anyio
async def test_add_get_update_delete(store):
    id = await store.add(Collection.CATALOG_FOLDERS, Folder(name="Brochures").to_doc())
    doc = await store.get(Collection.CATALOG_FOLDERS, id)
    assert doc is not None
    assert Folder.from_record(id, doc).name == "Brochures"

    await store.update(Collection.CATALOG_FOLDERS, id, {"name": "Leaflets"})
    assert (await store.get(Collection.CATALOG_FOLDERS, id))["name"] == "Leaflets"

    assert await store.delete(Collection.CATALOG_FOLDERS, id) is True
    assert await store.get(Collection.CATALOG_FOLDERS, id) is None
    assert await store.delete(Collection.CATALOG_FOLDERS, id) is False


@pytest.mark.anyio
async def test_add_with_id(store):
    assert await store.add(Collection.PROJECTS, Project(name="x").to_doc(), id="p1") == "p1"
    assert (await store.get(Collection.PROJECTS, "p1"))["name"] == "x"


@pytest.mark.anyio
async def test_query(store):
    top = await create_catalog_folder(store, "Top")
    child = await create_catalog_folder(store, "Child", top.id)
    assert child.order == 0
    assert [id for id, _ in await store.query(Collection.CATALOG_FOLDERS, {"parent_id": None})] == [top.id]
    assert [id for id, _ in await store.query(Collection.CATALOG_FOLDERS, {"parent_id": top.id})] == [child.id]
    assert len(await store.query(Collection.CATALOG_FOLDERS, {})) == 2


@pytest.mark.anyio
async def test_batch_delete(store):
    ids = [await store.add(Collection.PROJECTS, Project(name=str(i)).to_doc()) for i in range(5)]
    assert await store.batch_delete(Collection.PROJECTS, ids[:3] + ["does-not-exist"]) == 3
    assert {id for id, _ in await store.query(Collection.PROJECTS, {})} == set(ids[3:])
    assert await store.batch_delete(Collection.PROJECTS, []) == 0


@pytest.mark.anyio
async def test_strict_mapping(store):
    with pytest.raises(BadRequestError):
        await store.add(Collection.PROJECTS, {"name": "x", "no_such_field": 1})


@pytest.mark.anyio
async def test_cascades(store):
    folder = await create_catalog_folder(store, "Top")
    sub = await create_catalog_folder(store, "Sub", folder.id)
    await create_catalog_entry(store, sub.id, "Entry", "https://example.com/e.pdf")

    await store.add(Collection.PROJECTS, Project(name="p", customer_id="c").to_doc(), id="p")
    for folder_path in ("02_Photos/Before", "09_Admin_Only"):
        file = ProjectFile(
            project_id="p",
            folder_key=folder_storage_key(folder_path),
            folder_path=folder_path,
            file_name="x.jpg",
            public_id=f"projects/p/{folder_path}/x.jpg",
        )
        await store.add(Collection.FILES, file.to_doc())
    await store.add(Collection.CUSTOMERS, {"name": "c"}, id="c")

    # without an asset store the asset deletions fail, which does not stop the cascades
    engine = CascadeEngine(store, UnconfiguredAssetStore())
    await engine.delete_folder_cascade(folder.id)
    await engine.delete_customer_cascade("c")

    for collection in (Collection.CATALOG_FOLDERS, Collection.CATALOG_ENTRIES, Collection.PROJECTS, Collection.FILES):
        assert await store.query(collection, {}) == []
    assert await store.get(Collection.CUSTOMERS, "c") is None
