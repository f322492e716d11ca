import pytest

from projectadmin.cascade import CascadeFailed
from projectadmin.catalog import create_catalog_entry, create_catalog_folder
from projectadmin.folders import create_folder
from projectadmin.models import OFFER_TREE, Collection
from projectadmin.offers import create_offer_item
from tests.tools import StoreError


async def _tree(metadata, depth: int, parent_id: str | None = None) -> list[str]:
    """Create a chain of folders of the given depth, each with one entry. Returns the folder ids, root first."""
    ids = []
    for level in range(depth):
        folder = await create_catalog_folder(metadata, f"level {level}", parent_id)
        await create_catalog_entry(metadata, folder.id, f"entry {level}", f"https://example.com/{level}.pdf")
        ids.append(folder.id)
        parent_id = folder.id
    return ids


@pytest.mark.anyio
async def test_folder_with_child_and_entries(engine, metadata, assets):
    a = await create_catalog_folder(metadata, "A")
    b = await create_catalog_folder(metadata, "B", a.id)
    for name in ("one", "two"):
        await create_catalog_entry(metadata, b.id, name, f"https://example.com/{name}.pdf", public_id=f"catalog/{name}")
    assets.keys.update({"catalog/one", "catalog/two"})

    await engine.delete_folder_cascade(a.id)

    assert metadata.ids(Collection.CATALOG_FOLDERS) == set()
    assert metadata.ids(Collection.CATALOG_ENTRIES) == set()
    # the folder cascade leaves the catalog assets alone
    assert assets.destroyed == []
    assert assets.keys == {"catalog/one", "catalog/two"}


@pytest.mark.anyio
async def test_deep_tree(engine, metadata):
    ids = await _tree(metadata, depth=12)
    await engine.delete_folder_cascade(ids[0])
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set()
    assert metadata.ids(Collection.CATALOG_ENTRIES) == set()


@pytest.mark.anyio
async def test_subtree_only(engine, metadata):
    keep = await _tree(metadata, depth=2)
    ids = await _tree(metadata, depth=3, parent_id=keep[0])
    await engine.delete_folder_cascade(ids[0])
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set(keep)
    entries = metadata.records[Collection.CATALOG_ENTRIES].values()
    assert {e["folder_id"] for e in entries} == set(keep)


@pytest.mark.anyio
async def test_children_deleted_before_parent(engine, metadata):
    ids = await _tree(metadata, depth=3)
    metadata.calls.clear()
    await engine.delete_folder_cascade(ids[0])
    folder_deletes = [c for c in metadata.calls if c == ("delete", Collection.CATALOG_FOLDERS)]
    assert len(folder_deletes) == 3
    # entries of each folder are deleted in one batch, before the folder itself
    calls = [op for op, collection in metadata.calls if op in ("delete", "batch_delete")]
    assert calls == ["batch_delete", "delete"] * 3


@pytest.mark.anyio
async def test_idempotent(engine, metadata):
    ids = await _tree(metadata, depth=3)
    await engine.delete_folder_cascade(ids[0])
    await engine.delete_folder_cascade(ids[0])
    await engine.delete_folder_cascade("never-existed")
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set()


@pytest.mark.anyio
async def test_metadata_failure_aborts_and_can_be_retried(engine, metadata):
    ids = await _tree(metadata, depth=3)
    metadata.fail_on.add(("batch_delete", Collection.CATALOG_ENTRIES))

    with pytest.raises(CascadeFailed) as exc_info:
        await engine.delete_folder_cascade(ids[0])
    assert isinstance(exc_info.value.__cause__, StoreError)
    assert exc_info.value.kind == "catalog folder"
    assert exc_info.value.id == ids[0]
    # the failure happened on the deepest folder, so nothing was deleted yet
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set(ids)

    metadata.fail_on.clear()
    await engine.delete_folder_cascade(ids[0])
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set()
    assert metadata.ids(Collection.CATALOG_ENTRIES) == set()


@pytest.mark.anyio
async def test_parent_cycle(engine, metadata):
    a = await metadata.add(Collection.CATALOG_FOLDERS, {"name": "a", "parent_id": "b", "order": 0})
    await metadata.add(Collection.CATALOG_FOLDERS, {"name": "b", "parent_id": a, "order": 0}, id="b")
    await engine.delete_folder_cascade(a)
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set()


@pytest.mark.anyio
async def test_offer_tree(engine, metadata):
    catalog = await _tree(metadata, depth=2)
    top = await create_folder(metadata, OFFER_TREE, "Bathrooms")
    sub = await create_folder(metadata, OFFER_TREE, "Tiles", top.id)
    for folder in (top, sub):
        await create_offer_item(metadata, folder.id, "Tiling", unit="m2", price="45.00")

    await engine.delete_folder_cascade(top.id, OFFER_TREE)

    assert metadata.ids(Collection.OFFER_FOLDERS) == set()
    assert metadata.ids(Collection.OFFER_ITEMS) == set()
    # the catalog tree is a different tree and is left alone
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set(catalog)
    assert len(metadata.ids(Collection.CATALOG_ENTRIES)) == 2

    # a catalog folder id is not an offer folder
    await engine.delete_folder_cascade(catalog[0], OFFER_TREE)
    assert metadata.ids(Collection.CATALOG_FOLDERS) == set(catalog)


@pytest.mark.anyio
async def test_offer_tree_failure(engine, metadata):
    top = await create_folder(metadata, OFFER_TREE, "Bathrooms")
    await create_offer_item(metadata, top.id, "Tiling")
    metadata.fail_on.add(("batch_delete", Collection.OFFER_ITEMS))
    with pytest.raises(CascadeFailed) as exc_info:
        await engine.delete_folder_cascade(top.id, OFFER_TREE)
    assert exc_info.value.kind == "offer folder"
    assert metadata.ids(Collection.OFFER_FOLDERS) == {top.id}
