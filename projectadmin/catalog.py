"""
Catalog folders and entries, and gallery images.

Catalog folders form a tree (parent_id is None for top level folders), see projectadmin.folders for the
ordering rules. Deleting a whole folder tree is a cascade, see projectadmin.cascade.CascadeEngine.
"""

import logging

from projectadmin.cascade import CascadeEngine
from projectadmin.folders import create_folder, list_folders, next_order, update_folder
from projectadmin.models import CATALOG_TREE, AssetOutcome, CatalogEntry, Collection, Folder, GalleryImage
from projectadmin.stores import MetadataStore, RecordNotFound

logger = logging.getLogger(__name__)


async def create_catalog_folder(store: MetadataStore, name: str, parent_id: str | None = None) -> Folder:
    return await create_folder(store, CATALOG_TREE, name, parent_id)


async def list_catalog_folders(store: MetadataStore, parent_id: str | None = None) -> list[Folder]:
    return await list_folders(store, CATALOG_TREE, parent_id)


async def update_catalog_folder(
    store: MetadataStore, folder_id: str, name: str | None = None, order: int | None = None
) -> Folder:
    return await update_folder(store, CATALOG_TREE, folder_id, name=name, order=order)


async def create_catalog_entry(
    store: MetadataStore,
    folder_id: str,
    name: str,
    file_url: str,
    description: str = "",
    file_name: str = "",
    public_id: str | None = None,
) -> CatalogEntry:
    name = name.strip()
    if not name:
        raise ValueError("Entry name cannot be empty")
    order = await next_order(store, CATALOG_TREE, folder_id)

    entry = CatalogEntry(
        folder_id=folder_id,
        name=name,
        description=description,
        file_url=file_url,
        file_name=file_name,
        public_id=public_id,
        order=order,
    )
    entry.id = await store.add(Collection.CATALOG_ENTRIES, entry.to_doc())
    logger.info(f"Created catalog entry {entry.id} ({name!r}) in folder {folder_id}")
    return entry


async def list_catalog_entries(store: MetadataStore, folder_id: str) -> list[CatalogEntry]:
    records = await store.query(Collection.CATALOG_ENTRIES, {"folder_id": folder_id})
    entries = [CatalogEntry.from_record(id, doc) for id, doc in records]
    return sorted(entries, key=lambda e: e.order)


async def delete_catalog_entry(engine: CascadeEngine, entry_id: str, remove_asset: bool = False) -> AssetOutcome | None:
    """
    Delete a single catalog entry. If remove_asset is True and the entry knows its asset, the asset is
    deleted as well (advisory: a failure is logged and returned, the entry is deleted regardless).
    Deleting an entry that does not exist is not an error.

    Returns the outcome of the asset deletion, or None if no asset deletion was attempted.
    """
    outcome = None
    if remove_asset:
        doc = await engine.metadata.get(Collection.CATALOG_ENTRIES, entry_id)
        if doc is not None and (public_id := doc.get("public_id")):
            outcome = await engine.destroy_asset(public_id)
    await engine.metadata.delete(Collection.CATALOG_ENTRIES, entry_id)
    return outcome


async def delete_gallery_image(engine: CascadeEngine, image_id: str) -> AssetOutcome | None:
    """Delete a gallery image record and (advisory) its asset. Raises RecordNotFound if there is no such image."""
    doc = await engine.metadata.get(Collection.GALLERY, image_id)
    if doc is None:
        raise RecordNotFound(Collection.GALLERY, image_id)
    image = GalleryImage.from_record(image_id, doc)
    outcome = await engine.destroy_asset(image.public_id) if image.public_id else None
    await engine.metadata.delete(Collection.GALLERY, image_id)
    logger.info(f"Deleted gallery image {image_id}")
    return outcome
