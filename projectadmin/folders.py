"""
User-created folder trees (the catalog and the offers).

Folders and items are ordered among their siblings: a new folder or item is appended at the end, with order
equal to the number of siblings that already exist. Deleting a sibling does not renumber the others, so gaps
in order are normal. Renaming or reordering a folder is an explicit update.

Deleting a whole folder tree is a cascade, see projectadmin.cascade.CascadeEngine.delete_folder_cascade.
"""

import logging
from datetime import UTC, datetime

from projectadmin.models import Folder, FolderTree
from projectadmin.stores import MetadataStore, RecordNotFound

logger = logging.getLogger(__name__)


def _clean_name(name: str, what: str = "Folder") -> str:
    name = name.strip()
    if not name:
        raise ValueError(f"{what} name cannot be empty")
    return name


async def next_order(store: MetadataStore, tree: FolderTree, folder_id: str) -> int:
    """The order for a new item in the given folder. Raises ValueError if the folder does not exist."""
    if await store.get(tree.folders, folder_id) is None:
        raise ValueError(f"Folder {folder_id} does not exist")
    return len(await store.query(tree.items, {"folder_id": folder_id}))


async def create_folder(store: MetadataStore, tree: FolderTree, name: str, parent_id: str | None = None) -> Folder:
    name = _clean_name(name)
    if parent_id is not None and await store.get(tree.folders, parent_id) is None:
        raise ValueError(f"Parent folder {parent_id} does not exist")

    siblings = await store.query(tree.folders, {"parent_id": parent_id})
    folder = Folder(name=name, parent_id=parent_id, order=len(siblings))
    folder.id = await store.add(tree.folders, folder.to_doc())
    logger.info(f"Created {tree.name} folder {folder.id} ({name!r}) under {parent_id}")
    return folder


async def list_folders(store: MetadataStore, tree: FolderTree, parent_id: str | None = None) -> list[Folder]:
    """List the direct children of a folder (or the top level folders), in order."""
    records = await store.query(tree.folders, {"parent_id": parent_id})
    folders = [Folder.from_record(id, doc) for id, doc in records]
    return sorted(folders, key=lambda f: f.order)


async def update_folder(
    store: MetadataStore,
    tree: FolderTree,
    folder_id: str,
    name: str | None = None,
    order: int | None = None,
) -> Folder:
    """
    Rename and/or move a folder among its siblings. Fields that are None are left as they are.
    Other siblings are not renumbered, so two folders can end up with the same order.
    """
    doc = await store.get(tree.folders, folder_id)
    if doc is None:
        raise RecordNotFound(tree.folders, folder_id)

    updates: dict = {"updated_at": datetime.now(UTC).isoformat()}
    if name is not None:
        updates["name"] = _clean_name(name)
    if order is not None:
        if order < 0:
            raise ValueError(f"Folder order cannot be negative, not {order}")
        updates["order"] = order

    await store.update(tree.folders, folder_id, updates)
    logger.info(f"Updated {tree.name} folder {folder_id}: {sorted(updates)}")
    return Folder.from_record(folder_id, {**doc, **updates})
