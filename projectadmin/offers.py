"""
Offer folders and the items (products and services that can be offered) in them.

Offer folders are a second folder tree with the same rules as the catalog, see projectadmin.folders.
"""

import logging

from projectadmin.folders import next_order
from projectadmin.models import OFFER_TREE, Collection, OfferItem
from projectadmin.stores import MetadataStore

logger = logging.getLogger(__name__)


async def create_offer_item(
    store: MetadataStore,
    folder_id: str,
    name: str,
    description: str = "",
    unit: str = "",
    price: str = "",
    quantity_unit: str = "",
    image_url: str | None = None,
) -> OfferItem:
    name = name.strip()
    if not name:
        raise ValueError("Item name cannot be empty")
    order = await next_order(store, OFFER_TREE, folder_id)

    item = OfferItem(
        folder_id=folder_id,
        name=name,
        description=description.strip(),
        unit=unit.strip(),
        price=price.strip(),
        quantity_unit=quantity_unit.strip(),
        image_url=(image_url or "").strip() or None,
        order=order,
    )
    item.id = await store.add(Collection.OFFER_ITEMS, item.to_doc())
    logger.info(f"Created offer item {item.id} ({name!r}) in folder {folder_id}")
    return item


async def list_offer_items(store: MetadataStore, folder_id: str) -> list[OfferItem]:
    records = await store.query(Collection.OFFER_ITEMS, {"folder_id": folder_id})
    items = [OfferItem.from_record(id, doc) for id, doc in records]
    return sorted(items, key=lambda i: i.order)


async def delete_offer_item(store: MetadataStore, item_id: str) -> None:
    """Delete a single offer item. Deleting an item that does not exist is not an error."""
    await store.delete(Collection.OFFER_ITEMS, item_id)
