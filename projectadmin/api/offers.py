"""API Endpoints for the offers: folders (a tree) and the items in them."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, Field

from projectadmin.api.catalog import CreateFolderBody, UpdateFolderBody
from projectadmin.api.dependencies import get_engine, get_metadata_store
from projectadmin.cascade import CascadeEngine
from projectadmin.folders import create_folder, list_folders, update_folder
from projectadmin.models import OFFER_TREE, Folder, OfferItem
from projectadmin.offers import create_offer_item, delete_offer_item, list_offer_items
from projectadmin.stores import MetadataStore

app_offers = APIRouter(tags=["offers"])


class CreateItemBody(BaseModel):
    folder_id: str = Field(description="Id of the folder this item belongs to")
    name: str = Field(description="Name of the item")
    description: str = Field(default="", description="Description of the item")
    unit: str = Field(default="", description="Unit the item is sold in")
    price: str = Field(default="", description="Price, as it should be shown")
    quantity_unit: str = Field(default="", description="Unit of the quantity")
    image_url: str | None = Field(default=None, description="URL of an image of the item")


@app_offers.post("/offer-folders", status_code=status.HTTP_201_CREATED)
async def create_offer_folder(
    body: Annotated[CreateFolderBody, Body(...)],
    store: MetadataStore = Depends(get_metadata_store),
) -> Folder:
    return await create_folder(store, OFFER_TREE, body.name, body.parent_id)


@app_offers.get("/offer-folders")
async def list_offer_folders(
    parent_id: Annotated[str | None, Query(description="List the children of this folder (default: top level)")] = None,
    store: MetadataStore = Depends(get_metadata_store),
) -> list[Folder]:
    return await list_folders(store, OFFER_TREE, parent_id)


@app_offers.put("/offer-folders/{folder_id}")
async def update_offer_folder(
    folder_id: str,
    body: Annotated[UpdateFolderBody, Body(...)],
    store: MetadataStore = Depends(get_metadata_store),
) -> Folder:
    return await update_folder(store, OFFER_TREE, folder_id, name=body.name, order=body.order)


@app_offers.delete("/offer-folders/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offer_folder(folder_id: str, engine: CascadeEngine = Depends(get_engine)):
    """Delete an offer folder with all its subfolders (any depth) and all items in them."""
    await engine.delete_folder_cascade(folder_id, OFFER_TREE)


@app_offers.post("/offer-items", status_code=status.HTTP_201_CREATED)
async def create_item(
    body: Annotated[CreateItemBody, Body(...)],
    store: MetadataStore = Depends(get_metadata_store),
) -> OfferItem:
    return await create_offer_item(
        store,
        body.folder_id,
        body.name,
        description=body.description,
        unit=body.unit,
        price=body.price,
        quantity_unit=body.quantity_unit,
        image_url=body.image_url,
    )


@app_offers.get("/offer-items")
async def list_items(
    folder_id: Annotated[str, Query(description="Folder to list the items of")],
    store: MetadataStore = Depends(get_metadata_store),
) -> list[OfferItem]:
    return await list_offer_items(store, folder_id)


@app_offers.delete("/offer-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: str, store: MetadataStore = Depends(get_metadata_store)):
    await delete_offer_item(store, item_id)
