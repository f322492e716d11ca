"""API Endpoints for the catalog: folders (a tree) and the entries in them."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, Field

from projectadmin.api.dependencies import get_engine, get_metadata_store
from projectadmin.cascade import CascadeEngine
from projectadmin.catalog import (
    create_catalog_entry,
    create_catalog_folder,
    delete_catalog_entry,
    list_catalog_entries,
    list_catalog_folders,
    update_catalog_folder,
)
from projectadmin.models import CatalogEntry, Folder
from projectadmin.stores import MetadataStore

app_catalog = APIRouter(tags=["catalog"])


class CreateFolderBody(BaseModel):
    name: str = Field(description="Name of the folder")
    parent_id: str | None = Field(default=None, description="Id of the parent folder, or null for a top level folder")


class UpdateFolderBody(BaseModel):
    name: str | None = Field(default=None, description="New name of the folder")
    order: int | None = Field(default=None, description="New position of the folder among its siblings")


class CreateEntryBody(BaseModel):
    folder_id: str = Field(description="Id of the folder this entry belongs to")
    name: str = Field(description="Name of the entry")
    file_url: str = Field(description="URL of the uploaded file")
    description: str = Field(default="", description="Description of the entry")
    file_name: str = Field(default="", description="Original file name")
    public_id: str | None = Field(default=None, description="Key of the file in the asset store, if known")


@app_catalog.post("/catalog-folders", status_code=status.HTTP_201_CREATED)
async def create_folder(
    body: Annotated[CreateFolderBody, Body(...)],
    store: MetadataStore = Depends(get_metadata_store),
) -> Folder:
    """Create a catalog folder. It is placed after its existing siblings."""
    return await create_catalog_folder(store, body.name, body.parent_id)


@app_catalog.get("/catalog-folders")
async def list_folders(
    parent_id: Annotated[str | None, Query(description="List the children of this folder (default: top level)")] = None,
    store: MetadataStore = Depends(get_metadata_store),
) -> list[Folder]:
    return await list_catalog_folders(store, parent_id)


@app_catalog.put("/catalog-folders/{folder_id}")
async def update_folder(
    folder_id: str,
    body: Annotated[UpdateFolderBody, Body(...)],
    store: MetadataStore = Depends(get_metadata_store),
) -> Folder:
    """Rename a catalog folder and/or change its order."""
    return await update_catalog_folder(store, folder_id, name=body.name, order=body.order)


@app_catalog.delete("/catalog-folders/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(folder_id: str, engine: CascadeEngine = Depends(get_engine)):
    """
    Delete a catalog folder with all its subfolders (any depth) and all entries in them.
    The files of the entries are not removed from the asset store.
    """
    await engine.delete_folder_cascade(folder_id)


@app_catalog.post("/catalog-entries", status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: Annotated[CreateEntryBody, Body(...)],
    store: MetadataStore = Depends(get_metadata_store),
) -> CatalogEntry:
    return await create_catalog_entry(
        store,
        body.folder_id,
        body.name,
        body.file_url,
        description=body.description,
        file_name=body.file_name,
        public_id=body.public_id,
    )


@app_catalog.get("/catalog-entries")
async def list_entries(
    folder_id: Annotated[str, Query(description="Folder to list the entries of")],
    store: MetadataStore = Depends(get_metadata_store),
) -> list[CatalogEntry]:
    return await list_catalog_entries(store, folder_id)


@app_catalog.delete("/catalog-entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    remove_asset: Annotated[bool, Query(description="Also delete the file from the asset store")] = False,
    engine: CascadeEngine = Depends(get_engine),
):
    await delete_catalog_entry(engine, entry_id, remove_asset=remove_asset)
