"""FastAPI dependencies giving the endpoints access to the stores and the cascade engine."""

from fastapi import Depends

from projectadmin.cascade import CascadeEngine
from projectadmin.stores import AssetStore, MetadataStore, default_asset_store, default_metadata_store


def get_metadata_store() -> MetadataStore:
    return default_metadata_store()


def get_asset_store() -> AssetStore:
    return default_asset_store()


def get_engine(
    metadata: MetadataStore = Depends(get_metadata_store),
    assets: AssetStore = Depends(get_asset_store),
) -> CascadeEngine:
    return CascadeEngine(metadata, assets)
