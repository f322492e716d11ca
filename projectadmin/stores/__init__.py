from projectadmin.connections import s3_enabled
from projectadmin.stores.assets import AssetStore, S3AssetStore, UnconfiguredAssetStore
from projectadmin.stores.metadata import ElasticMetadataStore, MetadataStore, RecordNotFound, StoredRecord


def default_metadata_store() -> MetadataStore:
    return ElasticMetadataStore()


def default_asset_store() -> AssetStore:
    return S3AssetStore() if s3_enabled() else UnconfiguredAssetStore()


__all__ = [
    "AssetStore",
    "ElasticMetadataStore",
    "MetadataStore",
    "RecordNotFound",
    "S3AssetStore",
    "StoredRecord",
    "UnconfiguredAssetStore",
    "default_asset_store",
    "default_metadata_store",
]
