"""
Interact with S3-compatible object storage (e.g., AWS S3, MinIO, SeaweedFS, Cloudflare R2).
"""

from typing import AsyncIterable

import async_lru
from botocore.exceptions import ClientError
from types_aiobotocore_s3.type_defs import ObjectIdentifierTypeDef

from projectadmin.config import get_settings
from projectadmin.connections import s3

# S3 DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_SIZE = 1000

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


async def get_bucket() -> str:
    """
    Get the asset bucket, taking into account whether we are using a test database.
    """
    settings = get_settings()
    if settings.use_test_db:
        return await _create_or_get_bucket_name(f"test-{settings.s3_bucket}")
    return await _create_or_get_bucket_name(settings.s3_bucket)


@async_lru.alru_cache(maxsize=1000)
async def _create_or_get_bucket_name(bucket: str) -> str:
    try:
        await s3().head_bucket(Bucket=bucket)
    except ClientError as e:
        error = e.response.get("Error", {})
        if error.get("Code") in ("404", "NoSuchBucket"):
            await s3().create_bucket(Bucket=bucket)
        else:
            raise
    return bucket


def error_code(e: ClientError) -> str:
    return str(e.response.get("Error", {}).get("Code", ""))


async def scan_s3_keys(bucket: str, prefix: str = "", page_size=1000) -> AsyncIterable[str]:
    paginator = s3().get_paginator("list_objects_v2")

    async for page in paginator.paginate(Bucket=bucket, Prefix=prefix, PaginationConfig={"PageSize": page_size}):
        for content in page.get("Contents", []):
            if "Key" in content:
                yield content["Key"]


async def delete_s3_object(bucket: str, key: str) -> None:
    """Delete a single object. S3 reports success for keys that do not exist."""
    await s3().delete_object(Bucket=bucket, Key=key)


async def delete_s3_by_key(bucket: str, keys: list[str]) -> dict[str, str | None]:
    """
    Delete objects in batches. Returns a dict of key -> error code (None if the key was deleted).
    """
    results: dict[str, str | None] = {}
    for i in range(0, len(keys), DELETE_BATCH_SIZE):
        batch = keys[i : i + DELETE_BATCH_SIZE]
        to_delete: list[ObjectIdentifierTypeDef] = [{"Key": key} for key in batch]
        res = await s3().delete_objects(Bucket=bucket, Delete={"Objects": to_delete})
        for deleted in res.get("Deleted", []):
            results[deleted.get("Key", "")] = None
        for error in res.get("Errors", []):
            results[error.get("Key", "")] = error.get("Code", "Unknown")
    return results


async def add_s3_object(bucket: str, key: str, data: bytes):
    await s3().put_object(Bucket=bucket, Key=key, Body=data)
