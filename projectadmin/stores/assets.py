"""
Asset store: the binary object store holding uploaded files, catalogue PDFs and gallery images.

Deleting assets is advisory: the metadata store decides whether something exists, so asset deletion
never raises. destroy and destroy_prefix report an AssetOutcome instead, and a missing object counts
as NOT_FOUND, which callers treat as success.
"""

import logging
from typing import Protocol

from botocore.exceptions import BotoCoreError, ClientError

from projectadmin.models import AssetOutcome
from projectadmin.objectstorage.s3bucket import (
    NOT_FOUND_CODES,
    delete_s3_by_key,
    delete_s3_object,
    error_code,
    get_bucket,
    scan_s3_keys,
)

logger = logging.getLogger(__name__)


class AssetStore(Protocol):
    async def destroy(self, public_id: str) -> AssetOutcome: ...

    async def list_by_prefix(self, prefix: str) -> list[str]: ...

    async def delete_many(self, public_ids: list[str]) -> dict[str, AssetOutcome]: ...

    async def destroy_prefix(self, prefix: str) -> dict[str, AssetOutcome]:
        """Delete every object under the prefix. Never raises; a failed listing is reported under the prefix itself."""
        ...


class S3AssetStore:
    async def destroy(self, public_id: str) -> AssetOutcome:
        try:
            await delete_s3_object(await get_bucket(), public_id)
        except ClientError as e:
            if error_code(e) in NOT_FOUND_CODES:
                return AssetOutcome.NOT_FOUND
            logger.warning(f"Could not delete asset {public_id}: {e}")
            return AssetOutcome.ERROR
        except BotoCoreError as e:
            logger.warning(f"Could not delete asset {public_id}: {e}")
            return AssetOutcome.ERROR
        return AssetOutcome.DELETED

    async def list_by_prefix(self, prefix: str) -> list[str]:
        bucket = await get_bucket()
        return [key async for key in scan_s3_keys(bucket, prefix)]

    async def delete_many(self, public_ids: list[str]) -> dict[str, AssetOutcome]:
        try:
            results = await delete_s3_by_key(await get_bucket(), public_ids)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Could not delete {len(public_ids)} assets: {e}")
            return {key: AssetOutcome.ERROR for key in public_ids}

        outcomes: dict[str, AssetOutcome] = {}
        for key in public_ids:
            code = results.get(key)
            if key in results and code is None:
                outcomes[key] = AssetOutcome.DELETED
            elif code in NOT_FOUND_CODES:
                outcomes[key] = AssetOutcome.NOT_FOUND
            else:
                outcomes[key] = AssetOutcome.ERROR
        return outcomes

    async def destroy_prefix(self, prefix: str) -> dict[str, AssetOutcome]:
        try:
            keys = await self.list_by_prefix(prefix)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Could not list assets under {prefix}: {e}")
            return {prefix: AssetOutcome.ERROR}
        if not keys:
            return {}
        return await self.delete_many(keys)


class UnconfiguredAssetStore:
    """Used when no asset store is configured. Every deletion attempt is reported as an advisory error."""

    async def destroy(self, public_id: str) -> AssetOutcome:
        logger.warning(f"No asset store configured, cannot delete asset {public_id}")
        return AssetOutcome.ERROR

    async def list_by_prefix(self, prefix: str) -> list[str]:
        return []

    async def delete_many(self, public_ids: list[str]) -> dict[str, AssetOutcome]:
        return {key: await self.destroy(key) for key in public_ids}

    async def destroy_prefix(self, prefix: str) -> dict[str, AssetOutcome]:
        return {}
