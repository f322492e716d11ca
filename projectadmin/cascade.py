"""
Cascading deletion across the metadata store and the asset store.

Three kinds of containers can be deleted with everything they own:

- folders of a FolderTree (catalog or offers): the folder, all descendant folders (any depth) and all items
  attached to them
- projects: all files in every taxonomy folder (asset + record), all read statuses and report approvals,
  and finally the project record
- customers: every project of the customer (as above), and finally the customer record

Ordering: a container is only deleted after everything it owns is gone, so an interrupted cascade never
leaves records that no future cascade can reach. There is no rollback: a failed cascade leaves a partially
deleted tree, and because every step treats "already deleted" as success the whole cascade can simply be
run again.

Failures in the two stores are treated differently. Metadata store errors are fatal: they abort the cascade
and are raised to the caller as CascadeFailed. Asset store deletions are advisory: the asset store reports an
AssetOutcome, errors are logged and the cascade continues.

Item assets are not deleted by the folder cascade, only their records. Use
projectadmin.catalog.delete_catalog_entry(remove_asset=True) for that.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Iterable, Mapping, TypeVar

from projectadmin.config import get_settings
from projectadmin.models import CATALOG_TREE, AssetOutcome, Collection, FolderTree
from projectadmin.paths import folder_storage_key, project_asset_prefix
from projectadmin.stores import AssetStore, MetadataStore, StoredRecord
from projectadmin.taxonomy import get_all_folder_paths

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CascadeFailed(RuntimeError):
    """A cascade was aborted by a metadata store error. The cascade is safe to retry."""

    def __init__(self, kind: str, id: str):
        super().__init__(f"Deleting {kind} {id} failed, the {kind} may be partially deleted")
        self.kind = kind
        self.id = id


@dataclass
class CascadeStats:
    folders: int = 0
    items: int = 0
    files: int = 0
    cross_references: int = 0
    projects: int = 0
    assets: dict[AssetOutcome, int] = field(default_factory=lambda: {o: 0 for o in AssetOutcome})

    def record_asset(self, outcome: AssetOutcome) -> None:
        self.assets[outcome] += 1

    def __str__(self) -> str:
        assets = ", ".join(f"{o.value}={n}" for o, n in self.assets.items())
        return (
            f"folders={self.folders} items={self.items} files={self.files} "
            f"cross_references={self.cross_references} projects={self.projects} assets[{assets}]"
        )


class CascadeEngine:
    def __init__(self, metadata: MetadataStore, assets: AssetStore, concurrency: int | None = None):
        self.metadata = metadata
        self.assets = assets
        if concurrency is None:
            concurrency = get_settings().cascade_concurrency
        if concurrency < 1:
            raise ValueError(f"Cascade concurrency must be at least 1, not {concurrency}")
        self.concurrency = concurrency

    async def delete_folder_cascade(self, folder_id: str, tree: FolderTree = CATALOG_TREE) -> None:
        """Delete a folder of the given tree, all its descendant folders and all items attached to any of them."""
        kind = f"{tree.name} folder"
        stats = CascadeStats()
        logger.info(f"Deleting {kind} {folder_id}")
        try:
            await self._delete_folder_tree(tree, folder_id, stats, visited=set())
        except Exception as e:
            logger.exception(f"Deleting {kind} {folder_id} failed ({stats})")
            raise CascadeFailed(kind, folder_id) from e
        logger.info(f"Deleted {kind} {folder_id}: {stats}")

    async def delete_project_cascade(self, project_id: str) -> None:
        """Delete a project, all its files (records and assets) and all read statuses and approvals referencing it."""
        stats = CascadeStats()
        logger.info(f"Deleting project {project_id}")
        try:
            await self._delete_project(project_id, stats)
        except Exception as e:
            logger.exception(f"Deleting project {project_id} failed ({stats})")
            raise CascadeFailed("project", project_id) from e
        logger.info(f"Deleted project {project_id}: {stats}")

    async def delete_customer_cascade(self, customer_id: str) -> None:
        """Delete every project of a customer (see delete_project_cascade), then the customer."""
        stats = CascadeStats()
        logger.info(f"Deleting customer {customer_id}")
        try:
            projects = await self.metadata.query(Collection.PROJECTS, {"customer_id": customer_id})
            for project_id, _ in projects:
                await self._delete_project(project_id, stats)
            await self.metadata.delete(Collection.CUSTOMERS, customer_id)
        except Exception as e:
            logger.exception(f"Deleting customer {customer_id} failed ({stats})")
            raise CascadeFailed("customer", customer_id) from e
        logger.info(f"Deleted customer {customer_id}: {stats}")

    async def delete_file_related_data(self, project_id: str, file_path: str) -> None:
        """
        Delete the read statuses and report approvals of a single file, so tracking and audit views
        never point at a file that no longer exists. file_path is the public id of the file.
        """
        filters = {"project_id": project_id, "file_path": file_path}
        try:
            deleted = await self._gather_bounded(
                [
                    self._delete_where(Collection.FILE_READ_STATUS, filters),
                    self._delete_where(Collection.REPORT_APPROVALS, filters),
                ]
            )
        except Exception as e:
            logger.exception(f"Deleting related data of {file_path} in project {project_id} failed")
            raise CascadeFailed("file", file_path) from e
        logger.info(f"Deleted {sum(deleted)} read statuses and approvals of {file_path} in project {project_id}")

    async def destroy_asset(self, public_id: str, stats: CascadeStats | None = None) -> AssetOutcome:
        """Advisory delete of one asset: errors are logged and reported, never raised."""
        outcome = await self.assets.destroy(public_id)
        if outcome is AssetOutcome.ERROR:
            logger.warning(f"Asset {public_id} could not be deleted, continuing without it")
        if stats is not None:
            stats.record_asset(outcome)
        return outcome

    async def _delete_folder_tree(self, tree: FolderTree, folder_id: str, stats: CascadeStats, visited: set[str]) -> None:
        # a corrupt parent_id cycle would otherwise recurse forever
        if folder_id in visited:
            logger.warning(f"{tree.name.capitalize()} folder {folder_id} is its own ancestor, skipping")
            return
        visited.add(folder_id)

        children = await self.metadata.query(tree.folders, {"parent_id": folder_id})
        for child_id, _ in children:
            await self._delete_folder_tree(tree, child_id, stats, visited)

        stats.items += await self._delete_where(tree.items, {"folder_id": folder_id})
        if await self.metadata.delete(tree.folders, folder_id):
            stats.folders += 1

    async def _delete_project(self, project_id: str, stats: CascadeStats) -> None:
        for folder_path in get_all_folder_paths():
            await self._delete_project_folder_files(project_id, folder_path, stats)

        # sweep objects that were uploaded without (or lost) their file record
        prefix = project_asset_prefix(project_id)
        swept = await self.assets.destroy_prefix(prefix)
        for outcome in swept.values():
            stats.record_asset(outcome)
        if failed := [key for key, outcome in swept.items() if not outcome.ok]:
            logger.warning(f"Sweeping assets under {prefix} failed for {len(failed)} objects, continuing")

        deleted = await self._gather_bounded(
            [
                self._delete_where(Collection.FILE_READ_STATUS, {"project_id": project_id}),
                self._delete_where(Collection.REPORT_APPROVALS, {"project_id": project_id}),
            ]
        )
        stats.cross_references += sum(deleted)

        if await self.metadata.delete(Collection.PROJECTS, project_id):
            stats.projects += 1

    async def _delete_project_folder_files(self, project_id: str, folder_path: str, stats: CascadeStats) -> None:
        filters = {"project_id": project_id, "folder_key": folder_storage_key(folder_path)}
        files = await self.metadata.query(Collection.FILES, filters)
        await self._gather_bounded(self._delete_project_file(file, stats) for file in files)

    async def _delete_project_file(self, file: StoredRecord, stats: CascadeStats) -> None:
        id, doc = file
        if public_id := doc.get("public_id"):
            await self.destroy_asset(public_id, stats)
        if await self.metadata.delete(Collection.FILES, id):
            stats.files += 1

    async def _delete_where(self, collection: Collection, filters: Mapping[str, Any]) -> int:
        """Delete all records of one collection matching the filters in one batch."""
        records = await self.metadata.query(collection, filters)
        if not records:
            return 0
        return await self.metadata.batch_delete(collection, [id for id, _ in records])

    async def _gather_bounded(self, awaitables: Iterable[Awaitable[T]]) -> list[T]:
        """
        Run independent store calls concurrently, at most self.concurrency at a time.
        All calls run to completion; if any failed, the first failure is raised afterwards.
        """
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run(aw: Awaitable[T]) -> T:
            async with semaphore:
                return await aw

        results = await asyncio.gather(*(run(aw) for aw in awaitables), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results  # type: ignore[return-value]
