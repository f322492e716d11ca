"""
Project files: listing and single-file deletion.

Files are stored per (project, folder) using the flattened folder key from projectadmin.paths.
Customers never see or delete anything in the admin-only folder.
"""

import logging

from projectadmin.cascade import CascadeEngine
from projectadmin.models import AssetOutcome, Collection, ProjectFile
from projectadmin.paths import folder_storage_key
from projectadmin.stores import MetadataStore, RecordNotFound
from projectadmin.taxonomy import is_admin_only_path, is_valid_folder_path

logger = logging.getLogger(__name__)


async def list_project_files(
    store: MetadataStore, project_id: str, folder_path: str, customer_view: bool = False
) -> list[ProjectFile]:
    """
    List the files of a project folder, newest first.
    In the customer view, admin-only and unknown folders are simply empty.
    """
    if not is_valid_folder_path(folder_path):
        if customer_view:
            return []
        raise ValueError(f"Unknown folder path {folder_path!r}")
    if customer_view and is_admin_only_path(folder_path):
        return []

    filters = {"project_id": project_id, "folder_key": folder_storage_key(folder_path)}
    records = await store.query(Collection.FILES, filters)
    files = [ProjectFile.from_record(id, doc) for id, doc in records]
    return sorted(files, key=lambda f: f.uploaded_at, reverse=True)


async def delete_project_file(
    engine: CascadeEngine, project_id: str, folder_path: str, file_id: str, by_customer: bool = False
) -> AssetOutcome | None:
    """
    Delete one project file: its asset (advisory), the read statuses and approvals that refer to it,
    and finally its record. Deleting a file that no longer exists is not an error.

    Returns the outcome of the asset deletion, or None if no asset deletion was attempted.
    """
    if not is_valid_folder_path(folder_path):
        raise ValueError(f"Unknown folder path {folder_path!r}")
    if by_customer and is_admin_only_path(folder_path):
        raise PermissionError(f"Customers cannot delete files in {folder_path}")

    doc = await engine.metadata.get(Collection.FILES, file_id)
    if doc is None:
        logger.debug(f"File {file_id} in project {project_id} was already deleted")
        return None
    file = ProjectFile.from_record(file_id, doc)
    if file.project_id != project_id or file.folder_key != folder_storage_key(folder_path):
        raise RecordNotFound(Collection.FILES, file_id)

    # the file record goes last: while it exists, a failed delete can be retried
    outcome = None
    if file.public_id:
        outcome = await engine.destroy_asset(file.public_id)
        await engine.delete_file_related_data(project_id, file.public_id)
    await engine.metadata.delete(Collection.FILES, file_id)
    logger.info(f"Deleted file {file_id} ({file.file_name}) from {folder_path} in project {project_id}")
    return outcome
