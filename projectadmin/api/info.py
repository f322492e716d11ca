"""API Endpoints for server information and the fixed project folder structure."""

import logging
from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter
from pydantic import BaseModel, Field

from projectadmin.connections import es, s3_enabled
from projectadmin.models import FolderNode
from projectadmin.taxonomy import (
    ADMIN_ONLY_FOLDER_PATH,
    PROJECT_FOLDER_STRUCTURE,
    get_all_folder_paths,
    get_default_folder_path,
    get_visible_folder_paths_for_edit,
)

logger = logging.getLogger(__name__)

app_info = APIRouter(tags=["informational"])


class TaxonomyResponse(BaseModel):
    folders: list[FolderNode] = Field(description="The complete folder tree every project has")
    all_paths: list[str] = Field(description="Every valid folder path, in order")
    visible_paths: list[str] = Field(description="Folder paths shown to admins for editing and to customers")
    default_path: str = Field(description="Folder opened when none is selected")
    admin_only_path: str = Field(description="Folder that is never shown to customers")


class HealthResponse(BaseModel):
    elastic: bool = Field(description="Whether elasticsearch is reachable")
    s3_enabled: bool = Field(description="Whether an asset store is configured")
    api_version: str = Field(description="The version of the projectadmin API")


def _api_version() -> str:
    try:
        return version("projectadmin")
    except PackageNotFoundError:
        return "unknown"


@app_info.get("/taxonomy")
def taxonomy() -> TaxonomyResponse:
    return TaxonomyResponse(
        folders=list(PROJECT_FOLDER_STRUCTURE),
        all_paths=get_all_folder_paths(),
        visible_paths=get_visible_folder_paths_for_edit(),
        default_path=get_default_folder_path(),
        admin_only_path=ADMIN_ONLY_FOLDER_PATH,
    )


@app_info.get("/health")
async def health() -> HealthResponse:
    try:
        elastic = await es().ping()
    except ConnectionError as e:
        logger.warning(f"Health check: {e}")
        elastic = False
    return HealthResponse(elastic=elastic, s3_enabled=s3_enabled(), api_version=_api_version())
