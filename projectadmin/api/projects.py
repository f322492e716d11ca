"""API Endpoints for deleting projects and customers, and for the files of a project."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, Field

from projectadmin.api.dependencies import get_engine, get_metadata_store
from projectadmin.cascade import CascadeEngine
from projectadmin.files import delete_project_file, list_project_files
from projectadmin.models import ProjectFile
from projectadmin.stores import MetadataStore

app_projects = APIRouter(tags=["projects"])


class RelatedDataBody(BaseModel):
    file_path: str = Field(description="Asset store key (public id) of the file")


@app_projects.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, engine: CascadeEngine = Depends(get_engine)):
    """
    Delete a project with all its files, read statuses and report approvals.
    If this fails, the project may be partially deleted and the request can be repeated.
    """
    await engine.delete_project_cascade(project_id)


@app_projects.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: str, engine: CascadeEngine = Depends(get_engine)):
    """Delete a customer and all of its projects."""
    await engine.delete_customer_cascade(customer_id)


@app_projects.get("/projects/{project_id}/files")
async def list_files(
    project_id: str,
    folder_path: Annotated[str, Query(description="Taxonomy folder path, e.g. 02_Photos/Before")],
    customer_view: Annotated[bool, Query(description="List as the customer would see it")] = False,
    store: MetadataStore = Depends(get_metadata_store),
) -> list[ProjectFile]:
    return await list_project_files(store, project_id, folder_path, customer_view=customer_view)


@app_projects.delete("/projects/{project_id}/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    project_id: str,
    file_id: str,
    folder_path: Annotated[str, Query(description="Taxonomy folder path of the file")],
    by_customer: Annotated[bool, Query(description="The deletion is requested by the customer")] = False,
    engine: CascadeEngine = Depends(get_engine),
):
    """Delete a file, its asset, and the read statuses and approvals that refer to it."""
    await delete_project_file(engine, project_id, folder_path, file_id, by_customer=by_customer)


@app_projects.post("/projects/{project_id}/files/related-data/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_related_data(
    project_id: str,
    body: Annotated[RelatedDataBody, Body(...)],
    engine: CascadeEngine = Depends(get_engine),
):
    """Delete the read statuses and report approvals of a file that was removed by other means."""
    await engine.delete_file_related_data(project_id, body.file_path)
