"""Project administration API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from projectadmin.api.catalog import app_catalog
from projectadmin.api.gallery import app_gallery
from projectadmin.api.info import app_info
from projectadmin.api.offers import app_offers
from projectadmin.api.projects import app_projects
from projectadmin.cascade import CascadeFailed
from projectadmin.connections import projectadmin_connections
from projectadmin.elastic.indices import create_or_update_indices
from projectadmin.stores import RecordNotFound


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with projectadmin_connections():
        logging.info("Initializing metadata indices...")
        await create_or_update_indices()
        yield


app = FastAPI(
    title="projectadmin",
    description=__doc__ if __doc__ else "",
    openapi_tags=[
        dict(name="catalog", description="Endpoints to create, list, update, and delete catalog folders and entries"),
        dict(name="offers", description="Endpoints to create, list, update, and delete offer folders and items"),
        dict(name="projects", description="Endpoints to delete projects and customers, and to manage project files"),
        dict(name="gallery", description="Endpoints to manage gallery images"),
        dict(name="informational", description="Server health and the project folder structure"),
    ],
    lifespan=lifespan,
)
app.include_router(app_info)
app.include_router(app_catalog)
app.include_router(app_offers)
app.include_router(app_projects)
app.include_router(app_gallery)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.exception_handler(ValueError)
async def value_error_exception_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"message": str(exc)},
    )


@app.exception_handler(PermissionError)
async def permission_error_exception_handler(request: Request, exc: PermissionError):
    return JSONResponse(
        status_code=403,
        content={"message": str(exc)},
    )


@app.exception_handler(RecordNotFound)
async def not_found_exception_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(
        status_code=404,
        content={"message": str(exc)},
    )


@app.exception_handler(CascadeFailed)
async def cascade_failed_exception_handler(request: Request, exc: CascadeFailed):
    # the cause is logged by the cascade engine, do not leak it to the client
    return JSONResponse(
        status_code=500,
        content={"message": f"Could not delete {exc.kind} {exc.id}, please try again"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"message": "There was an issue with the data you sent.", "fields_invalid": exc.errors()}
    )
