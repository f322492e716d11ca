"""API Endpoints for the image gallery."""

from fastapi import APIRouter, Depends, status

from projectadmin.api.dependencies import get_engine
from projectadmin.cascade import CascadeEngine
from projectadmin.catalog import delete_gallery_image

app_gallery = APIRouter(tags=["gallery"])


@app_gallery.delete("/gallery/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(image_id: str, engine: CascadeEngine = Depends(get_engine)):
    await delete_gallery_image(engine, image_id)
