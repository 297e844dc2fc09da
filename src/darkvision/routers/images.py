import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from darkvision.auth import require_admin
from darkvision.dependencies import get_storage
from darkvision.services.storage import MediaStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


@router.get("/images/{kind}/{doc_id}.jpg")
async def get_image_attachment(
    kind: str,
    doc_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> FileResponse:
    """Return an image attachment, e.g. a video thumbnail or an uploaded image."""
    path = storage.attachment_path(doc_id, f"{kind}.jpg")
    return FileResponse(path, media_type="image/jpeg")


@router.get("/api/images")
async def list_images(storage: MediaStorage = Depends(get_storage)) -> list[dict[str, Any]]:
    """Return all standalone images (images not linked to a video)."""
    return storage.images()


@router.get("/api/images/{image_id}/reset", dependencies=[Depends(require_admin)])
async def reset_image(
    image_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> dict[str, Any]:
    """Remove the analysis from one image."""
    return storage.image_reset(image_id)


@router.delete("/api/images/{image_id}", dependencies=[Depends(require_admin)])
async def delete_image(
    image_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> dict[str, Any]:
    """Delete a single image."""
    return storage.delete(image_id)
