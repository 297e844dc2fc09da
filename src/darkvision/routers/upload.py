from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from darkvision.auth import require_admin
from darkvision.config import Settings
from darkvision.dependencies import get_settings, get_storage
from darkvision.services.storage import MediaStorage
from darkvision.services.upload import new_image_document, new_video_document, upload_document

router = APIRouter(prefix="/upload", tags=["upload"], dependencies=[Depends(require_admin)])


async def _read_upload(file: UploadFile, settings: Settings) -> bytes:
    data = await file.read()
    if len(data) > settings.max_upload_size_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    return data


@router.post("/video")
async def upload_video(
    file: UploadFile = File(...),
    storage: MediaStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Upload one video."""
    data = await _read_upload(file, settings)
    doc = new_video_document(file.filename or "upload.mp4")
    return upload_document(
        storage, doc, "video.mp4", data, file.content_type or "video/mp4"
    )


@router.post("/image")
async def upload_image(
    file: UploadFile = File(...),
    storage: MediaStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Upload one image."""
    data = await _read_upload(file, settings)
    return upload_document(
        storage, new_image_document(), "image.jpg", data, file.content_type or "image/jpeg"
    )
