"""Two-step media upload: create the document, then attach the payload."""

import logging
from datetime import datetime, timezone
from typing import Any

from darkvision.exceptions import AttachmentError, StorageError
from darkvision.services.storage import MediaStorage

logger = logging.getLogger(__name__)


def new_video_document(filename: str) -> dict[str, Any]:
    return {
        "type": "video",
        "source": filename,
        "title": filename,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }


def new_image_document() -> dict[str, Any]:
    return {
        "type": "image",
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }


def upload_document(
    storage: MediaStorage,
    doc: dict[str, Any],
    attachment_name: str,
    data: bytes,
    content_type: str,
) -> dict[str, Any]:
    """Insert ``doc`` and attach ``data`` to it.

    If the attachment cannot be saved the freshly inserted document is deleted
    again, so no document is left without its media.

    Raises:
        StorageError: the document itself could not be created.
        AttachmentError: the payload could not be attached.
    """
    inserted = storage.insert(doc)
    logger.info("Created new document %s for %s", inserted["_id"], attachment_name)
    try:
        attached = storage.attach(inserted["_id"], attachment_name, data, content_type)
    except StorageError as e:
        logger.error("Failed to attach %s to %s: %s", attachment_name, inserted["_id"], e)
        try:
            storage.delete(inserted["_id"])
        except StorageError as cleanup_error:
            logger.warning("Failed to delete %s after attach error: %s", inserted["_id"], cleanup_error)
        raise AttachmentError("Error saving media attachment") from e
    logger.info("Upload completed for %s", inserted["_id"])
    return attached
