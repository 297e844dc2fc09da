"""JSON document store and attachment store for videos, frames and images.

Layout under ``data_dir``::

    documents/{doc_id}.json
    attachments/{doc_id}/{attachment_name}
"""

import json
import logging
import tempfile
import uuid
from pathlib import Path
from typing import Any

from darkvision.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

# attachments produced by the upload itself; everything else is generated
_SOURCE_ATTACHMENTS = {"video.mp4", "image.jpg"}


class MediaStorage:
    """Manages media documents and their binary attachments on disk."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._documents_dir = data_dir / "documents"
        self._attachments_dir = data_dir / "attachments"
        self._documents_dir.mkdir(parents=True, exist_ok=True)
        self._attachments_dir.mkdir(parents=True, exist_ok=True)

    # -- documents -----------------------------------------------------------

    def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        stored = dict(doc)
        stored["_id"] = stored.get("_id") or uuid.uuid4().hex
        stored.pop("_rev", None)
        self._write(stored)
        logger.info("Created %s document %s", stored.get("type", "media"), stored["_id"])
        return stored

    def get(self, doc_id: str) -> dict[str, Any]:
        path = self._document_path(doc_id)
        if not path.exists():
            raise NotFoundError(f"Document {doc_id} not found")
        try:
            return json.loads(path.read_text("utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise StorageError(f"Failed to read document {doc_id}: {e}") from e

    def update(self, doc: dict[str, Any]) -> dict[str, Any]:
        doc_id = doc.get("_id")
        if not doc_id or not self._document_path(doc_id).exists():
            raise NotFoundError(f"Document {doc_id} not found")
        stored = dict(doc)
        self._write(stored)
        return stored

    def delete(self, doc_id: str) -> dict[str, Any]:
        doc = self.get(doc_id)
        try:
            self._document_path(doc_id).unlink(missing_ok=True)
            attachment_dir = self._attachments_dir / doc_id
            if attachment_dir.is_dir():
                for p in attachment_dir.iterdir():
                    p.unlink()
                attachment_dir.rmdir()
        except OSError as e:
            raise StorageError(f"Failed to delete document {doc_id}: {e}") from e
        logger.info("Deleted document %s", doc_id)
        return {"id": doc_id, "rev": doc.get("_rev"), "deleted": True}

    def all_documents(self) -> list[dict[str, Any]]:
        docs: list[dict[str, Any]] = []
        for path in sorted(self._documents_dir.glob("*.json")):
            try:
                docs.append(json.loads(path.read_text("utf-8")))
            except (json.JSONDecodeError, OSError) as e:
                raise StorageError(f"Failed to read {path.name}: {e}") from e
        return docs

    # -- attachments ---------------------------------------------------------

    def attach(
        self, doc_id: str, name: str, data: bytes, content_type: str
    ) -> dict[str, Any]:
        doc = self.get(doc_id)
        dest = self._attachments_dir / doc_id / name
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to store {name} for {doc_id}: {e}") from e
        doc.setdefault("_attachments", {})[name] = {
            "content_type": content_type,
            "length": len(data),
        }
        self._write(doc)
        logger.info("Attached %s (%d bytes) to %s", name, len(data), doc_id)
        return doc

    def attachment_path(self, doc_id: str, name: str) -> Path:
        base = (self._attachments_dir / doc_id).resolve()
        path = (base / name).resolve()
        # reject ids and names that escape the document's attachment directory
        if (
            base.parent != self._attachments_dir.resolve()
            or path.parent != base
            or not path.is_file()
        ):
            raise NotFoundError(f"Attachment {name} not found for {doc_id}")
        return path

    # -- queries -------------------------------------------------------------

    def videos(self) -> list[dict[str, Any]]:
        """All videos, newest first."""
        result = [d for d in self.all_documents() if d.get("type") == "video"]
        result.sort(key=lambda d: d.get("createdAt") or "", reverse=True)
        return result

    def images(self) -> list[dict[str, Any]]:
        """Images uploaded on their own, i.e. not extracted from a video."""
        return [
            d for d in self.all_documents()
            if d.get("type") == "image" and not d.get("video_id")
        ]

    def video_images(self, video_id: str) -> list[dict[str, Any]]:
        return [
            d for d in self.all_documents()
            if d.get("type") == "image" and d.get("video_id") == video_id
        ]

    # -- reset ---------------------------------------------------------------

    def image_reset(self, image_id: str) -> dict[str, Any]:
        doc = self.get(image_id)
        if "analysis" not in doc:
            return doc
        del doc["analysis"]
        self._write(doc)
        logger.info("Removed analysis from image %s", image_id)
        return doc

    def video_reset(self, video_id: str) -> dict[str, Any]:
        """Delete frames and generated data of a video so it gets analysed again."""
        doc = self.get(video_id)
        frames = self.video_images(video_id)
        for frame in frames:
            self.delete(frame["_id"])

        doc.pop("metadata", None)
        attachments = doc.get("_attachments", {})
        for name in list(attachments):
            if name in _SOURCE_ATTACHMENTS:
                continue
            try:
                (self._attachments_dir / video_id / name).unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to remove {name} of {video_id}: {e}") from e
            del attachments[name]
        self._write(doc)
        logger.info("Reset video %s (%d frames deleted)", video_id, len(frames))
        return doc

    def video_images_reset(self, video_id: str) -> list[dict[str, Any]]:
        self.get(video_id)
        return [self.image_reset(frame["_id"]) for frame in self.video_images(video_id)]

    # -- status --------------------------------------------------------------

    def status(self) -> dict[str, dict[str, int]]:
        counts = {
            kind: {"count": 0, "analyzed": 0, "to_be_analyzed": 0}
            for kind in ("videos", "images", "frames")
        }
        for doc in self.all_documents():
            if doc.get("type") == "video":
                kind, done = "videos", bool(doc.get("metadata"))
            elif doc.get("type") == "image":
                kind = "frames" if doc.get("video_id") else "images"
                done = "analysis" in doc
            else:
                continue
            counts[kind]["count"] += 1
            counts[kind]["analyzed" if done else "to_be_analyzed"] += 1
        return counts

    # -- internal ------------------------------------------------------------

    def _document_path(self, doc_id: str) -> Path:
        return self._documents_dir / f"{Path(doc_id).name}.json"

    def _write(self, doc: dict[str, Any]) -> None:
        generation = int(str(doc.get("_rev", "0-")).split("-", 1)[0] or 0) + 1
        doc["_rev"] = f"{generation}-{uuid.uuid4().hex}"
        try:
            self._atomic_write(
                self._document_path(doc["_id"]),
                json.dumps(doc, ensure_ascii=False, indent=2, default=str),
            )
        except OSError as e:
            raise StorageError(f"Failed to write document {doc['_id']}: {e}") from e

    @staticmethod
    def _atomic_write(dest: Path, content: str) -> None:
        """Write via temp file + rename to avoid partial writes."""
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=str(dest.parent), suffix=".tmp"
        )
        try:
            with open(tmp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(dest)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
