from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from darkvision.config import Settings
from darkvision.main import create_app
from darkvision.services.storage import MediaStorage


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", admin_username=None, admin_password=None)


@pytest.fixture
def storage(settings: Settings) -> MediaStorage:
    return MediaStorage(settings.data_dir)


@pytest.fixture
def test_app(settings: Settings):
    """Create the app on a temporary data dir."""
    return create_app(settings)


@pytest.fixture
def client(test_app) -> TestClient:
    with TestClient(test_app) as c:
        yield c


@pytest.fixture
def admin_settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", admin_username="admin", admin_password="secret")


@pytest.fixture
def admin_client(admin_settings: Settings) -> TestClient:
    with TestClient(create_app(admin_settings)) as c:
        yield c


@pytest.fixture
def make_frame(storage: MediaStorage):
    """Factory fixture storing a frame document with the given detections.

    ``faces`` are ``(name, score)`` pairs; a ``None`` name stores an
    unidentified face. ``keywords`` are ``(class, score)`` pairs.
    """

    def _factory(
        video_id: str | None,
        *,
        faces: list[tuple[str | None, float]] | None = None,
        keywords: list[tuple[str, float]] | None = None,
        frame_number: int | None = None,
        timecode: float | None = None,
    ) -> dict:
        analysis: dict = {}
        if faces is not None:
            analysis["face_detection"] = [
                {"identity": {"name": name, "score": score}} if name is not None
                else {"identity": {"score": score}}
                for name, score in faces
            ]
        if keywords is not None:
            analysis["image_keywords"] = [
                {"class": label, "score": score} for label, score in keywords
            ]
        doc: dict = {"type": "image", "frame_number": frame_number, "frame_timecode": timecode}
        if video_id is not None:
            doc["video_id"] = video_id
        if analysis:
            doc["analysis"] = analysis
        return storage.insert(doc)

    return _factory
