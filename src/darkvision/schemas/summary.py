from typing import Any

from pydantic import BaseModel, Field


class SummaryResponse(BaseModel):
    """Most relevant faces and keywords of a video, best first.

    Each kept name/class maps to a list holding its single best occurrence.
    """

    video: dict[str, Any]
    face_detection: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    image_keywords: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
