"""Schemas for media documents and the per-frame analysis stored on them.

Detections are written by the external analysis pipeline; fields this service
does not use (face location, age, gender, type hierarchy...) are kept as extra
attributes and passed through untouched.
"""

from pydantic import BaseModel, ConfigDict, Field


class FaceIdentity(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    score: float | None = None


class FaceDetection(BaseModel):
    """A face found in a frame, optionally matched to a known identity."""

    model_config = ConfigDict(extra="allow")

    identity: FaceIdentity | None = None

    @property
    def identity_name(self) -> str | None:
        if self.identity is None or not self.identity.name:
            return None
        return self.identity.name


class KeywordDetection(BaseModel):
    """A label/class detected in a frame."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    label: str = Field(alias="class")
    score: float | None = None


class ImageAnalysis(BaseModel):
    model_config = ConfigDict(extra="allow")

    face_detection: list[FaceDetection] | None = None
    image_keywords: list[KeywordDetection] | None = None


class FrameAnalysisRecord(BaseModel):
    """An analysed frame (or standalone image) as stored in the document store."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    frame_id: str = Field(alias="_id")
    video_id: str | None = None
    frame_timecode: float | str | None = None
    analysis: ImageAnalysis | None = None

    @property
    def faces(self) -> list[FaceDetection]:
        if self.analysis is None:
            return []
        return self.analysis.face_detection or []

    @property
    def keywords(self) -> list[KeywordDetection]:
        if self.analysis is None:
            return []
        return self.analysis.image_keywords or []
