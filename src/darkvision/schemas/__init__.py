"""DarkVision schemas."""

from darkvision.schemas.media import (
    FaceDetection,
    FaceIdentity,
    FrameAnalysisRecord,
    ImageAnalysis,
    KeywordDetection,
)
from darkvision.schemas.status import MediaCounts, StatusResponse
from darkvision.schemas.summary import SummaryResponse

__all__ = [
    "FaceDetection",
    "FaceIdentity",
    "FrameAnalysisRecord",
    "ImageAnalysis",
    "KeywordDetection",
    "MediaCounts",
    "StatusResponse",
    "SummaryResponse",
]
