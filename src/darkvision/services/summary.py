"""Video summary: the most relevant faces and keywords found in a video's frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from darkvision.exceptions import UpstreamError
from darkvision.schemas.media import FrameAnalysisRecord
from darkvision.services.occurrences import (
    FrameUrlBuilder,
    Occurrence,
    collect_occurrences,
    face_score,
    keyword_score,
)
from darkvision.services.ranking import RankedEntry, ThresholdConfig, rank_occurrences

if TYPE_CHECKING:
    from darkvision.services.storage import MediaStorage

logger = logging.getLogger(__name__)


@dataclass
class SummaryResult:
    """A video with its kept faces and keywords, each mapped to its best occurrence."""

    video: dict[str, Any]
    faces: dict[str, list[Occurrence]] = field(default_factory=dict)
    keywords: dict[str, list[Occurrence]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "video": self.video,
            "face_detection": {
                name: [o.to_dict() for o in occurrences]
                for name, occurrences in self.faces.items()
            },
            "image_keywords": {
                label: [o.to_dict() for o in occurrences]
                for label, occurrences in self.keywords.items()
            },
        }


def _as_mapping(entries: list[RankedEntry[Occurrence]]) -> dict[str, list[Occurrence]]:
    return {entry.key: [entry.occurrence] for entry in entries}


class SummaryService:
    """Builds video summaries from the documents in a MediaStorage."""

    def __init__(
        self,
        storage: MediaStorage,
        face_thresholds: ThresholdConfig,
        keyword_thresholds: ThresholdConfig,
    ) -> None:
        self._storage = storage
        self._face_thresholds = face_thresholds
        self._keyword_thresholds = keyword_thresholds

    @property
    def face_thresholds(self) -> ThresholdConfig:
        return self._face_thresholds

    @property
    def keyword_thresholds(self) -> ThresholdConfig:
        return self._keyword_thresholds

    def summarize(
        self,
        video_id: str,
        build_frame_url: FrameUrlBuilder,
        face_thresholds: ThresholdConfig | None = None,
        keyword_thresholds: ThresholdConfig | None = None,
    ) -> SummaryResult:
        """Summarize one video.

        Raises:
            NotFoundError: the video does not exist.
            UpstreamError: the store failed while fetching the video or frames.
        """
        face_thresholds = face_thresholds or self._face_thresholds
        keyword_thresholds = keyword_thresholds or self._keyword_thresholds
        face_thresholds.validate()
        keyword_thresholds.validate()

        logger.info("Retrieving video %s", video_id)
        video = self._storage.get(video_id)

        logger.info("Retrieving images for %s", video_id)
        try:
            records = [
                FrameAnalysisRecord.model_validate(doc)
                for doc in self._storage.video_images(video_id)
            ]
        except ValidationError as e:
            raise UpstreamError(f"Malformed frame analysis for video {video_id}: {e}") from e

        logger.info("Sorting analysis for video %s (%d frames)", video_id, len(records))
        collected = collect_occurrences(records, build_frame_url)

        logger.info("Filtering faces for video %s", video_id)
        faces = rank_occurrences(
            collected.faces, face_score, face_thresholds, label="faces"
        )

        logger.info("Filtering keywords for video %s", video_id)
        keywords = rank_occurrences(
            collected.keywords, keyword_score, keyword_thresholds, label="keywords"
        )

        return SummaryResult(
            video=video,
            faces=_as_mapping(faces),
            keywords=_as_mapping(keywords),
        )
