"""Group the detections of a video's frames by identity name and keyword class."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from darkvision.schemas.media import FaceDetection, FrameAnalysisRecord, KeywordDetection

logger = logging.getLogger(__name__)

FrameUrlBuilder = Callable[[str], str]


@dataclass(frozen=True)
class Occurrence:
    """One detection attributed to the frame it was found in."""

    detection: FaceDetection | KeywordDetection
    frame_id: str
    image_url: str
    timecode: float | str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = self.detection.model_dump(by_alias=True, exclude_unset=True)
        payload["image_id"] = self.frame_id
        payload["image_url"] = self.image_url
        payload["timecode"] = self.timecode
        return payload


@dataclass(frozen=True)
class CollectedOccurrences:
    faces: dict[str, tuple[Occurrence, ...]] = field(default_factory=dict)
    keywords: dict[str, tuple[Occurrence, ...]] = field(default_factory=dict)


def _score_or_floor(score: float | None) -> float:
    # a missing score never clears a minimum and never wins a tie-break
    return -math.inf if score is None else score


def face_score(occurrence: Occurrence) -> float:
    return _score_or_floor(occurrence.detection.identity.score)


def keyword_score(occurrence: Occurrence) -> float:
    return _score_or_floor(occurrence.detection.score)


def collect_occurrences(
    records: Iterable[FrameAnalysisRecord],
    build_frame_url: FrameUrlBuilder,
) -> CollectedOccurrences:
    """Bucket every named face and every keyword of ``records``, in frame order.

    Faces without an identity name cannot be attributed to anyone and are
    skipped. No scoring happens here.
    """
    faces: dict[str, list[Occurrence]] = defaultdict(list)
    keywords: dict[str, list[Occurrence]] = defaultdict(list)
    unnamed = 0

    for record in records:
        detections = record.faces
        labels = record.keywords
        if not detections and not labels:
            continue
        image_url = build_frame_url(record.frame_id)

        for face in detections:
            name = face.identity_name
            if name is None:
                unnamed += 1
                continue
            faces[name].append(
                Occurrence(face, record.frame_id, image_url, record.frame_timecode)
            )

        for keyword in labels:
            keywords[keyword.label].append(
                Occurrence(keyword, record.frame_id, image_url, record.frame_timecode)
            )

    if unnamed:
        logger.debug("Skipped %d unnamed face detections", unnamed)

    return CollectedOccurrences(
        faces={name: tuple(occ) for name, occ in faces.items()},
        keywords={label: tuple(occ) for label, occ in keywords.items()},
    )
