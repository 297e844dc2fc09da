"""Helpers deriving per-request values for the summary endpoint."""

from dataclasses import replace

from fastapi import Request

from darkvision.services.occurrences import FrameUrlBuilder
from darkvision.services.ranking import ThresholdConfig

UNBOUNDED = -1


def frame_url_builder(request: Request) -> FrameUrlBuilder:
    """Return a function mapping a frame id to its displayable image URL.

    The URL uses the protocol and host the client called us with.
    """
    base = f"{request.url.scheme}://{request.url.netloc}"

    def build(frame_id: str) -> str:
        return f"{base}/images/image/{frame_id}.jpg"

    return build


def override_thresholds(
    defaults: ThresholdConfig,
    *,
    minimum_occurrence: int | None = None,
    minimum_score: float | None = None,
    minimum_score_occurrence: int | None = None,
    maximum_count: int | None = None,
) -> ThresholdConfig:
    """Apply the query overrides that were given on top of ``defaults``.

    A ``maximum_count`` of -1 removes the cap of ``defaults``.

    Raises:
        ConfigurationError: the resulting combination is invalid.
    """
    changes: dict = {}
    if minimum_occurrence is not None:
        changes["minimum_occurrence"] = minimum_occurrence
    if minimum_score is not None:
        changes["minimum_score"] = minimum_score
    if minimum_score_occurrence is not None:
        changes["minimum_score_occurrence"] = minimum_score_occurrence
    if maximum_count == UNBOUNDED:
        changes["maximum_occurrence_count"] = None
    elif maximum_count is not None:
        changes["maximum_occurrence_count"] = maximum_count
    if not changes:
        return defaults
    return replace(defaults, **changes)
