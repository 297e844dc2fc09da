import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from darkvision.auth import require_admin
from darkvision.dependencies import get_storage, get_summary_service
from darkvision.schemas.summary import SummaryResponse
from darkvision.services.storage import MediaStorage
from darkvision.services.summary import SummaryService
from darkvision.utils.request import frame_url_builder, override_thresholds

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.get("")
async def list_videos(storage: MediaStorage = Depends(get_storage)) -> list[dict[str, Any]]:
    """Return all videos."""
    return storage.videos()


@router.get("/{video_id}")
async def get_video(
    video_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> dict[str, Any]:
    """Return the video and its metadata."""
    return storage.get(video_id)


@router.get("/{video_id}/summary", response_model=SummaryResponse)
async def get_video_summary(
    video_id: str,
    request: Request,
    face_min_occurrence: int | None = Query(default=None),
    face_min_score: float | None = Query(default=None),
    face_min_score_occurrence: int | None = Query(default=None),
    face_max_count: int | None = Query(default=None),
    keyword_min_occurrence: int | None = Query(default=None),
    keyword_min_score: float | None = Query(default=None),
    keyword_min_score_occurrence: int | None = Query(default=None),
    keyword_max_count: int | None = Query(default=None),
    summary: SummaryService = Depends(get_summary_service),
) -> SummaryResponse:
    """Return the most relevant faces and keywords of one video.

    Every threshold can be overridden for this call through the query string.
    A max count of -1 lifts the cap.
    """
    face_thresholds = override_thresholds(
        summary.face_thresholds,
        minimum_occurrence=face_min_occurrence,
        minimum_score=face_min_score,
        minimum_score_occurrence=face_min_score_occurrence,
        maximum_count=face_max_count,
    )
    keyword_thresholds = override_thresholds(
        summary.keyword_thresholds,
        minimum_occurrence=keyword_min_occurrence,
        minimum_score=keyword_min_score,
        minimum_score_occurrence=keyword_min_score_occurrence,
        maximum_count=keyword_max_count,
    )
    result = summary.summarize(
        video_id,
        frame_url_builder(request),
        face_thresholds=face_thresholds,
        keyword_thresholds=keyword_thresholds,
    )
    return SummaryResponse.model_validate(result.to_dict())


@router.get("/{video_id}/related")
async def get_related_videos(
    video_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> list[dict[str, Any]]:
    """Return related videos. Currently all analysed videos but the given one."""
    return [v for v in storage.videos() if v["_id"] != video_id and v.get("metadata")]


@router.get("/{video_id}/images")
async def get_video_images(
    video_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> list[dict[str, Any]]:
    """Return all frames of a video with their analysis, in frame order."""
    images = storage.video_images(video_id)
    images.sort(key=lambda d: (d.get("frame_number") is None, d.get("frame_number") or 0))
    return images


@router.get("/{video_id}/reset", dependencies=[Depends(require_admin)])
async def reset_video(
    video_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> dict[str, Any]:
    """Delete all generated data for one video so that it gets analysed again."""
    result = storage.video_reset(video_id)
    logger.info("Video %s reset", video_id)
    return result


@router.get("/{video_id}/reset-images", dependencies=[Depends(require_admin)])
async def reset_video_images(
    video_id: str,
    storage: MediaStorage = Depends(get_storage),
) -> list[dict[str, Any]]:
    """Delete the analysis of every frame of a video so they get analysed again."""
    result = storage.video_images_reset(video_id)
    logger.info("Frames of video %s reset", video_id)
    return result
