from pydantic import BaseModel, Field


class MediaCounts(BaseModel):
    count: int = 0
    analyzed: int = 0
    to_be_analyzed: int = 0


class StatusResponse(BaseModel):
    """Overview of the processing state, derived from the stored documents."""

    videos: MediaCounts = Field(default_factory=MediaCounts)
    images: MediaCounts = Field(default_factory=MediaCounts)
    frames: MediaCounts = Field(default_factory=MediaCounts)
