"""Pydantic request/response models for the vidseek API."""

from pydantic import BaseModel, Field

# =============================================================================
# Response Models
# =============================================================================


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str

    model_config = {"json_schema_extra": {"examples": [{"message": "vidseek API", "version": "1.0.0"}]}}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "healthy"}]}}


class ErrorResponse(BaseModel):
    """Generic error body."""

    error: str


class VideoResponse(BaseModel):
    """A catalog video."""

    id: str
    name: str
    duration_in_seconds: float
    thumbnail_id: str | None = None
    created: str | None = None
    thumbnail: str | None = Field(default=None, description="JPEG thumbnail as a data URI")


class ScoredVideoResponse(BaseModel):
    """A ranked search result."""

    video: VideoResponse
    matching_tags: list[str]
    score: float = Field(ge=0.0, le=1.0)


class SearchResponse(BaseModel):
    """Ranked results of a text search or a catalog listing."""

    mode: str
    query_tags: list[str] = []
    results: list[ScoredVideoResponse]
    warnings: list[str] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "mode": "text",
                    "query_tags": ["cat", "dog"],
                    "results": [
                        {
                            "video": {
                                "id": "a1b2c3",
                                "name": "Dogs in the park",
                                "duration_in_seconds": 42.0,
                            },
                            "matching_tags": ["dog"],
                            "score": 0.5,
                        }
                    ],
                    "warnings": [],
                }
            ]
        }
    }


class TaggedItem(BaseModel):
    name: str
    confidence: float


class ImageAnalysisResponse(BaseModel):
    """Summary of an image analysis."""

    caption: str | None = None
    caption_confidence: float | None = None
    description_tags: list[str]
    tags: list[TaggedItem]


class ImageSearchResponse(SearchResponse):
    """Ranked results of a search by image, with the analysis that drove it."""

    analysis: ImageAnalysisResponse


class VideoInsightsResponse(BaseModel):
    """Insight names per category for the details view."""

    id: str
    name: str
    duration_in_seconds: float
    sentiments: list[str]
    emotions: list[str]
    audio_effects: list[str]
    labels: list[str]
    faces: list[str]
    keywords: list[str]
    topics: list[str]


class KeyframeInstanceResponse(BaseModel):
    start: str
    thumbnail_id: str


class KeyframeResponse(BaseModel):
    id: str
    instances: list[KeyframeInstanceResponse]


class UploadResponse(BaseModel):
    """Response when a video is uploaded."""

    id: str
    message: str


class DownloadUrlResponse(BaseModel):
    url: str
