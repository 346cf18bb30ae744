# Data models for vidseek
from .video import Video, VideoInsights, InsightEntity, Appearance, Keyframe, KeyframeInstance
from .tags import TagSet
from .credential import Credential
from .image_analysis import ImageAnalysis, Caption, ClassifiedTag
from .search import (
    TextQuery,
    ImageQuery,
    SearchQuery,
    SearchMode,
    ScoredResult,
    SearchOutcome,
)

__all__ = [
    "Video",
    "VideoInsights",
    "InsightEntity",
    "Appearance",
    "Keyframe",
    "KeyframeInstance",
    "TagSet",
    "Credential",
    # Image analysis
    "ImageAnalysis",
    "Caption",
    "ClassifiedTag",
    # Search
    "TextQuery",
    "ImageQuery",
    "SearchQuery",
    "SearchMode",
    "ScoredResult",
    "SearchOutcome",
]
