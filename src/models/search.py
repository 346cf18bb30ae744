"""Search query and result models."""

from dataclasses import dataclass, field
from typing import Union

from .image_analysis import ImageAnalysis
from .video import Video


@dataclass(frozen=True)
class TextQuery:
    """Free-text search; an empty query lists the whole catalog."""

    text: str


@dataclass(frozen=True)
class ImageQuery:
    """Search by the tags extracted from an analyzed image."""

    analysis: ImageAnalysis


SearchQuery = Union[TextQuery, ImageQuery]


class SearchMode:
    """Search mode constants."""

    LISTING = "listing"
    TEXT = "text"
    IMAGE = "image"


@dataclass
class ScoredResult:
    """A candidate video with its matching tags and relevance score."""

    video: Video
    matching_tags: list[str] = field(default_factory=list)
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "video": self.video.to_dict(),
            "matching_tags": list(self.matching_tags),
            "score": self.score,
        }


@dataclass
class SearchOutcome:
    """Ranked results plus warnings for candidates dropped along the way."""

    mode: str
    results: list[ScoredResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    failed_video_ids: list[str] = field(default_factory=list)
    query_tags: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_video_ids)

    def visible_results(self, include_zero: bool = False) -> list[ScoredResult]:
        """Results to present to the user.

        Zero-score rows are hidden for image searches only; text searches and
        listings always show every row.
        """
        if self.mode != SearchMode.IMAGE or include_zero:
            return list(self.results)
        return [r for r in self.results if r.score > 0]
