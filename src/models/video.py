"""Video-related data models."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Video:
    """A video known to the indexing service.

    Owned by the remote catalog; instances are read-only projections of the
    catalog's JSON (camelCase keys) and are only referenced here.
    """

    id: str
    name: str = ""
    duration_in_seconds: float = 0.0
    thumbnail_id: Optional[str] = None
    created: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Video":
        """Build a Video from a catalog or search result entry."""
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            duration_in_seconds=float(data.get("durationInSeconds") or 0),
            thumbnail_id=data.get("thumbnailId") or None,
            created=data.get("created"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "duration_in_seconds": self.duration_in_seconds,
            "thumbnail_id": self.thumbnail_id,
            "created": self.created,
        }


@dataclass(frozen=True)
class Appearance:
    """Time range in which an insight entity appears."""

    start_time: str
    end_time: str


@dataclass
class InsightEntity:
    """A named insight (label, keyword, topic, sentiment, emotion...)."""

    name: str
    appearances: list[Appearance] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "InsightEntity":
        # Sentiments are keyed by sentimentKey, emotions and audio effects by type
        name = data.get("name") or data.get("sentimentKey") or data.get("type") or ""
        appearances = [
            Appearance(
                start_time=str(a.get("startTime", "")),
                end_time=str(a.get("endTime", "")),
            )
            for a in data.get("appearances") or []
        ]
        return cls(name=str(name), appearances=appearances)


INSIGHT_CATEGORIES = {
    "sentiments": "sentiments",
    "emotions": "emotions",
    "audio_effects": "audioEffects",
    "labels": "labels",
    "faces": "faces",
    "keywords": "keywords",
    "topics": "topics",
}


@dataclass
class VideoInsights:
    """Summarized insights for one video.

    Only labels, keywords and topics take part in ranking; the other
    categories are carried for display.
    """

    id: str
    name: str = ""
    duration_in_seconds: float = 0.0
    sentiments: list[InsightEntity] = field(default_factory=list)
    emotions: list[InsightEntity] = field(default_factory=list)
    audio_effects: list[InsightEntity] = field(default_factory=list)
    labels: list[InsightEntity] = field(default_factory=list)
    faces: list[InsightEntity] = field(default_factory=list)
    keywords: list[InsightEntity] = field(default_factory=list)
    topics: list[InsightEntity] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict, video_id: Optional[str] = None) -> "VideoInsights":
        """Parse the index response of the indexing service.

        Args:
            data: JSON body of the video index request
            video_id: Fallback id when the payload does not carry one

        Returns:
            VideoInsights with missing categories left empty
        """
        summarized = data.get("summarizedInsights") or {}
        categories = {
            attr: [InsightEntity.from_api(item) for item in summarized.get(key) or []]
            for attr, key in INSIGHT_CATEGORIES.items()
        }
        return cls(
            id=str(data.get("id") or video_id or ""),
            name=data.get("name") or "",
            duration_in_seconds=float(data.get("durationInSeconds") or 0),
            **categories,
        )

    def to_dict(self) -> dict:
        def names(entities: list[InsightEntity]) -> list[str]:
            return [e.name for e in entities]

        return {
            "id": self.id,
            "name": self.name,
            "duration_in_seconds": self.duration_in_seconds,
            **{attr: names(getattr(self, attr)) for attr in INSIGHT_CATEGORIES},
        }


@dataclass(frozen=True)
class KeyframeInstance:
    start: str
    thumbnail_id: str


@dataclass
class Keyframe:
    """A keyframe detected by the indexer, with its thumbnail instances."""

    id: str
    instances: list[KeyframeInstance] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "Keyframe":
        return cls(
            id=str(data.get("id", "")),
            instances=[
                KeyframeInstance(
                    start=str(i.get("start", "")),
                    thumbnail_id=str(i.get("thumbnailId", "")),
                )
                for i in data.get("instances") or []
            ],
        )
