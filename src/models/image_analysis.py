"""Data models for image analysis results."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Caption:
    text: str
    confidence: float = 0.0


@dataclass(frozen=True)
class ClassifiedTag:
    name: str
    confidence: float = 0.0


@dataclass
class ImageAnalysis:
    """Tags and captions produced by the image-analysis service.

    The search core never calls the analysis service itself; it receives an
    already-parsed ImageAnalysis and turns it into a query tag set.
    """

    description_tags: list[str] = field(default_factory=list)
    captions: list[Caption] = field(default_factory=list)
    tags: list[ClassifiedTag] = field(default_factory=list)
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> "ImageAnalysis":
        """Parse an `analyze` response with the Tags and Description features."""
        description = data.get("description") or {}
        return cls(
            description_tags=[str(t) for t in description.get("tags") or []],
            captions=[
                Caption(text=c.get("text", ""), confidence=float(c.get("confidence") or 0))
                for c in description.get("captions") or []
            ],
            tags=[
                ClassifiedTag(name=t.get("name", ""), confidence=float(t.get("confidence") or 0))
                for t in data.get("tags") or []
            ],
            raw=data,
        )

    @property
    def caption(self) -> Optional[Caption]:
        """Best caption, if the service returned any."""
        return self.captions[0] if self.captions else None

    def to_dict(self) -> dict:
        caption = self.caption
        return {
            "caption": caption.text if caption else None,
            "caption_confidence": caption.confidence if caption else None,
            "description_tags": list(self.description_tags),
            "tags": [{"name": t.name, "confidence": t.confidence} for t in self.tags],
        }
