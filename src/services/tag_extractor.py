"""Normalize queries, image analyses and video insights into tag sets."""

from models.image_analysis import ImageAnalysis
from models.tags import TagSet
from models.video import VideoInsights


def from_query_text(text: str) -> TagSet:
    """Split free text on whitespace into lower-cased tags."""
    return TagSet((text or "").split())


def from_image_analysis(analysis: ImageAnalysis) -> TagSet:
    """Description tags followed by classified tag names."""
    return TagSet([*analysis.description_tags, *(tag.name for tag in analysis.tags)])


def from_insights(insights: VideoInsights) -> TagSet:
    """Label, keyword and topic names of a video, in that order.

    Used for both text and image searches.
    """
    return TagSet(
        entity.name
        for entity in (*insights.labels, *insights.keywords, *insights.topics)
    )
