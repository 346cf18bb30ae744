"""Collaborator interfaces consumed by the search core."""

from abc import ABC, abstractmethod

from models.video import Video, VideoInsights


class VideoCatalog(ABC):
    """Lists known videos and performs server-side free-text search."""

    @abstractmethod
    async def list_videos(self) -> list[Video]:
        """Return every video of the account."""

    @abstractmethod
    async def search_videos(self, query: str) -> list[Video]:
        """Return videos matching the free-text query server-side.

        Args:
            query: Search query string

        Returns:
            Matching videos; empty when the service returns no results
        """


class InsightSource(ABC):
    """Supplies the insight record of a video."""

    @abstractmethod
    async def get_insights(self, video_id: str) -> VideoInsights:
        """Fetch the summarized insights of one video.

        Args:
            video_id: Identifier of a catalog video

        Returns:
            VideoInsights for the video
        """
