"""Thumbnail retrieval where a failed thumbnail never hides a video."""

import asyncio
import base64
import logging
from typing import Optional

from models.video import Video
from services.errors import AuthFailure, UpstreamFailure
from services.video_indexer.client import VideoIndexerClient

logger = logging.getLogger(__name__)


def to_data_uri(image: bytes, media_type: str = "image/jpeg") -> str:
    """Embed image bytes in a data URI for JSON responses."""
    return f"data:{media_type};base64,{base64.b64encode(image).decode('ascii')}"


class ThumbnailService:
    """Fetches video thumbnails concurrently.

    Failures are downgraded to "no thumbnail" for the affected video only.
    """

    def __init__(self, client: VideoIndexerClient, max_concurrent: int = 8):
        self.client = client
        self.max_concurrent = max_concurrent

    async def fetch_thumbnail(self, video: Video) -> Optional[bytes]:
        """Return the thumbnail of one video, or None if it has none or the fetch fails."""
        if not video.thumbnail_id:
            return None
        try:
            return await self.client.get_thumbnail(video.id, video.thumbnail_id)
        except (UpstreamFailure, AuthFailure) as e:
            logger.error(f"Error generating thumbnail for video {video.id}: {e}")
            return None

    async def fetch_thumbnails(self, videos: list[Video]) -> dict[str, Optional[bytes]]:
        """Fetch thumbnails for many videos.

        Args:
            videos: Videos to fetch thumbnails for

        Returns:
            Mapping of video id to JPEG bytes, or None where unavailable
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_one(video: Video) -> tuple[str, Optional[bytes]]:
            async with semaphore:
                return video.id, await self.fetch_thumbnail(video)

        results = await asyncio.gather(*(fetch_one(v) for v in videos))
        thumbnails = dict(results)
        missing = sum(1 for t in thumbnails.values() if t is None)
        if missing:
            logger.debug(f"{missing} of {len(videos)} videos have no thumbnail")
        return thumbnails
