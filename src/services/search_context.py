"""Per-process session object wiring clients, credential cache and services."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from services.search_orchestrator import SearchOrchestrator
from services.thumbnail_service import ThumbnailService
from services.video_indexer.client import VideoIndexerClient
from services.vision_service import ComputerVisionService

logger = logging.getLogger(__name__)


@dataclass
class SearchContext:
    """Everything a request needs, constructed once and passed by reference.

    Holds the only shared mutable state of the application: the indexer
    client's credential cache.
    """

    indexer: VideoIndexerClient
    vision: ComputerVisionService
    orchestrator: SearchOrchestrator
    thumbnails: ThumbnailService
    http_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls, config: dict, http_client: Optional[httpx.AsyncClient] = None
    ) -> "SearchContext":
        """Build the context from a load_config() dictionary.

        Args:
            config: Configuration dictionary
            http_client: Optional shared client; one is created and owned
                by the context when omitted
        """
        owned_client = http_client is None
        client = http_client or httpx.AsyncClient(timeout=config.get("http_timeout_seconds", 30.0))

        indexer = VideoIndexerClient(
            account_id=config.get("video_indexer_account_id", ""),
            location=config.get("video_indexer_location", "trial"),
            api_key=config.get("video_indexer_api_key", ""),
            base_url=config.get("video_indexer_base_url", VideoIndexerClient.BASE_URL),
            language=config.get("video_indexer_language", "English"),
            http_client=client,
        )
        vision = ComputerVisionService(
            endpoint=config.get("computer_vision_endpoint"),
            api_key=config.get("computer_vision_api_key"),
            http_client=client,
        )
        max_concurrent = config.get("max_concurrent_requests", 8)
        orchestrator = SearchOrchestrator(
            catalog=indexer,
            insight_source=indexer,
            max_concurrent_requests=max_concurrent,
            image_top_k=config.get("image_search_top_k", 10),
        )
        logger.info(
            f"Search context ready (location={indexer.location}, "
            f"max_concurrent={max_concurrent}, vision={'on' if vision.is_configured() else 'off'})"
        )
        return cls(
            indexer=indexer,
            vision=vision,
            orchestrator=orchestrator,
            thumbnails=ThumbnailService(indexer, max_concurrent=max_concurrent),
            http_client=client if owned_client else None,
        )

    async def close(self) -> None:
        """Release HTTP connections owned by the context."""
        if self.http_client is not None:
            await self.http_client.aclose()
