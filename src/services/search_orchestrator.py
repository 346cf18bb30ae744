"""Search orchestration: candidate retrieval, insight fan-out, scoring and ranking.

Responsibilities:
- Turn a text or image query into a query tag set
- Narrow candidates server-side for text queries, use the whole catalog for images
- Fetch every candidate's insights concurrently under a concurrency limit
- Drop candidates whose insights cannot be fetched instead of failing the search
- Score, sort and truncate the results
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Optional

from models.image_analysis import ImageAnalysis
from models.search import (
    ImageQuery,
    ScoredResult,
    SearchMode,
    SearchOutcome,
    SearchQuery,
    TextQuery,
)
from models.tags import TagSet
from models.video import Video
from services import relevance_scorer, tag_extractor
from services.errors import UpstreamFailure
from services.video_indexer.base import InsightSource, VideoCatalog
from utils.logging import clear_search_context, set_search_context

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 8
DEFAULT_IMAGE_TOP_K = 10


def rank(results: list[ScoredResult]) -> list[ScoredResult]:
    """Sort by descending score; ties keep their incoming order."""
    return sorted(results, key=lambda r: r.score, reverse=True)


class SearchOrchestrator:
    """Ranks catalog videos against text or image queries.

    Stateless between calls: every search re-fetches candidates and insights.
    """

    def __init__(
        self,
        catalog: VideoCatalog,
        insight_source: InsightSource,
        max_concurrent_requests: int = DEFAULT_MAX_CONCURRENT,
        image_top_k: int = DEFAULT_IMAGE_TOP_K,
    ):
        """Initialize the orchestrator.

        Args:
            catalog: Lists and searches videos
            insight_source: Supplies per-video insights
            max_concurrent_requests: Maximum insight requests in flight per search
            image_top_k: Number of results kept for image searches
        """
        if max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        self.catalog = catalog
        self.insight_source = insight_source
        self.max_concurrent_requests = max_concurrent_requests
        self.image_top_k = image_top_k

    async def search_text(self, text: str) -> SearchOutcome:
        return await self.search(TextQuery(text))

    async def search_image(self, analysis: ImageAnalysis) -> SearchOutcome:
        return await self.search(ImageQuery(analysis))

    async def search(self, query: SearchQuery) -> SearchOutcome:
        """Run one search.

        Args:
            query: TextQuery or ImageQuery

        Returns:
            SearchOutcome with ranked results and warnings for dropped candidates

        Raises:
            AuthFailure: If no access token can be obtained
            UpstreamFailure: If the candidate listing itself fails
        """
        search_id = uuid.uuid4().hex[:12]
        set_search_context(search_id)
        try:
            if isinstance(query, TextQuery):
                return await self._search_text(query.text)
            if isinstance(query, ImageQuery):
                return await self._search_image(query.analysis)
            raise TypeError(f"Unsupported query type: {type(query).__name__}")
        finally:
            clear_search_context()

    async def _search_text(self, text: str) -> SearchOutcome:
        query_tags = tag_extractor.from_query_text(text)
        if not query_tags:
            videos = await self.catalog.list_videos()
            logger.info(f"Empty query, listing {len(videos)} videos")
            return SearchOutcome(
                mode=SearchMode.LISTING,
                results=[ScoredResult(video=v, matching_tags=[], score=1.0) for v in videos],
            )

        candidates = await self.catalog.search_videos(text)
        logger.info(f"Text search {query_tags.as_list()}: {len(candidates)} candidates")
        outcome = await self._rank_candidates(
            SearchMode.TEXT, query_tags, candidates, relevance_scorer.ORDER_CANDIDATE
        )
        return outcome

    async def _search_image(self, analysis: ImageAnalysis) -> SearchOutcome:
        query_tags = tag_extractor.from_image_analysis(analysis)
        candidates = await self.catalog.list_videos()
        logger.info(f"Image search {query_tags.as_list()}: {len(candidates)} candidates")
        outcome = await self._rank_candidates(
            SearchMode.IMAGE, query_tags, candidates, relevance_scorer.ORDER_QUERY
        )
        outcome.results = outcome.results[: self.image_top_k]
        return outcome

    async def _rank_candidates(
        self,
        mode: str,
        query_tags: TagSet,
        candidates: list[Video],
        order: str,
    ) -> SearchOutcome:
        outcome = SearchOutcome(mode=mode, query_tags=query_tags.as_list())
        if not candidates:
            return outcome

        semaphore = asyncio.Semaphore(self.max_concurrent_requests)

        async def score_one(video: Video) -> Optional[ScoredResult]:
            async with semaphore:
                try:
                    insights = await self.insight_source.get_insights(video.id)
                except UpstreamFailure as e:
                    logger.warning(f"Skipping video {video.id}: insights unavailable ({e})")
                    outcome.failed_video_ids.append(video.id)
                    outcome.warnings.append(f"Insights unavailable for '{video.name or video.id}'")
                    return None

            matches, value = relevance_scorer.score(
                query_tags, tag_extractor.from_insights(insights), order
            )
            return ScoredResult(video=video, matching_tags=matches, score=value)

        scored = await asyncio.gather(*(score_one(v) for v in candidates))
        outcome.results = rank([r for r in scored if r is not None])

        logger.info(
            f"Ranked {len(outcome.results)} of {len(candidates)} candidates"
            + (f", {len(outcome.failed_video_ids)} skipped" if outcome.failed_video_ids else "")
        )
        return outcome


class LatestSearchGuard:
    """Drops responses of searches that were superseded while in flight.

    Each search is tagged with an increasing epoch; only the newest epoch's
    outcome is delivered, so a slow stale response never overwrites fresher
    results.
    """

    def __init__(self):
        self._epoch = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def begin(self) -> int:
        self._epoch += 1
        return self._epoch

    def is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    async def run(
        self, search: Callable[[], Awaitable[SearchOutcome]]
    ) -> Optional[SearchOutcome]:
        """Run a search and return its outcome, or None if it went stale."""
        epoch = self.begin()
        outcome = await search()
        if not self.is_current(epoch):
            logger.debug(f"Discarding stale search result (epoch {epoch} < {self._epoch})")
            return None
        return outcome
