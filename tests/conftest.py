"""Shared pytest fixtures for vidseek tests."""

import sys
from pathlib import Path
from typing import Dict

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from models.image_analysis import ImageAnalysis  # noqa: E402
from models.video import Video, VideoInsights  # noqa: E402
from services.errors import UpstreamFailure  # noqa: E402
from services.video_indexer.base import InsightSource, VideoCatalog  # noqa: E402


def make_insights(
    video_id: str,
    labels: list[str] = (),
    keywords: list[str] = (),
    topics: list[str] = (),
) -> VideoInsights:
    """Build VideoInsights the way the indexer's JSON would produce them."""
    def entities(names):
        return [
            {"name": n, "appearances": [{"startTime": "0:00:00", "endTime": "0:00:05"}]}
            for n in names
        ]

    return VideoInsights.from_api(
        {
            "id": video_id,
            "name": f"Video {video_id}",
            "summarizedInsights": {
                "labels": entities(labels),
                "keywords": entities(keywords),
                "topics": entities(topics),
            },
        }
    )


class FakeIndexer(VideoCatalog, InsightSource):
    """In-memory catalog and insight source with call recording."""

    def __init__(self, videos, insights, search_results=None, failing_ids=()):
        self.videos = list(videos)
        self.insights = dict(insights)
        self.search_results = search_results
        self.failing_ids = set(failing_ids)
        self.list_calls = 0
        self.search_calls: list[str] = []
        self.insight_calls: list[str] = []

    async def list_videos(self):
        self.list_calls += 1
        return list(self.videos)

    async def search_videos(self, query):
        self.search_calls.append(query)
        if self.search_results is None:
            return list(self.videos)
        return list(self.search_results)

    async def get_insights(self, video_id):
        self.insight_calls.append(video_id)
        if video_id in self.failing_ids:
            raise UpstreamFailure(
                "Failed to fetch video insights: 500 Internal Server Error",
                status=500,
                status_text="Internal Server Error",
                body='{"ErrorType":"GENERAL"}',
            )
        return self.insights[video_id]


@pytest.fixture
def sample_videos() -> list[Video]:
    """Three catalog videos."""
    return [
        Video(id="v1", name="Dog park", duration_in_seconds=65, thumbnail_id="t1"),
        Video(id="v2", name="City at night", duration_in_seconds=120, thumbnail_id="t2"),
        Video(id="v3", name="Beach sunset", duration_in_seconds=30, thumbnail_id=None),
    ]


@pytest.fixture
def sample_insights() -> Dict[str, VideoInsights]:
    return {
        "v1": make_insights("v1", labels=["Dog", "Grass"], keywords=["park"]),
        "v2": make_insights("v2", labels=["building"], keywords=["city"], topics=["Night Life"]),
        "v3": make_insights("v3", labels=["beach", "sunset"], topics=["travel"]),
    }


@pytest.fixture
def fake_indexer(sample_videos, sample_insights) -> FakeIndexer:
    return FakeIndexer(sample_videos, sample_insights)


@pytest.fixture
def beach_analysis() -> ImageAnalysis:
    """Image analysis with case-varied tags, as the vision service returns them."""
    return ImageAnalysis.from_api(
        {
            "description": {
                "tags": ["Beach", "outdoor"],
                "captions": [{"text": "a beach at sunset", "confidence": 0.91}],
            },
            "tags": [
                {"name": "Sunset", "confidence": 0.98},
                {"name": "beach", "confidence": 0.95},
            ],
        }
    )


@pytest.fixture
def sample_config() -> Dict:
    """Sample configuration for testing."""
    return {
        "video_indexer_account_id": "acct-123",
        "video_indexer_location": "trial",
        "video_indexer_api_key": "test_key",
        "video_indexer_base_url": "https://api.videoindexer.test",
        "video_indexer_language": "English",
        "computer_vision_endpoint": "https://vision.test",
        "computer_vision_api_key": "vision_key",
        "max_concurrent_requests": 4,
        "image_search_top_k": 10,
        "http_timeout_seconds": 5.0,
        "log_level": "INFO",
        "log_json": False,
        "cors_origins": ["http://localhost:3000"],
    }


@pytest.fixture
def insights_factory():
    """Factory building VideoInsights from label/keyword/topic names."""
    return make_insights


@pytest.fixture
def indexer_factory():
    """Factory building FakeIndexer instances."""
    return FakeIndexer
