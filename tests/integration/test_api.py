"""Integration tests for the HTTP API with fake indexing and vision services.

Routes, exception handlers and the search pipeline run for real; only the
remote services are replaced.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from services.errors import AuthFailure, UpstreamFailure
from services.search_context import SearchContext
from services.search_orchestrator import SearchOrchestrator
from services.thumbnail_service import ThumbnailService


class FakeVision:
    def __init__(self, analysis=None, error=None):
        self.analysis = analysis
        self.error = error
        self.calls = []

    async def analyze_image(self, content):
        self.calls.append(content)
        if self.error is not None:
            raise self.error
        return self.analysis


def add_pass_through(indexer):
    """Give a FakeIndexer the thumbnail, keyframe and upload calls of the real client."""

    async def get_thumbnail(video_id, thumbnail_id):
        if thumbnail_id == "missing":
            raise UpstreamFailure("Failed to generate thumbnail", status=404)
        return f"jpeg-{thumbnail_id}".encode()

    async def get_keyframes(video_id):
        return []

    async def upload_video(content, filename, name):
        indexer.uploaded = (content, filename, name)
        return "new-video"

    indexer.get_thumbnail = get_thumbnail
    indexer.get_keyframes = get_keyframes
    indexer.upload_video = upload_video
    return indexer


@pytest.fixture
def vision(beach_analysis):
    return FakeVision(analysis=beach_analysis)


@pytest.fixture
def search_context(fake_indexer, vision):
    indexer = add_pass_through(fake_indexer)
    return SearchContext(
        indexer=indexer,
        vision=vision,
        orchestrator=SearchOrchestrator(indexer, indexer, max_concurrent_requests=2),
        thumbnails=ThumbnailService(indexer),
    )


@pytest.fixture
def client(search_context, sample_config):
    app = create_app(search_context=search_context, config=sample_config)
    with TestClient(app) as test_client:
        yield test_client


IMAGE_FILE = {"file": ("beach.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")}


@pytest.mark.integration
class TestCoreRoutes:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "vidseek API"

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "healthy"}


@pytest.mark.integration
class TestAnalyzeImage:
    def test_returns_raw_analysis(self, client, vision):
        response = client.post("/api/analyze-image", files=IMAGE_FILE)

        assert response.status_code == 200
        assert response.json()["description"]["tags"] == ["Beach", "outdoor"]
        assert vision.calls == [b"\xff\xd8fake-jpeg"]

    def test_no_file_is_400(self, client, vision):
        response = client.post("/api/analyze-image")

        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}
        assert vision.calls == []

    def test_vision_failure_is_500_json(self, client, vision):
        vision.error = UpstreamFailure(
            "Computer Vision API responded with status 503", status=503, body="busy"
        )

        response = client.post("/api/analyze-image", files=IMAGE_FILE)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


@pytest.mark.integration
class TestSearchByImage:
    def test_ranks_and_hides_zero_scores(self, client, fake_indexer):
        response = client.post("/api/search-by-image", files=IMAGE_FILE)

        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "image"
        assert [r["video"]["id"] for r in body["results"]] == ["v3"]
        assert body["results"][0]["matching_tags"] == ["beach", "sunset"]
        assert body["results"][0]["score"] == pytest.approx(2 / 3)
        assert body["analysis"]["caption"] == "a beach at sunset"
        assert fake_indexer.list_calls == 1

    def test_include_zero(self, client):
        response = client.post("/api/search-by-image?include_zero=true", files=IMAGE_FILE)
        assert len(response.json()["results"]) == 3

    def test_no_file_is_400(self, client, fake_indexer):
        response = client.post("/api/search-by-image")

        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}
        assert fake_indexer.list_calls == 0

    def test_empty_file_is_400(self, client):
        response = client.post(
            "/api/search-by-image", files={"file": ("empty.jpg", b"", "image/jpeg")}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Uploaded file is empty"}

    def test_auth_failure_is_500_json(self, client, fake_indexer):
        async def no_token():
            raise AuthFailure("Failed to get access token: 401 Unauthorized")

        fake_indexer.list_videos = no_token

        response = client.post("/api/search-by-image", files=IMAGE_FILE)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_failed_insights_reported_as_warning(self, client, fake_indexer):
        fake_indexer.failing_ids = {"v3"}

        response = client.post("/api/search-by-image?include_zero=true", files=IMAGE_FILE)

        body = response.json()
        assert response.status_code == 200
        assert sorted(r["video"]["id"] for r in body["results"]) == ["v1", "v2"]
        assert len(body["warnings"]) == 1

    def test_thumbnails_embedded(self, client):
        response = client.post("/api/search-by-image?include_zero=true&thumbnails=true", files=IMAGE_FILE)

        videos = {r["video"]["id"]: r["video"] for r in response.json()["results"]}
        encoded = videos["v1"]["thumbnail"].split(",", 1)[1]
        assert base64.b64decode(encoded) == b"jpeg-t1"
        assert videos["v3"]["thumbnail"] is None


@pytest.mark.integration
class TestVideoRoutes:
    def test_listing(self, client, fake_indexer):
        body = client.get("/api/videos").json()

        assert body["mode"] == "listing"
        assert [r["video"]["id"] for r in body["results"]] == ["v1", "v2", "v3"]
        assert all(r["score"] == 1 for r in body["results"])
        assert fake_indexer.insight_calls == []

    def test_text_search(self, client):
        body = client.get("/api/videos/search", params={"q": "dog park"}).json()

        assert body["mode"] == "text"
        assert body["results"][0]["video"]["id"] == "v1"
        assert body["results"][0]["score"] == 1.0
        # Text searches keep zero-score rows
        assert len(body["results"]) == 3

    def test_insights(self, client):
        body = client.get("/api/videos/v2/insights").json()
        assert body["keywords"] == ["city"]
        assert body["topics"] == ["Night Life"]

    def test_upstream_failure_is_500_json(self, client, fake_indexer):
        fake_indexer.failing_ids = {"v2"}

        response = client.get("/api/videos/v2/insights")

        assert response.status_code == 500
        assert "Failed to fetch video insights" in response.json()["error"]

    def test_thumbnail(self, client):
        response = client.get("/api/videos/v1/thumbnail", params={"thumbnail_id": "t1"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content == b"jpeg-t1"

    def test_missing_thumbnail_is_404(self, client):
        response = client.get("/api/videos/v1/thumbnail", params={"thumbnail_id": "missing"})
        assert response.status_code == 404
        assert response.json() == {"error": "Thumbnail not available"}

    def test_upload(self, client, fake_indexer):
        response = client.post(
            "/api/videos",
            files={"file": ("clip.mp4", b"video-bytes", "video/mp4")},
            data={"name": "My clip"},
        )

        assert response.status_code == 201
        assert response.json()["id"] == "new-video"
        assert fake_indexer.uploaded == (b"video-bytes", "clip.mp4", "My clip")

    def test_upload_without_file_is_400(self, client):
        response = client.post("/api/videos")
        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}


@pytest.mark.integration
def test_lifespan_rejects_invalid_config(sample_config):
    sample_config["video_indexer_api_key"] = ""
    app = create_app(config=sample_config)

    with pytest.raises(RuntimeError, match="VIDEO_INDEXER_API_KEY"):
        with TestClient(app):
            pass
