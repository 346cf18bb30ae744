"""Unit tests for the Computer Vision client."""

import httpx
import pytest

from services.errors import InputFailure, UpstreamFailure
from services.vision_service import ComputerVisionService

ANALYZE_RESPONSE = {
    "description": {
        "tags": ["outdoor", "Beach"],
        "captions": [{"text": "a sandy beach", "confidence": 0.87}],
    },
    "tags": [{"name": "sand", "confidence": 0.99}, {"name": "Sky", "confidence": 0.97}],
    "requestId": "req-1",
}


def make_service(handler, endpoint="https://vision.test/", api_key="vision_key"):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ComputerVisionService(endpoint, api_key, http_client=http_client)


@pytest.mark.unit
class TestAnalyzeImage:
    @pytest.mark.asyncio
    async def test_posts_image_bytes(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=ANALYZE_RESPONSE)

        service = make_service(handler)
        analysis = await service.analyze_image(b"\x89PNG-data")

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url).startswith("https://vision.test/vision/v3.2/analyze")
        assert request.url.params["visualFeatures"] == "Tags,Description"
        assert request.headers["Content-Type"] == "application/octet-stream"
        assert request.headers["Ocp-Apim-Subscription-Key"] == "vision_key"
        assert request.content == b"\x89PNG-data"

        assert analysis.description_tags == ["outdoor", "Beach"]
        assert [t.name for t in analysis.tags] == ["sand", "Sky"]
        assert analysis.caption.text == "a sandy beach"
        assert analysis.raw == ANALYZE_RESPONSE

    @pytest.mark.asyncio
    async def test_empty_image_rejected_without_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(InputFailure):
            await make_service(handler).analyze_image(b"")

    @pytest.mark.asyncio
    async def test_error_status(self):
        def handler(request):
            return httpx.Response(401, json={"error": {"code": "401", "message": "Access denied"}})

        with pytest.raises(UpstreamFailure) as exc_info:
            await make_service(handler).analyze_image(b"img")

        assert exc_info.value.status == 401
        assert "Access denied" in exc_info.value.body
        assert "status 401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(UpstreamFailure):
            await make_service(handler).analyze_image(b"img")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(UpstreamFailure):
            await make_service(handler).analyze_image(b"img")

    @pytest.mark.asyncio
    async def test_unconfigured_service(self):
        def handler(request):
            raise AssertionError("no request expected")

        service = make_service(handler, endpoint=None, api_key=None)
        assert not service.is_configured()
        with pytest.raises(UpstreamFailure):
            await service.analyze_image(b"img")
