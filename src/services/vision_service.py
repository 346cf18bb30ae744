"""Computer Vision client - tags and captions for an uploaded still image."""

import logging
from typing import Optional

import httpx

from models.image_analysis import ImageAnalysis
from services.errors import InputFailure, UpstreamFailure

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/vision/v3.2/analyze"
VISUAL_FEATURES = "Tags,Description"


class ComputerVisionService:
    """HTTP client for the Computer Vision `analyze` endpoint."""

    def __init__(
        self,
        endpoint: Optional[str],
        api_key: Optional[str],
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = endpoint.rstrip("/") if endpoint else ""
        self.api_key = api_key or ""
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=timeout)

    def is_configured(self) -> bool:
        return bool(self.endpoint and self.api_key)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def analyze_image(self, content: bytes) -> ImageAnalysis:
        """Analyze raw image bytes.

        Args:
            content: Image file bytes (JPEG, PNG, ...)

        Returns:
            Parsed ImageAnalysis with description tags, captions and tags

        Raises:
            InputFailure: If the image is empty
            UpstreamFailure: If the service is not configured or responds
                with a non-success status
        """
        if not content:
            raise InputFailure("Empty image upload")
        if not self.is_configured():
            raise UpstreamFailure("Computer Vision endpoint or key not configured")

        url = f"{self.endpoint}{ANALYZE_PATH}"
        logger.info(f"Analyzing image ({len(content)} bytes) at: {url}")
        try:
            response = await self.client.post(
                url,
                params={"visualFeatures": VISUAL_FEATURES},
                headers={
                    "Content-Type": "application/octet-stream",
                    "Ocp-Apim-Subscription-Key": self.api_key,
                },
                content=content,
            )
        except httpx.RequestError as e:
            logger.error(f"Computer Vision network error: {e}")
            raise UpstreamFailure(f"Computer Vision request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"Computer Vision API responded with status {response.status_code}: {response.text}"
            )
            raise UpstreamFailure(
                f"Computer Vision API responded with status {response.status_code}",
                status=response.status_code,
                status_text=response.reason_phrase,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFailure(
                "Computer Vision API returned invalid JSON", body=response.text
            ) from e

        analysis = ImageAnalysis.from_api(data)
        logger.info(
            f"Image analysis: {len(analysis.description_tags)} description tags, "
            f"{len(analysis.tags)} classified tags"
        )
        return analysis
