"""HTTP client for the Azure Video Indexer REST API."""

import json
import logging
from typing import Any, Optional

import httpx

from models.video import Keyframe, Video, VideoInsights
from services.errors import UpstreamFailure
from services.video_indexer.base import InsightSource, VideoCatalog
from services.video_indexer.credential_cache import CredentialCache

logger = logging.getLogger(__name__)


class VideoIndexerClient(VideoCatalog, InsightSource):
    """Async client for one Video Indexer account.

    Every request carries the subscription key header and an access token
    taken from a shared CredentialCache, so re-authentication happens only
    when the held token is close to expiry.

    API Documentation: https://api-portal.videoindexer.ai/
    """

    BASE_URL = "https://api.videoindexer.ai"

    def __init__(
        self,
        account_id: str,
        location: str,
        api_key: str,
        base_url: str = BASE_URL,
        language: str = "English",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        credential_cache: Optional[CredentialCache] = None,
    ):
        """Initialize the client.

        Args:
            account_id: Video Indexer account id
            location: Account region (e.g. "trial", "westus2")
            api_key: API subscription key
            base_url: API root URL
            language: Language requested for insights
            timeout: Request timeout in seconds for an owned HTTP client
            http_client: Optional shared httpx.AsyncClient (not closed by us)
            credential_cache: Optional cache; one backed by this client is
                created when omitted
        """
        self.account_id = account_id
        self.location = location
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=timeout)
        self.credentials = credential_cache or CredentialCache(self._request_access_token)

    def is_configured(self) -> bool:
        """Check that account id and API key are set."""
        return bool(self.account_id and self.api_key)

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    # =========================================================================
    # Request plumbing
    # =========================================================================

    @property
    def _headers(self) -> dict[str, str]:
        return {"Ocp-Apim-Subscription-Key": self.api_key}

    def _account_url(self, *parts: str) -> str:
        path = "/".join([self.location, "Accounts", self.account_id, *parts])
        return f"{self.base_url}/{path}"

    def _handle_response(self, response: httpx.Response, error_context: str) -> Any:
        """Parse a response body or raise UpstreamFailure on non-success.

        Returns:
            Decoded JSON, the raw text when the body is not JSON, or None for
            an empty body
        """
        text = response.text
        if not response.is_success:
            logger.error(
                "API Error: "
                + json.dumps(
                    {
                        "status": response.status_code,
                        "statusText": response.reason_phrase,
                        "body": text,
                        "headers": dict(response.headers),
                    }
                )
            )
            raise UpstreamFailure(
                f"{error_context}: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
                status_text=response.reason_phrase,
                body=text,
            )

        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def _send(
        self,
        method: str,
        url: str,
        error_context: str,
        params: Optional[dict] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            return await self.client.request(
                method, url, params=params, headers=self._headers, **kwargs
            )
        except httpx.RequestError as e:
            logger.error(f"{error_context}: network error: {e}")
            raise UpstreamFailure(f"{error_context}: {e}") from e

    async def _send_authorized(
        self,
        method: str,
        url: str,
        error_context: str,
        params: Optional[dict] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        credential = await self.credentials.acquire()
        query = {**(params or {}), "accessToken": credential.token}
        response = await self._send(method, url, error_context, params=query, **kwargs)
        if response.status_code == 401:
            # Next caller re-authenticates; this request is not retried
            logger.warning(f"{error_context}: access token rejected, dropping cached token")
            self.credentials.invalidate()
        return response

    async def _request_access_token(self) -> str:
        url = f"{self.base_url}/Auth/{self.location}/Accounts/{self.account_id}/AccessToken"
        logger.info(f"Requesting access token from: {url}")
        context = "Failed to get access token"
        response = await self._send("GET", url, context, params={"allowEdit": "true"})
        return self._handle_response(response, context)

    async def get_access_token(self, force_new: bool = False) -> str:
        """Return a valid access token, refreshing it if needed."""
        credential = await self.credentials.acquire(force_refresh=force_new)
        return credential.token

    async def _get_json(self, url: str, error_context: str, **params: str) -> Any:
        response = await self._send_authorized("GET", url, error_context, params=params)
        return self._handle_response(response, error_context)

    # =========================================================================
    # Catalog and insights
    # =========================================================================

    async def list_videos(self) -> list[Video]:
        url = self._account_url("Videos")
        logger.info(f"Fetching all videos from: {url}")
        result = await self._get_json(url, "Failed to fetch videos")
        return self._parse_videos(result)

    async def search_videos(self, query: str) -> list[Video]:
        url = self._account_url("Videos", "Search")
        logger.info(f"Searching videos at: {url} (query={query!r})")
        result = await self._get_json(url, "Failed to search videos", query=query)
        return self._parse_videos(result)

    async def get_insights(self, video_id: str) -> VideoInsights:
        result = await self._get_index(video_id, "Failed to fetch video insights")
        return VideoInsights.from_api(result, video_id=video_id)

    async def get_keyframes(self, video_id: str) -> list[Keyframe]:
        """Return the keyframes detected in the first video of the index."""
        result = await self._get_index(video_id, "Failed to fetch video keyframes")
        videos = result.get("videos") or []
        if not videos:
            return []
        keyframes = (videos[0].get("insights") or {}).get("keyFrames") or []
        return [Keyframe.from_api(k) for k in keyframes]

    async def _get_index(self, video_id: str, error_context: str) -> dict:
        url = self._account_url("Videos", video_id, "Index")
        logger.debug(f"Fetching video index from: {url}")
        result = await self._get_json(url, error_context, language=self.language)
        if not isinstance(result, dict):
            raise UpstreamFailure(f"{error_context}: unexpected response body", body=str(result))
        return result

    @staticmethod
    def _parse_videos(result: Any) -> list[Video]:
        if not isinstance(result, dict):
            return []
        return [Video.from_api(v) for v in result.get("results") or []]

    # =========================================================================
    # Pass-through operations
    # =========================================================================

    async def upload_video(self, content: bytes, filename: str, name: str) -> str:
        """Upload a video file for indexing.

        Args:
            content: Raw file bytes
            filename: Original file name sent with the multipart body
            name: Display name of the video in the catalog

        Returns:
            Id assigned to the uploaded video
        """
        url = self._account_url("Videos")
        logger.info(f"Uploading video to: {url} (name={name!r}, {len(content)} bytes)")
        context = "Failed to upload video"
        response = await self._send_authorized(
            "POST",
            url,
            context,
            params={"name": name, "videoUrl": ""},
            files={"file": (filename, content)},
        )
        result = self._handle_response(response, context)
        if not isinstance(result, dict) or not result.get("id"):
            raise UpstreamFailure(f"{context}: response has no video id", body=str(result))
        return str(result["id"])

    async def get_thumbnail(self, video_id: str, thumbnail_id: str) -> bytes:
        """Download a JPEG thumbnail (video thumbnail or keyframe thumbnail)."""
        url = self._account_url("Videos", video_id, "Thumbnails", thumbnail_id)
        logger.debug(f"Generating thumbnail from: {url}")
        context = "Failed to generate thumbnail"
        response = await self._send_authorized("GET", url, context, params={"format": "Jpeg"})
        if not response.is_success:
            raise UpstreamFailure(
                context,
                status=response.status_code,
                status_text=response.reason_phrase,
                body=response.text,
            )
        return response.content

    async def get_download_url(self, video_id: str) -> str:
        url = self._account_url("Videos", video_id, "SourceFile", "DownloadUrl")
        logger.info(f"Fetching video download URL from: {url}")
        result = await self._get_json(url, "Failed to fetch video download URL")
        return str(result or "")

    async def get_streaming_url(self, video_id: str) -> str:
        """Streaming uses the same source-file URL as downloads."""
        return await self.get_download_url(video_id)
