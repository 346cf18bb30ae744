"""Video Indexer client, collaborator interfaces and token cache."""

from services.video_indexer.base import InsightSource, VideoCatalog
from services.video_indexer.client import VideoIndexerClient
from services.video_indexer.credential_cache import CredentialCache

__all__ = ["InsightSource", "VideoCatalog", "VideoIndexerClient", "CredentialCache"]
