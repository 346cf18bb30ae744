"""Configuration loading and validation for vidseek."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")


def load_config() -> dict:
    """Load configuration from environment variables."""
    config = {
        # Video Indexer account (required)
        "video_indexer_account_id": os.getenv("VIDEO_INDEXER_ACCOUNT_ID", ""),
        "video_indexer_location": os.getenv("VIDEO_INDEXER_LOCATION", "trial"),
        "video_indexer_api_key": os.getenv("VIDEO_INDEXER_API_KEY", ""),
        "video_indexer_base_url": os.getenv(
            "VIDEO_INDEXER_BASE_URL", "https://api.videoindexer.ai"
        ),
        "video_indexer_language": os.getenv("VIDEO_INDEXER_LANGUAGE", "English"),
        # Computer Vision (required for image search only)
        "computer_vision_endpoint": os.getenv("COMPUTER_VISION_API_ENDPOINT"),
        "computer_vision_api_key": os.getenv("COMPUTER_VISION_API_KEY"),
        # Search settings
        "max_concurrent_requests": int(os.getenv("MAX_CONCURRENT_INSIGHT_REQUESTS", "8")),
        "image_search_top_k": int(os.getenv("IMAGE_SEARCH_TOP_K", "10")),
        "http_timeout_seconds": float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
        # Server settings
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": os.getenv("LOG_JSON", "false").lower() == "true",
        "cors_origins": [
            origin.strip()
            for origin in os.getenv(
                "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
            ).split(",")
            if origin.strip()
        ],
    }

    return config


def validate_config(config: dict) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    if not config.get("video_indexer_account_id"):
        errors.append("VIDEO_INDEXER_ACCOUNT_ID is required")
    if not config.get("video_indexer_api_key"):
        errors.append("VIDEO_INDEXER_API_KEY is required")
    if not config.get("video_indexer_location"):
        errors.append("VIDEO_INDEXER_LOCATION must not be empty")

    if config.get("max_concurrent_requests", 0) < 1:
        errors.append("MAX_CONCURRENT_INSIGHT_REQUESTS must be at least 1")
    if config.get("image_search_top_k", 0) < 1:
        errors.append("IMAGE_SEARCH_TOP_K must be at least 1")

    # Image search degrades to an error response without these, so only the
    # partial configuration is rejected
    has_vision_endpoint = bool(config.get("computer_vision_endpoint"))
    has_vision_key = bool(config.get("computer_vision_api_key"))
    if has_vision_endpoint != has_vision_key:
        errors.append(
            "COMPUTER_VISION_API_ENDPOINT and COMPUTER_VISION_API_KEY must be set together"
        )

    return errors


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration with Rich for terminal output."""
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,  # Disable markup to avoid conflicts
    )

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=[rich_handler],
        format="%(message)s",
    )

    # Suppress noisy third-party loggers
    for logger_name in ["httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
