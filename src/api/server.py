#!/usr/bin/env python
"""FastAPI server for the vidseek web interface."""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import core, image_search, videos
from api.routers.core import API_VERSION
from services.errors import InputFailure, UpstreamFailure, VideoSearchError
from services.search_context import SearchContext
from utils.config import load_config, validate_config
from utils.logging import get_logger, setup_logging

logger = logging.getLogger(__name__)
request_log = get_logger("api.requests")


def create_app(
    search_context: Optional[SearchContext] = None, config: Optional[dict] = None
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        search_context: Pre-built context (tests pass fakes here). When omitted
            the lifespan builds one from configuration and closes it on shutdown.
        config: Configuration dictionary; load_config() when omitted
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "search_context", None) is None:
            errors = validate_config(config)
            if errors:
                for error in errors:
                    logger.error(f"Configuration error: {error}")
                raise RuntimeError("Invalid configuration: " + "; ".join(errors))
            owned = SearchContext.from_config(config)
            app.state.search_context = owned
        try:
            yield
        finally:
            if owned is not None:
                await owned.close()
                app.state.search_context = None

    app = FastAPI(title="vidseek API", version=API_VERSION, lifespan=lifespan)
    app.state.search_context = search_context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get("cors_origins", []),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InputFailure)
    async def input_failure_handler(request: Request, exc: InputFailure) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(VideoSearchError)
    async def search_error_handler(request: Request, exc: VideoSearchError) -> JSONResponse:
        details = exc.to_dict() if isinstance(exc, UpstreamFailure) else {"message": str(exc)}
        request_log.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
            **details,
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    app.include_router(core.router)
    app.include_router(videos.router)
    app.include_router(image_search.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = load_config()
    setup_logging(config["log_level"], json_output=config["log_json"])
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
