"""Image routes: analyze an uploaded image, search videos by an uploaded image."""

import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import JSONResponse

from api.dependencies import get_search_context, outcome_to_dict, read_upload
from api.schemas import ErrorResponse, ImageSearchResponse
from services.errors import InputFailure, UpstreamFailure
from services.search_context import SearchContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Image Search"])

INTERNAL_ERROR = {"error": "Internal server error"}


def _log_failure(route: str, error: Exception) -> None:
    if isinstance(error, UpstreamFailure):
        logger.error(f"Error in {route} API route: {error} {error.to_dict()}")
    else:
        logger.exception(f"Error in {route} API route: {error}")


@router.post(
    "/api/analyze-image",
    summary="Analyze an image",
    description="Returns the raw tags and description produced by the image-analysis service.",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_image(
    file: UploadFile | None = File(None),
    context: SearchContext = Depends(get_search_context),
):
    try:
        content = await read_upload(file)
    except InputFailure as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        analysis = await context.vision.analyze_image(content)
    except Exception as e:
        _log_failure("analyze-image", e)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR)
    return analysis.raw


@router.post(
    "/api/search-by-image",
    response_model=ImageSearchResponse,
    summary="Search videos by image",
    description=(
        "Analyzes the uploaded image and ranks catalog videos by how many of its tags "
        "appear in their insights. Zero-score videos are hidden unless include_zero is set."
    ),
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_by_image(
    file: UploadFile | None = File(None),
    include_zero: bool = Query(False, description="Also return videos with no matching tag"),
    thumbnails: bool = Query(False, description="Embed JPEG thumbnails as data URIs"),
    context: SearchContext = Depends(get_search_context),
):
    try:
        content = await read_upload(file)
    except InputFailure as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        analysis = await context.vision.analyze_image(content)
        outcome = await context.orchestrator.search_image(analysis)
        thumbs = None
        if thumbnails:
            visible = outcome.visible_results(include_zero=include_zero)
            thumbs = await context.thumbnails.fetch_thumbnails([r.video for r in visible])
    except Exception as e:
        _log_failure("search-by-image", e)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR)

    body = outcome_to_dict(outcome, include_zero=include_zero, thumbnails=thumbs)
    body["analysis"] = analysis.to_dict()
    return body
