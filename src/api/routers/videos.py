"""Catalog routes: listing, text search, insights, keyframes, thumbnails, upload."""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from api.dependencies import get_search_context, outcome_to_dict, read_upload
from api.schemas import (
    DownloadUrlResponse,
    ErrorResponse,
    KeyframeResponse,
    SearchResponse,
    UploadResponse,
    VideoInsightsResponse,
)
from services.errors import UpstreamFailure
from services.search_context import SearchContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Videos"])


@router.get(
    "/api/videos",
    response_model=SearchResponse,
    summary="List videos",
    description="Lists every catalog video as an unranked result, optionally with thumbnails.",
)
async def list_videos(
    thumbnails: bool = Query(False, description="Embed JPEG thumbnails as data URIs"),
    context: SearchContext = Depends(get_search_context),
) -> dict:
    outcome = await context.orchestrator.search_text("")
    thumbs = None
    if thumbnails:
        thumbs = await context.thumbnails.fetch_thumbnails([r.video for r in outcome.results])
    return outcome_to_dict(outcome, thumbnails=thumbs)


@router.get(
    "/api/videos/search",
    response_model=SearchResponse,
    summary="Search videos by text",
    description="Narrows candidates server-side, then ranks them by overlap with their insights.",
)
async def search_videos(
    q: str = Query("", description="Free-text query; empty lists the catalog"),
    thumbnails: bool = Query(False, description="Embed JPEG thumbnails as data URIs"),
    context: SearchContext = Depends(get_search_context),
) -> dict:
    outcome = await context.orchestrator.search_text(q)
    thumbs = None
    if thumbnails:
        thumbs = await context.thumbnails.fetch_thumbnails([r.video for r in outcome.results])
    return outcome_to_dict(outcome, thumbnails=thumbs)


@router.get(
    "/api/videos/{video_id}/insights",
    response_model=VideoInsightsResponse,
    summary="Video insights",
)
async def get_insights(
    video_id: str, context: SearchContext = Depends(get_search_context)
) -> dict:
    insights = await context.indexer.get_insights(video_id)
    return insights.to_dict()


@router.get(
    "/api/videos/{video_id}/keyframes",
    response_model=list[KeyframeResponse],
    summary="Video keyframes",
)
async def get_keyframes(
    video_id: str, context: SearchContext = Depends(get_search_context)
) -> list[dict]:
    keyframes = await context.indexer.get_keyframes(video_id)
    return [
        {
            "id": k.id,
            "instances": [{"start": i.start, "thumbnail_id": i.thumbnail_id} for i in k.instances],
        }
        for k in keyframes
    ]


@router.get(
    "/api/videos/{video_id}/thumbnail",
    summary="Video or keyframe thumbnail",
    responses={200: {"content": {"image/jpeg": {}}}, 404: {"model": ErrorResponse}},
)
async def get_thumbnail(
    video_id: str,
    thumbnail_id: str = Query(..., description="Thumbnail id of the video or of a keyframe"),
    context: SearchContext = Depends(get_search_context),
) -> Response:
    try:
        image = await context.indexer.get_thumbnail(video_id, thumbnail_id)
    except UpstreamFailure as e:
        logger.warning(f"Thumbnail {thumbnail_id} of video {video_id} unavailable: {e}")
        return JSONResponse(status_code=404, content={"error": "Thumbnail not available"})
    return Response(content=image, media_type="image/jpeg")


@router.get(
    "/api/videos/{video_id}/download-url",
    response_model=DownloadUrlResponse,
    summary="Source file download URL",
)
async def get_download_url(
    video_id: str, context: SearchContext = Depends(get_search_context)
) -> dict[str, str]:
    return {"url": await context.indexer.get_download_url(video_id)}


@router.post(
    "/api/videos",
    response_model=UploadResponse,
    status_code=201,
    summary="Upload a video",
    description="Uploads a video file to the indexing service.",
)
async def upload_video(
    file: UploadFile | None = File(None),
    name: str | None = Form(None),
    context: SearchContext = Depends(get_search_context),
) -> dict[str, str]:
    content = await read_upload(file)
    video_name = name or file.filename
    video_id = await context.indexer.upload_video(content, file.filename, video_name)
    logger.info(f"Uploaded video '{video_name}' as {video_id}")
    return {"id": video_id, "message": f"Video uploaded successfully. Video ID: {video_id}"}
