"""Dependency injection for the vidseek API.

The SearchContext is built once per process by the app lifespan (or passed to
create_app in tests) and stored on app.state; routes receive it by reference.
"""

from fastapi import Request, UploadFile

from models.search import SearchOutcome
from services.errors import InputFailure
from services.search_context import SearchContext
from services.thumbnail_service import to_data_uri


def get_search_context(request: Request) -> SearchContext:
    """Return the process-wide search context."""
    return request.app.state.search_context


async def read_upload(file: UploadFile | None) -> bytes:
    """Read an uploaded file, rejecting a missing or empty upload."""
    if file is None or not file.filename:
        raise InputFailure("No file uploaded")
    content = await file.read()
    if not content:
        raise InputFailure("Uploaded file is empty")
    return content


def outcome_to_dict(
    outcome: SearchOutcome,
    include_zero: bool = False,
    thumbnails: dict[str, bytes | None] | None = None,
) -> dict:
    """Serialize a SearchOutcome, applying the zero-score presentation policy."""
    results = []
    for result in outcome.visible_results(include_zero=include_zero):
        item = result.to_dict()
        thumb = (thumbnails or {}).get(result.video.id)
        item["video"]["thumbnail"] = to_data_uri(thumb) if thumb else None
        results.append(item)
    return {
        "mode": outcome.mode,
        "query_tags": outcome.query_tags,
        "results": results,
        "warnings": outcome.warnings,
    }
