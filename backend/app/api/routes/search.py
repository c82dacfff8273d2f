"""Search endpoints for SDN entries and press releases."""

import json
import logging

from fastapi import APIRouter, HTTPException, Query, Request

from app.config import settings
from app.db.search_client import SearchEngineError
from app.models.responses import SearchResponse
from app.services.query_builder import (
    build_press_release_query,
    build_sdn_query,
    is_empty_query,
)
from app.services.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter()

PAGINATION_PARAMS = ("size", "from")


def _log_search(request: Request, params: dict) -> None:
    client_ip = request.headers.get("x-forwarded-for") or (
        request.client.host if request.client else None
    )
    logger.info(f"{request.url.path} from {client_ip}: {json.dumps(params, ensure_ascii=False)}")


async def _respond(index: str, query: dict, size: int, offset: int) -> SearchResponse:
    try:
        return await SearchService.search(index, query, size=size, offset=offset)
    except SearchEngineError:
        # Engine detail is logged by the client, never returned.
        raise HTTPException(status_code=400, detail="Search failed")


@router.get("/sdn", response_model=SearchResponse)
async def search_sdn(
    request: Request,
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=0, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0, alias="from"),
):
    """
    Search SDN and Non-SDN entries field by field.

    Any recognized document field may be passed as a query parameter;
    ``all_fields`` searches the whole record. A ``sanction_dates`` value
    such as ``2011-2017`` matches any year in the range.

    Example:
        GET /search/sdn?all_display_names=kim&countries=north%20korea&size=20
    """
    params = {k: v for k, v in request.query_params.items() if k not in PAGINATION_PARAMS}
    _log_search(request, params)

    query = build_sdn_query(params)
    if is_empty_query(query):
        raise HTTPException(status_code=400, detail="No recognized search fields")

    return await _respond(settings.SDN_INDEX, query, size, offset)


@router.get("/press-releases", response_model=SearchResponse)
async def search_press_releases(
    request: Request,
    query: str = Query(..., min_length=1, description="Search text"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=0, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0, alias="from"),
):
    """
    Full-text search over press releases.

    Example:
        GET /search/press-releases?query=designates%20shipping%20network
    """
    _log_search(request, {"query": query})
    return await _respond(
        settings.PRESS_RELEASE_INDEX,
        build_press_release_query(query),
        size,
        offset,
    )
