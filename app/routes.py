# app/routes.py

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, status
from fastapi.responses import ORJSONResponse, PlainTextResponse

from app.database import MongoDataSource, get_data_source
from app.errors import ClientInputError, UpstreamLookupError, UpstreamFetchError
from app.http_client import get_http_client
from app.logging_setup import logger
from app.models import SortOrder, ErrorResponse
from app.services.image_proxy import relay_image
from app.services.listing import run_listing
from app.services.search import run_search

router = APIRouter()

@router.get("/health/ready", tags=["Health"])
async def get_readiness_status(ds: MongoDataSource = Depends(get_data_source)):
    """
    Readiness probe: ready once the data store answers a ping.
    """
    if await ds.ping():
        return {"status": "ready"}
    return ORJSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unavailable"}
    )

@router.get("/", tags=["Catalog"], responses={500: {"model": ErrorResponse}})
async def list_manga(
    sortBy: Optional[str] = None,
    order: Optional[str] = None,
    language: Optional[str] = None,
    ds: MongoDataSource = Depends(get_data_source),
):
    """
    Lists up to 1000 enriched items. `sortBy` is a column name or `Artist`,
    `language` a comma-separated list of codes.
    """
    try:
        return await run_listing(ds, sort_by=sortBy, order=SortOrder.from_param(order), language=language)
    except UpstreamLookupError as e:
        logger.error(f"Listing failed: {e}")
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Server error", message=str(e)).body(),
        )

@router.get("/search", tags=["Catalog"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def search_manga(q: Optional[str] = None, ds: MongoDataSource = Depends(get_data_source)):
    """
    Field-scoped search, e.g. `artist:"hyji" tag:"dog%cat" some title words`.
    """
    try:
        return await run_search(ds, q)
    except ClientInputError as e:
        return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=ErrorResponse(error=str(e)).body())
    except UpstreamLookupError as e:
        logger.error(f"Search failed: {e}", extra={"q": q})
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Search failed", message=str(e)).body(),
        )

@router.get("/proxy-image", tags=["Images"])
async def proxy_image(url: Optional[str] = None, client: httpx.AsyncClient = Depends(get_http_client)):
    """
    Relays an external image, keeping the upstream status and content headers.
    """
    try:
        return await relay_image(client, url)
    except ClientInputError as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except UpstreamFetchError as e:
        return PlainTextResponse(
            f"Error fetching image: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
