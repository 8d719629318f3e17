from typing import AsyncIterator, Dict

import httpx
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.config import PROXY_HEADERS, RELAYED_HEADERS, DEFAULT_IMAGE_CONTENT_TYPE
from app.errors import ClientInputError, UpstreamFetchError
from app.http_client import open_stream
from app.logging_setup import logger


async def _relay_body(upstream: httpx.Response) -> AsyncIterator[bytes]:
    try:
        # Raw bytes, so a forwarded Content-Encoding/Length still describes them.
        async for chunk in upstream.aiter_raw():
            yield chunk
    finally:
        await upstream.aclose()


def _relayed_headers(upstream: httpx.Response) -> Dict[str, str]:
    headers = {name: upstream.headers[name] for name in RELAYED_HEADERS if name in upstream.headers}
    # Passed as a plain header so Starlette does not append a charset.
    headers["content-type"] = upstream.headers.get("content-type", DEFAULT_IMAGE_CONTENT_TYPE)
    return headers


async def relay_image(client: httpx.AsyncClient, url: str) -> StreamingResponse:
    """
    Streams `url` back to the caller. The upstream status code is relayed as
    is, including error statuses; only transport failures raise.
    """
    if not url:
        raise ClientInputError("Missing Url")

    try:
        upstream = await open_stream(client, url, headers=PROXY_HEADERS)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Error fetching image: {e}", extra={"url": url})
        raise UpstreamFetchError(str(e) or e.__class__.__name__) from e

    if upstream.is_error:
        logger.warning("Upstream image request failed", extra={"url": url, "status_code": upstream.status_code})

    return StreamingResponse(
        _relay_body(upstream),
        status_code=upstream.status_code,
        headers=_relayed_headers(upstream),
        # Covers the case where the body is never iterated; aclose() is idempotent.
        background=BackgroundTask(upstream.aclose),
    )
