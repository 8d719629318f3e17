import httpx
from fastapi import Request

from app.config import DEFAULT_TIMEOUT

def get_async_client() -> httpx.AsyncClient:
    """
    Returns a configured httpx.AsyncClient with HTTP/2 support and default timeouts.
    """
    return httpx.AsyncClient(http2=True, timeout=DEFAULT_TIMEOUT, follow_redirects=True)

def get_http_client(request: Request) -> httpx.AsyncClient:
    """FastAPI dependency returning the client opened in the application lifespan."""
    return request.app.state.http_client

async def open_stream(client: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
    """
    Sends a GET request in streaming mode. Only the status line and headers
    have been read when this returns; the caller owns the response and must
    close it with `aclose()`.
    """
    request = client.build_request("GET", url, **kwargs)
    return await client.send(request, stream=True)
