# app/middleware.py
import time

from asgi_correlation_id import correlation_id
from fastapi import Request
from fastapi.responses import ORJSONResponse
from fastapi.middleware.gzip import GZipMiddleware

from app.logging_setup import logger, access_logger


class CatalogGZipMiddleware(GZipMiddleware):
    """GZip for JSON routes; relayed images keep their upstream encoding and length."""
    excluded_paths = {"/proxy-image"}

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"] in self.excluded_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


async def log_requests(request: Request, call_next):
    """
    One access record per request. Anything the routes let escape becomes a
    500 carrying the request's correlation id, which must already be set by
    CorrelationIdMiddleware further out.
    """
    started = time.perf_counter()
    route = {"method": request.method, "path": request.url.path, "query": request.url.query}
    try:
        response = await call_next(request)
    except Exception as e:
        logger.critical("Unhandled exception", extra={**route, "error": repr(e)}, exc_info=True)
        return ORJSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred.",
                "correlation_id": correlation_id.get(),
            },
        )

    access_logger.info(
        "%s %s -> %s",
        request.method,
        request.url.path,
        response.status_code,
        extra={**route, "status_code": response.status_code,
               "elapsed_ms": round((time.perf_counter() - started) * 1000, 2)},
    )
    return response
