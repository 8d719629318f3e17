import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from asgi_correlation_id import CorrelationIdMiddleware

from app.config import CORS_ORIGINS, PORT
from app.logging_setup import setup_logging, logger
from app.middleware import CatalogGZipMiddleware, log_requests
from app.routes import router
from app.database import connect_to_mongo, close_mongo_connection
from app.http_client import get_async_client
from app.services.listing import configure_sort_locale

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    setup_logging()
    logger.info("--- Catalog API starting ---")

    try:
        await connect_to_mongo()
    except Exception as e:
        logger.critical(f"Could not connect to the database on startup: {e}", exc_info=True)
        # Non-zero exit so the container is reported as failed
        sys.exit(1)

    configure_sort_locale()
    app.state.http_client = get_async_client()

    yield
    await app.state.http_client.aclose()
    await close_mongo_connection()
    logger.info("--- Catalog API stopped ---")

app = FastAPI(
    title="Manga Catalog API",
    description="Lists, searches and enriches manga records, and relays their cover images.",
    version="1.0.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)


# MIDDLEWARE CONFIGURATION (last added runs first)

app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)
app.add_middleware(CatalogGZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

#ROUTER INCLUSION
app.include_router(router)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT, log_config=None)
