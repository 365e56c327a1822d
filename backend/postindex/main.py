"""Post Index API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PostIndexError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Post load starts on startup in the background; until it settles the API
      answers queries with 503 POSTS_LOADING and readiness reports not_ready

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Load runs as a task, not inline in lifespan: liveness is served while a slow
      remote source is still being fetched
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from postindex.api.error_handlers import register_error_handlers
from postindex.api.routes import health, posts, reader_stream
from postindex.config import get_settings
from postindex.infrastructure.observability import setup_logging
from postindex.services.post_library import init_post_library

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    library = init_post_library(
        settings.posts_source,
        timeout_seconds=settings.posts_fetch_timeout_seconds,
    )
    load_task = asyncio.create_task(library.load())
    logger.info("Post Index API started", extra={"source": settings.posts_source})
    yield
    if not load_task.done():
        load_task.cancel()
    logger.info("Post Index API shutting down")


app = FastAPI(
    title="Post Index API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(posts.router)
app.include_router(reader_stream.router)
