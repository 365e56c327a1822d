"""Reader Stream — WebSocket carrying a live reader's input events and view updates.

Invariants:
    - One ReaderSession (own QueryState) per connection, closed on disconnect
    - The initial home listing is sent once the post load settles
    - Inbound frames are validated; a bad frame yields an error event, not a disconnect
    - A single sender task drains the session outbox, so socket writes never interleave
    - The sender is cancelled and awaited on close; a send failure is logged, never lost

Design Decisions:
    - WebSocket over SSE: the reader pushes keystrokes and navigation upstream
    - receive_text + TypeAdapter instead of receive_json: invalid JSON is just
      another validation failure
"""

import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from postindex.config import Settings, get_settings
from postindex.core.errors import QueryValidationError
from postindex.schemas.reader_events import parse_reader_event
from postindex.services.post_library import PostLibrary, get_post_library
from postindex.services.reader_session import ReaderSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["reader"])


async def _pump(websocket: WebSocket, outbox: asyncio.Queue) -> None:
    while True:
        event = await outbox.get()
        await websocket.send_json(event)


async def _stop_sender(sender: asyncio.Task) -> None:
    """Cancel the sender and retrieve its outcome, so a failed send is logged."""
    sender.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        try:
            await sender
        except Exception as e:
            logger.warning(f"Reader sender stopped on send failure: {e!r}")


@router.websocket("/reader")
async def reader_stream(
    websocket: WebSocket,
    library: PostLibrary = Depends(get_post_library),
    settings: Settings = Depends(get_settings),
):
    await websocket.accept()
    session = ReaderSession(
        library,
        mode=settings.search_mode,
        debounce_ms=settings.search_debounce_ms,
        max_term_length=settings.max_search_term_length,
        site_title=settings.site_title,
    )
    sender = asyncio.create_task(_pump(websocket, session.outbox))
    try:
        await session.start()
        while True:
            frame = await websocket.receive_text()
            try:
                event = parse_reader_event(frame)
            except ValidationError as e:
                session.reject(QueryValidationError(
                    f"Invalid reader event: {e.error_count()} error(s)",
                    field="frame",
                ))
                continue
            session.handle(event)
    except WebSocketDisconnect:
        logger.info("Reader disconnected")
    finally:
        session.close()
        await _stop_sender(sender)
