"""WebSocket endpoint for the live location preview.

Each connection mounts its own ``PreviewCycler`` and receives a
``preview_state`` event for every transition. The cycler is unmounted when
the client disconnects, which cancels its timers.

Usage:
    ws://localhost:8000/api/v1/ws/maps/{slug}/preview
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from guessr.api.deps import CyclerFactory, MapLoader, get_map_loader, get_preview_cycler_factory
from guessr.schemas.preview import (
    ConnectionErrorEvent,
    PongEvent,
    PreviewEventType,
    PreviewMessage,
    PreviewStateEvent,
)
from guessr.services.map_service import MapNotFoundError
from guessr.services.preview_cycler import CyclerState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["websocket"])


def state_event(slug: str, state: CyclerState) -> PreviewStateEvent:
    """Build the wire event for a cycler state."""
    return PreviewStateEvent(
        slug=slug,
        phase=state.phase.value,
        visual=state.visual.value,
        index=state.index,
        url=state.current_url,
        total=len(state.urls),
    )


async def send_event(websocket: WebSocket, event) -> None:
    await websocket.send_json(PreviewMessage.from_event(event).model_dump(mode="json"))


@router.websocket("/maps/{slug}/preview")
async def websocket_map_preview(
    websocket: WebSocket,
    slug: str,
    load_map: MapLoader = Depends(get_map_loader),
    create_cycler: CyclerFactory = Depends(get_preview_cycler_factory),
):
    """Stream preview transitions for a map.

    Connection Flow:
    1. Server looks up the map; unknown slugs get connection_error and
       close code 4004; a failed lookup gets connection_error and 1011
    2. Server sends the current preview_state (idle when the map has no
       locations)
    3. Server sends preview_state on every fade transition
    4. Client disconnect unmounts the cycler

    Message Types Received:
    - ping: Client heartbeat, server responds with pong

    Message Types Sent:
    - preview_state: Current phase, index and embed URL
    - connection_error: Map lookup failed
    - pong: Response to client ping
    """
    try:
        map_record = await load_map(slug)
    except MapNotFoundError as e:
        logger.warning(f"Preview requested for unknown map {slug}")
        await websocket.accept()
        await send_event(
            websocket,
            ConnectionErrorEvent(error_code="MAP_NOT_FOUND", message=str(e)),
        )
        await websocket.close(code=4004, reason="Map not found")
        return
    except Exception as e:
        logger.error(f"Preview map lookup failed for {slug}: {e}")
        await websocket.accept()
        await send_event(
            websocket,
            ConnectionErrorEvent(error_code="INTERNAL_ERROR", message="Internal server error"),
        )
        await websocket.close(code=1011, reason="Internal server error")
        return

    await websocket.accept()

    cycler = create_cycler()
    cycler.set_locations(map_record.data)

    queue: asyncio.Queue[CyclerState] = asyncio.Queue()
    cycler.subscribe(queue.put_nowait)

    try:
        async with cycler:
            await send_event(websocket, state_event(slug, cycler.state))
            await handle_preview_session(websocket, slug, queue)

    except WebSocketDisconnect:
        logger.info(f"Preview WebSocket disconnected for map {slug}")

    except Exception as e:
        logger.error(f"Preview WebSocket error for map {slug}: {e}")
        try:
            await send_event(
                websocket,
                ConnectionErrorEvent(
                    error_code="INTERNAL_ERROR",
                    message="Internal server error",
                ),
            )
        except Exception:
            pass


async def handle_preview_session(
    websocket: WebSocket, slug: str, queue: "asyncio.Queue[CyclerState]"
) -> None:
    """Run the client and cycler directions until either ends.

    Args:
        websocket: The WebSocket connection
        slug: Map being previewed
        queue: Cycler states waiting to be sent
    """
    receive_task = asyncio.create_task(handle_client_messages(websocket, slug))
    forward_task = asyncio.create_task(forward_preview_states(websocket, slug, queue))

    try:
        done, pending = await asyncio.wait(
            [receive_task, forward_task],
            return_when=asyncio.FIRST_COMPLETED,
        )

        for task in pending:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # Re-raise WebSocketDisconnect or errors from the finished side
        for task in done:
            task.result()

    except asyncio.CancelledError:
        receive_task.cancel()
        forward_task.cancel()
        raise


async def handle_client_messages(websocket: WebSocket, slug: str) -> None:
    """Answer client pings until the socket closes."""
    while True:
        data = await websocket.receive_text()

        try:
            message = json.loads(data)
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON from preview client for map {slug}")
            continue

        event = message.get("event") if isinstance(message, dict) else None
        if isinstance(event, dict) and event.get("type") == PreviewEventType.PING.value:
            await send_event(websocket, PongEvent())
            logger.debug(f"Sent pong to preview client for map {slug}")


async def forward_preview_states(
    websocket: WebSocket, slug: str, queue: "asyncio.Queue[CyclerState]"
) -> None:
    """Send every queued cycler state to the client."""
    while True:
        state = await queue.get()
        await send_event(websocket, state_event(slug, state))
