"""
Server-sent events (SSE) broadcasting module.

This module handles real-time updates via Server-Sent Events, managing
subscriber connections and pushing map viewport commands and spot
notifications to all connected browsers.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Set

from logic.camera import WORLD_VIEW, FocusPoint

logger = logging.getLogger(__name__)

# Global set of SSE subscribers (asyncio.Queue instances)
subscribers: Set[asyncio.Queue] = set()


async def event_generator(queue: asyncio.Queue):
    """Generate SSE events from the queue.

    Args:
        queue: Async queue to read events from.

    Yields:
        SSE formatted event strings.
    """
    try:
        while True:
            data = await queue.get()
            yield f"data: {json.dumps(data)}\n\n"
    except asyncio.CancelledError:
        pass
    finally:
        subscribers.discard(queue)


def publish(payload: Dict[str, Any]) -> None:
    """Queue a payload for every SSE subscriber.

    Args:
        payload: JSON-serialisable event body.
    """
    payload.setdefault("time", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
    logger.debug("Publishing %s event to %d subscribers", payload.get("type"), len(subscribers))
    for queue in list(subscribers):
        queue.put_nowait(payload)


async def notify_spot_created(spot: Dict[str, Any]):
    """Broadcast a newly stored spot to all SSE subscribers.

    Args:
        spot: Spot dictionary as returned by the API.
    """
    publish({"type": "spot_created", "spot": spot})


class BroadcastSurface:
    """Map surface that forwards viewport commands to connected browsers.

    Browsers animate the fly-to themselves; completion is reported after the
    requested duration on the server's event loop, which is the controller's
    completion proxy.
    """

    def __init__(self, send: Callable[[Dict[str, Any]], None] = publish):
        self._send = send
        self._pending: Optional[asyncio.TimerHandle] = None
        self.target = WORLD_VIEW

    def set_viewport(self, latitude: float, longitude: float, zoom: float) -> None:
        self._cancel_pending()
        self.target = FocusPoint(latitude, longitude, zoom)
        self._send(
            {
                "type": "viewport",
                "mode": "set",
                "latitude": latitude,
                "longitude": longitude,
                "zoom": zoom,
            }
        )

    def fly_to(
            self,
            latitude: float,
            longitude: float,
            zoom: float,
            duration: float,
            on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        self._cancel_pending()
        self.target = FocusPoint(latitude, longitude, zoom)
        self._send(
            {
                "type": "viewport",
                "mode": "fly",
                "latitude": latitude,
                "longitude": longitude,
                "zoom": zoom,
                "duration": duration,
            }
        )
        if on_complete is not None:
            loop = asyncio.get_running_loop()
            self._pending = loop.call_later(duration, self._complete, on_complete)

    def stop(self) -> None:
        self._cancel_pending()
        self._send({"type": "viewport", "mode": "stop"})

    def _complete(self, on_complete: Callable[[], None]) -> None:
        self._pending = None
        on_complete()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
