"""Server-Sent Events (SSE) plumbing for workflow progress.

A ``RunEventQueue`` is handed to a ``TranslationWorkflow`` as its event
callback; the streaming route drains it while the run is still in flight, so
the translation reaches the client before the critique starts.
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

logger = logging.getLogger(__name__)


SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class SSEEvent:
    """A server-sent event."""
    def __init__(self, event_type: str, data: Dict[str, Any], event_id: Optional[str] = None):
        self.type = event_type
        self.data = data
        self.id = event_id

    def format(self) -> str:
        lines = []
        if self.id:
            lines.append(f"id: {self.id}")
        lines.append(f"event: {self.type}")
        lines.append(f"data: {json.dumps(self.data, ensure_ascii=False)}")
        return "\n".join(lines) + "\n\n"


class RunEventQueue:
    """Buffers the events of a single workflow run for one SSE consumer."""

    def __init__(self):
        self._queue: "asyncio.Queue[Optional[SSEEvent]]" = asyncio.Queue()
        self._seq = 0
        self._closed = False

    def put(self, event_type: str, data: Dict[str, Any]) -> bool:
        if self._closed:
            logger.debug(f"[SSE] Dropping {event_type} event after close")
            return False
        self._seq += 1
        self._queue.put_nowait(SSEEvent(event_type, data, event_id=str(self._seq)))
        return True

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    @property
    def closed(self) -> bool:
        return self._closed

    async def events(self) -> AsyncIterator[SSEEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event

    async def stream(self) -> AsyncIterator[str]:
        """Yield formatted SSE frames until ``close()`` is called."""
        async for event in self.events():
            yield event.format()
