# skillsync/services/relay_service.py

import asyncio
import logging
import threading
from collections import defaultdict

logger = logging.getLogger(__name__)


class RelayHub:
    """
    In-process fan-out of new chat messages to WebSocket subscribers.

    publish() may be called from worker threads (sync routes) or from the
    event loop; every subscriber queue is fed on its own loop.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[tuple[asyncio.AbstractEventLoop, asyncio.Queue]]] = (
            defaultdict(list)
        )

    def subscribe(self, conversation_id: str) -> asyncio.Queue:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        with self._lock:
            self._subscribers[conversation_id].append((loop, queue))
        return queue

    def unsubscribe(self, conversation_id: str, queue: asyncio.Queue) -> None:
        with self._lock:
            subs = self._subscribers.get(conversation_id, [])
            self._subscribers[conversation_id] = [s for s in subs if s[1] is not queue]
            if not self._subscribers[conversation_id]:
                del self._subscribers[conversation_id]

    def subscriber_count(self, conversation_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(conversation_id, []))

    def publish(self, conversation_id: str, event: dict) -> int:
        with self._lock:
            targets = list(self._subscribers.get(conversation_id, []))

        delivered = 0
        for loop, queue in targets:
            try:
                loop.call_soon_threadsafe(queue.put_nowait, event)
                delivered += 1
            except RuntimeError:
                # Loop already closed; the subscriber is gone
                logger.debug("Dropping event for closed subscriber on %s", conversation_id)
        return delivered


hub = RelayHub()
