"""
In-process event bus for best-effort notifications.

The core publishes events such as ``message.created`` or
``friend_request.created`` after its writes are committed. Subscribers (for
example a real-time transport) are called synchronously; a failing subscriber is
logged and skipped, it never fails the publishing operation.
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

FRIEND_REQUEST_CREATED = "friend_request.created"
FRIEND_REQUEST_ACCEPTED = "friend_request.accepted"
JOIN_REQUEST_CREATED = "join_request.created"
MESSAGE_CREATED = "message.created"


class EventBus:
    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> None:
        self._handlers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: Handler) -> None:
        if handler in self._handlers.get(topic, []):
            self._handlers[topic].remove(handler)

    def publish(self, topic: str, payload: Dict[str, Any]) -> int:
        """Deliver ``payload`` to every subscriber of ``topic``; returns deliveries."""
        delivered = 0
        for handler in list(self._handlers.get(topic, [])):
            try:
                handler(payload)
            except Exception:
                logger.exception("Event handler failed for %s", topic)
                continue
            delivered += 1
        return delivered

    def clear(self) -> None:
        self._handlers.clear()


event_bus = EventBus()
