"""
EventDispatcher - the narration channel.

Objects and actions never print or hold subscriptions. They return events
(plain dicts); the WorldManager dispatches them to whoever subscribed.

    dispatcher = EventDispatcher()
    unsubscribe = dispatcher.subscribe(lambda ev: print(ev["text"]))
    dispatcher.dispatch([dispatcher.msg_to_location("cellar", "It is dark.")])
    unsubscribe()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


# Type alias for events (message dicts sent to listeners)
Event = Dict[str, Any]

Listener = Callable[[Event], None]


def msg_to_player(player_id: str, text: str, *, payload: dict | None = None) -> Event:
    """Create a message event for the player only."""
    ev: Event = {
        "type": "message",
        "scope": "player",
        "player_id": player_id,
        "text": text,
    }
    if payload:
        ev["payload"] = payload
    return ev


def msg_to_location(location_id: str | None, text: str, *, payload: dict | None = None) -> Event:
    """Create a message event for everyone in a location."""
    ev: Event = {
        "type": "message",
        "scope": "location",
        "location_id": location_id,
        "text": text,
    }
    if payload:
        ev["payload"] = payload
    return ev


class EventDispatcher:
    """
    Routes events to subscribed listeners.

    Listeners are called synchronously, in subscription order. A listener that
    raises is logged and skipped; the remaining listeners still get the event.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    msg_to_player = staticmethod(msg_to_player)
    msg_to_location = staticmethod(msg_to_location)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, events: List[Event]) -> None:
        """Push each event to every current listener."""
        for ev in events:
            logger.debug("Dispatching event: %r", ev)
            # Snapshot: a listener may unsubscribe itself
            for listener in list(self._listeners):
                try:
                    listener(ev)
                except Exception:
                    logger.exception("Event listener %r failed", listener)
