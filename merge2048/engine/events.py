"""
Domain events emitted by the game engine.

Sound, rendering and persistence layers subscribe to these instead of being called by the engine,
so a failing listener can never interrupt a move.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

# ##>: Module logger.
_logger = logging.getLogger(__name__)

MOVE = "move"
MERGE = "merge"
WIN = "win"
SCORE_IMPROVED = "score-improved"
GAME_OVER = "game-over"
UNDO = "undo"
NEW_GAME = "new-game"

Handler = Callable[..., Any]


class EventBus:
    """Synchronous publish/subscribe dispatcher."""

    def __init__(self):
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> Handler:
        """
        Register a handler for an event.

        Parameters
        ----------
        name : str
            Event name, such as ``"merge"``.
        handler : Callable
            Called with the event payload as keyword arguments.

        Returns
        -------
        Callable
            The handler, so the method can be used as a decorator.
        """
        self._handlers[name].append(handler)
        return handler

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._handlers.get(name, []):
            self._handlers[name].remove(handler)

    def emit(self, name: str, **payload: Any) -> None:
        """
        Call every handler of an event, in subscription order.

        Exceptions raised by a handler are logged and do not stop the remaining handlers.
        """
        for handler in list(self._handlers.get(name, [])):
            try:
                handler(**payload)
            except Exception:
                _logger.exception("Handler %r failed on event %s", handler, name)
