import logging
from collections import defaultdict

logger = logging.getLogger(__name__)

WALL_BUMP = "wall_bump"
ARRIVE = "arrive"
COLLECT = "collect"
CHEST_REVEALED = "chest_revealed"
CAUGHT = "caught"
WIN = "win"
LOSE = "lose"

EVENT_NAMES = (WALL_BUMP, ARRIVE, COLLECT, CHEST_REVEALED, CAUGHT, WIN, LOSE)


class EventBus:
    """Synchronous fire-and-forget dispatch for side-effect hooks
    (sound, popups, ...). The core never waits on a handler's result.
    """

    def __init__(self):
        self._handlers = defaultdict(list)

    def on(self, name, handler):
        if name not in EVENT_NAMES:
            raise ValueError(f"unknown event {name!r}")
        self._handlers[name].append(handler)
        return handler

    def off(self, name, handler):
        if handler in self._handlers[name]:
            self._handlers[name].remove(handler)

    def emit(self, name, **payload):
        logger.debug("event %s %s", name, payload)
        for handler in list(self._handlers[name]):
            handler(**payload)
