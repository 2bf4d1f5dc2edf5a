import logging
import math
from dataclasses import dataclass

import pygame

from .config import BIG_CHEST_VALUE, CELL_SIZE, COIN_TABLE, PICKUP_RADIUS, SMALL_CHEST_VALUE
from .geometry import grid_to_world
from .maze import PATH

logger = logging.getLogger(__name__)

COIN = "coin"
CHEST = "chest"


@dataclass
class Collectible:
    id: int
    position: pygame.Vector2
    value: int
    kind: str = COIN
    cell: tuple = None
    collected: bool = False
    visible: bool = True


def candidate_cells(maze):
    """Interior odd/odd PATH cells, excluding start and exit."""
    cells = []
    for y in range(1, maze.height - 1, 2):
        for x in range(1, maze.width - 1, 2):
            if maze.grid[y, x] == PATH and (x, y) != maze.start and (x, y) != maze.exit:
                cells.append((x, y))
    return cells


def _dist(a, b):
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _place_chests(cells, start, exit):
    """Small chest far from the start, big chest near (not at) the exit and
    on the other side of the maze from the small one.
    """
    by_start = sorted(cells, key=lambda c: _dist(c, start), reverse=True)
    by_exit = sorted(cells, key=lambda c: _dist(c, exit))

    small = next(
        (c for c in by_start if _dist(c, start) >= 8 and _dist(c, exit) >= 6),
        by_start[0],
    )

    big = next(
        (c for c in by_exit if 3 <= _dist(c, exit) <= 10 and _dist(c, small) >= 10),
        None,
    )
    if big is None:
        big = next((c for c in by_exit if _dist(c, small) >= 8), None)
    if big is None:
        big = by_exit[min(5, len(by_exit) - 1)]
    return small, big


def place_collectibles(maze, rng, coin_table=COIN_TABLE, cell_size=CELL_SIZE):
    """Builds the session's collectibles: two treasure chests plus coins from
    ``coin_table`` on shuffled free cells. The big chest starts hidden.
    """
    cells = candidate_cells(maze)
    if not cells:
        logger.warning("No free cells for collectibles in %dx%d maze", maze.width, maze.height)
        return []

    items = []

    def add(cell, value, kind, visible=True):
        items.append(Collectible(
            id=len(items),
            position=grid_to_world(cell[0], cell[1], maze, cell_size),
            value=value,
            kind=kind,
            cell=cell,
            visible=visible,
        ))

    small, big = _place_chests(cells, maze.start, maze.exit)
    add(small, SMALL_CHEST_VALUE, CHEST)
    if big != small:
        add(big, BIG_CHEST_VALUE, CHEST, visible=False)

    free = [c for c in cells if c != small and c != big]
    order = rng.permutation(len(free)) if free else []
    free = [free[i] for i in order]

    i = 0
    for value, count in coin_table:
        for _ in range(count):
            if i >= len(free):
                break
            add(free[i], value, COIN)
            i += 1

    logger.debug("Placed %d collectibles", len(items))
    return items


class CollectibleRegistry:
    def __init__(self, items=(), pickup_radius=PICKUP_RADIUS):
        self.items = {item.id: item for item in items}
        self.pickup_radius = pickup_radius

    def __iter__(self):
        return iter(self.items.values())

    def __len__(self):
        return len(self.items)

    def collect(self, item_id):
        """Marks an item collected and returns its value; 0 if it was already
        collected, unknown or still hidden.
        """
        item = self.items.get(item_id)
        if item is None or item.collected or not item.visible:
            return 0
        item.collected = True
        return item.value

    def check_pickups(self, pos):
        """Collects every visible item within the pickup radius of ``pos``."""
        picked = []
        for item in self.items.values():
            if item.collected or not item.visible:
                continue
            if item.position.distance_to(pos) <= self.pickup_radius:
                self.collect(item.id)
                picked.append(item)
        return picked

    def reveal_hidden(self):
        revealed = []
        for item in self.items.values():
            if not item.visible and not item.collected:
                item.visible = True
                revealed.append(item)
        return revealed
