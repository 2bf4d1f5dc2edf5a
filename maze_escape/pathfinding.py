import logging
from collections import deque

from .config import PATH_UPDATE_INTERVAL
from .geometry import GridCoord, clamp_cell
from .maze import PATH

logger = logging.getLogger(__name__)

# Scan order breaks ties between equally short paths: up, right, down, left
NEIGHBOR_STEPS = ((0, -1), (1, 0), (0, 1), (-1, 0))


def find_path(grid, start, end):
    """Shortest 4-connected path over PATH cells from ``start`` to ``end``.

    Returns the cells from ``start`` to ``end`` inclusive, ``[end]`` when they
    are the same cell, or ``[]`` when ``end`` is unreachable. Both endpoints
    are clamped onto the grid first.
    """
    height, width = grid.shape
    start = clamp_cell(start, width, height)
    end = clamp_cell(end, width, height)

    if start == end:
        return [end]

    queue = deque([start])
    parent = {start: None}

    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBOR_STEPS:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            nxt = GridCoord(nx, ny)
            if nxt in parent or grid[ny, nx] != PATH:
                continue
            parent[nxt] = GridCoord(x, y)
            if nxt == end:
                return _reconstruct(parent, end)
            queue.append(nxt)

    return []


def _reconstruct(parent, end):
    path = []
    cell = end
    while cell is not None:
        path.append(cell)
        cell = parent[cell]
    path.reverse()
    return path


class PathPlanner:
    """Holds a waypoint sequence and recomputes it at a fixed interval of
    simulated time. Between recomputes the old sequence keeps being consumed.
    """

    def __init__(self, grid, interval=PATH_UPDATE_INTERVAL):
        self.grid = grid
        self.interval = interval
        self.waypoints = []
        self.cursor = 0
        # Plan on the first update rather than waiting a full interval
        self._since_replan = interval

    def update(self, dt, start, goal):
        """Advances the recompute timer; replans if it elapsed. Returns True
        when a new search ran this call.
        """
        self._since_replan += dt
        if self._since_replan < self.interval:
            return False
        self._since_replan = 0.0
        self.replan(start, goal)
        return True

    def replan(self, start, goal):
        path = find_path(self.grid, start, goal)
        # Drop the cell we are standing in unless it is the goal itself
        self.waypoints = path[1:] or path
        self.cursor = 0
        logger.debug("Replanned %s -> %s: %d waypoints", start, goal, len(self.waypoints))

    @property
    def current(self):
        if self.cursor < len(self.waypoints):
            return self.waypoints[self.cursor]
        return None

    def advance(self):
        self.cursor += 1

    def clear(self):
        self.waypoints = []
        self.cursor = 0
        self._since_replan = self.interval
