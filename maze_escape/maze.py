import logging
from collections import namedtuple
from dataclasses import dataclass

import numpy as np

from .config import CELL_SIZE, validate_maze_size
from .geometry import GridCoord, grid_to_world, in_bounds

logger = logging.getLogger(__name__)

# 0: path, 1: wall
PATH = 0
WALL = 1

# Up, right, down, left, two cells at a time
CARVE_STEPS = ((0, -2), (2, 0), (0, 2), (-2, 0))

WallInstance = namedtuple("WallInstance", ["x", "z", "cell", "is_edge"])


@dataclass(frozen=True, eq=False)
class MazeData:
    grid: np.ndarray
    width: int
    height: int
    start: GridCoord
    exit: GridCoord

    def is_wall(self, x, y):
        """Cells outside the grid count as walls."""
        if not in_bounds((x, y), self.width, self.height):
            return True
        return self.grid[y, x] == WALL

    def path_cells(self):
        return [GridCoord(int(x), int(y)) for y, x in np.argwhere(self.grid == PATH)]


def generate_maze(width, height, rng=None):
    """Carves a maze by recursive backtracking from the centre cell and opens
    an exit on a random side.

    ``width`` and ``height`` must be odd and at least 5, anything else raises
    InvalidMazeDimensions. ``rng`` is a ``numpy.random.Generator``, a seed, or
    None for fresh entropy; the same seed always yields the same maze.
    """
    validate_maze_size(width, height)
    width, height = int(width), int(height)
    rng = np.random.default_rng(rng)

    grid = np.full((height, width), WALL, dtype=np.int8)

    # Start from the centre, snapped to odd coordinates
    start = GridCoord((width // 2) | 1, (height // 2) | 1)
    _carve(grid, start, rng)

    exit_cell = _open_exit(grid, rng)

    grid.flags.writeable = False
    maze = MazeData(grid=grid, width=width, height=height, start=start, exit=exit_cell)
    logger.debug("Generated %dx%d maze, start=%s exit=%s", width, height, start, exit_cell)
    return maze


def _shuffled_steps(rng):
    return [CARVE_STEPS[i] for i in rng.permutation(len(CARVE_STEPS))]


def _carve(grid, start, rng):
    """Depth-first carve. Each frame keeps its own shuffled direction iterator,
    so the visiting order is that of the recursive formulation without
    touching the interpreter's recursion limit on large mazes.
    """
    height, width = grid.shape
    grid[start.y, start.x] = PATH
    stack = [(start.x, start.y, iter(_shuffled_steps(rng)))]

    while stack:
        x, y, steps = stack[-1]
        for dx, dy in steps:
            nx, ny = x + dx, y + dy
            if 0 < nx < width - 1 and 0 < ny < height - 1 and grid[ny, nx] == WALL:
                # Carve through the wall between current and next cell
                grid[y + dy // 2, x + dx // 2] = PATH
                grid[ny, nx] = PATH
                stack.append((nx, ny, iter(_shuffled_steps(rng))))
                break
        else:
            stack.pop()


def _open_exit(grid, rng):
    height, width = grid.shape
    side = int(rng.integers(4))
    odd_x = int(rng.integers((width - 1) // 2)) * 2 + 1
    odd_y = int(rng.integers((height - 1) // 2)) * 2 + 1

    if side == 0:  # top
        exit_cell, inner = GridCoord(odd_x, 0), (odd_x, 1)
    elif side == 1:  # right
        exit_cell, inner = GridCoord(width - 1, odd_y), (width - 2, odd_y)
    elif side == 2:  # bottom
        exit_cell, inner = GridCoord(odd_x, height - 1), (odd_x, height - 2)
    else:  # left
        exit_cell, inner = GridCoord(0, odd_y), (1, odd_y)

    grid[inner[1], inner[0]] = PATH
    grid[exit_cell.y, exit_cell.x] = PATH
    return exit_cell


def wall_instances(maze, cell_size=CELL_SIZE):
    """One world-space wall centre per WALL cell, in row-major order."""
    walls = []
    for y, x in np.argwhere(maze.grid == WALL):
        x, y = int(x), int(y)
        pos = grid_to_world(x, y, maze, cell_size)
        is_edge = x == 0 or x == maze.width - 1 or y == 0 or y == maze.height - 1
        walls.append(WallInstance(pos.x, pos.y, GridCoord(x, y), is_edge))
    return walls


def maze_from_rows(rows, start, exit):
    """Builds a MazeData from rows of 0/1 (or '.'/'#') for hand-made layouts."""
    grid = np.array(
        [[WALL if c in (1, "#") else PATH for c in row] for row in rows],
        dtype=np.int8,
    )
    grid.flags.writeable = False
    height, width = grid.shape
    return MazeData(grid=grid, width=width, height=height,
                    start=GridCoord(*start), exit=GridCoord(*exit))
