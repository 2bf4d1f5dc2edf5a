"""Grid <-> world coordinate transforms shared by every subsystem.

World space is centred on the origin. ``pygame.Vector2`` holds world
positions, with ``.x`` as world x and ``.y`` as world z (the vertical axis
belongs to whatever renders the maze).
"""
import enum
import math
from collections import namedtuple

import pygame

from .config import CELL_SIZE

GridCoord = namedtuple("GridCoord", ["x", "y"])


def grid_to_world(gx, gy, maze, cell_size=CELL_SIZE):
    """Returns the world position of the centre of cell (gx, gy)."""
    x = gx * cell_size - (maze.width * cell_size) / 2 + cell_size / 2
    z = gy * cell_size - (maze.height * cell_size) / 2 + cell_size / 2
    return pygame.Vector2(x, z)


def world_to_grid(x, z, maze, cell_size=CELL_SIZE, clamp=True):
    """Returns the cell containing (x, z), which is also the cell whose centre
    is nearest. Out-of-range positions are clamped onto the grid unless
    ``clamp`` is False.
    """
    gx = math.floor((x + (maze.width * cell_size) / 2) / cell_size)
    gy = math.floor((z + (maze.height * cell_size) / 2) / cell_size)
    if clamp:
        return clamp_cell((gx, gy), maze.width, maze.height)
    return GridCoord(gx, gy)


def clamp_cell(cell, width, height):
    x, y = cell
    return GridCoord(min(max(int(x), 0), width - 1), min(max(int(y), 0), height - 1))


def in_bounds(cell, width, height):
    x, y = cell
    return 0 <= x < width and 0 <= y < height


def world_bounds(maze, cell_size=CELL_SIZE):
    """(min_x, min_z, max_x, max_z) of the maze in world space."""
    half_w = (maze.width * cell_size) / 2
    half_h = (maze.height * cell_size) / 2
    return -half_w, -half_h, half_w, half_h


class Direction(enum.Enum):
    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def dx(self):
        return self.value[0]

    @property
    def dy(self):
        return self.value[1]

    def step(self, cell):
        return GridCoord(cell[0] + self.dx, cell[1] + self.dy)

    @property
    def opposite(self):
        return Direction((-self.dx, -self.dy))
