import numpy as np
import pygame

from .config import CELL_SIZE, PLAYER_RADIUS
from .maze import wall_instances


class CollisionField:
    """Answers "is this world position blocked?" against a fixed wall set.

    The test is an axis-aligned box: a position is blocked when some wall
    centre is within ``cell_size / 2 + entity_radius`` on both axes at once.
    """

    def __init__(self, walls, cell_size=CELL_SIZE, entity_radius=PLAYER_RADIUS):
        self.cell_size = cell_size
        self.entity_radius = entity_radius
        self.reach = cell_size / 2 + entity_radius
        self.centers = np.array([(w.x, w.z) for w in walls], dtype=np.float64).reshape(-1, 2)

    @classmethod
    def from_maze(cls, maze, cell_size=CELL_SIZE, entity_radius=PLAYER_RADIUS):
        return cls(wall_instances(maze, cell_size), cell_size, entity_radius)

    def is_blocked(self, pos):
        if len(self.centers) == 0:
            return False
        dx = np.abs(self.centers[:, 0] - pos[0])
        dz = np.abs(self.centers[:, 1] - pos[1])
        return bool(np.any((dx < self.reach) & (dz < self.reach)))

    def resolve_slide(self, current, desired):
        """Moves as far toward ``desired`` as the walls allow: both axes, then
        x only, then z only, otherwise stays put.
        """
        candidates = (
            (desired[0], desired[1]),
            (desired[0], current[1]),
            (current[0], desired[1]),
        )
        for x, z in candidates:
            if not self.is_blocked((x, z)):
                return pygame.Vector2(x, z)
        return pygame.Vector2(current[0], current[1])
