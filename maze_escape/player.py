"""Player movement controllers.

``PlayerMotionController`` is the default tap-to-move scheme: one tap turns
the player and sends them cell by cell until a wall stops them.
``ContinuousMotionController`` is the simpler held-key alternative.
"""
import enum
import logging

import pygame

from .config import ARRIVAL_EPSILON, CELL_SIZE, CONTINUOUS_PLAYER_SPEED, PLAYER_SPEED
from .events import ARRIVE, WALL_BUMP
from .geometry import Direction, GridCoord, grid_to_world, in_bounds, world_bounds, world_to_grid

logger = logging.getLogger(__name__)


class MotionState(enum.Enum):
    STATIONARY = "stationary"
    MOVING = "moving"


class PlayerMotionController:
    def __init__(self, maze, collision, start_cell, speed=PLAYER_SPEED,
                 cell_size=CELL_SIZE, events=None, arrival_epsilon=ARRIVAL_EPSILON):
        self.maze = maze
        self.collision = collision
        self.speed = speed
        self.cell_size = cell_size
        self.events = events
        self.arrival_epsilon = arrival_epsilon

        self.cell = GridCoord(*start_cell)
        self.position = grid_to_world(self.cell.x, self.cell.y, maze, cell_size)
        self.facing = Direction.UP
        self.state = MotionState.STATIONARY
        self.target = None
        self.heading = None
        self.queued = None

    @property
    def is_moving(self):
        return self.state == MotionState.MOVING

    @property
    def destination(self):
        """The cell the player is heading for, or standing on."""
        return self.target if self.is_moving else self.cell

    def can_enter(self, cell):
        if not in_bounds(cell, self.maze.width, self.maze.height):
            return False
        return not self.collision.is_blocked(grid_to_world(cell[0], cell[1], self.maze, self.cell_size))

    def on_intent(self, direction):
        """Handles one discrete directional input. Returns False if it was
        rejected by a wall.
        """
        self.facing = direction
        if self.is_moving:
            # Only the latest pending turn is kept
            self.queued = direction
            return True
        return self._try_move(direction)

    def _try_move(self, direction, bump=True):
        target = direction.step(self.cell)
        if not self.can_enter(target):
            if bump:
                logger.debug("Bump %s at %s", direction.name, self.cell)
                self._emit(WALL_BUMP, direction=direction)
            return False

        self.state = MotionState.MOVING
        self.target = target
        self.heading = direction
        self.facing = direction
        return True

    def update(self, dt):
        """Moves toward the target cell. Returns True on the tick the player
        lands exactly on a cell; at that point ``position`` is still the cell
        centre even if the next move has already been started.
        """
        if not self.is_moving:
            return False

        target_pos = grid_to_world(self.target.x, self.target.y, self.maze, self.cell_size)
        self.position.move_towards_ip(target_pos, self.speed * dt)
        if self.position.distance_to(target_pos) >= self.arrival_epsilon:
            return False

        # Snap to remove drift
        self.position = target_pos
        self.cell = self.target
        self.state = MotionState.STATIONARY
        self.target = None
        self._emit(ARRIVE, cell=self.cell)

        queued, self.queued = self.queued, None
        if queued is not None and self._try_move(queued):
            return True
        # Keep going the same way until a wall stops us
        self._try_move(self.heading, bump=False)
        return True

    def _emit(self, name, **payload):
        if self.events is not None:
            self.events.emit(name, **payload)


class ContinuousMotionController:
    def __init__(self, maze, collision, start_cell, speed=CONTINUOUS_PLAYER_SPEED,
                 cell_size=CELL_SIZE, events=None):
        self.maze = maze
        self.collision = collision
        self.speed = speed
        self.cell_size = cell_size
        self.events = events

        self.position = grid_to_world(start_cell[0], start_cell[1], maze, cell_size)
        self.facing = Direction.UP
        self.held = set()
        self._blocked = False

    @property
    def cell(self):
        return world_to_grid(self.position.x, self.position.y, self.maze, self.cell_size)

    destination = cell

    @property
    def is_moving(self):
        return bool(self.held)

    def on_intent(self, direction):
        """A tap steers toward ``direction`` alone, dropping other held keys."""
        self.held = {direction}
        self.facing = direction
        return True

    def set_held(self, direction, pressed):
        if pressed:
            self.held.add(direction)
            self.facing = direction
        else:
            self.held.discard(direction)

    def update(self, dt):
        """Returns True when the player moved this tick."""
        move = pygame.Vector2(0, 0)
        for direction in self.held:
            move += pygame.Vector2(direction.dx, direction.dy)
        if move.length_squared() == 0:
            self._blocked = False
            return False

        # Normalize diagonal movement
        move.scale_to_length(self.speed * dt)
        desired = self._clamp(self.position + move)
        new_pos = self.collision.resolve_slide(self.position, desired)

        if new_pos == self.position:
            if not self._blocked:
                self._blocked = True
                self._emit(WALL_BUMP, direction=self.facing)
            return False

        self._blocked = False
        self.position = new_pos
        return True

    def _clamp(self, pos):
        min_x, min_z, max_x, max_z = world_bounds(self.maze, self.cell_size)
        r = self.collision.entity_radius
        return pygame.Vector2(
            min(max(pos.x, min_x + r), max_x - r),
            min(max(pos.y, min_z + r), max_z - r),
        )

    def _emit(self, name, **payload):
        if self.events is not None:
            self.events.emit(name, **payload)
