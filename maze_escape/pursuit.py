import enum
import logging

import pygame

from .config import CATCH_DISTANCE, CELL_SIZE, PATH_UPDATE_INTERVAL, WAYPOINT_EPSILON
from .geometry import grid_to_world, world_to_grid
from .pathfinding import PathPlanner

logger = logging.getLogger(__name__)


class AgentState(enum.Enum):
    IDLE = "idle"
    FOLLOWING = "following"
    CAUGHT_PLAYER = "caught_player"


class PursuitAgent:
    """An enemy that walks the shortest grid path toward the player.

    Every pursuer variant runs this same state machine; they differ only in
    speed, catch distance and spawn cell. Agents ignore each other.
    """

    def __init__(self, name, maze, start_cell, speed, catch_distance=CATCH_DISTANCE,
                 cell_size=CELL_SIZE, path_interval=PATH_UPDATE_INTERVAL,
                 waypoint_epsilon=WAYPOINT_EPSILON):
        self.name = name
        self.maze = maze
        self.speed = speed
        self.catch_distance = catch_distance
        self.cell_size = cell_size
        self.waypoint_epsilon = waypoint_epsilon
        self.start_cell = start_cell
        self.position = grid_to_world(start_cell[0], start_cell[1], maze, cell_size)
        self.planner = PathPlanner(maze.grid, path_interval)
        self.state = AgentState.IDLE

    @property
    def caught(self):
        return self.state == AgentState.CAUGHT_PLAYER

    def tick(self, dt, player_pos):
        """Advances the agent by ``dt`` seconds. Returns True on the single
        tick in which it catches the player.
        """
        if self.caught:
            return False

        # 1. Recompute the path occasionally
        own_cell = world_to_grid(self.position.x, self.position.y, self.maze, self.cell_size)
        player_cell = world_to_grid(player_pos[0], player_pos[1], self.maze, self.cell_size)
        self.planner.update(dt, own_cell, player_cell)

        # 2. Follow it
        self._follow(dt)

        # 3. Catch check
        if self.position.distance_to(player_pos) < self.catch_distance:
            self.state = AgentState.CAUGHT_PLAYER
            logger.info("%s caught the player at (%.2f, %.2f)", self.name, self.position.x, self.position.y)
            return True
        return False

    def _follow(self, dt):
        waypoint = self.planner.current
        if waypoint is None:
            self.state = AgentState.IDLE
            return

        self.state = AgentState.FOLLOWING
        target = grid_to_world(waypoint[0], waypoint[1], self.maze, self.cell_size)
        # move_towards never overshoots the waypoint
        self.position.move_towards_ip(target, self.speed * dt)

        if self.position.distance_to(target) < self.waypoint_epsilon:
            self.planner.advance()
            if self.planner.current is None:
                self.state = AgentState.IDLE

    def place(self, pos):
        """Teleports the agent, e.g. for scripted scenarios. The old path is
        dropped so the next tick plans from the new position.
        """
        self.position = pygame.Vector2(pos[0], pos[1])
        self.planner.clear()
        if not self.caught:
            self.state = AgentState.IDLE
