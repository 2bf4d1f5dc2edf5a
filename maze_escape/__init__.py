import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from .collision import CollisionField
from .config import GameConfig, PursuerSpec
from .errors import ConfigError, InvalidMazeDimensions, MazeEscapeError
from .geometry import Direction, GridCoord, grid_to_world, world_to_grid
from .maze import PATH, WALL, MazeData, generate_maze, wall_instances
from .pathfinding import PathPlanner, find_path
from .player import ContinuousMotionController, PlayerMotionController
from .pursuit import AgentState, PursuitAgent
from .session import GamePhase, GameSession, SessionState

__version__ = "0.1.0"
