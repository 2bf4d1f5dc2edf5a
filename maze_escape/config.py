import numbers
from dataclasses import dataclass, field

from .errors import ConfigError, InvalidMazeDimensions

# --- Maze ---
MAZE_WIDTH = 21  # Must be odd
MAZE_HEIGHT = 21  # Must be odd
MIN_MAZE_SIZE = 5
CELL_SIZE = 2.0

# --- Player ---
PLAYER_RADIUS = 0.4
PLAYER_SPEED = 6.0  # world units per second, discrete grid-step mode
CONTINUOUS_PLAYER_SPEED = 5.0
ARRIVAL_EPSILON = 0.01

# --- Pursuers ---
PATH_UPDATE_INTERVAL = 0.5  # seconds between path recomputes
WAYPOINT_EPSILON = 0.2
CATCH_DISTANCE = 1.2
GHOST_SPEED = 4.0
BALL_SPEED = 3.5

# --- Session ---
GAME_DURATION = 180  # seconds
TRAIL_CAPACITY = 500
TRAIL_MIN_DISTANCE = 0.5
PICKUP_RADIUS = 1.0
CHEST_REVEAL_DISTANCE = 6.0
TIME_BONUS_PER_SECOND = 10

# --- Collectibles ---
COIN_TABLE = ((100, 4), (250, 3), (500, 2), (1000, 1))  # (value, count)
SMALL_CHEST_VALUE = 10000
BIG_CHEST_VALUE = 50000

CONTROL_SCHEMES = ("discrete", "continuous")


def validate_maze_size(width, height):
    for n in (width, height):
        if not isinstance(n, numbers.Integral) or isinstance(n, bool):
            raise InvalidMazeDimensions(width, height)
        if n < MIN_MAZE_SIZE or n % 2 == 0:
            raise InvalidMazeDimensions(width, height)


@dataclass(frozen=True)
class PursuerSpec:
    """Tuning for one pursuer. ``start`` is ``"exit"`` or an ``(x, y)`` cell."""

    name: str
    speed: float
    catch_distance: float = CATCH_DISTANCE
    start: object = "exit"


DEFAULT_PURSUERS = (
    PursuerSpec("ghost", GHOST_SPEED),
    PursuerSpec("ball", BALL_SPEED),
)


@dataclass(frozen=True)
class GameConfig:
    maze_width: int = MAZE_WIDTH
    maze_height: int = MAZE_HEIGHT
    cell_size: float = CELL_SIZE
    player_radius: float = PLAYER_RADIUS
    player_speed: float = PLAYER_SPEED
    continuous_player_speed: float = CONTINUOUS_PLAYER_SPEED
    control_scheme: str = "discrete"
    duration: int = GAME_DURATION
    path_update_interval: float = PATH_UPDATE_INTERVAL
    waypoint_epsilon: float = WAYPOINT_EPSILON
    pursuers: tuple = field(default=DEFAULT_PURSUERS)
    collectibles: bool = True
    coin_table: tuple = COIN_TABLE
    pickup_radius: float = PICKUP_RADIUS
    chest_reveal_distance: float = CHEST_REVEAL_DISTANCE
    trail_capacity: int = TRAIL_CAPACITY
    trail_min_distance: float = TRAIL_MIN_DISTANCE
    time_bonus_per_second: int = TIME_BONUS_PER_SECOND

    def __post_init__(self):
        validate_maze_size(self.maze_width, self.maze_height)

        if self.control_scheme not in CONTROL_SCHEMES:
            raise ConfigError(f"unknown control scheme {self.control_scheme!r}")
        if self.cell_size <= 0:
            raise ConfigError("cell_size must be positive")
        if self.duration <= 0:
            raise ConfigError("duration must be positive")
        if self.path_update_interval <= 0:
            raise ConfigError("path_update_interval must be positive")
        if self.trail_capacity < 1:
            raise ConfigError("trail_capacity must be at least 1")

        # Pursuers are always strictly slower than the player
        if self.control_scheme == "continuous":
            top_speed = self.continuous_player_speed
        else:
            top_speed = self.player_speed
        for spec in self.pursuers:
            if spec.speed <= 0:
                raise ConfigError(f"pursuer {spec.name!r} must have a positive speed")
            if spec.speed >= top_speed:
                raise ConfigError(
                    f"pursuer {spec.name!r} speed {spec.speed} must be below "
                    f"the player's {top_speed}"
                )
