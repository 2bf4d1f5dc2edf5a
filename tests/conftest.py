import numpy as np
import pytest

from maze_escape.collision import CollisionField
from maze_escape.config import GameConfig
from maze_escape.events import EventBus
from maze_escape.maze import maze_from_rows

# Straight three-cell corridor running up from (1, 3), plus a side branch
CORRIDOR_ROWS = [
    "#####",
    "#...#",
    "#.#.#",
    "#...#",
    "#####",
]

# Dead-straight corridor from (1, 1) down to an exit on the bottom edge
EXIT_ROWS = [
    "#####",
    "#.###",
    "#.###",
    "#.###",
    "#.###",
]


@pytest.fixture
def corridor_maze():
    return maze_from_rows(CORRIDOR_ROWS, start=(1, 3), exit=(3, 3))


@pytest.fixture
def corridor_field(corridor_maze):
    return CollisionField.from_maze(corridor_maze)


@pytest.fixture
def exit_maze():
    return maze_from_rows(EXIT_ROWS, start=(1, 1), exit=(1, 4))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def recorder():
    """An EventBus plus a list of (name, payload) it has emitted."""
    bus = EventBus()
    seen = []
    for name in ("wall_bump", "arrive", "collect", "chest_revealed", "caught", "win", "lose"):
        bus.on(name, lambda _name=name, **payload: seen.append((_name, payload)))
    return bus, seen


@pytest.fixture
def quiet_config():
    """No pursuers and no collectibles."""
    return GameConfig(pursuers=(), collectibles=False)


def run(obj, seconds, dt=0.05):
    """Calls obj.update/tick repeatedly for ``seconds`` of simulated time."""
    step = getattr(obj, "tick", None) or obj.update
    for _ in range(int(round(seconds / dt))):
        step(dt)
