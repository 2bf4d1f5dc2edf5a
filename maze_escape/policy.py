from .env import DIRECTION_TO_ACTION
from .geometry import Direction
from .pathfinding import find_path


def policy(env):
    # Strategy: BFS from the cell the player will next stand on to the exit and
    # tap toward the first step. While moving, the tap is queued and taken on
    # arrival, so turns happen exactly at junctions. Pursuers are ignored.
    session = env.session
    maze = session.maze
    here = session.player.destination

    path = find_path(maze.grid, here, maze.exit)
    if len(path) < 2:
        return 0  # No movement (unreachable, or already at exit)

    nx, ny = path[1]
    return DIRECTION_TO_ACTION[Direction((nx - here[0], ny - here[1]))]
