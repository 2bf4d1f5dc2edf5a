import numpy as np
import pytest

from maze_escape.maze import PATH, generate_maze, maze_from_rows
from maze_escape.pathfinding import PathPlanner, find_path

# Two equally short routes from (1, 1) to (3, 3): east-about and south-about.
# (5, 5) is sealed off.
ROWS = [
    "#######",
    "#.....#",
    "#.###.#",
    "#.#...#",
    "#.#.###",
    "#...#.#",
    "#######",
]


@pytest.fixture
def grid():
    return maze_from_rows(ROWS, start=(1, 1), exit=(3, 3)).grid


def test_known_shortest_length(grid):
    path = find_path(grid, (1, 1), (3, 3))
    assert len(path) == 9
    assert path[0] == (1, 1)
    assert path[-1] == (3, 3)


def test_ties_follow_up_right_down_left_scan(grid):
    path = find_path(grid, (1, 1), (3, 3))
    assert path == [(1, 1), (2, 1), (3, 1), (4, 1), (5, 1), (5, 2), (5, 3), (4, 3), (3, 3)]


def test_same_cell_gives_single_element_path(grid):
    assert find_path(grid, (3, 3), (3, 3)) == [(3, 3)]


def test_unreachable_goal_is_empty(grid):
    assert find_path(grid, (1, 1), (5, 5)) == []


def test_walled_in_start_is_empty(grid):
    assert find_path(grid, (5, 5), (1, 1)) == []


def test_wall_goal_is_empty(grid):
    assert find_path(grid, (1, 1), (2, 2)) == []


def test_endpoints_are_clamped():
    open_grid = np.zeros((5, 5), dtype=np.int8)
    path = find_path(open_grid, (-3, -3), (40, 0))
    assert path[0] == (0, 0)
    assert path[-1] == (4, 0)
    assert len(path) == 5


@pytest.mark.parametrize("seed", range(5))
def test_paths_are_contiguous_over_open_cells(seed):
    maze = generate_maze(21, 21, rng=seed)
    path = find_path(maze.grid, maze.start, maze.exit)
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert abs(ax - bx) + abs(ay - by) == 1
        assert maze.grid[by, bx] == PATH


def test_planner_plans_on_first_update(grid):
    planner = PathPlanner(grid, interval=0.5)
    assert planner.update(0.016, (1, 1), (3, 3))
    # Own cell is dropped from the waypoints
    assert planner.waypoints[0] == (2, 1)
    assert planner.waypoints[-1] == (3, 3)
    assert planner.current == (2, 1)


def test_planner_keeps_stale_path_between_recomputes(grid):
    planner = PathPlanner(grid, interval=0.5)
    planner.update(0.1, (1, 1), (3, 3))
    old = planner.waypoints

    # The goal moved, but the interval has not elapsed yet
    assert not planner.update(0.2, (1, 1), (1, 5))
    assert planner.waypoints is old
    assert not planner.update(0.2, (1, 1), (1, 5))

    assert planner.update(0.15, (1, 1), (1, 5))
    assert planner.waypoints[-1] == (1, 5)


def test_planner_goal_in_own_cell(grid):
    planner = PathPlanner(grid)
    planner.replan((3, 3), (3, 3))
    assert planner.waypoints == [(3, 3)]


def test_planner_advance_and_clear(grid):
    planner = PathPlanner(grid)
    planner.replan((1, 1), (3, 1))
    assert planner.current == (2, 1)
    planner.advance()
    assert planner.current == (3, 1)
    planner.advance()
    assert planner.current is None

    planner.clear()
    assert planner.waypoints == []
    assert planner.update(0.0, (1, 1), (3, 1))


def test_planner_no_path_holds(grid):
    planner = PathPlanner(grid)
    planner.replan((1, 1), (5, 5))
    assert planner.current is None
