import numpy as np
import pytest

from maze_escape.errors import InvalidMazeDimensions
from maze_escape.maze import PATH, WALL, generate_maze, maze_from_rows, wall_instances
from maze_escape.pathfinding import find_path

SIZES = [(5, 5), (7, 11), (21, 21), (41, 31)]


@pytest.mark.parametrize("width,height", [(4, 5), (5, 6), (3, 3), (1, 5), (21, 20), (0, 0), (-5, 5)])
def test_rejects_invalid_dimensions(width, height):
    with pytest.raises(InvalidMazeDimensions):
        generate_maze(width, height, rng=0)


def test_rejects_non_integer_dimensions():
    with pytest.raises(InvalidMazeDimensions):
        generate_maze(21.0, 21, rng=0)
    with pytest.raises(InvalidMazeDimensions):
        generate_maze(True, 21, rng=0)


def test_accepts_numpy_integer_dimensions():
    maze = generate_maze(np.int64(21), np.int64(15), rng=0)
    assert maze.grid.shape == (15, 21)
    assert type(maze.width) is int


def test_invalid_dimensions_is_a_value_error():
    with pytest.raises(ValueError):
        generate_maze(6, 6)


def test_grid_shape_and_values():
    maze = generate_maze(21, 15, rng=7)
    assert maze.grid.shape == (15, 21)
    assert maze.grid.dtype == np.int8
    assert set(np.unique(maze.grid)) <= {PATH, WALL}


def test_start_is_odd_cell_near_centre():
    maze = generate_maze(21, 21, rng=1)
    assert maze.start == (11, 11)
    assert maze.grid[11, 11] == PATH


@pytest.mark.parametrize("seed", range(25))
def test_exit_on_boundary_with_open_inner_neighbour(seed):
    maze = generate_maze(21, 21, rng=seed)
    ex, ey = maze.exit
    assert maze.grid[ey, ex] == PATH
    on_edge = ex in (0, maze.width - 1) or ey in (0, maze.height - 1)
    assert on_edge

    if ey == 0:
        inner = (ex, 1)
    elif ey == maze.height - 1:
        inner = (ex, maze.height - 2)
    elif ex == 0:
        inner = (1, ey)
    else:
        inner = (maze.width - 2, ey)
    assert maze.grid[inner[1], inner[0]] == PATH
    # The coordinate running along the edge is odd
    assert (ex if ey in (0, maze.height - 1) else ey) % 2 == 1


@pytest.mark.parametrize("width,height", SIZES)
@pytest.mark.parametrize("seed", range(10))
def test_exit_always_reachable(width, height, seed):
    maze = generate_maze(width, height, rng=seed)
    path = find_path(maze.grid, maze.start, maze.exit)
    assert path[0] == maze.start
    assert path[-1] == maze.exit


@pytest.mark.parametrize("width,height", SIZES)
def test_path_cells_are_odd_cells_or_carve_midpoints(width, height):
    maze = generate_maze(width, height, rng=99)
    for x, y in maze.path_cells():
        if (x, y) == maze.exit:
            continue
        if x % 2 == 1 and y % 2 == 1:
            continue
        assert (x % 2) != (y % 2), f"({x}, {y}) has two even coordinates"
        if x % 2 == 0:
            assert maze.grid[y, x - 1] == PATH and maze.grid[y, x + 1] == PATH
        else:
            assert maze.grid[y - 1, x] == PATH and maze.grid[y + 1, x] == PATH


@pytest.mark.parametrize("width,height", SIZES)
def test_carve_is_a_spanning_tree(width, height):
    maze = generate_maze(width, height, rng=5)
    odd_cells = ((width - 1) // 2) * ((height - 1) // 2)
    assert all(maze.grid[y, x] == PATH for y in range(1, height, 2) for x in range(1, width, 2))
    # n cells, n - 1 connectors, one opening on the boundary
    assert int(np.count_nonzero(maze.grid == PATH)) == 2 * odd_cells


def test_same_seed_same_maze():
    a = generate_maze(21, 21, rng=42)
    b = generate_maze(21, 21, rng=42)
    assert np.array_equal(a.grid, b.grid)
    assert a.start == b.start
    assert a.exit == b.exit


def test_different_seeds_differ():
    grids = [generate_maze(21, 21, rng=seed).grid for seed in range(5)]
    assert any(not np.array_equal(grids[0], g) for g in grids[1:])


def test_accepts_generator():
    rng = np.random.default_rng(3)
    maze = generate_maze(9, 9, rng=rng)
    assert maze.width == 9


def test_grid_is_read_only():
    maze = generate_maze(9, 9, rng=0)
    with pytest.raises(ValueError):
        maze.grid[1, 1] = WALL


def test_large_maze_does_not_hit_recursion_limit():
    maze = generate_maze(151, 151, rng=0)
    assert find_path(maze.grid, maze.start, maze.exit)


def test_wall_instances_one_per_wall_cell():
    maze = generate_maze(11, 9, rng=2)
    walls = wall_instances(maze, 2.0)
    cells = [w.cell for w in walls]
    assert len(walls) == int(np.count_nonzero(maze.grid == WALL))
    assert len(set(cells)) == len(cells)
    for w in walls:
        assert maze.grid[w.cell.y, w.cell.x] == WALL
        assert w.is_edge == (w.cell.x in (0, 10) or w.cell.y in (0, 8))


def test_is_wall_treats_outside_as_wall():
    maze = maze_from_rows(["#.#", "#.#", "###"], start=(1, 1), exit=(1, 0))
    assert maze.is_wall(-1, 0)
    assert maze.is_wall(0, 0)
    assert not maze.is_wall(1, 0)
