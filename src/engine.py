# engine.py
# Stateless grid engine for the 2048 sliding-tile game.

import logging
import random
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

GRID_SIZE = 4
WIN_TILE = 2048
TILE_VALUES = (2, 4)
TILE_PROBABILITIES = (0.9, 0.1)

Grid = List[List[int]]

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class MoveResult(NamedTuple):
    """Outcome of sliding a grid in one direction."""
    grid: Grid
    moved: bool
    score_delta: int


# Counter-clockwise quarter turns that bring each direction onto "slide left".
_ROTATIONS = {
    Direction.LEFT: 0,
    Direction.UP: 1,
    Direction.RIGHT: 2,
    Direction.DOWN: 3,
}

# --- Grid Helper Functions ---

def get_grid_size(grid: Grid) -> int:
    """
    Gets the size (N) of an N x N grid.
    Args:
        grid (Grid): The game grid.
    Returns:
        int: The dimension of the grid.
    Raises:
        ValueError: If the grid is not square or empty.
    """
    if not grid or not all(len(row) == len(grid) for row in grid):
        raise ValueError("Grid must be a non-empty square matrix.")
    return len(grid)


def validate_grid(grid: Grid) -> None:
    """
    Checks that a grid has GRID_SIZE x GRID_SIZE cells holding 0 or a power of two >= 2.
    Raises:
        ValueError: If the grid is malformed.
    """
    if get_grid_size(grid) != GRID_SIZE:
        raise ValueError(f"Grid must be {GRID_SIZE}x{GRID_SIZE}.")
    for row in grid:
        for value in row:
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Invalid cell value: {value!r}")
            if value != 0 and (value < 2 or value & (value - 1)):
                raise ValueError(f"Tile values must be powers of two, got {value}.")


def new_grid() -> Grid:
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


def copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def get_empty_cells(grid: Grid) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty (0-value) cells in row-major order.
    Args:
        grid (Grid): The grid to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells.
    """
    n = get_grid_size(grid)
    empty_cells = []
    for row in range(n):
        for col in range(n):
            if grid[row][col] == 0:
                empty_cells.append((row, col))
    return empty_cells


def has_tile(grid: Grid, value: int = WIN_TILE) -> bool:
    """True if any cell of the grid holds `value`."""
    return any(value in row for row in grid)


def spawn_tile(grid: Grid, rng: Optional[random.Random] = None) -> Grid:
    """
    Places a new tile (90% chance of 2, 10% chance of 4) on a copy of the grid.

    The first draw from `rng` picks the empty cell, the second picks the value.
    A grid without empty cells is returned unchanged and no draws are made.
    Args:
        grid (Grid): The current game grid.
        rng (random.Random): Source of uniform draws in [0, 1). Defaults to the
                             module-level generator.
    Returns:
        Grid: A new grid with one more tile, or the input grid if it was full.
    """
    empty_cells = get_empty_cells(grid)
    if not empty_cells:
        logger.debug("No empty cell to spawn a tile in")
        return grid

    rng = rng or random
    row, col = empty_cells[int(rng.random() * len(empty_cells))]
    value = TILE_VALUES[0] if rng.random() < TILE_PROBABILITIES[0] else TILE_VALUES[1]
    logger.debug("Spawned %d at (%d, %d)", value, row, col)

    spawned = copy_grid(grid)
    spawned[row][col] = value
    return spawned

# --- Line Manipulation ---

def collapse_line(line: List[int]) -> Tuple[List[int], int]:
    """
    Slides a line towards index 0, merging equal neighbours once per pass.
    Args:
        line (List[int]): The line to collapse, oriented so that "left" is index 0.
    Returns:
        Tuple[List[int], int]: The collapsed line (same length as the input) and
                               the score gained from merges.
    """
    n = len(line)
    tiles = [value for value in line if value != 0]
    collapsed = []
    score_delta = 0

    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            merged_value = tiles[i] * 2
            collapsed.append(merged_value)
            score_delta += merged_value
            i += 2  # the merged pair is consumed
        else:
            collapsed.append(tiles[i])
            i += 1

    collapsed += [0] * (n - len(collapsed))
    return collapsed, score_delta

# --- Grid Transformations ---

def rotate_grid(grid: Grid, times: int = 1) -> Grid:
    """
    Rotates a grid 90 degrees counter-clockwise `times` times.
    Args:
        grid (Grid): The grid to rotate.
        times (int): Number of quarter turns.
    Returns:
        Grid: A new rotated grid.
    """
    n = get_grid_size(grid)
    rotated = copy_grid(grid)
    for _ in range(times % 4):
        turned = [[0] * n for _ in range(n)]
        for r in range(n):
            for c in range(n):
                turned[n - 1 - c][r] = rotated[r][c]
        rotated = turned
    return rotated

# --- Core Game Move Processing ---

def apply_move(grid: Grid, direction: Direction) -> MoveResult:
    """
    Slides every tile of the grid in `direction`.

    The grid is rotated so the move becomes a left slide, each row is
    collapsed, and the grid is rotated back.
    Args:
        grid (Grid): The current game grid. Never mutated.
        direction (Direction): The direction to move.
    Returns:
        MoveResult: The new grid, whether any cell changed, and the score gained.
                    When nothing moved the returned grid equals the input and
                    the score delta is 0.
    """
    times = _ROTATIONS[Direction(direction)]
    rotated = rotate_grid(grid, times)

    moved = False
    score_delta = 0
    for r_idx, original in enumerate(rotated):
        collapsed, line_score = collapse_line(original)
        if collapsed != original:
            moved = True
        rotated[r_idx] = collapsed
        score_delta += line_score

    if not moved:
        return MoveResult(copy_grid(grid), False, 0)
    return MoveResult(rotate_grid(rotated, (4 - times) % 4), True, score_delta)

# --- Game State Checks ---

def is_terminal(grid: Grid) -> bool:
    """
    Check if no move is possible: the grid is full and no two adjacent cells match.
    Args:
        grid (Grid): The game grid.
    Returns:
        bool: True if the grid is in a terminal state.
    """
    n = get_grid_size(grid)
    for r in range(n):
        for c in range(n):
            value = grid[r][c]
            if value == 0:
                return False
            if c + 1 < n and value == grid[r][c + 1]:
                return False
            if r + 1 < n and value == grid[r + 1][c]:
                return False
    return True
