import enum
import logging
import random
import time
from typing import Callable, Protocol, Sequence

import numpy as np

from tile2048.config import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)

SIZE = 4

INITIAL_GRID = (
    (2, 2, 0, 16),
    (32, 0, 128, 16),
    (1024, 1024, 0, 0),
    (0, 0, 0, 0),
)


class Direction(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, name: str) -> "Direction":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid direction: {name!r}. Must be 'left', 'right', 'up', or 'down'"
            ) from None


class MoveResult(enum.Enum):
    NOOP = "noop"
    MOVED = "moved"
    WIN = "win"
    LOSS = "loss"


class RandomSource(Protocol):
    def choice(self, seq): ...

    def random(self) -> float: ...


def new_grid() -> np.ndarray:
    return np.zeros((SIZE, SIZE), dtype=np.int64)


def validate_grid(cells: Sequence[Sequence[int]]) -> np.ndarray:
    """Copy `cells` into a fresh grid, rejecting anything that is not a 4x4
    grid of zeros and powers of two from 2 up."""
    grid = np.array(cells, dtype=np.int64)
    if grid.shape != (SIZE, SIZE):
        raise ValueError(f"Grid must be {SIZE}x{SIZE}, got shape {grid.shape}")
    if (grid < 0).any():
        raise ValueError("Grid cells must be non-negative")
    if (grid == 1).any():
        raise ValueError("Grid cells must be 0 or at least 2")
    if ((grid & (grid - 1)) != 0).any():
        raise ValueError("Grid cells must be 0 or a power of two")
    return grid


def _lines(grid: np.ndarray, direction: Direction) -> list[np.ndarray]:
    # views into the grid, each ordered so that index 0 is the side tiles move to
    if direction is Direction.LEFT:
        return [grid[i, :] for i in range(SIZE)]
    if direction is Direction.RIGHT:
        return [grid[i, ::-1] for i in range(SIZE)]
    if direction is Direction.UP:
        return [grid[:, j] for j in range(SIZE)]
    return [grid[::-1, j] for j in range(SIZE)]


def _compress_line(line: np.ndarray):
    tiles = line[line != 0]
    line[:] = 0
    line[: len(tiles)] = tiles


def _merge_line(line: np.ndarray):
    for j in range(SIZE - 1):
        if line[j] != 0 and line[j] == line[j + 1]:
            line[j] *= 2
            line[j + 1] = 0


def compress(grid: np.ndarray, direction: Direction):
    """Slide every tile toward `direction` without merging."""
    for line in _lines(grid, direction):
        _compress_line(line)


def merge(grid: np.ndarray, direction: Direction):
    """
    Combine equal neighbours, scanning each line from the side tiles move to.

    The cell nearer that side doubles and its partner becomes empty. A doubled
    cell is never merged again during the same scan.
    """
    for line in _lines(grid, direction):
        _merge_line(line)


def apply_move(grid: np.ndarray, direction: Direction) -> bool:
    """Compress, merge and compress `grid` in place. Return whether it changed."""
    before = grid.copy()
    compress(grid, direction)
    merge(grid, direction)
    compress(grid, direction)
    return not np.array_equal(before, grid)


def has_value(grid: np.ndarray, value: int) -> bool:
    return bool((grid == value).any())


def spawn(
    grid: np.ndarray,
    rng: RandomSource | None = None,
    four_probability: float = DEFAULT_SETTINGS.four_probability,
) -> tuple[int, int, int] | None:
    """Place a 2 (or, with `four_probability`, a 4) on a random empty cell.

    Does nothing on a full grid. Returns the placed `(row, col, value)`.
    """
    rng = rng or random
    places = []
    for i in range(SIZE):
        for j in range(SIZE):
            if grid[i, j] == 0:
                places.append((i, j))
    if len(places) == 0:
        return None
    x, y = rng.choice(places)
    num = 4 if rng.random() < four_probability else 2
    grid[x, y] = num
    return x, y, num


class Game:
    """2048 game session: the current grid plus win and loss tallies."""

    win_count: int
    loss_count: int

    def __init__(
        self,
        grid: Sequence[Sequence[int]] | None = None,
        rng: RandomSource | None = None,
        sleep: Callable[[float], None] = time.sleep,
        settings: Settings = DEFAULT_SETTINGS,
    ):
        self._grid = validate_grid(INITIAL_GRID if grid is None else grid)
        self._rng = rng or random
        self._sleep = sleep
        self.settings = settings
        self.win_count = 0
        self.loss_count = 0

    @property
    def grid(self) -> np.ndarray:
        view = self._grid.view()
        view.flags.writeable = False
        return view

    def _reset(self):
        self._sleep(self.settings.terminal_pause)
        self._grid = new_grid()

    def move(self, direction: Direction) -> MoveResult:
        """
        Play a move. A full board afterwards is a loss, a winning tile is a
        win; either one pauses and clears the board. A tile is spawned
        whenever the board ends up different from before the move.
        """
        before = self._grid.copy()
        apply_move(self._grid, direction)

        result = MoveResult.MOVED
        if not has_value(self._grid, 0):
            self._reset()
            self.loss_count += 1
            result = MoveResult.LOSS
            logger.info("board full, loss #%d", self.loss_count)
        elif has_value(self._grid, self.settings.win_tile):
            self._reset()
            self.win_count += 1
            result = MoveResult.WIN
            logger.info("reached %d, win #%d", self.settings.win_tile, self.win_count)

        if np.array_equal(before, self._grid):
            return MoveResult.NOOP

        placed = spawn(self._grid, self._rng, self.settings.four_probability)
        logger.debug("moved %s, spawned %s", direction.value, placed)
        return result


def new_session(
    initial_grid: Sequence[Sequence[int]] = INITIAL_GRID,
    *,
    rng: RandomSource | None = None,
    sleep: Callable[[float], None] = time.sleep,
    settings: Settings = DEFAULT_SETTINGS,
) -> Game:
    return Game(initial_grid, rng=rng, sleep=sleep, settings=settings)
