# session.py
# Mutable game state for one 2048 game, advanced one move at a time.

import logging
import random
from enum import Enum
from typing import Any, Dict, Optional

from engine import (
    WIN_TILE,
    Direction,
    Grid,
    apply_move,
    copy_grid,
    get_empty_cells,
    has_tile,
    is_terminal,
    new_grid,
    spawn_tile,
    validate_grid,
)

logger = logging.getLogger(__name__)


class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    GAME_OVER = 2  # Lost, or won and then ran out of moves
    GAME_WON = 3  # Reached WIN_TILE, still playable


class Session:
    """
    Holds the grid, score and won/over flags of a single game.

    A fresh session seeds two tiles. Passing `grid` restores a snapshot
    instead, which is how clients that keep their own state resume a game.
    `won` and `over` are sticky and independent of each other.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        grid: Optional[Grid] = None,
        score: int = 0,
        won: bool = False,
        over: bool = False,
    ):
        self._rng = rng or random.Random()
        if grid is None:
            self.initialize()
            return

        validate_grid(grid)
        if score < 0:
            raise ValueError("Score must be non-negative.")
        self._grid = copy_grid(grid)
        self._score = score
        self._won = won or has_tile(grid, WIN_TILE)
        self._over = over or (not get_empty_cells(grid) and is_terminal(grid))

    def initialize(self) -> None:
        """Starts a new game: empty grid plus two spawned tiles."""
        grid = spawn_tile(new_grid(), self._rng)
        self._grid = spawn_tile(grid, self._rng)
        self._score = 0
        self._won = False
        self._over = False

    @property
    def grid(self) -> Grid:
        return copy_grid(self._grid)

    @property
    def score(self) -> int:
        return self._score

    @property
    def won(self) -> bool:
        return self._won

    @property
    def over(self) -> bool:
        return self._over

    @property
    def status(self) -> GameProgressState:
        if self._over:
            return GameProgressState.GAME_OVER
        if self._won:
            return GameProgressState.GAME_WON
        return GameProgressState.IN_PROGRESS

    def submit_move(self, direction: Direction) -> bool:
        """
        Plays one move.
        Args:
            direction (Direction): The direction to slide.
        Returns:
            bool: True if the move was accepted. Moves on a finished game and
                  moves that change nothing are ignored and return False.
        """
        if self._over:
            logger.debug("Ignoring %s: game is over", direction)
            return False

        result = apply_move(self._grid, direction)
        if not result.moved:
            logger.debug("Ignoring %s: nothing moved", direction)
            return False

        self._grid = spawn_tile(result.grid, self._rng)
        self._score += result.score_delta

        if not self._won and has_tile(self._grid, WIN_TILE):
            self._won = True
            logger.info("Reached %d with score %d", WIN_TILE, self._score)

        if not get_empty_cells(self._grid) and is_terminal(self._grid):
            self._over = True
            logger.info("Game over with score %d (won=%s)", self._score, self._won)

        return True

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the session for renderers."""
        return {
            "board": self.grid,
            "score": self._score,
            "won": self._won,
            "over": self._over,
            "progress": self.status,
        }

    def outcome_message(self) -> Optional[str]:
        if not self._over:
            return None
        return "You Win!" if self._won else "Game Over"

    def share_text(self, url: str) -> str:
        return f"I scored {self._score} in 2048! {url}".rstrip()
