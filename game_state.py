"""
Snake game engine: grid, snake, food, lives and immunity.

World matrix:
  0 = empty
  1 = snake body (head included)
  2 = food
 -1 = outside (never stored, returned for cells past the border)

The snake is kept head first: snake_positions()[0] is the head.
A random start puts three cells in one row with the head on the right,
so the first move to the right never hits the snake itself.
"""
import logging
import threading
from collections import deque
from enum import Enum, IntEnum
from typing import NamedTuple

import numpy as np

from config import DEFAULT_DELAY, IMMUNE_TIME, LIVES

logger = logging.getLogger(__name__)

MAX_PENDING = 2
START_LENGTH = 3
START_MARGIN = 3


class ConfigError(ValueError):
    """Bad arguments for a new game."""


class GridValue(IntEnum):
    OUTSIDE = -1
    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def row_delta(self):
        return self.value[0]

    @property
    def col_delta(self):
        return self.value[1]

    def opposite(self):
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Position(NamedTuple):
    row: int
    col: int

    def translate(self, direction):
        return Position(self.row + direction.row_delta, self.col + direction.col_delta)


class GameMode(Enum):
    NOT_STARTED = "not_started"
    STARTED = "started"
    PAUSED = "paused"
    RESUMING = "resuming"
    OVER = "over"


class GameState:
    """State of one round. A new round gets a new GameState (see next_round)."""

    def __init__(self, rows, cols, lives=LIVES, time_limit=None, snake=None,
                 direction=Direction.RIGHT, seed=None):
        """
        rows, cols: grid size
        lives: lives at the start of the round
        time_limit: seconds for the round, None = no limit
        snake: fixed start cells (head first), None = random row of three
        direction: starting direction
        seed: seed for food and start placement
        """
        _check_size("rows", rows)
        _check_size("cols", cols)
        _check_size("lives", lives)
        if time_limit is not None:
            _check_size("time_limit", time_limit)
        if snake is None and cols < 2 * START_MARGIN + 1:
            raise ConfigError(
                f"cols must be at least {2 * START_MARGIN + 1} to fit the starting snake, got {cols}"
            )

        self.rows = rows
        self.cols = cols
        self.grid = np.zeros((rows, cols), dtype=np.int8)
        self.dir = direction
        self.score = 0
        self.lives = lives
        self.initial_lives = lives
        self.time_limit = time_limit
        self.time_left = time_limit
        self.mode = GameMode.NOT_STARTED
        self.immune = False
        self.immune_timer = 0
        self.food = None

        self._seed = seed
        self._rng = np.random.default_rng(seed)
        self._dir_changes = deque()
        self._dir_lock = threading.Lock()
        self._snake = deque()

        if snake is None:
            self._add_random_snake()
        else:
            self._add_snake(snake)
        self._add_food()

    def next_round(self):
        """Fresh state with the same settings for the next round"""
        seed = None if self._seed is None else self._seed + 1
        return GameState(self.rows, self.cols, self.initial_lives, self.time_limit, seed=seed)

    # --- placement ---

    def _add_random_snake(self):
        r = int(self._rng.integers(0, self.rows))
        start = int(self._rng.integers(START_MARGIN, self.cols - START_MARGIN))
        for c in range(start, start + START_LENGTH):
            self._add_head(Position(r, c))

    def _add_snake(self, positions):
        cells = [Position(*pos) for pos in positions]
        if not cells:
            raise ConfigError("snake needs at least one cell")
        if len(set(cells)) != len(cells):
            raise ConfigError("snake cells must be unique")
        for pos in cells:
            if self._outside(pos):
                raise ConfigError(f"snake cell {tuple(pos)} is outside the {self.rows}x{self.cols} grid")
        # Given head first, stored by pushing tail first
        for pos in reversed(cells):
            self._add_head(pos)

    def empty_positions(self):
        rows, cols = np.nonzero(self.grid == GridValue.EMPTY)
        return [Position(int(r), int(c)) for r, c in zip(rows, cols)]

    def _add_food(self):
        """Food on a random empty cell, or nowhere if the grid is full"""
        empty = self.empty_positions()
        if not empty:
            self.food = None
            return
        pos = empty[self._rng.integers(len(empty))]
        self.grid[pos.row, pos.col] = GridValue.FOOD
        self.food = pos

    def _add_head(self, pos):
        self._snake.appendleft(pos)
        self.grid[pos.row, pos.col] = GridValue.SNAKE

    def _remove_tail(self):
        tail = self._snake.pop()
        self.grid[tail.row, tail.col] = GridValue.EMPTY

    # --- reading ---

    def head_position(self):
        return self._snake[0]

    def tail_position(self):
        return self._snake[-1]

    def snake_positions(self):
        return tuple(self._snake)

    def pending_directions(self):
        with self._dir_lock:
            return tuple(self._dir_changes)

    def value_at(self, pos):
        if self._outside(pos):
            return GridValue.OUTSIDE
        return GridValue(int(self.grid[pos.row, pos.col]))

    def cells(self):
        """All cells row by row as (Position, GridValue)"""
        for r in range(self.rows):
            for c in range(self.cols):
                yield Position(r, c), GridValue(int(self.grid[r, c]))

    def _outside(self, pos):
        return pos.row < 0 or pos.row >= self.rows or pos.col < 0 or pos.col >= self.cols

    # --- direction changes ---

    def _last_direction(self):
        if not self._dir_changes:
            return self.dir
        return self._dir_changes[-1]

    def _can_change_direction(self, new_dir):
        if len(self._dir_changes) >= MAX_PENDING:
            return False
        last_dir = self._last_direction()
        return new_dir != last_dir and new_dir != last_dir.opposite()

    def change_direction(self, direction):
        """
        Queue a turn. Safe to call from another thread while move() runs.
        Raises ValueError for anything that is not a Direction or its delta tuple.
        """
        direction = Direction(direction)
        with self._dir_lock:
            if self._can_change_direction(direction):
                self._dir_changes.append(direction)

    # --- ticks ---

    def _will_hit(self, new_head):
        if self._outside(new_head):
            return GridValue.OUTSIDE
        # The tail leaves its cell on this same tick
        if new_head == self.tail_position():
            return GridValue.EMPTY
        return GridValue(int(self.grid[new_head.row, new_head.col]))

    def move(self, delay=DEFAULT_DELAY):
        """
        One tick of the snake.
        delay: ms since the previous tick, counted off the immunity window
        Returns what the head ran into, or None once the game is over.
        """
        if self.mode == GameMode.OVER:
            return None

        with self._dir_lock:
            if self._dir_changes:
                self.dir = self._dir_changes.popleft()

        new_head = self.head_position().translate(self.dir)
        hit = self._will_hit(new_head)

        if self.immune:
            self.immune_timer -= delay
            if self.immune_timer <= 0:
                self.immune = False
                self.immune_timer = 0

        if hit in (GridValue.OUTSIDE, GridValue.SNAKE):
            # No step on a crash: the snake stays where it is
            if not self.immune:
                self.lives -= 1
                self.immune = True
                self.immune_timer = IMMUNE_TIME
                logger.debug("Crash into %s at %s, lives left: %d", hit.name.lower(), tuple(new_head), self.lives)
                if self.lives <= 0:
                    self.mode = GameMode.OVER
                    logger.info("Game over: no lives left, score %d", self.score)
        elif hit == GridValue.EMPTY:
            self._remove_tail()
            self._add_head(new_head)
        elif hit == GridValue.FOOD:
            self._add_head(new_head)
            self.score += 1
            logger.debug("Food eaten at %s, score %d", tuple(new_head), self.score)
            self._add_food()

        return hit

    def tick_clock(self):
        """One second of the round timer"""
        if self.time_left is None:
            return
        if self.mode == GameMode.STARTED:
            self.time_left -= 1
        if self.time_left <= 0 and self.mode not in (GameMode.PAUSED, GameMode.OVER):
            self.time_left = 0
            self.mode = GameMode.OVER
            logger.info("Game over: time is up, score %d", self.score)

    # --- mode ---

    def start(self):
        if self.mode == GameMode.NOT_STARTED:
            self.mode = GameMode.STARTED

    def toggle_pause(self):
        """Started -> Paused -> Resuming"""
        if self.mode == GameMode.STARTED:
            self.mode = GameMode.PAUSED
        elif self.mode == GameMode.PAUSED:
            self.mode = GameMode.RESUMING

    def resume(self):
        if self.mode == GameMode.RESUMING:
            self.mode = GameMode.STARTED

    def __repr__(self):
        return (
            f"<GameState {self.rows}x{self.cols} mode={self.mode.value} score={self.score} "
            f"lives={self.lives} length={len(self._snake)}>"
        )


def _check_size(name, value):
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
