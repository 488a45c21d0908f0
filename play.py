"""
Snake with lives, score and a round timer (pygame).

Usage:
    python play.py                     # 15x15, 3 lives, 63 seconds
    python play.py --time 0            # no time limit
    python play.py --rows 20 --cols 25 --lives 5
"""
import argparse
import logging

import pygame

from config import (
    ROWS, COLS, LIVES, GAME_TIME, GRID_SIZE, PANEL_WIDTH, FPS,
    MAX_DELAY, MIN_DELAY, DELAY_DECREASE,
    COUNTDOWN_FROM, COUNTDOWN_STEP, DEATH_STEP, GAME_OVER_PAUSE,
    BACKGROUND, GRID, SNAKE, HEAD, FOOD, DEAD_BODY, DEAD_HEAD,
    BLACK, WHITE, LIGHT_GRAY, PANEL_BG, OVERLAY_BG, TEXT_COLOR,
)
from game_state import GameState, GameMode, GridValue, Direction, ConfigError

logger = logging.getLogger(__name__)

KEY_TO_DIRECTION = {
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
}

CELL_COLORS = {
    GridValue.EMPTY: BACKGROUND,
    GridValue.SNAKE: SNAKE,
    GridValue.FOOD: FOOD,
}


def tick_delay(score):
    """Delay between moves in ms: faster with every point, never below MIN_DELAY"""
    return max(MIN_DELAY, MAX_DELAY - score * DELAY_DECREASE)


def eye_offset(direction, size=GRID_SIZE):
    """Where the head's eye sits inside the cell, pointing the way the snake goes"""
    center = size // 2
    reach = size // 4
    return center + direction.col_delta * reach, center + direction.row_delta * reach


class SnakeGame:
    def __init__(self, rows=ROWS, cols=COLS, lives=LIVES, game_time=GAME_TIME, seed=None):
        # Bad sizes fail here, before a window opens
        self.state = GameState(rows, cols, lives, game_time or None, seed=seed)

        pygame.init()

        self.rows = rows
        self.cols = cols
        self.width = cols * GRID_SIZE
        self.height = rows * GRID_SIZE

        self.screen = pygame.display.set_mode((self.width + PANEL_WIDTH, self.height))
        pygame.display.set_caption('Snake')
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont('arial', 18)
        self.big_font = pygame.font.SysFont('arial', 36)

        self.overlay = "Press any key to start"
        self.running = True

        self.next_move_at = 0
        self.next_second_at = 0
        self.games = 0
        self.best = 0

    # --- drawing ---

    def draw_grid(self):
        """Cells from the game state plus grid lines"""
        for pos, value in self.state.cells():
            rect = pygame.Rect(pos.col * GRID_SIZE, pos.row * GRID_SIZE, GRID_SIZE, GRID_SIZE)
            pygame.draw.rect(self.screen, CELL_COLORS[value], rect)

        for x in range(0, self.width, GRID_SIZE):
            pygame.draw.line(self.screen, GRID, (x, 0), (x, self.height))
        for y in range(0, self.height, GRID_SIZE):
            pygame.draw.line(self.screen, GRID, (0, y), (self.width, y))

    def draw_head(self):
        head = self.state.head_position()
        rect = pygame.Rect(head.col * GRID_SIZE, head.row * GRID_SIZE, GRID_SIZE - 1, GRID_SIZE - 1)
        pygame.draw.rect(self.screen, HEAD, rect)
        ex, ey = eye_offset(self.state.dir)
        pygame.draw.circle(self.screen, BLACK, (rect.x + ex, rect.y + ey), GRID_SIZE // 8)

    def draw_stats(self):
        panel = pygame.Rect(self.width, 0, PANEL_WIDTH, self.height)
        pygame.draw.rect(self.screen, PANEL_BG, panel)

        time_left = self.state.time_left
        stats = [
            f"Score {self.state.score}",
            f"Lives {self.state.lives}",
            f"Time: {time_left}s" if time_left is not None else "Time: -",
            "",
            f"Games: {self.games}",
            f"Best: {self.best}",
            "",
            "Controls:",
            "Arrows/WASD Move",
            "SPACE Pause",
            "ESC Quit",
        ]

        for i, text in enumerate(stats):
            color = LIGHT_GRAY if i >= 7 else TEXT_COLOR
            surf = self.font.render(text, True, color)
            self.screen.blit(surf, (self.width + 10, 20 + i * 25))

    def draw_overlay(self):
        if not self.overlay:
            return
        shade = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        shade.fill(OVERLAY_BG)
        self.screen.blit(shade, (0, 0))
        text = self.big_font.render(self.overlay, True, WHITE)
        self.screen.blit(text, text.get_rect(center=(self.width // 2, self.height // 2)))

    def draw(self):
        self.screen.fill(BACKGROUND)
        self.draw_grid()
        self.draw_head()
        self.draw_stats()
        self.draw_overlay()
        pygame.display.flip()

    def wait(self, ms):
        """Sleep without freezing the window"""
        end = pygame.time.get_ticks() + ms
        while self.running and pygame.time.get_ticks() < end:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
            self.clock.tick(FPS)

    def countdown(self, template):
        for i in range(COUNTDOWN_FROM, 0, -1):
            self.overlay = template.format(i)
            self.draw()
            self.wait(COUNTDOWN_STEP)
        self.overlay = None

    def draw_dead_snake(self):
        """Recolor the snake from head to tail"""
        for i, pos in enumerate(self.state.snake_positions()):
            rect = pygame.Rect(pos.col * GRID_SIZE, pos.row * GRID_SIZE, GRID_SIZE - 1, GRID_SIZE - 1)
            pygame.draw.rect(self.screen, DEAD_HEAD if i == 0 else DEAD_BODY, rect)
            pygame.display.flip()
            self.wait(DEATH_STEP)

    # --- game flow ---

    def start_round(self):
        self.countdown("{}")
        self.state.start()
        now = pygame.time.get_ticks()
        self.next_move_at = now + tick_delay(self.state.score)
        self.next_second_at = now + 1000
        logger.info("Round started: %dx%d, %d lives", self.rows, self.cols, self.state.lives)

    def game_over(self):
        self.games += 1
        score = self.state.score
        self.best = max(self.best, score)
        logger.info("Game %d: score %d", self.games, score)

        self.draw_dead_snake()
        self.wait(GAME_OVER_PAUSE)
        self.state = self.state.next_round()
        self.overlay = "Press any key to start"

    def handle_key(self, key):
        mode = self.state.mode
        if mode == GameMode.NOT_STARTED:
            self.start_round()
        elif mode in (GameMode.STARTED, GameMode.PAUSED) and key == pygame.K_SPACE:
            self.state.toggle_pause()
        elif mode == GameMode.STARTED and key in KEY_TO_DIRECTION:
            self.state.change_direction(KEY_TO_DIRECTION[key])

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                else:
                    self.handle_key(event.key)

    def update(self):
        """Driver tick: moves on schedule, counts seconds, shows pause overlays"""
        now = pygame.time.get_ticks()
        mode = self.state.mode

        if mode == GameMode.STARTED and now >= self.next_move_at:
            delay = tick_delay(self.state.score)
            self.state.move(delay)
            self.next_move_at = now + tick_delay(self.state.score)

        if mode != GameMode.NOT_STARTED and now >= self.next_second_at:
            self.state.tick_clock()
            self.next_second_at = now + 1000

        mode = self.state.mode
        if mode == GameMode.PAUSED:
            self.overlay = "Pause"
        elif mode == GameMode.RESUMING:
            self.countdown("Resuming in {}")
            self.state.resume()
            self.next_move_at = pygame.time.get_ticks() + tick_delay(self.state.score)
        elif mode == GameMode.OVER:
            self.game_over()
        elif mode == GameMode.STARTED:
            self.overlay = None

    def play(self):
        while self.running:
            self.handle_events()
            if not self.running:
                break
            self.update()
            self.draw()
            self.clock.tick(FPS)

        pygame.quit()

        if self.games > 0:
            logger.info("Results: %d games, best score %d", self.games, self.best)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Snake with lives, score and a round timer")
    parser.add_argument("--rows", type=int, default=ROWS, help="Grid rows")
    parser.add_argument("--cols", type=int, default=COLS, help="Grid columns (at least 7)")
    parser.add_argument("--lives", type=int, default=LIVES, help="Lives per round")
    parser.add_argument("--time", type=int, default=GAME_TIME,
                        help="Seconds per round, 0 for no limit")
    parser.add_argument("--seed", type=int, default=None, help="Seed for snake and food placement")
    parser.add_argument("--verbose", action="store_true", help="Log every crash and every food eaten")
    args = parser.parse_args(argv)

    if args.time < 0:
        parser.error("--time must be 0 or positive")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        game = SnakeGame(args.rows, args.cols, args.lives, args.time, args.seed)
    except ConfigError as e:
        parser.error(str(e))
    game.play()


if __name__ == "__main__":
    main()
