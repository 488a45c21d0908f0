# Game settings
# Grid 15x15, three lives, 63 seconds per round
ROWS = 15
COLS = 15
LIVES = 3
GAME_TIME = 63  # seconds

# Immunity after losing a life (in ms of tick delay)
IMMUNE_TIME = 200
DEFAULT_DELAY = 45

# Speed: delay between moves shrinks as the score grows
MAX_DELAY = 300
MIN_DELAY = 50
DELAY_DECREASE = 10

# Overlays
COUNTDOWN_FROM = 3
COUNTDOWN_STEP = 500   # ms per countdown number
DEATH_STEP = 100       # ms per segment of the dead snake animation
GAME_OVER_PAUSE = 500

# Window
GRID_SIZE = 30
PANEL_WIDTH = 200
FPS = 60

# Colors
BLUE = (0, 139, 139)
GREEN = (124, 252, 0)
DARK_GREEN = (34, 139, 34)
RED = (255, 0, 0)
GRAY = (102, 205, 170)
DARK_GRAY = (90, 90, 90)
LIGHT_GRAY = (150, 150, 150)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
PANEL_BG = (40, 40, 40)
OVERLAY_BG = (0, 0, 0, 160)

SNAKE = DARK_GREEN
HEAD = GREEN
FOOD = RED
GRID = GRAY
BACKGROUND = BLUE
DEAD_BODY = DARK_GRAY
DEAD_HEAD = LIGHT_GRAY
TEXT_COLOR = WHITE
