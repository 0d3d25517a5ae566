from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60
FRAME_MS = 1000.0 / 60.0    # reference frame, per-frame constants below are tuned for it
MAX_FRAME_MS = 100.0        # clamp stalls (window drag, breakpoints)

# --- Session ---
SCORE_MS_PER_POINT = 100    # score = floor(elapsed_ms / 100)
COMMAND_QUEUE_SIZE = 16     # pending input commands kept between two steps

# --- Side-view jumper ---
GROUND_HEIGHT = 60
PLAYER_W = 30
PLAYER_H = 40
PLAYER_X_FRAC = 0.15        # player's fixed x as a fraction of the width
OBSTACLE_W = 25
OBSTACLE_H = 50
GRAVITY = 0.6               # px/frame^2
JUMP_STRENGTH = -12.0       # px/frame
DOUBLE_JUMP_FACTOR = 0.9
MAX_FALL_SPEED = 15.0
SPAWN_JITTER_PX = 120       # random extra distance past the right edge

# --- Lanes ---
LANE_COUNT = 3
LANE_EPSILON = 0.01         # lane units
HIT_OFFSET = 0.3            # |lane_offset| above this = mid-transition, no hit

# --- Input ---
DOUBLE_TAP_MS = 300
MOVE_COOLDOWN_MS = 200
CLICK_SUPPRESS_MS = 500     # synthetic click after a touch
SWIPE_MIN_FRAC = 0.05       # horizontal swipe threshold, fraction of the screen

# --- Persistence ---
DATA_DIR_ENV = "INFINITE_RUNNER_DATA_DIR"
BEST_SCORE_KEY = "bestScore"

# --- Share ---
GAME_TITLE = "Infinite Runner"
GAME_URL = "https://infinite-runner.example/"

# --- Colors (RGB) ---
COLOR_SKY_TOP = (135, 206, 235)
COLOR_SKY_BOT = (224, 246, 255)
COLOR_GROUND = (139, 115, 85)
COLOR_PLAYER = (255, 107, 107)
COLOR_OBSTACLE = (255, 107, 107)
COLOR_ROAD = (52, 58, 74)
COLOR_LANE_LINE = (230, 230, 240)
COLOR_BG = (9, 14, 28)
COLOR_FG = (220, 232, 255)
COLOR_ACCENT = (120, 200, 255)
COLOR_DANGER = (255, 86, 110)


@dataclass(frozen=True)
class VariantConfig:
    """
    Every knob of one game variant.
    motion = "physics" -> side-view jumper (gravity, jump, double jump)
    motion = "lane"    -> discrete lanes with interpolated lane changes
    Speeds are per reference frame (FRAME_MS), times in milliseconds.
    """
    name: str
    title: str
    motion: str

    # difficulty
    difficulty_step: float          # k in 1 + level * k
    difficulty_period_ms: float = 10000.0
    base_speed: float = 6.0         # px/frame (physics) or z/frame (lane)

    # spawner
    min_spawn_ms: float = 1200.0
    max_spawn_ms: float = 2500.0
    spawn_ramp_ms: float = 300.0    # interval shrink per unit of difficulty above 1
    spawn_ramp_cap_ms: float = 1200.0
    second_obstacle_chance: float = 0.0

    # lane form
    lane_count: int = LANE_COUNT
    lane_damping: float = 0.15
    lane_epsilon: float = LANE_EPSILON
    move_cooldown_ms: float = MOVE_COOLDOWN_MS
    player_depth: float = 0.85
    hit_depth: float = 0.08
    hit_offset: float = HIT_OFFSET
    depth_scaled: bool = False

    # physics form
    double_tap_ms: float = DOUBLE_TAP_MS
    gravity: float = GRAVITY
    jump_impulse: float = JUMP_STRENGTH
    double_jump_factor: float = DOUBLE_JUMP_FACTOR
    max_fall_speed: float = MAX_FALL_SPEED
    player_w: int = PLAYER_W
    player_h: int = PLAYER_H
    obstacle_w: int = OBSTACLE_W
    obstacle_h: int = OBSTACLE_H
    ground_height: int = GROUND_HEIGHT
    spawn_jitter_px: int = SPAWN_JITTER_PX

    # world size
    width: int = WIDTH
    height: int = HEIGHT

    @property
    def is_lane(self) -> bool:
        return self.motion == "lane"

    @property
    def ground_y(self) -> int:
        return self.height - self.ground_height

    @property
    def player_x(self) -> float:
        return self.width * PLAYER_X_FRAC


JUMPER = VariantConfig(
    name="jumper",
    title="Infinite Runner",
    motion="physics",
    difficulty_step=0.15,
    base_speed=6.0,
    min_spawn_ms=1200.0,
    max_spawn_ms=2500.0,
    spawn_ramp_ms=300.0,
    spawn_ramp_cap_ms=1200.0,
)

RUNNER_3D = VariantConfig(
    name="runner3d",
    title="Infinite Runner 3D",
    motion="lane",
    difficulty_step=0.1,
    base_speed=0.012,
    min_spawn_ms=500.0,
    max_spawn_ms=1400.0,
    spawn_ramp_ms=800.0,
    spawn_ramp_cap_ms=900.0,
    second_obstacle_chance=0.3,
    lane_damping=0.2,
    player_depth=0.85,
    depth_scaled=True,
)

DODGER = VariantConfig(
    name="dodger",
    title="Infinite Runner: Lanes",
    motion="lane",
    difficulty_step=0.1,
    base_speed=0.015,
    min_spawn_ms=400.0,
    max_spawn_ms=1000.0,
    spawn_ramp_ms=600.0,
    spawn_ramp_cap_ms=600.0,
    second_obstacle_chance=0.3,
    lane_damping=0.15,
    player_depth=0.75,
)

VARIANTS: Dict[str, VariantConfig] = {v.name: v for v in (JUMPER, RUNNER_3D, DODGER)}


def get_variant(name: str) -> VariantConfig:
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError(f"Unknown variant {name!r} (expected one of {sorted(VARIANTS)})") from None
