# src/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass, field

from .config import VariantConfig


@dataclass
class PhysicsPlayer:
    """
    Side-view player: x is fixed, the world scrolls left.
    - is_jumping      : airborne after a jump (cleared on landing)
    - can_double_jump : one extra, weaker impulse available while airborne
    """
    cfg: VariantConfig = field(repr=False)
    x: float
    y: float
    vy: float = 0.0
    is_jumping: bool = False
    can_double_jump: bool = False

    @classmethod
    def spawn(cls, cfg: VariantConfig) -> "PhysicsPlayer":
        return cls(cfg=cfg, x=cfg.player_x, y=float(cfg.ground_y - cfg.player_h))

    @property
    def width(self) -> int:
        return self.cfg.player_w

    @property
    def height(self) -> int:
        return self.cfg.player_h

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), self.width, self.height)

    @property
    def grounded(self) -> bool:
        return self.y + self.height >= self.cfg.ground_y and self.vy >= 0.0

    def try_jump(self) -> bool:
        """Jump only from the ground. Returns True if performed."""
        if self.is_jumping:
            return False
        self.vy = self.cfg.jump_impulse
        self.is_jumping = True
        self.can_double_jump = True
        return True

    def try_double_jump(self) -> bool:
        """Second, weaker impulse while airborne; consumes eligibility. Falls back to a jump on the ground."""
        if not self.is_jumping:
            return self.try_jump()
        if not self.can_double_jump:
            return False
        self.vy = self.cfg.jump_impulse * self.cfg.double_jump_factor
        self.can_double_jump = False
        return True

    def update_physics(self, frames: float):
        """Integrate gravity for `frames` reference frames, clamp fall speed, land on the ground."""
        self.vy += self.cfg.gravity * frames
        if self.vy > self.cfg.max_fall_speed:
            self.vy = self.cfg.max_fall_speed

        self.y += self.vy * frames

        ground = self.cfg.ground_y
        if self.y + self.height >= ground:
            self.y = float(ground - self.height)
            self.vy = 0.0
            self.is_jumping = False
            self.can_double_jump = False


@dataclass
class LanePlayer:
    """
    Lane-form player.
    current_lane snaps to target_lane once lane_offset has caught up with the
    distance between them; lane_offset is measured in lane widths.
    """
    cfg: VariantConfig = field(repr=False)
    current_lane: int
    target_lane: int
    lane_offset: float = 0.0
    last_move_ms: float | None = None

    @classmethod
    def spawn(cls, cfg: VariantConfig) -> "LanePlayer":
        middle = cfg.lane_count // 2
        return cls(cfg=cfg, current_lane=middle, target_lane=middle)

    @property
    def lane_count(self) -> int:
        return self.cfg.lane_count

    @property
    def position(self) -> float:
        """Continuous lane coordinate, for renderers."""
        return self.current_lane + self.lane_offset

    def request_move(self, direction: int, now_ms: float) -> bool:
        """Shift target by ±1 lane, clamped, unless still inside the move cooldown."""
        if self.last_move_ms is not None and now_ms - self.last_move_ms < self.cfg.move_cooldown_ms:
            return False
        self.last_move_ms = now_ms
        step = 1 if direction > 0 else -1
        self.target_lane = max(0, min(self.lane_count - 1, self.target_lane + step))
        return True

    def update_motion(self, frames: float = 1.0):
        distance = float(self.target_lane - self.current_lane)
        if distance == 0.0 and self.lane_offset == 0.0:
            return

        # exactly `damping` of the remaining gap per reference frame
        alpha = 1.0 - (1.0 - self.cfg.lane_damping) ** max(0.0, frames)
        self.lane_offset += (distance - self.lane_offset) * alpha

        if abs(distance - self.lane_offset) < self.cfg.lane_epsilon:
            self.current_lane = self.target_lane
            self.lane_offset = 0.0
