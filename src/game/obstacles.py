# src/game/obstacles.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

import pygame

from .config import VariantConfig

logger = logging.getLogger(__name__)


@dataclass
class Obstacle:
    """
    Physics form: `rect` in screen space, scrolls left.
    Lane form: `lane` index and depth progress `z` in [0,1] (0 = horizon/top, 1 = viewer/bottom).
    """
    lane: Optional[int] = None
    z: float = 0.0
    rect: Optional[pygame.Rect] = None
    x: float = 0.0   # sub-pixel x for the physics form; rect.x follows it


class Spawner:
    """
    Time-gated, seeded obstacle generator.
    Lane form: one uniform lane, plus a second distinct lane with `second_obstacle_chance`.
    Physics form: one ground obstacle past the right edge.
    """
    def __init__(self, cfg: VariantConfig, seed: int | None = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.cfg = cfg
        self.seed = seed
        self.rng = random.Random(seed)

    @staticmethod
    def ready(now_ms: float, last_spawn_ms: float, interval_ms: float) -> bool:
        return now_ms - last_spawn_ms > interval_ms

    def pick_lanes(self, count: int) -> List[int]:
        """`count` distinct lanes. The resample loop is bounded by the lane count."""
        n = self.cfg.lane_count
        count = max(0, min(count, n))
        lanes: List[int] = []
        while len(lanes) < count:
            lane = self.rng.randrange(n)
            attempts = 1
            while lane in lanes and attempts < n:
                lane = self.rng.randrange(n)
                attempts += 1
            if lane in lanes:
                # unlucky draws: take the first free lane
                lane = next(i for i in range(n) if i not in lanes)
            lanes.append(lane)
        return lanes

    def spawn(self) -> List[Obstacle]:
        cfg = self.cfg
        if cfg.is_lane:
            count = 2 if self.rng.random() < cfg.second_obstacle_chance else 1
            lanes = self.pick_lanes(count)
            logger.debug("spawn lanes=%s", lanes)
            return [Obstacle(lane=lane, z=0.0) for lane in lanes]

        x = cfg.width + self.rng.randint(0, cfg.spawn_jitter_px)
        y = cfg.ground_y - cfg.obstacle_h
        logger.debug("spawn x=%d", x)
        return [Obstacle(x=float(x), rect=pygame.Rect(x, y, cfg.obstacle_w, cfg.obstacle_h))]


def advance_obstacles(obstacles: List[Obstacle], speed: float, frames: float,
                      cfg: VariantConfig) -> List[Obstacle]:
    """Scroll every obstacle by `speed` per frame and drop the ones past the visible bound."""
    kept: List[Obstacle] = []
    if cfg.is_lane:
        for ob in obstacles:
            dz = speed * frames
            if cfg.depth_scaled:
                # perspective: slow near the horizon, fast near the viewer
                dz *= 0.3 + 0.7 * ob.z
            ob.z += dz
            if ob.z <= 1.0:
                kept.append(ob)
    else:
        for ob in obstacles:
            ob.x -= speed * frames
            ob.rect.x = int(ob.x)
            if ob.rect.right >= 0:
                kept.append(ob)
    return kept
