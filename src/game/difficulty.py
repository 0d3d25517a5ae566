# src/game/difficulty.py
from __future__ import annotations
import math
from typing import NamedTuple

from .config import VariantConfig


class Difficulty(NamedTuple):
    level: int
    difficulty: float
    scroll_speed: float
    spawn_interval_ms: float


def compute_difficulty(elapsed_ms: float, cfg: VariantConfig) -> Difficulty:
    """
    Pure function of playing time:
      level      = floor(elapsed / period)
      difficulty = 1 + level * k
      speed      = base_speed * difficulty                                  (non-decreasing)
      interval   = max(min_spawn, max_spawn - min((difficulty-1)*c, cap))   (non-increasing)
    """
    elapsed = max(0.0, float(elapsed_ms))
    level = int(math.floor(elapsed / cfg.difficulty_period_ms))
    difficulty = 1.0 + level * cfg.difficulty_step

    scroll_speed = cfg.base_speed * difficulty

    ramp = min((difficulty - 1.0) * cfg.spawn_ramp_ms, cfg.spawn_ramp_cap_ms)
    spawn_interval = max(cfg.min_spawn_ms, cfg.max_spawn_ms - ramp)

    return Difficulty(level, difficulty, scroll_speed, spawn_interval)
