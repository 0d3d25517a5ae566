# src/game/collision.py
from __future__ import annotations
from typing import TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from .session import Session


def rects_overlap(a: pygame.Rect, b: pygame.Rect) -> bool:
    """Strict AABB overlap: shared edges do not count."""
    return bool(a.colliderect(b))


def lane_hit(player_lane: int, player_offset: float, player_depth: float,
             obstacle_lane: int, obstacle_z: float,
             hit_depth: float, hit_offset: float) -> bool:
    """Same lane, player not mid-transition, and obstacle depth within `hit_depth` of the player."""
    if obstacle_lane != player_lane:
        return False
    if abs(player_offset) >= hit_offset:
        return False
    return abs(obstacle_z - player_depth) <= hit_depth


def check_collision(session: "Session") -> bool:
    """First hit wins."""
    cfg = session.config
    player = session.player
    if cfg.is_lane:
        for ob in session.obstacles:
            if lane_hit(player.current_lane, player.lane_offset, cfg.player_depth,
                        ob.lane, ob.z, cfg.hit_depth, cfg.hit_offset):
                return True
        return False

    me = player.rect
    return any(rects_overlap(me, ob.rect) for ob in session.obstacles)
