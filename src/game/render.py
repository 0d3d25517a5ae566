# src/game/render.py
from __future__ import annotations
from typing import Tuple

import pygame

from .config import (
    COLOR_SKY_TOP, COLOR_SKY_BOT, COLOR_GROUND, COLOR_PLAYER, COLOR_OBSTACLE,
    COLOR_ROAD, COLOR_LANE_LINE, COLOR_BG, COLOR_FG, COLOR_ACCENT, COLOR_DANGER,
    VariantConfig,
)
from .session import GameState, Session

HORIZON_FRAC = 0.3      # runner3d: horizon line as a fraction of the height
FAR_SCALE = 0.12        # runner3d: road width at the horizon vs. at the bottom


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _lerp_color(c1, c2, t: float) -> Tuple[int, int, int]:
    return tuple(int(_lerp(a, b, t)) for a, b in zip(c1, c2))


class Renderer:
    """Draws a session snapshot. Reads state only."""
    def __init__(self, cfg: VariantConfig):
        self.cfg = cfg
        self._font = None
        self._big = None

    def _fonts(self):
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.SysFont("jetbrainsmono", 18)
            self._big = pygame.font.SysFont("jetbrainsmono", 36, bold=True)
        return self._font, self._big

    def draw(self, surf: pygame.Surface, session: Session):
        if self.cfg.motion == "physics":
            self._draw_side(surf, session)
        elif self.cfg.depth_scaled:
            self._draw_perspective(surf, session)
        else:
            self._draw_topdown(surf, session)
        self._draw_hud(surf, session)

    # -------------------- Variants --------------------

    def _draw_side(self, surf: pygame.Surface, session: Session):
        cfg = self.cfg
        w, h = surf.get_size()
        for y in range(0, h, 4):
            pygame.draw.rect(surf, _lerp_color(COLOR_SKY_TOP, COLOR_SKY_BOT, y / h), (0, y, w, 4))

        gy = cfg.ground_y
        pygame.draw.rect(surf, COLOR_GROUND, (0, gy, w, cfg.ground_height))
        for x in range(0, w, 40):
            pygame.draw.line(surf, (110, 92, 68), (x, gy), (x + 20, gy + cfg.ground_height))

        color = COLOR_PLAYER if session.state is not GameState.GAME_OVER else COLOR_DANGER
        pr = session.player.rect
        pygame.draw.rect(surf, color, pr, border_radius=5)
        pygame.draw.rect(surf, (255, 170, 170), (pr.x + 2, pr.y + 2, int(pr.w * 0.4), int(pr.h * 0.3)))

        for ob in session.obstacles:
            pygame.draw.rect(surf, COLOR_OBSTACLE, ob.rect)
            pygame.draw.rect(surf, (255, 150, 150), (ob.rect.x, ob.rect.y, ob.rect.w // 3, ob.rect.h))

    def _road_at(self, z: float, w: int, h: int) -> Tuple[float, float]:
        """(y, lane width) of the road at depth z."""
        horizon = h * HORIZON_FRAC
        y = _lerp(horizon, h, z)
        road_w = w * 0.8 * _lerp(FAR_SCALE, 1.0, z)
        return y, road_w / self.cfg.lane_count

    def _lane_x(self, lane_pos: float, lane_w: float, w: int) -> float:
        return w / 2 + (lane_pos - (self.cfg.lane_count - 1) / 2) * lane_w

    def _draw_perspective(self, surf: pygame.Surface, session: Session):
        cfg = self.cfg
        w, h = surf.get_size()
        horizon = int(h * HORIZON_FRAC)
        surf.fill(COLOR_SKY_TOP, (0, 0, w, horizon))
        surf.fill((70, 140, 70), (0, horizon, w, h - horizon))

        _, far_lane = self._road_at(0.0, w, h)
        _, near_lane = self._road_at(1.0, w, h)
        n = cfg.lane_count
        far_half, near_half = far_lane * n / 2, near_lane * n / 2
        pygame.draw.polygon(surf, COLOR_ROAD, [
            (w / 2 - far_half, horizon), (w / 2 + far_half, horizon),
            (w / 2 + near_half, h), (w / 2 - near_half, h),
        ])
        for i in range(1, n):
            edge = i - 0.5
            pygame.draw.line(surf, COLOR_LANE_LINE,
                             (self._lane_x(edge, far_lane, w), horizon),
                             (self._lane_x(edge, near_lane, w), h), 2)

        # far to near so closer obstacles overlap farther ones
        for ob in sorted(session.obstacles, key=lambda o: o.z):
            y, lane_w = self._road_at(ob.z, w, h)
            size = lane_w * 0.6
            x = self._lane_x(ob.lane, lane_w, w)
            pygame.draw.rect(surf, COLOR_OBSTACLE, (int(x - size / 2), int(y - size), int(size), int(size)))

        y, lane_w = self._road_at(cfg.player_depth, w, h)
        size = lane_w * 0.45
        x = self._lane_x(session.player.position, lane_w, w)
        color = COLOR_ACCENT if session.state is not GameState.GAME_OVER else COLOR_DANGER
        pygame.draw.rect(surf, color, (int(x - size / 2), int(y - size * 1.3), int(size), int(size * 1.3)),
                         border_radius=6)

    def _draw_topdown(self, surf: pygame.Surface, session: Session):
        cfg = self.cfg
        w, h = surf.get_size()
        surf.fill(COLOR_BG)
        lane_w = w / cfg.lane_count
        for i in range(1, cfg.lane_count):
            x = int(i * lane_w)
            for y in range(0, h, 40):
                pygame.draw.line(surf, COLOR_LANE_LINE, (x, y), (x, y + 20), 2)

        size = int(lane_w * 0.5)
        for ob in session.obstacles:
            cx = (ob.lane + 0.5) * lane_w
            cy = ob.z * h
            pygame.draw.rect(surf, COLOR_OBSTACLE, (int(cx - size / 2), int(cy - size / 2), size, size))

        cx = (session.player.position + 0.5) * lane_w
        cy = cfg.player_depth * h
        color = COLOR_ACCENT if session.state is not GameState.GAME_OVER else COLOR_DANGER
        pygame.draw.circle(surf, color, (int(cx), int(cy)), size // 2)

    # -------------------- HUD / overlays --------------------

    def _draw_hud(self, surf: pygame.Surface, session: Session):
        font, big = self._fonts()
        w, h = surf.get_size()
        hud = f"Score: {session.score}   Best: {session.best_score}   x{session.difficulty:.2f}"
        surf.blit(font.render(hud, True, COLOR_FG), (12, 10))

        if session.state is GameState.START:
            lines = [self.cfg.title, "SPACE / click / tap to start"]
        elif session.state is GameState.GAME_OVER:
            lines = ["Game Over", f"Score {session.score}  Best {session.best_score}",
                     "SPACE restart | S share | ESC quit"]
        else:
            return

        panel = pygame.Surface((w, 40 * len(lines) + 30), pygame.SRCALPHA)
        panel.fill((10, 20, 35, 170))
        top = (h - panel.get_height()) // 2
        surf.blit(panel, (0, top))
        for i, msg in enumerate(lines):
            txt = (big if i == 0 else font).render(msg, True, COLOR_FG)
            surf.blit(txt, (w // 2 - txt.get_width() // 2, top + 15 + i * 40))
