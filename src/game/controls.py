# src/game/controls.py
from __future__ import annotations
from typing import List, Optional

import pygame

from .config import CLICK_SUPPRESS_MS, SWIPE_MIN_FRAC, VariantConfig
from .session import Command, GameState

JUMP_KEYS = (pygame.K_SPACE, pygame.K_UP, pygame.K_w)
LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
START_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER)


class InputMapper:
    """
    Turns raw pygame events into core commands.
    Gesture work lives here: tap vs swipe, double tap, and the synthetic
    click pygame emits after a touch. The core still applies its own
    cooldown/eligibility rules to whatever comes out.
    """
    def __init__(self, cfg: VariantConfig, width: Optional[int] = None):
        self.cfg = cfg
        self.width = width if width is not None else cfg.width
        self.last_tap_ms: Optional[float] = None
        self.last_touch_ms: Optional[float] = None
        self._touch_start: Optional[tuple] = None

    def handle_event(self, event: pygame.event.Event, state: GameState, now_ms: float) -> List[Command]:
        if event.type == pygame.KEYDOWN:
            return self._on_key(event.key, state, now_ms)
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            return self._on_click(event.pos[0], state, now_ms, getattr(event, "touch", False))
        if event.type == pygame.FINGERDOWN:
            self._touch_start = (event.x, event.y)
            return []
        if event.type == pygame.FINGERUP:
            return self._on_touch_end(event.x, event.y, state, now_ms)
        return []

    # -------------------- Handlers --------------------

    def _on_key(self, key: int, state: GameState, now_ms: float) -> List[Command]:
        if key in START_KEYS:
            return [Command.START] if state is not GameState.PLAYING else []
        if key in JUMP_KEYS:
            return self._tap(state, now_ms, lane_side=None)
        if state is not GameState.PLAYING or not self.cfg.is_lane:
            return []
        if key in LEFT_KEYS:
            return [Command.MOVE_LEFT]
        if key in RIGHT_KEYS:
            return [Command.MOVE_RIGHT]
        return []

    def _on_click(self, x: int, state: GameState, now_ms: float, from_touch: bool) -> List[Command]:
        if from_touch:
            return []
        if self.last_touch_ms is not None and now_ms - self.last_touch_ms < CLICK_SUPPRESS_MS:
            return []
        return self._tap(state, now_ms, lane_side=self._side(x / max(1, self.width)))

    def _on_touch_end(self, x: float, y: float, state: GameState, now_ms: float) -> List[Command]:
        """Touch coordinates are normalized to [0,1] by pygame."""
        self.last_touch_ms = now_ms
        start = self._touch_start
        self._touch_start = None

        if start is not None and state is GameState.PLAYING and self.cfg.is_lane:
            dx = x - start[0]
            dy = y - start[1]
            if abs(dx) >= SWIPE_MIN_FRAC and abs(dx) > abs(dy):
                return [Command.MOVE_RIGHT if dx > 0 else Command.MOVE_LEFT]
        return self._tap(state, now_ms, lane_side=self._side(x))

    def _tap(self, state: GameState, now_ms: float, lane_side: Optional[Command]) -> List[Command]:
        if state is not GameState.PLAYING:
            self.last_tap_ms = None
            return [Command.START]

        if self.cfg.is_lane:
            return [lane_side] if lane_side is not None else []

        double = self.last_tap_ms is not None and now_ms - self.last_tap_ms < self.cfg.double_tap_ms
        self.last_tap_ms = now_ms
        return [Command.DOUBLE_JUMP if double else Command.JUMP]

    @staticmethod
    def _side(x_frac: float) -> Command:
        return Command.MOVE_LEFT if x_frac < 0.5 else Command.MOVE_RIGHT
