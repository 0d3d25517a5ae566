# src/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any, List

import numpy as np
import gymnasium as gym
import pygame

from src.game.config import FPS, VariantConfig, get_variant
from src.game.render import Renderer
from src.game.session import Command, Session, new_session, push_command, start
from src.game.simulation import step as sim_step

DIFFICULTY_SPAN = 2.0   # difficulty - 1 mapped onto [0,1]
N_AHEAD = 3             # physics form: obstacles reported ahead of the player

PHYSICS_ACTIONS = {1: Command.JUMP, 2: Command.DOUBLE_JUMP}
LANE_ACTIONS = {1: Command.MOVE_LEFT, 2: Command.MOVE_RIGHT}


class RunnerEnv(gym.Env):
    """
    Infinite Runner Gymnasium environment (vector observations), any variant.
    - Simulation at 60 Hz on a simulated clock (no wall time -> deterministic).
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Actions: physics form 0=NOOP 1=JUMP 2=DOUBLE_JUMP ; lane form 0=NOOP 1=LEFT 2=RIGHT.
    - Observation:
        physics: [y_norm, vy_norm, jumping, can_double, difficulty_norm, dx1, dx2, dx3]
        lane   : [current_norm, target_norm, offset, difficulty_norm, z_lane0 .. z_laneN-1]
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 variant: str = "jumper",
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0):
        super().__init__()
        if frame_skip < 1:
            raise ValueError("frame_skip must be >= 1")
        self.cfg: VariantConfig = get_variant(variant)
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        # Internal sim timing
        self.sim_fps = FPS
        self.dt_ms = 1000.0 / self.sim_fps

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(3)
        if self.cfg.is_lane:
            n = self.cfg.lane_count
            low = np.array([0.0, 0.0, -1.0, 0.0] + [0.0] * n, dtype=np.float32)
            high = np.array([1.0, 1.0, 1.0, 1.0] + [1.0] * n, dtype=np.float32)
        else:
            low = np.array([0.0, -1.0, 0.0, 0.0, 0.0] + [0.0] * N_AHEAD, dtype=np.float32)
            high = np.array([1.0, 1.0, 1.0, 1.0, 1.0] + [1.0] * N_AHEAD, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[Session] = None
        self.clock_ms: float = 0.0
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer: Optional[Renderer] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Given seed -> reproducible spawns; None -> spawner randomizes itself
        spawn_seed = int(seed) if seed is not None else None

        self.session = new_session(self.cfg, seed=spawn_seed)
        self.clock_ms = 0.0
        start(self.session, self.clock_ms)
        self.timestep = 0
        self.current_seed = self.session.spawner.seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None

        table = LANE_ACTIONS if self.cfg.is_lane else PHYSICS_ACTIONS
        cmd = table.get(int(action))
        if cmd is not None and self.session.playing:
            push_command(self.session, cmd)

        for _ in range(self.frame_skip):
            self.clock_ms += self.dt_ms
            if sim_step(self.session, self.dt_ms, self.clock_ms):
                break
            if not self.session.playing:
                break

        alive = self.session.playing
        reward = 1.0 if alive else -1.0

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "score": self.session.score,
            "elapsed_ms": self.session.elapsed_ms,
            "difficulty": self.session.difficulty,
            "obstacles": len(self.session.obstacles),
            "timestep": self.timestep,
            "seed": self.current_seed,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        s = self.session
        cfg = self.cfg
        diff_norm = min(1.0, max(0.0, (s.difficulty - 1.0) / DIFFICULTY_SPAN))

        if cfg.is_lane:
            p = s.player
            span = max(1, cfg.lane_count - 1)
            reach = cfg.player_depth + cfg.hit_depth  # deeper obstacles are already behind the player
            nearest: List[float] = [0.0] * cfg.lane_count
            for ob in s.obstacles:
                if ob.z > reach:
                    continue
                nearest[ob.lane] = max(nearest[ob.lane], min(1.0, ob.z))
            values = [p.current_lane / span, p.target_lane / span,
                      max(-1.0, min(1.0, p.lane_offset / span)), diff_norm] + nearest
        else:
            p = s.player
            y_norm = p.y / max(1.0, cfg.ground_y - cfg.player_h)
            vy_norm = p.vy / max(1.0, cfg.max_fall_speed)
            reach = float(cfg.width + cfg.spawn_jitter_px)
            ahead = sorted((ob.rect.left - p.x) / reach for ob in s.obstacles if ob.rect.right >= p.x)
            ahead = (ahead + [1.0] * N_AHEAD)[:N_AHEAD]
            values = [y_norm, vy_norm, float(p.is_jumping), float(p.can_double_jump), diff_norm] + ahead

        obs = np.asarray(values, dtype=np.float32)
        return np.clip(obs, self.observation_space.low, self.observation_space.high)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return

        if self.renderer is None:
            pygame.init()
            self.renderer = Renderer(self.cfg)
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((self.cfg.width, self.cfg.height))
                pygame.display.set_caption(f"{self.cfg.title} - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface((self.cfg.width, self.cfg.height))

        if self.render_mode == "human":
            # Pump events so the OS doesn't think we're hung
            pygame.event.pump()

        self.renderer.draw(self.screen, self.session)

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.renderer is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.renderer = None
            self.screen = None
            self.clock = None
