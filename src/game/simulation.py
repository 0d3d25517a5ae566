# src/game/simulation.py
from __future__ import annotations
import math

from .collision import check_collision
from .config import FRAME_MS, SCORE_MS_PER_POINT
from .difficulty import compute_difficulty
from .obstacles import advance_obstacles
from .session import Command, Session, end_game, start


def apply_commands(session: Session, now_ms: float):
    """Drain the command queue. Gameplay commands are dropped unless a run is active."""
    while session.commands:
        cmd = session.commands.popleft()
        if cmd is Command.START:
            start(session, now_ms)
            continue
        if not session.playing:
            continue

        player = session.player
        if session.config.is_lane:
            if cmd is Command.MOVE_LEFT:
                player.request_move(-1, now_ms)
            elif cmd is Command.MOVE_RIGHT:
                player.request_move(+1, now_ms)
        else:
            if cmd is Command.JUMP:
                player.try_jump()
            elif cmd is Command.DOUBLE_JUMP:
                player.try_double_jump()


def step(session: Session, dt_ms: float, now_ms: float) -> bool:
    """
    Advance one frame of `dt_ms` measured wall-clock time.
    Order: commands -> difficulty -> spawner -> (player -> obstacles -> collision) per sub-step.
    Motion and collision run in sub-steps of at most FRAME_MS so a long frame
    cannot carry an obstacle past the player between two checks.
    Returns True when this step ended the run.
    """
    apply_commands(session, now_ms)
    if not session.playing:
        return False

    cfg = session.config
    session.elapsed_ms += dt_ms
    diff = compute_difficulty(session.elapsed_ms, cfg)
    session.difficulty = diff.difficulty
    session.scroll_speed = diff.scroll_speed
    session.spawn_interval_ms = diff.spawn_interval_ms
    session.score = int(math.floor(session.elapsed_ms / SCORE_MS_PER_POINT))

    if session.spawner.ready(now_ms, session.last_spawn_ms, session.spawn_interval_ms):
        session.obstacles.extend(session.spawner.spawn())
        session.last_spawn_ms = now_ms

    n_sub = max(1, math.ceil(dt_ms / FRAME_MS - 1e-9))
    frames = dt_ms / FRAME_MS / n_sub
    for _ in range(n_sub):
        if cfg.is_lane:
            session.player.update_motion(frames)
        else:
            session.player.update_physics(frames)

        session.obstacles = advance_obstacles(session.obstacles, session.scroll_speed, frames, cfg)

        if check_collision(session):
            end_game(session)
            return True
    return False
