# src/tests/test_session.py
"""
State machine + simulation step.

Usage (from repo root):
  python -m src.tests.test_session
"""

from __future__ import annotations
import json
import tempfile
from pathlib import Path

import pygame

from src.game.config import COMMAND_QUEUE_SIZE, DODGER, JUMPER, MAX_FRAME_MS, RUNNER_3D
from src.game.game import shutdown
from src.game.obstacles import Obstacle
from src.game.session import (
    Command, GameState, commit_best_score, end_game, new_session, push_command, start,
)
from src.game.simulation import step
from src.game.storage import BestScoreStore


def _memory_store(best: int) -> BestScoreStore:
    store = BestScoreStore(None)
    store.save(best)
    return store


def test_new_session_waits_for_start():
    s = new_session(JUMPER, store=_memory_store(7), seed=1)
    assert s.state is GameState.START
    assert s.best_score == 7
    assert not step(s, 16.0, 16.0)
    assert s.elapsed_ms == 0.0 and s.obstacles == []


def test_start_command_begins_run():
    s = new_session(RUNNER_3D, seed=1)
    push_command(s, Command.START)
    step(s, 16.0, 5000.0)
    assert s.state is GameState.PLAYING
    assert s.last_spawn_ms == 5000.0


def test_restart_after_game_over_commits_best():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "jumper_best.json"
        store = BestScoreStore(path)
        store.save(10)
        s = new_session(JUMPER, store=store, seed=1)
        assert s.best_score == 10

        start(s, 0.0)
        s.score = 12
        s.state = GameState.GAME_OVER

        assert start(s, 1000.0)
        assert s.state is GameState.PLAYING
        assert s.score == 0 and s.elapsed_ms == 0.0
        assert s.best_score == 12
        assert json.loads(path.read_text(encoding="utf-8")) == {"bestScore": 12}


def test_restart_resets_everything():
    s = new_session(DODGER, seed=1)
    start(s, 0.0)
    s.elapsed_ms = 55_000.0
    s.difficulty = 1.5
    s.obstacles = [Obstacle(lane=0, z=0.3)]
    s.player.request_move(+1, 0.0)
    s.player.lane_offset = 0.4
    end_game(s)

    start(s, 60_000.0)
    assert s.elapsed_ms == 0.0 and s.difficulty == 1.0
    assert s.obstacles == []
    assert s.player.current_lane == s.player.target_lane == 1
    assert s.player.lane_offset == 0.0
    assert s.spawn_interval_ms == DODGER.max_spawn_ms
    assert s.last_spawn_ms == 60_000.0


def test_start_while_playing_is_ignored():
    s = new_session(JUMPER, seed=1)
    start(s, 0.0)
    s.elapsed_ms = 500.0
    assert not start(s, 10.0)
    assert s.elapsed_ms == 500.0


def test_score_follows_elapsed_time():
    s = new_session(JUMPER, seed=1)
    start(s, 0.0)
    now = 0.0
    for _ in range(100):
        now += 10.0
        step(s, 10.0, now)
    assert s.elapsed_ms == 1000.0
    assert s.score == 10


def test_no_obstacle_before_first_spawn_tick():
    s = new_session(JUMPER, seed=1)
    start(s, 0.0)
    step(s, 10.0, JUMPER.max_spawn_ms)
    assert s.obstacles == []
    step(s, 10.0, JUMPER.max_spawn_ms + 1.0)
    assert len(s.obstacles) == 1
    assert s.last_spawn_ms == JUMPER.max_spawn_ms + 1.0


def test_collision_ends_run_and_freezes():
    s = new_session(JUMPER, store=_memory_store(0), seed=1)
    start(s, 0.0)
    s.elapsed_ms = 2_345.0
    pr = s.player.rect
    rect = pygame.Rect(pr.x, JUMPER.ground_y - JUMPER.obstacle_h, JUMPER.obstacle_w, JUMPER.obstacle_h)
    s.obstacles = [Obstacle(x=float(rect.x), rect=rect)]

    assert step(s, 10.0, 10.0)
    assert s.state is GameState.GAME_OVER
    assert s.score == 23
    assert s.best_score == 23

    elapsed = s.elapsed_ms
    assert not step(s, 10.0, 20.0)
    assert s.elapsed_ms == elapsed


def test_long_frame_cannot_skip_adjacent_obstacle():
    s = new_session(JUMPER, store=_memory_store(0), seed=1)
    start(s, 0.0)
    s.elapsed_ms = 40_000.0  # difficulty 1.6: a 100 ms frame scrolls more than the overlap window
    pr = s.player.rect
    rect = pygame.Rect(pr.right, JUMPER.ground_y - JUMPER.obstacle_h, JUMPER.obstacle_w, JUMPER.obstacle_h)
    s.obstacles = [Obstacle(x=float(rect.x), rect=rect)]

    assert step(s, MAX_FRAME_MS, 100.0)
    assert s.state is GameState.GAME_OVER


def test_quit_mid_run_keeps_new_best():
    s = new_session(DODGER, store=_memory_store(5), seed=1)
    start(s, 0.0)
    s.score = 40
    shutdown(s)
    assert s.best_score == 40
    assert s.store.load() == 40


def test_jump_command_applied_next_step():
    s = new_session(JUMPER, seed=1)
    start(s, 0.0)
    push_command(s, Command.JUMP)
    assert not s.player.is_jumping
    step(s, 10.0, 10.0)
    assert s.player.is_jumping
    assert s.player.vy < 0.0


def test_gameplay_commands_ignored_outside_run():
    s = new_session(JUMPER, seed=1)
    push_command(s, Command.JUMP)
    step(s, 10.0, 10.0)
    assert not s.player.is_jumping
    assert len(s.commands) == 0


def test_lane_cooldown_through_commands():
    s = new_session(DODGER, seed=1)
    start(s, 0.0)
    push_command(s, Command.MOVE_RIGHT)
    push_command(s, Command.MOVE_RIGHT)  # same frame: touch + synthetic click
    step(s, 16.0, 16.0)
    assert s.player.target_lane == 2
    push_command(s, Command.MOVE_LEFT)
    step(s, 16.0, 300.0)
    assert s.player.target_lane == 1


def test_command_queue_is_bounded():
    s = new_session(DODGER, seed=1)
    for _ in range(COMMAND_QUEUE_SIZE * 3):
        push_command(s, Command.MOVE_LEFT)
    assert len(s.commands) == COMMAND_QUEUE_SIZE


def test_best_score_only_grows():
    s = new_session(JUMPER, store=_memory_store(50), seed=1)
    s.score = 20
    assert not commit_best_score(s)
    assert s.best_score == 50
    s.score = 51
    assert commit_best_score(s)
    assert s.store.load() == 51


def test_lane_run_eventually_spawns_and_moves_obstacles():
    s = new_session(RUNNER_3D, seed=3)
    push_command(s, Command.START)
    now = 0.0
    seen = False
    for _ in range(600):
        now += 1000.0 / 60.0
        if step(s, 1000.0 / 60.0, now):
            break
        seen = seen or bool(s.obstacles)
        assert all(0.0 <= ob.z <= 1.0 for ob in s.obstacles)
    assert seen


def main():
    test_new_session_waits_for_start()
    test_start_command_begins_run()
    test_restart_after_game_over_commits_best()
    test_restart_resets_everything()
    test_start_while_playing_is_ignored()
    test_score_follows_elapsed_time()
    test_no_obstacle_before_first_spawn_tick()
    test_collision_ends_run_and_freezes()
    test_long_frame_cannot_skip_adjacent_obstacle()
    test_quit_mid_run_keeps_new_best()
    test_jump_command_applied_next_step()
    test_gameplay_commands_ignored_outside_run()
    test_lane_cooldown_through_commands()
    test_command_queue_is_bounded()
    test_best_score_only_grows()
    test_lane_run_eventually_spawns_and_moves_obstacles()
    print("✓ session checks passed")


if __name__ == "__main__":
    main()
