# src/tests/test_player.py
"""
Player motion: vertical physics (jumper) and lane interpolation (lane variants).

Usage (from repo root):
  python -m src.tests.test_player
"""

from __future__ import annotations
import math
import random
from dataclasses import replace

from src.game.config import DODGER, JUMPER, RUNNER_3D
from src.game.player import LanePlayer, PhysicsPlayer


# ------------------------ Physics form ------------------------

def test_spawns_on_ground():
    p = PhysicsPlayer.spawn(JUMPER)
    assert p.y + p.height == JUMPER.ground_y
    assert p.x == JUMPER.width * 0.15
    assert not p.is_jumping and not p.can_double_jump


def test_jump_only_from_ground():
    p = PhysicsPlayer.spawn(JUMPER)
    assert p.try_jump()
    assert p.vy == JUMPER.jump_impulse
    assert p.is_jumping and p.can_double_jump
    assert not p.try_jump(), "second jump while airborne must be refused"


def test_gravity_integration():
    p = PhysicsPlayer.spawn(JUMPER)
    y0 = p.y
    p.try_jump()
    p.update_physics(1.0)
    assert math.isclose(p.vy, -12.0 + 0.6)
    assert math.isclose(p.y, y0 - 11.4)


def test_double_jump_consumes_eligibility():
    p = PhysicsPlayer.spawn(JUMPER)
    p.try_jump()
    for _ in range(5):
        p.update_physics(1.0)
    assert p.try_double_jump()
    assert math.isclose(p.vy, JUMPER.jump_impulse * 0.9)
    assert not p.can_double_jump
    assert not p.try_double_jump()


def test_double_jump_on_ground_is_a_jump():
    p = PhysicsPlayer.spawn(JUMPER)
    assert p.try_double_jump()
    assert p.vy == JUMPER.jump_impulse
    assert p.can_double_jump


def test_landing_clears_flags():
    p = PhysicsPlayer.spawn(JUMPER)
    p.try_jump()
    for _ in range(200):
        p.update_physics(1.0)
        assert p.vy <= JUMPER.max_fall_speed
        if not p.is_jumping:
            break
    assert not p.is_jumping and not p.can_double_jump
    assert p.vy == 0.0
    assert p.y + p.height == JUMPER.ground_y


def test_fall_speed_clamped():
    p = PhysicsPlayer(cfg=JUMPER, x=100.0, y=-2000.0)
    for _ in range(60):
        p.update_physics(1.0)
        assert p.vy <= JUMPER.max_fall_speed


def test_rect():
    p = PhysicsPlayer(cfg=JUMPER, x=100.0, y=300.0)
    assert tuple(p.rect) == (100, 300, 30, 40)


# ------------------------ Lane form ------------------------

def test_lane_spawn_in_middle():
    p = LanePlayer.spawn(RUNNER_3D)
    assert p.current_lane == p.target_lane == 1
    assert p.lane_offset == 0.0


def test_target_lane_always_clamped():
    rng = random.Random(7)
    p = LanePlayer.spawn(DODGER)
    now = 0.0
    for _ in range(500):
        now += rng.choice((50.0, 250.0))
        p.request_move(rng.choice((-1, 1)), now)
        assert 0 <= p.target_lane <= DODGER.lane_count - 1
        p.update_motion(1.0)
        assert 0 <= p.current_lane <= DODGER.lane_count - 1


def test_move_cooldown():
    p = LanePlayer.spawn(DODGER)
    assert p.request_move(+1, 1000.0)
    assert not p.request_move(+1, 1100.0), "inside the 200ms cooldown"
    assert p.target_lane == 2
    assert p.request_move(-1, 1200.0)
    assert p.target_lane == 1


def test_move_at_edge_stays_in_range():
    p = LanePlayer.spawn(DODGER)
    for i in range(5):
        p.request_move(-1, i * 1000.0)
    assert p.target_lane == 0


def test_converges_within_fifty_steps():
    cfg = replace(DODGER, lane_damping=0.15)
    p = LanePlayer.spawn(cfg)
    p.request_move(+1, 0.0)
    for n in range(1, 51):
        p.update_motion(1.0)
        if p.current_lane == p.target_lane:
            break
    assert p.current_lane == 2, f"did not converge after {n} steps"
    assert p.lane_offset == 0.0


def test_offset_moves_toward_target():
    cfg = replace(DODGER, lane_damping=0.15)
    p = LanePlayer.spawn(cfg)
    p.request_move(-1, 0.0)
    p.update_motion(1.0)
    assert math.isclose(p.lane_offset, -0.15)
    assert p.current_lane == 1
    assert math.isclose(p.position, 0.85)


def main():
    test_spawns_on_ground()
    test_jump_only_from_ground()
    test_gravity_integration()
    test_double_jump_consumes_eligibility()
    test_double_jump_on_ground_is_a_jump()
    test_landing_clears_flags()
    test_fall_speed_clamped()
    test_rect()
    test_lane_spawn_in_middle()
    test_target_lane_always_clamped()
    test_move_cooldown()
    test_move_at_edge_stays_in_range()
    test_converges_within_fifty_steps()
    test_offset_moves_toward_target()
    print("✓ player checks passed")


if __name__ == "__main__":
    main()
