# /experiments/rollout.py
"""
Rollouts for RunnerEnv:
- Runs RANDOM and/or HEURISTIC policies over fixed seeds for one variant
- Writes an episodes CSV for notebook analysis
- Saves per-episode action sequences for exact replay

Usage examples (from repo root):
  # Both policies on the jumper, 20 default seeds, save traces:
  python -m experiments.rollout --variant jumper --policies both --save-traces

  # Heuristic only on the perspective lane runner, custom seeds:
  python -m experiments.rollout --variant runner3d --policies heuristic --seeds 111,222,333

  # Quick random-only smoke with fewer steps:
  python -m experiments.rollout --variant dodger --policies random --steps 300 --out-dir /tmp/rollouts
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple

import numpy as np

from src.env.runner_env import RunnerEnv
from src.game.config import VARIANTS, VariantConfig


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.randint(0, 3))
    return act

def heuristic_policy_init(cfg: VariantConfig):
    """
    Physics form: jump when the nearest obstacle is close, double jump if it is still close while falling.
    Lane form: leave the current lane when its nearest obstacle is about to reach the player,
    towards the neighbour with the farthest-away obstacle.
    """
    if not cfg.is_lane:
        def act(obs: np.ndarray) -> int:
            vy_norm, jumping, can_double, dx1 = obs[1], obs[2], obs[3], obs[5]
            if dx1 < 0.12 and jumping < 0.5:
                return 1
            if dx1 < 0.05 and can_double > 0.5 and vy_norm > 0.0:
                return 2
            return 0
        return act

    n = cfg.lane_count
    span = max(1, n - 1)
    def act(obs: np.ndarray) -> int:
        lane = int(round(obs[0] * span))
        depths = obs[4:4 + n]
        if depths[lane] < cfg.player_depth - 0.3:
            return 0
        left = depths[lane - 1] if lane > 0 else 2.0
        right = depths[lane + 1] if lane < n - 1 else 2.0
        return 1 if left < right else 2
    return act


# ------------------------ Rollout core ------------------------

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(variant: str,
                    policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int,
                    save_traces: bool,
                    out_dir: Path) -> Tuple[int, float, int, bool, bool]:
    """
    Returns: (ep_len, ret_sum, score, terminated, truncated)
    Also writes the action trace to disk if requested.
    """
    env = RunnerEnv(variant=variant, frame_skip=frame_skip)

    if policy_name == "random":
        action_seed = 10_000 + seed
        policy = random_policy_init(action_seed)
    elif policy_name == "heuristic":
        action_seed = -1
        policy = heuristic_policy_init(env.cfg)
    else:
        raise ValueError("Unknown policy")

    actions: List[int] = []
    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info = {}

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / variant / policy_name
        trace_dir.mkdir(parents=True, exist_ok=True)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        meta_lines = [
            f"variant={variant}",
            f"seed={seed}",
            f"frame_skip={frame_skip}",
            f"policy={policy_name}",
            f"action_rng_seed={action_seed}",
            f"steps_limit={steps_limit}",
        ]
        (trace_dir / f"{seed}_meta.txt").write_text("\n".join(meta_lines), encoding="utf-8")

    return ep_len, ret_sum, int(info.get("score", 0)), bool(term), bool(trunc)


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--variant", type=str, default="jumper", choices=sorted(VARIANTS))
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim frames per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true",
                    help="Save action sequences for replay")
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "variant", "policy_name", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "score",
        "terminated", "truncated",
    ]
    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running {args.variant} policies={to_run} on {len(seeds)} seeds (frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, terminated, truncated = run_one_episode(
                variant=args.variant,
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                save_traces=args.save_traces,
                out_dir=out_dir,
            )
            write_episode_row(episodes_csv, header, [
                args.variant, policy_name, seed, args.frame_skip,
                ep_len, f"{ret_sum:.1f}", score, int(terminated), int(truncated),
            ])
            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}")

    print("✓ Rollouts complete")


if __name__ == "__main__":
    main()
