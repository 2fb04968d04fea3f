# /experiments/sanity_rollout.py
"""
Sanity rollouts for FlyerEnv.

Plays a RANDOM and/or a GAP-FOLLOWING controller over fixed level seeds,
writes one CSV row per episode and prints a per-policy summary (mean score,
pipes passed, how the flyer died). A controller that cannot beat random here
points at a broken observation or reward, not at the learner.

Usage (from repo root):
  python -m experiments.sanity_rollout
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity --save-actions
"""

from __future__ import annotations
import argparse
import csv
import logging
from collections import Counter
from dataclasses import dataclass, astuple, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from src.env.flyer_env import FlyerEnv

Policy = Callable[[np.ndarray], int]


# ------------------------ Policies ------------------------

def random_policy(level_seed: int, jump_prob: float = 0.15) -> Policy:
    # action noise is tied to the level so a row can be replayed from its seed alone
    rng = np.random.default_rng(10_000 + level_seed)
    return lambda _obs: int(rng.random() < jump_prob)


def gap_following_policy(_level_seed: int, margin: float = 0.06) -> Policy:
    """Jump once the flyer sinks into the lower part of the nearest gap and is not already rising."""
    def act(obs: np.ndarray) -> int:
        y, vy, gap_bottom = obs[0], obs[1], obs[4]
        return int(y > gap_bottom - margin and vy > -0.1)
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": random_policy,
    "heuristic": gap_following_policy,
}


# ------------------------ Rollout core ------------------------

@dataclass
class Episode:
    policy: str
    seed: int
    decisions: int
    ret: float
    distance_px: float
    score: int
    passed: int
    terminated: bool
    truncated: bool
    death_cause: str


def play(policy_name: str, seed: int, frame_skip: int, steps_limit: int,
         actions_dir: Optional[Path] = None) -> Episode:
    env = FlyerEnv(frame_skip=frame_skip)
    policy = POLICIES[policy_name](seed)
    actions: List[int] = []
    ret = 0.0
    term = trunc = False
    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(a)
            obs, r, term, trunc, info = env.step(a)
            ret += r
            if term or trunc:
                break
    finally:
        env.close()

    if actions_dir is not None:
        np.save(actions_dir / f"{policy_name}_{seed}.npy", np.asarray(actions, dtype=np.int8))

    return Episode(policy_name, seed, len(actions), ret, float(info["distance_px"]),
                   int(info["score"]), int(info["passed"]), term, trunc, info["death_cause"] or "")


def summarize(episodes: List[Episode]) -> str:
    scores = np.array([e.score for e in episodes], dtype=np.float64)
    passed = np.array([e.passed for e in episodes], dtype=np.float64)
    causes = Counter(e.death_cause or "timeout" for e in episodes)
    cause_txt = ", ".join(f"{k}={v}" for k, v in causes.most_common())
    return (f"score {scores.mean():.2f}±{scores.std():.2f} (max {scores.max():.0f})  "
            f"passed {passed.mean():.2f}  ends: {cause_txt}")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", default="both", choices=[*POLICIES, "both"])
    ap.add_argument("--seeds", default="", help="Comma-separated level seeds (default 101..120)")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim ticks per decision")
    ap.add_argument("--steps", type=int, default=10_000, help="Cap on decisions (env truncates at its time limit)")
    ap.add_argument("--out-dir", default="experiments/runs")
    ap.add_argument("--save-actions", action="store_true", help="Save each episode's action sequence as .npy")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    actions_dir = None
    if args.save_actions:
        actions_dir = out_dir / "actions"
        actions_dir.mkdir(exist_ok=True)

    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    to_run = list(POLICIES) if args.policies == "both" else [args.policies]
    csv_path = out_dir / "episodes.csv"
    print(f"Running {to_run} on {len(seeds)} seeds (frame_skip={args.frame_skip}) -> {csv_path}")

    with csv_path.open("w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow([f.name for f in fields(Episode)])
        for policy_name in to_run:
            episodes = []
            for seed in seeds:
                ep = play(policy_name, seed, args.frame_skip, args.steps, actions_dir)
                writer.writerow(astuple(ep))
                episodes.append(ep)
                print(f"[{policy_name}] seed={seed} len={ep.decisions} score={ep.score} "
                      f"passed={ep.passed} cause={ep.death_cause or '-'}")
            print(f"== {policy_name}: {summarize(episodes)}")


if __name__ == "__main__":
    main()
