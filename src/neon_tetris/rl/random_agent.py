from __future__ import annotations

import argparse
import random

import gymnasium as gym

import neon_tetris.env  # noqa: F401  ensure registration


def run_random(steps: int = 2000, seed: int | None = None) -> float:
    env = gym.make("NeonTetris-v0", gravity_every=3)
    rng = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    best_lines = 0
    for _ in range(steps):
        action = rng.randrange(int(env.action_space.n))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        best_lines = max(best_lines, int(info["lines"]))
        if terminated or truncated:
            episodes += 1
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}  episodes: {episodes}  best lines: {best_lines}")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()
    run_random(steps=args.steps, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
