from __future__ import annotations

import gymnasium as gym
import numpy as np
from gymnasium.utils.env_checker import check_env

import neon_tetris.env  # noqa: F401
from neon_tetris.env.tetris_env import TetrisEnv, hex_to_rgb
from neon_tetris.game import Action


def test_env_passes_gymnasium_checker():
    check_env(TetrisEnv(), skip_render_check=True)


def test_registered_env_resets_deterministically():
    env = gym.make("NeonTetris-v0")
    obs_a, info_a = env.reset(seed=5)
    obs_b, _ = env.reset(seed=5)
    np.testing.assert_array_equal(obs_a["board"], obs_b["board"])
    assert obs_a["piece"] == obs_b["piece"]
    assert info_a["score"] == 0
    assert obs_a["level"][0] == 1
    env.close()


def test_center_drops_end_the_game_without_reward():
    env = TetrisEnv()
    env.reset(seed=1)
    total = 0.0
    terminated = False
    for _ in range(2000):
        obs, reward, terminated, truncated, info = env.step(int(Action.SOFT_DROP))
        total += reward
        if terminated:
            break
    assert terminated
    assert total == 0.0
    assert info["lines"] == 0
    assert obs["piece"] == 0


def test_truncates_after_max_steps():
    env = TetrisEnv(max_episode_steps=5)
    env.reset(seed=0)
    for i in range(5):
        _, _, terminated, truncated, info = env.step(int(Action.NONE))
        assert not terminated
    assert truncated
    assert info["steps"] == 5


def test_gravity_every_adds_ticks():
    env = TetrisEnv(gravity_every=1)
    obs, _ = env.reset(seed=0)
    start_y = env.game.snapshot.piece.y
    env.step(int(Action.NONE))
    assert env.game.snapshot.piece.y == start_y + 1


def test_rgb_render():
    env = TetrisEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (20 * 12, 10 * 12, 3)
    assert img.dtype == np.uint8
    assert hex_to_rgb("#0EA5E9") == (14, 165, 233)
