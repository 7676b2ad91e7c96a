"""Gymnasium environments for Neon Tetris."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Per-frame environment: one engine action per step
register(
    id="NeonTetris-v0",
    entry_point="neon_tetris.env.tetris_env:TetrisEnv",
)

__all__ = ["NeonTetris-v0"]
