from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from neon_tetris.game import Action, BlockFallGame, GameConfig, TetrominoType
from neon_tetris.game.pieces import color_of


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


class TetrisEnv(gym.Env):
    """One engine action per step; gravity is the agent's SOFT_DROP.

    Observation:
      board: locked cells plus the falling piece, 0 = empty, 1..7 = piece type
      piece: type of the falling piece, 0 once the game is over
      level: current level
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 10000,
        gravity_every: int = 0,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.game = BlockFallGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        # Apply an extra gravity tick every N steps (0 disables).
        self.gravity_every = int(gravity_every)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.config.height, self.game.config.width
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=len(TetrominoType), shape=(h, w), dtype=np.int8),
                "piece": spaces.Discrete(len(TetrominoType) + 1),
                "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        snapshot = self.game.snapshot
        piece = snapshot.piece
        return {
            "board": np.array(snapshot.board, dtype=np.int8),
            "piece": int(piece.kind) if piece is not None else 0,
            "level": np.array([snapshot.level], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        snapshot = self.game.snapshot
        return {
            "score": snapshot.score,
            "lines": snapshot.lines,
            "level": snapshot.level,
            "pieces_locked": snapshot.pieces_locked,
            "fall_interval_ms": snapshot.fall_interval_ms,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        score_before = self.game.score
        _, cleared, locked = self.game.step(Action(int(action)))
        self._steps += 1
        if self.gravity_every and self._steps % self.gravity_every == 0 and not self.game.game_over:
            _, extra_cleared, extra_locked = self.game.step(Action.SOFT_DROP)
            cleared += extra_cleared
            locked = locked or extra_locked

        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        reward = float(self.game.score - score_before)
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["lines_cleared"] = cleared
        info["locked"] = locked
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            # human rendering delegated to the pygame front end
            return None
        board = self.game.snapshot.board
        cell = 12
        h, w = board.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = color_of(int(board[y, x]))
                rgb = hex_to_rgb(color) if color is not None else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = rgb
        return img

    def close(self) -> None:
        pass
