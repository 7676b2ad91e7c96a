from __future__ import annotations

import itertools
from typing import Iterable, Optional, Sequence

import numpy as np

from neon_tetris.game import TetrominoType


class SequenceRng:
    """Stands in for random.Random: `choice` walks a fixed piece sequence, cycling."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self._kinds = itertools.cycle(list(kinds))

    def choice(self, seq: Sequence):
        kind = next(self._kinds)
        assert kind in seq
        return kind

    def seed(self, value: Optional[int] = None) -> None:
        pass


def grid_from(rows: Sequence[str], width: int = 10, height: int = 20) -> np.ndarray:
    """Build a grid from strings describing its bottom rows ('#' filled, '.' empty)."""
    grid = np.zeros((height, width), dtype=np.int8)
    offset = height - len(rows)
    for i, row in enumerate(rows):
        assert len(row) == width
        for x, ch in enumerate(row):
            if ch == "#":
                grid[offset + i, x] = int(TetrominoType.T)
    grid.flags.writeable = False
    return grid


