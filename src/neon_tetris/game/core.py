from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from .grid import HEIGHT, WIDTH, Grid, clear_lines, collides, composite, empty_grid, merge, to_colors
from .pieces import ActivePiece, random_kind, spawn_piece
from .rules import Progression, ScoringRules


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    NONE = 4


@dataclass
class GameConfig:
    width: int = WIDTH
    height: int = HEIGHT
    random_seed: Optional[int] = None
    rules: ScoringRules = field(default_factory=ScoringRules)
    progression: Progression = field(default_factory=Progression)


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Immutable view of one moment of a game.

    `grid` holds only locked cells; `board` adds the falling piece on top.
    `piece` is None once the game is over.
    """

    grid: Grid
    piece: Optional[ActivePiece]
    score: int = 0
    lines: int = 0
    level: int = 1
    fall_interval_ms: int = 1000
    pieces_locked: int = 0
    game_over: bool = False

    @property
    def board(self) -> Grid:
        return composite(self.piece, self.grid)

    def colors(self) -> List[List[Optional[str]]]:
        return to_colors(self.board)


def new_game(config: GameConfig, rng: random.Random) -> Snapshot:
    grid = empty_grid(config.width, config.height)
    level = config.progression.level_for_lines(0)
    snapshot = Snapshot(
        grid=grid,
        piece=None,
        level=level,
        fall_interval_ms=config.progression.fall_interval_ms(level),
    )
    return _spawn_next(snapshot, rng)


def _spawn_next(snapshot: Snapshot, rng: random.Random) -> Snapshot:
    width = snapshot.grid.shape[1]
    piece = spawn_piece(random_kind(rng), width)
    if collides(piece, snapshot.grid):
        logger.info("Game over: score=%d lines=%d level=%d", snapshot.score, snapshot.lines, snapshot.level)
        return replace(snapshot, piece=None, game_over=True)
    logger.debug("Spawned %s at (%d, %d)", piece.kind.name, piece.x, piece.y)
    return replace(snapshot, piece=piece)


def move(snapshot: Snapshot, dx: int) -> Snapshot:
    """Shift the falling piece sideways; blocked moves leave the snapshot as is."""
    piece = snapshot.piece
    if snapshot.game_over or piece is None:
        return snapshot
    if collides(piece, snapshot.grid, dx, 0):
        return snapshot
    return replace(snapshot, piece=piece.moved(dx, 0))


def rotate_piece(snapshot: Snapshot) -> Snapshot:
    piece = snapshot.piece
    if snapshot.game_over or piece is None:
        return snapshot
    rotated = piece.rotated()
    # No kicks: a colliding rotation is simply rejected.
    if collides(rotated, snapshot.grid):
        return snapshot
    return replace(snapshot, piece=rotated)


def tick(snapshot: Snapshot, rng: random.Random, config: GameConfig) -> Snapshot:
    """One gravity step: fall one row, or lock, clear, score and spawn."""
    piece = snapshot.piece
    if snapshot.game_over or piece is None:
        return snapshot
    if not collides(piece, snapshot.grid, 0, 1):
        return replace(snapshot, piece=piece.moved(0, 1))
    return _lock(snapshot, rng, config)


soft_drop = tick


def _lock(snapshot: Snapshot, rng: random.Random, config: GameConfig) -> Snapshot:
    assert snapshot.piece is not None
    grid, cleared = clear_lines(merge(snapshot.piece, snapshot.grid))
    score = snapshot.score + config.rules.score_for_lines(cleared, snapshot.level)
    lines = snapshot.lines + cleared
    level = config.progression.level_for_lines(lines)
    logger.debug("Locked %s at (%d, %d), cleared %d", snapshot.piece.kind.name, snapshot.piece.x, snapshot.piece.y, cleared)
    if level != snapshot.level:
        logger.info("Level up: %d -> %d", snapshot.level, level)
    locked = Snapshot(
        grid=grid,
        piece=None,
        score=score,
        lines=lines,
        level=level,
        fall_interval_ms=config.progression.fall_interval_ms(level),
        pieces_locked=snapshot.pieces_locked + 1,
    )
    return _spawn_next(locked, rng)


def apply(snapshot: Snapshot, action: Action, rng: random.Random, config: GameConfig) -> Snapshot:
    if action == Action.LEFT:
        return move(snapshot, -1)
    if action == Action.RIGHT:
        return move(snapshot, 1)
    if action == Action.ROTATE:
        return rotate_piece(snapshot)
    if action == Action.SOFT_DROP:
        return tick(snapshot, rng, config)
    if action == Action.NONE:
        return snapshot
    raise ValueError(f"unknown action: {action!r}")


class BlockFallGame:
    """Engine object owning the config, the piece rng and the current snapshot."""

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.random_seed)
        self.snapshot = new_game(self.config, self.rng)

    def reset(self, seed: Optional[int] = None) -> Snapshot:
        if seed is not None:
            self.rng.seed(seed)
        self.snapshot = new_game(self.config, self.rng)
        return self.snapshot

    @property
    def score(self) -> int:
        return self.snapshot.score

    @property
    def game_over(self) -> bool:
        return self.snapshot.game_over

    def step(self, action: Action) -> Tuple[Snapshot, int, bool]:
        """Apply one action; returns the new snapshot, rows cleared and whether a piece locked."""
        before = self.snapshot
        self.snapshot = apply(before, Action(action), self.rng, self.config)
        cleared = self.snapshot.lines - before.lines
        locked = self.snapshot.pieces_locked != before.pieces_locked
        return self.snapshot, cleared, locked

    def get_state(self) -> np.ndarray:
        return self.snapshot.board
