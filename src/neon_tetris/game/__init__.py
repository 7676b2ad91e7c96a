"""Game module for Neon Tetris.

Exports the rules engine:
- TetrominoType, ActivePiece, CATALOG: piece catalog and rotation
- collides, merge, clear_lines: pure grid operations
- ScoringRules, Progression: scoring and level/speed curve
- Snapshot, BlockFallGame: immutable game state and the engine object
- GameSession, Command: queued command processor with gravity scheduling
"""

from .pieces import ActivePiece, CATALOG, PieceDefinition, TetrominoType, rotate, spawn_piece
from .grid import HEIGHT, WIDTH, clear_lines, collides, empty_grid, merge
from .rules import Progression, ScoringRules, fall_interval_ms, level_for_lines
from .core import Action, BlockFallGame, GameConfig, Snapshot, new_game
from .session import Command, GameResult, GameSession, GravityScheduler, SessionState

__all__ = [
    "ActivePiece",
    "CATALOG",
    "PieceDefinition",
    "TetrominoType",
    "rotate",
    "spawn_piece",
    "HEIGHT",
    "WIDTH",
    "clear_lines",
    "collides",
    "empty_grid",
    "merge",
    "Progression",
    "ScoringRules",
    "fall_interval_ms",
    "level_for_lines",
    "Action",
    "BlockFallGame",
    "GameConfig",
    "Snapshot",
    "new_game",
    "Command",
    "GameResult",
    "GameSession",
    "GravityScheduler",
    "SessionState",
]
