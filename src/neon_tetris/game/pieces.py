from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _frozen(rows) -> Shape:
    shape = np.array(rows, dtype=np.int8)
    if shape.ndim != 2 or shape.size == 0:
        raise ValueError(f"piece shape must be a non-empty matrix, got {rows!r}")
    shape.flags.writeable = False
    return shape


@dataclass(frozen=True, eq=False)
class PieceDefinition:
    kind: TetrominoType
    shape: Shape
    color: str


CATALOG: Dict[TetrominoType, PieceDefinition] = {
    TetrominoType.I: PieceDefinition(TetrominoType.I, _frozen([[1, 1, 1, 1]]), "#0EA5E9"),
    TetrominoType.O: PieceDefinition(TetrominoType.O, _frozen([[1, 1], [1, 1]]), "#8B5CF6"),
    TetrominoType.T: PieceDefinition(TetrominoType.T, _frozen([[0, 1, 0], [1, 1, 1]]), "#D946EF"),
    TetrominoType.S: PieceDefinition(TetrominoType.S, _frozen([[0, 1, 1], [1, 1, 0]]), "#F97316"),
    TetrominoType.Z: PieceDefinition(TetrominoType.Z, _frozen([[1, 1, 0], [0, 1, 1]]), "#FEC6A1"),
    TetrominoType.J: PieceDefinition(TetrominoType.J, _frozen([[1, 0, 0], [1, 1, 1]]), "#33C3F0"),
    TetrominoType.L: PieceDefinition(TetrominoType.L, _frozen([[0, 0, 1], [1, 1, 1]]), "#1EAEDB"),
}


def color_of(value: int) -> str | None:
    """Hex color for a grid cell value, or None for an empty cell."""
    if value == 0:
        return None
    return CATALOG[TetrominoType(abs(int(value)))].color


def rotate(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise.

    No wall kicks: callers reject the result outright when it collides.
    """
    rotated = np.rot90(shape, 1, axes=(1, 0)).copy()
    rotated.flags.writeable = False
    return rotated


@dataclass(frozen=True, eq=False)
class ActivePiece:
    kind: TetrominoType
    shape: Shape
    x: int
    y: int

    @property
    def color(self) -> str:
        return CATALOG[self.kind].color

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells_at(self, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        cells: List[Tuple[int, int]] = []
        for ly, lx in zip(*np.nonzero(self.shape)):
            cells.append((self.x + int(lx) + dx, self.y + int(ly) + dy))
        return cells

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def with_shape(self, shape: Shape) -> "ActivePiece":
        return replace(self, shape=shape)

    def rotated(self) -> "ActivePiece":
        return self.with_shape(rotate(self.shape))


def spawn_piece(kind: TetrominoType, width: int) -> ActivePiece:
    """Place a fresh piece of `kind` centered on the top row."""
    definition = CATALOG[kind]
    shape_w = definition.shape.shape[1]
    return ActivePiece(kind=kind, shape=definition.shape, x=width // 2 - shape_w // 2, y=0)


def random_kind(rng: random.Random) -> TetrominoType:
    return rng.choice(list(TetrominoType))
