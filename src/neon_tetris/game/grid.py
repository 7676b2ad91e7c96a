from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from .pieces import ActivePiece, color_of


WIDTH = 10
HEIGHT = 20

Grid = np.ndarray


def _freeze(grid: Grid) -> Grid:
    grid.flags.writeable = False
    return grid


def empty_grid(width: int = WIDTH, height: int = HEIGHT) -> Grid:
    """Grid of `height` rows by `width` columns.

    0 marks an empty cell, positive values are `TetrominoType` ids used for coloring.
    Row 0 is the top of the well.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
    return _freeze(np.zeros((height, width), dtype=np.int8))


def collides(piece: ActivePiece, grid: Grid, dx: int = 0, dy: int = 0) -> bool:
    """True if `piece` shifted by (dx, dy) hits a wall, the floor or a filled cell.

    Cells above the top edge (y < 0) only count against the side walls.
    """
    height, width = grid.shape
    for x, y in piece.cells_at(dx, dy):
        if x < 0 or x >= width or y >= height:
            return True
        if y >= 0 and grid[y, x] != 0:
            return True
    return False


def merge(piece: ActivePiece, grid: Grid) -> Grid:
    """Return a copy of `grid` with the piece's cells written into it."""
    merged = grid.copy()
    height, width = merged.shape
    value = int(piece.kind)
    for x, y in piece.cells_at():
        if 0 <= y < height and 0 <= x < width:
            merged[y, x] = value
    return _freeze(merged)


def full_rows(grid: Grid) -> np.ndarray:
    return np.where(np.all(grid != 0, axis=1))[0]


def clear_lines(grid: Grid) -> Tuple[Grid, int]:
    """Remove every full row and pad the top with empty rows.

    Returns the compacted grid and the number of rows removed.
    """
    rows = full_rows(grid)
    if rows.size == 0:
        return grid, 0
    num = int(rows.size)
    height, width = grid.shape
    kept = np.delete(grid, rows, axis=0)
    compacted = np.vstack((np.zeros((num, width), dtype=grid.dtype), kept))
    assert compacted.shape == (height, width)
    return _freeze(compacted), num


def composite(piece: Optional[ActivePiece], grid: Grid) -> Grid:
    """Overlay the falling piece on a copy of the grid for display."""
    if piece is None:
        return grid
    return merge(piece, grid)


def to_colors(grid: Grid) -> List[List[Optional[str]]]:
    return [[color_of(int(v)) for v in row] for row in grid]
