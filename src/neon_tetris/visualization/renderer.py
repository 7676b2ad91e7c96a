from __future__ import annotations

from typing import List, Optional, Sequence

import pygame

from neon_tetris.game import Snapshot


BACKGROUND = (10, 10, 14)
WELL = (20, 20, 26)
TEXT = (230, 230, 230)
ACCENT = (14, 165, 233)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 200) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None
        self._title_font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        return (
            self.margin * 3 + width * self.cell_size + self.panel_width,
            self.margin * 2 + height * self.cell_size,
        )

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    @property
    def title_font(self) -> pygame.font.Font:
        if self._title_font is None:
            self._title_font = pygame.font.SysFont(None, 64)
        return self._title_font

    def _grid_surface(self, colors: List[List[Optional[str]]]) -> pygame.Surface:
        h, w = len(colors), len(colors[0])
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y, row in enumerate(colors):
            for x, color in enumerate(row):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, pygame.Color(color) if color else WELL, rect)
        return surf

    def _panel(self, screen: pygame.Surface, snapshot: Snapshot, x0: int) -> None:
        lines = [
            ("Score", snapshot.score),
            ("Level", snapshot.level),
            ("Lines", snapshot.lines),
        ]
        y = self.margin
        for label, value in lines:
            screen.blit(self.font.render(label, True, ACCENT), (x0, y))
            screen.blit(self.font.render(str(value), True, TEXT), (x0, y + 24))
            y += 64

    def draw_game(self, screen: pygame.Surface, snapshot: Snapshot, banner: Optional[str] = None) -> None:
        colors = snapshot.colors()
        grid_surf = self._grid_surface(colors)
        screen.fill(BACKGROUND)
        screen.blit(grid_surf, (self.margin, self.margin))
        self._panel(screen, snapshot, self.margin * 2 + grid_surf.get_width())
        if banner:
            text = self.font.render(banner, True, TEXT)
            rect = text.get_rect(center=(self.margin + grid_surf.get_width() // 2, screen.get_height() // 2))
            screen.blit(text, rect)
        pygame.display.flip()

    def draw_menu(self, screen: pygame.Surface, title: str, items: Sequence[str]) -> None:
        screen.fill(BACKGROUND)
        center_x = screen.get_width() // 2
        heading = self.title_font.render(title, True, ACCENT)
        screen.blit(heading, heading.get_rect(center=(center_x, screen.get_height() // 4)))
        y = screen.get_height() // 2
        for item in items:
            text = self.font.render(item, True, TEXT)
            screen.blit(text, text.get_rect(center=(center_x, y)))
            y += 36
        pygame.display.flip()
