from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import pygame

from neon_tetris.game import Command, GameConfig, GameSession, SessionState
from .renderer import Renderer


GRAVITY_EVENT = pygame.USEREVENT + 1

KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_UP: Command.ROTATE,
    pygame.K_SPACE: Command.ROTATE,
}

# Placeholder leaderboard; scores are not persisted.
LEADERBOARD = [
    ("NEON", 12000),
    ("PIXEL", 9500),
    ("BLOCK", 7200),
    ("GRID", 4100),
    ("LINE", 1500),
]

CONTROLS = [
    "Left / Right - move",
    "Up / Space - rotate",
    "Down - soft drop",
    "P - pause / resume",
    "Esc - back to menu",
]


class PygameGravityTimer:
    """Gravity timer on the pygame event queue.

    Each tick event carries the generation it was scheduled with, so a tick
    already queued when the timer is replaced is dropped by the session.
    """

    def __init__(self, event_type: int = GRAVITY_EVENT) -> None:
        self.event_type = event_type

    def schedule(self, interval_ms: int, generation: int) -> None:
        pygame.time.set_timer(pygame.event.Event(self.event_type, generation=generation), interval_ms)

    def cancel(self) -> None:
        pygame.time.set_timer(self.event_type, 0)


def _menu_items(session: GameSession) -> List[str]:
    items = ["Enter - play", "C - controls", "L - leaderboard", "Esc - quit"]
    if session.last_result is not None:
        result = session.last_result
        items.insert(0, f"Game over  score {result.score}  lines {result.lines}")
    return items


def run(cell_size: int = 30, seed: Optional[int] = None) -> None:
    pygame.init()
    try:
        session = GameSession(GameConfig(random_seed=seed), scheduler=PygameGravityTimer())
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(session.config.width, session.config.height))
        pygame.display.set_caption("Neon Tetris")
        clock = pygame.time.Clock()

        # Sub-screens of the menu state; they never touch the engine.
        menu_page = "main"
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == GRAVITY_EVENT:
                    session.submit(Command.TICK, getattr(event, "generation", None))
                elif event.type == pygame.KEYDOWN:
                    if session.state == SessionState.MENU:
                        if menu_page != "main":
                            if event.key in (pygame.K_ESCAPE, pygame.K_RETURN):
                                menu_page = "main"
                        elif event.key == pygame.K_RETURN:
                            session.submit(Command.START_GAME)
                        elif event.key == pygame.K_l:
                            menu_page = "leaderboard"
                        elif event.key == pygame.K_c:
                            menu_page = "controls"
                        elif event.key == pygame.K_ESCAPE:
                            running = False
                    elif event.key == pygame.K_p:
                        paused = session.state == SessionState.PAUSED
                        session.submit(Command.RESUME if paused else Command.PAUSE)
                    elif event.key == pygame.K_ESCAPE:
                        session.submit(Command.QUIT_TO_MENU)
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            session.submit(command)
            session.process_pending()

            if session.state == SessionState.MENU:
                if menu_page == "leaderboard":
                    renderer.draw_menu(screen, "LEADERBOARD", [f"{name}  {score}" for name, score in LEADERBOARD])
                elif menu_page == "controls":
                    renderer.draw_menu(screen, "CONTROLS", CONTROLS)
                else:
                    renderer.draw_menu(screen, "NEON TETRIS", _menu_items(session))
            elif session.snapshot is not None:
                banner = "PAUSED - press P" if session.state == SessionState.PAUSED else None
                renderer.draw_game(screen, session.snapshot, banner)

            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Neon Tetris")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(cell_size=args.cell_size, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
