"""Command processor for a play session.

Player input and gravity ticks arrive as `Command` messages on one FIFO queue
and are evaluated strictly one at a time against the current snapshot.
Gravity timing lives outside the engine behind `GravityScheduler`; every
(re)schedule bumps a generation number so ticks from a cancelled timer are
recognized and dropped.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Protocol

from .core import GameConfig, Snapshot, move, new_game, rotate_piece, tick


logger = logging.getLogger(__name__)


class Command(Enum):
    START_GAME = "start_game"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SOFT_DROP = "soft_drop"
    ROTATE = "rotate"
    PAUSE = "pause"
    RESUME = "resume"
    QUIT_TO_MENU = "quit_to_menu"
    TICK = "tick"


class SessionState(Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class Message:
    command: Command
    generation: Optional[int] = None


@dataclass(frozen=True)
class GameResult:
    score: int
    lines: int
    level: int


class GravityScheduler(Protocol):
    def schedule(self, interval_ms: int, generation: int) -> None:
        ...

    def cancel(self) -> None:
        ...


class NullScheduler:
    """Scheduler for drivers that issue ticks themselves (tests, agents)."""

    def __init__(self) -> None:
        self.interval_ms: Optional[int] = None
        self.generation: Optional[int] = None

    def schedule(self, interval_ms: int, generation: int) -> None:
        self.interval_ms = interval_ms
        self.generation = generation

    def cancel(self) -> None:
        self.interval_ms = None
        self.generation = None


Listener = Callable[[Snapshot], None]

_PIECE_COMMANDS = (Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.SOFT_DROP, Command.ROTATE, Command.TICK)


class GameSession:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[GravityScheduler] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.random_seed)
        self.scheduler: GravityScheduler = scheduler or NullScheduler()
        self.state = SessionState.MENU
        self.snapshot: Optional[Snapshot] = None
        self.last_result: Optional[GameResult] = None
        self.generation = 0
        self.listeners: List[Listener] = []
        self._queue: Deque[Message] = deque()
        self._processing = False

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------
    def submit(self, command: Command, generation: Optional[int] = None) -> None:
        if not isinstance(command, Command):
            raise ValueError(f"unknown command: {command!r}")
        self._queue.append(Message(command, generation))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def process_pending(self) -> Optional[Snapshot]:
        # Commands submitted by a listener mid-drain are picked up by the running loop.
        if self._processing:
            return self.snapshot
        self._processing = True
        try:
            while self._queue:
                self._handle(self._queue.popleft())
        finally:
            self._processing = False
        return self.snapshot

    def _dispatch(self, command: Command, generation: Optional[int] = None) -> Optional[Snapshot]:
        self.submit(command, generation)
        return self.process_pending()

    # ------------------------------------------------------------------
    # Inbound commands
    # ------------------------------------------------------------------
    def start_game(self) -> Optional[Snapshot]:
        return self._dispatch(Command.START_GAME)

    def move_left(self) -> Optional[Snapshot]:
        return self._dispatch(Command.MOVE_LEFT)

    def move_right(self) -> Optional[Snapshot]:
        return self._dispatch(Command.MOVE_RIGHT)

    def soft_drop(self) -> Optional[Snapshot]:
        return self._dispatch(Command.SOFT_DROP)

    def rotate(self) -> Optional[Snapshot]:
        return self._dispatch(Command.ROTATE)

    def pause(self) -> Optional[Snapshot]:
        return self._dispatch(Command.PAUSE)

    def resume(self) -> Optional[Snapshot]:
        return self._dispatch(Command.RESUME)

    def quit_to_menu(self) -> Optional[Snapshot]:
        return self._dispatch(Command.QUIT_TO_MENU)

    def tick(self, generation: Optional[int] = None) -> Optional[Snapshot]:
        """Gravity step. `generation` identifies the timer that fired; None means the live one."""
        return self._dispatch(Command.TICK, generation)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _handle(self, message: Message) -> None:
        command = message.command
        if command == Command.START_GAME:
            self._start()
        elif command == Command.PAUSE:
            if self.state == SessionState.PLAYING:
                self.state = SessionState.PAUSED
                self._cancel_gravity()
        elif command == Command.RESUME:
            if self.state == SessionState.PAUSED:
                self.state = SessionState.PLAYING
                self._schedule_gravity()
        elif command == Command.QUIT_TO_MENU:
            if self.state != SessionState.MENU:
                self.state = SessionState.MENU
                self.last_result = None
                self._cancel_gravity()
        elif command in _PIECE_COMMANDS:
            self._play(message)

    def _start(self) -> None:
        self.snapshot = new_game(self.config, self.rng)
        self.last_result = None
        self.state = SessionState.PLAYING
        logger.info("Game started (%dx%d)", self.config.width, self.config.height)
        self._schedule_gravity()
        self._notify()
        if self.snapshot.game_over:
            self._finish()

    def _play(self, message: Message) -> None:
        if self.state != SessionState.PLAYING or self.snapshot is None:
            return
        if message.command == Command.TICK and message.generation not in (None, self.generation):
            logger.debug("Dropping stale tick from generation %s", message.generation)
            return
        before = self.snapshot
        if message.command == Command.MOVE_LEFT:
            after = move(before, -1)
        elif message.command == Command.MOVE_RIGHT:
            after = move(before, 1)
        elif message.command == Command.ROTATE:
            after = rotate_piece(before)
        else:
            after = tick(before, self.rng, self.config)
        if after is before:
            return
        self.snapshot = after
        if after.game_over:
            self._finish()
        elif after.fall_interval_ms != before.fall_interval_ms:
            self._schedule_gravity()
        self._notify()

    def _finish(self) -> None:
        assert self.snapshot is not None
        self.state = SessionState.MENU
        self.last_result = GameResult(self.snapshot.score, self.snapshot.lines, self.snapshot.level)
        self._cancel_gravity()

    def _schedule_gravity(self) -> None:
        assert self.snapshot is not None
        self.generation += 1
        self.scheduler.schedule(self.snapshot.fall_interval_ms, self.generation)

    def _cancel_gravity(self) -> None:
        self.generation += 1
        self.scheduler.cancel()

    def _notify(self) -> None:
        assert self.snapshot is not None
        for listener in list(self.listeners):
            listener(self.snapshot)
