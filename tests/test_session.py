from __future__ import annotations

from dataclasses import replace

import pytest

from neon_tetris.game import CATALOG, ActivePiece, Command, GameConfig, GameSession, SessionState, TetrominoType

from conftest import SequenceRng, grid_from


class RecordingScheduler:
    def __init__(self) -> None:
        self.calls = []

    def schedule(self, interval_ms: int, generation: int) -> None:
        self.calls.append(("schedule", interval_ms, generation))

    def cancel(self) -> None:
        self.calls.append(("cancel",))

    @property
    def last(self):
        return self.calls[-1]


def _session(*kinds: TetrominoType):
    scheduler = RecordingScheduler()
    session = GameSession(GameConfig(), rng=SequenceRng(kinds or [TetrominoType.T]), scheduler=scheduler)
    return session, scheduler


def test_menu_ignores_play_commands():
    session, scheduler = _session()
    assert session.state == SessionState.MENU
    assert session.move_left() is None
    assert session.tick() is None
    assert session.resume() is None
    assert session.state == SessionState.MENU
    assert scheduler.calls == []


def test_start_game_schedules_gravity():
    session, scheduler = _session(TetrominoType.O)
    snapshot = session.start_game()
    assert session.state == SessionState.PLAYING
    assert snapshot.piece.kind == TetrominoType.O
    assert scheduler.last == ("schedule", 1000, session.generation)


def test_commands_processed_in_arrival_order():
    session, _ = _session(TetrominoType.T)
    session.start_game()
    session.submit(Command.MOVE_LEFT)
    session.submit(Command.MOVE_LEFT)
    session.submit(Command.TICK)
    session.submit(Command.ROTATE)
    assert session.pending == 4
    snapshot = session.process_pending()
    assert session.pending == 0
    assert (snapshot.piece.x, snapshot.piece.y) == (2, 1)
    assert snapshot.piece.shape.shape == (3, 2)


def test_rejected_move_is_silent():
    session, _ = _session(TetrominoType.I)
    session.start_game()
    for _ in range(10):
        snapshot = session.move_left()
    assert snapshot.piece.x == 0
    assert session.state == SessionState.PLAYING


def test_pause_suspends_gravity_and_input():
    session, scheduler = _session(TetrominoType.T)
    before = session.start_game()
    session.pause()
    assert session.state == SessionState.PAUSED
    assert scheduler.last == ("cancel",)
    assert session.tick() is before
    assert session.move_right() is before
    assert session.rotate() is before

    session.resume()
    assert session.state == SessionState.PLAYING
    assert scheduler.last == ("schedule", 1000, session.generation)
    assert session.tick().piece.y == 1


def test_stale_tick_is_dropped():
    session, scheduler = _session(TetrominoType.T)
    session.start_game()
    stale = session.generation
    session.pause()
    session.resume()
    assert session.generation != stale
    before = session.snapshot
    assert session.tick(stale) is before
    assert session.tick(session.generation).piece.y == 1


def test_level_up_reschedules_gravity():
    session, scheduler = _session(TetrominoType.I)
    session.start_game()
    session.snapshot = replace(session.snapshot, grid=grid_from(["###....###"]), lines=9)
    generation = session.generation
    for _ in range(20):
        session.soft_drop()
    assert session.snapshot.level == 2
    assert session.snapshot.fall_interval_ms == 900
    assert scheduler.last == ("schedule", 900, session.generation)
    assert session.generation == generation + 1
    # The timer that was running at level 1 is now stale.
    before = session.snapshot
    assert session.tick(generation) is before


def test_game_over_returns_to_menu_with_result():
    session, scheduler = _session(TetrominoType.I)
    session.start_game()
    rows = ["...####..."] + [".........."] * 19
    o_piece = ActivePiece(TetrominoType.O, CATALOG[TetrominoType.O].shape, x=0, y=18)
    session.snapshot = replace(session.snapshot, grid=grid_from(rows), piece=o_piece, score=400, lines=4)
    seen = []
    session.listeners.append(seen.append)

    final = session.tick()
    assert final.game_over
    assert session.state == SessionState.MENU
    assert session.last_result.score == 400
    assert session.last_result.lines == 4
    assert scheduler.last == ("cancel",)
    assert seen == [final]

    # Ticks from a timer that already fired are harmless.
    assert session.tick() is final
    assert session.move_left() is final
    assert seen == [final]


def test_start_game_resets_after_game_over():
    session, _ = _session(TetrominoType.I)
    session.start_game()
    session.snapshot = replace(session.snapshot, score=900, lines=9)
    session.quit_to_menu()
    assert session.state == SessionState.MENU
    snapshot = session.start_game()
    assert (snapshot.score, snapshot.lines, snapshot.level) == (0, 0, 1)
    assert not snapshot.grid.any()


def test_quit_to_menu_cancels_gravity():
    session, scheduler = _session()
    session.start_game()
    session.quit_to_menu()
    assert session.state == SessionState.MENU
    assert session.last_result is None
    assert scheduler.last == ("cancel",)


def test_listener_commands_run_after_current_one():
    session, _ = _session(TetrominoType.T)
    positions = []

    def listener(snapshot):
        positions.append((snapshot.piece.x, snapshot.piece.y))
        if len(positions) == 2:
            session.submit(Command.MOVE_LEFT)

    session.listeners.append(listener)
    session.start_game()
    session.tick()
    assert positions == [(4, 0), (4, 1), (3, 1)]


def test_submit_rejects_unknown_command():
    session, _ = _session()
    with pytest.raises(ValueError):
        session.submit("jump")
