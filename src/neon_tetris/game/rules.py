from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_points: int = 100

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.line_clear_points * level


@dataclass
class Progression:
    """Level and gravity speed as a function of cumulative cleared lines."""

    lines_per_level: int = 10
    base_interval_ms: int = 1000
    step_ms: int = 100
    min_interval_ms: int = 100

    def level_for_lines(self, lines: int) -> int:
        return max(0, lines) // self.lines_per_level + 1

    def fall_interval_ms(self, level: int) -> int:
        return max(self.min_interval_ms, self.base_interval_ms - (level - 1) * self.step_ms)


DEFAULT_PROGRESSION = Progression()


def level_for_lines(lines: int) -> int:
    return DEFAULT_PROGRESSION.level_for_lines(lines)


def fall_interval_ms(level: int) -> int:
    return DEFAULT_PROGRESSION.fall_interval_ms(level)
