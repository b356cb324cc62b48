#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Fixed-step time stepper.

Turns host frame callbacks (wall-clock timestamps) into a bounded,
speed-scaled sequence of fixed ticks measured in fractional game days.

- elapsed > 5s (backgrounded host) or speed 0: the frame is skipped, no catch-up
- per-frame delta is capped at `max_frame_time_ms`
- the accumulator is capped at the speed-adjusted buffer
- at most `calculate_max_iterations(speed)` ticks per frame; hitting the cap
  drops the remainder instead of carrying it forward
- a tick callback that raises aborts the rest of the frame only
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from config import FIXED_TIME_STEP_MS, MAX_FRAME_TIME_MS, MAX_VALID_DELTA_MS
from game_time import (
    calculate_day_progress,
    calculate_max_iterations,
    calculate_speed_adjusted_buffer,
    calculate_time_step,
    is_valid_time_delta,
)

logger = logging.getLogger(__name__)


@dataclass
class StepReport:
    ticks: int = 0
    day_progress: float = 0.0
    skipped: bool = False
    aborted: bool = False
    shed: bool = False
    accumulator_ms: float = 0.0


class TimeStepper:
    def __init__(
        self,
        on_tick: Callable[[float], None],
        *,
        fixed_time_step_ms: float = FIXED_TIME_STEP_MS,
        max_frame_time_ms: float = MAX_FRAME_TIME_MS,
        max_valid_delta_ms: float = MAX_VALID_DELTA_MS,
        now_ms: float = 0.0,
    ):
        self.on_tick = on_tick
        self.fixed_time_step_ms = float(fixed_time_step_ms)
        self.max_frame_time_ms = float(max_frame_time_ms)
        self.max_valid_delta_ms = float(max_valid_delta_ms)
        self.last_update_ms = float(now_ms)
        self.accumulator_ms = 0.0
        self._last_speed: Optional[int] = None

    def buffer_ms(self, game_speed: int) -> float:
        return calculate_speed_adjusted_buffer(self.fixed_time_step_ms, game_speed)

    def day_progress_per_tick(self, game_speed: int) -> float:
        return calculate_day_progress(calculate_time_step(self.fixed_time_step_ms, game_speed))

    def step(self, now_ms: float, game_speed: int) -> StepReport:
        elapsed = float(now_ms) - self.last_update_ms
        self.last_update_ms = float(now_ms)

        if game_speed != self._last_speed:
            # starting, stopping or changing speed starts from an empty accumulator
            self.accumulator_ms = 0.0
            self._last_speed = game_speed

        if game_speed <= 0 or not is_valid_time_delta(elapsed, self.max_valid_delta_ms):
            return StepReport(skipped=True, accumulator_ms=self.accumulator_ms)

        delta = min(max(0.0, elapsed), self.max_frame_time_ms)
        self.accumulator_ms = min(self.accumulator_ms + delta, self.buffer_ms(game_speed))

        max_iterations = calculate_max_iterations(game_speed)
        day_progress = self.day_progress_per_tick(game_speed)
        report = StepReport(day_progress=day_progress)

        while self.accumulator_ms >= self.fixed_time_step_ms and report.ticks < max_iterations:
            try:
                self.on_tick(day_progress)
            except Exception:
                logger.exception("tick failed; abandoning remaining iterations for this frame")
                report.aborted = True
                break
            self.accumulator_ms -= self.fixed_time_step_ms
            report.ticks += 1

        if report.ticks == max_iterations:
            self.accumulator_ms = 0.0
            report.shed = True

        report.accumulator_ms = self.accumulator_ms
        return report
