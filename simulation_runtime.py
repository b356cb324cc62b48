#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Host frame loop -> fixed ticks -> envelopes -> store."""

from __future__ import annotations

import logging
import time
from random import Random
from typing import Callable, Optional

from config import FIXED_TIME_STEP_MS, MAX_FRAME_TIME_MS, MAX_VALID_DELTA_MS
from state_store import InMemoryStateStore, apply_tick_changes
from tick_processor import TickCarry, TickChanges, process_game_tick
from time_stepper import StepReport, TimeStepper

logger = logging.getLogger(__name__)


class SimulationRuntime:
    """Owns the stepper, the RNG and the sub-threshold carry for one store.

    `clock` returns wall-clock seconds; it stamps completions, unlocks and
    alert triggers.
    """

    def __init__(
        self,
        store: InMemoryStateStore,
        seed: int = 42,
        *,
        clock: Callable[[], float] = time.time,
        fixed_time_step_ms: float = FIXED_TIME_STEP_MS,
        max_frame_time_ms: float = MAX_FRAME_TIME_MS,
        max_valid_delta_ms: float = MAX_VALID_DELTA_MS,
        now_ms: float = 0.0,
    ):
        self.store = store
        self.rng = Random(seed)
        self.clock = clock
        self.carry = TickCarry()
        self.ticks = 0
        self.last_changes: Optional[TickChanges] = None
        self.stepper = TimeStepper(
            self._on_tick,
            fixed_time_step_ms=fixed_time_step_ms,
            max_frame_time_ms=max_frame_time_ms,
            max_valid_delta_ms=max_valid_delta_ms,
            now_ms=now_ms,
        )

    def _on_tick(self, day_progress: float) -> None:
        changes = process_game_tick(
            self.store.snapshot(),
            day_progress,
            rng=self.rng,
            now=self.clock(),
            carry=self.carry,
        )
        apply_tick_changes(self.store, changes)
        self.carry = changes.carry
        self.last_changes = changes
        self.ticks += 1

    def set_game_speed(self, speed: int) -> None:
        speed = max(0, int(speed))
        if speed != self.store.snapshot().game_speed:
            logger.debug("game speed %s -> %s", self.store.snapshot().game_speed, speed)
        self.store.set_game_speed(speed)

    def on_frame(self, now_ms: float) -> StepReport:
        report = self.stepper.step(now_ms, self.store.snapshot().game_speed)
        if report.shed:
            logger.debug("iteration cap hit after %s ticks; accumulator dropped", report.ticks)
        return report
