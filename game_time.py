#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Pure timing math for the frame loop and the in-game calendar."""

from __future__ import annotations

import math
from typing import Optional

from config import (
    DAYS_PER_MONTH,
    GAME_DAYS_PER_REAL_SECOND,
    MAX_VALID_DELTA_MS,
    MIN_ITERATIONS,
    MONTHS_PER_YEAR,
    SPEED_EXPONENT,
)
from model import GameDate


def calculate_time_step(tick_delta_ms: float, game_speed: float) -> float:
    """Seconds of simulated time for one tick, scaled sub-linearly by speed."""
    return max(0.0, (float(tick_delta_ms) / 1000.0) * math.pow(float(game_speed), SPEED_EXPONENT))


def calculate_day_progress(time_step: float) -> float:
    return max(0.0, float(time_step) * GAME_DAYS_PER_REAL_SECOND)


def calculate_speed_adjusted_buffer(fixed_time_step_ms: float, game_speed: float) -> float:
    return float(fixed_time_step_ms) * 10.0 * math.log2(float(game_speed) + 1.0)


def calculate_max_iterations(game_speed: float) -> int:
    return max(MIN_ITERATIONS, int(math.floor(math.log2(float(game_speed) + 1.0) * 3)))


def is_valid_time_delta(delta_ms: float, threshold_ms: float = MAX_VALID_DELTA_MS) -> bool:
    return float(delta_ms) <= float(threshold_ms)


def calculate_new_game_date(current: GameDate, day_progress: float) -> Optional[GameDate]:
    """Advance `current` by `day_progress` days.

    Returns None when the whole-day date is unchanged (sub-day progress).
    """
    total_days = current.day + float(day_progress)
    new_day = int(math.floor(total_days))
    new_month = current.month
    new_year = current.year

    while new_day > DAYS_PER_MONTH:
        new_day -= DAYS_PER_MONTH
        new_month += 1
        if new_month > MONTHS_PER_YEAR:
            new_month = 1
            new_year += 1

    new_day = max(1, new_day)
    if (new_day, new_month, new_year) == (current.day, current.month, current.year):
        return None
    return GameDate(day=new_day, month=new_month, year=new_year)


def game_day_ordinal(date: GameDate) -> int:
    """Days since year 0 on the fixed 30-day / 12-month calendar."""
    return (date.year * MONTHS_PER_YEAR + (date.month - 1)) * DAYS_PER_MONTH + (date.day - 1)


def days_between(start: GameDate, end: GameDate) -> int:
    return game_day_ordinal(end) - game_day_ordinal(start)
