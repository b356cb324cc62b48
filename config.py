#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Game configuration.

Rule: constants and settings only in this file. (No logic.)
"""

# --- Frame loop ---
FIXED_TIME_STEP_MS = 1000.0 / 60.0   # one simulation tick of real time (60 Hz)
MAX_FRAME_TIME_MS = 50.0             # per-frame delta cap (spiral of death guard)
MAX_VALID_DELTA_MS = 5000.0          # longer gaps mean a backgrounded host; skip the frame
SPEED_EXPONENT = 0.75                # perceived speed grows sub-linearly with the multiplier
MIN_ITERATIONS = 3

# --- Calendar ---
DAYS_PER_MONTH = 30
MONTHS_PER_YEAR = 12
GAME_DAYS_PER_REAL_SECOND = 1.0 / 60.0   # 1 game day = 1 real minute at 1x

# --- Costs ---
BASE_EMPLOYEE_COST = 50_000
EMPLOYEE_COST_MULTIPLIER = 1.2
BASE_PROJECT_COST = 10_000
PROJECT_COST_MULTIPLIER = 1.15
BASE_RESEARCH_COST = 25_000
RESEARCH_COST_MULTIPLIER = 1.3

# size -> base development points
BASE_DEVELOPMENT_POINTS = {1: 1_000, 2: 5_000, 3: 20_000}

# --- Skills ---
MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 100
DEFAULT_SKILL_LEVEL = 50
DEFAULT_REQUIRED_SKILLS = ("programming", "design", "testing")

# --- Projects ---
DEFAULT_ESTIMATED_REVENUE = 50_000
PROGRESS_EMIT_THRESHOLD = 0.01
MIN_MORALE_PRODUCTIVITY = 0.1

# --- Morale ---
MIN_MORALE = 0.0
MAX_MORALE = 100.0
BASE_MORALE = 50.0
COMPLETION_BOOST_WINDOW_SECONDS = 30 * 24 * 60 * 60
HARMONY_SYNERGY = 0.5
HARMONY_CONFLICT = -0.3

# --- Stock market ---
DEFAULT_VOLATILITY = 0.03
MIN_STOCK_PRICE = 1.0
MIN_TREND = 0.95
MAX_TREND = 1.05
PRICE_HISTORY_LIMIT = 30
STOCK_UPDATES_PER_DAY = 24           # roughly hourly at 1x
MARKET_EVENTS_PER_DAY = 0.1
DIVIDEND_INTERVAL_DAYS = 90
MIN_DIVIDEND_PAYMENT = 0.01
GAMING_SECTOR_WINDOW_MONTHS = 3

# --- Studio ---
DEFAULT_REPUTATION = 50.0
