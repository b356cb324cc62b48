#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Headless studio simulation runner.

Drives the runtime with a synthetic 60 fps clock and prints, once per
simulated real-time second:
- game date, money, morale
- active project progress
- stock prices
- notifications raised during that second
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from editable_data import DATA_DIR, load_sim_settings, load_start_state
from finance import calculate_performance_metrics
from model import GameState, Notification
from simulation_runtime import SimulationRuntime
from state_store import InMemoryStateStore


def _fmt_date(state: GameState) -> str:
    d = state.current_date
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def _fmt_projects(state: GameState) -> str:
    active = state.active_projects()
    if not active:
        return "-"
    return ", ".join(f"{p.name}:{p.progress:.1f}%" for p in active)


def _fmt_stocks(state: GameState) -> str:
    if not state.stocks:
        return "-"
    return ", ".join(f"{s.symbol}:{s.current_price:.2f}" for s in state.stocks)


def _dump_second(second: int, state: GameState, notes: Iterable[Notification]) -> None:
    print(f"[t={second:>4}s] {_fmt_date(state)} money=${state.money:,.0f} morale={state.morale:.1f}")
    print(f"  projects: {_fmt_projects(state)}")
    print(f"  stocks:   {_fmt_stocks(state)}")
    for note in notes:
        print(f"  ({note.type.value}) {note.message}")


def _dump_summary(state: GameState, ticks: int) -> None:
    metrics = calculate_performance_metrics(state)
    print("[SUMMARY]")
    print(f"- ticks: {ticks}")
    print(f"- completed: {metrics.total_projects} (revenue ${metrics.total_revenue:,.0f})")
    print(f"- achievements: {', '.join(a.title for a in state.achievements) or '-'}")
    print(f"- burn/month: ${metrics.monthly_burn_rate:,.0f}, runway: {metrics.runway_months:.1f} months")


def run(seconds: float, speed: Optional[int], seed: Optional[int], data_dir: Path, fps: int = 60) -> GameState:
    settings = load_sim_settings(data_dir)
    store = InMemoryStateStore(load_start_state(data_dir))
    now_ms = 0.0
    runtime = SimulationRuntime(
        store,
        seed=settings.seed if seed is None else seed,
        clock=lambda: now_ms / 1000.0,
        fixed_time_step_ms=settings.fixed_time_step_ms,
        max_frame_time_ms=settings.max_frame_time_ms,
    )
    runtime.set_game_speed(settings.game_speed if speed is None else speed)

    frame_ms = 1000.0 / max(1, fps)
    total_frames = int(round(seconds * fps))
    seen = 0
    for frame in range(1, total_frames + 1):
        now_ms = frame * frame_ms
        runtime.on_frame(now_ms)
        if frame % fps == 0:
            notes: List[Notification] = store.notifications[seen:]
            seen = len(store.notifications)
            _dump_second(frame // fps, store.snapshot(), notes)

    _dump_summary(store.snapshot(), runtime.ticks)
    return store.snapshot()


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Headless game studio simulation")
    ap.add_argument("--seconds", type=float, default=60.0, help="simulated real-time seconds")
    ap.add_argument("--speed", type=int, default=None, help="game speed multiplier (0 = paused)")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--data-dir", type=Path, default=DATA_DIR)
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args(argv)

    if args.seconds <= 0:
        ap.error("--seconds must be positive")
    if args.speed is not None and args.speed < 0:
        ap.error("--speed must be >= 0")

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    run(args.seconds, args.speed, args.seed, args.data_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
