#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tick orchestrator.

One tick reads one immutable `GameState` snapshot and returns one
`TickChanges` envelope. Fixed order:

(a) date advance
(b) project progress and completion
(c) payroll
(d) morale
(e) achievements, evaluated on the snapshot projected with (b)-(d)
(f) stock walk, dividends, price alerts, market events
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from random import Random
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from achievements import check_for_new_achievements
from finance import calculate_daily_expenses
from game_time import calculate_new_game_date
from model import Achievement, GameDate, GameState, Notification, NotificationType, Project
from morale import apply_morale_bounds, calculate_morale_changes
from projects import ProjectUpdate, advance_projects
from stock_market import (
    DividendPayment,
    MarketEvent,
    StockUpdate,
    TriggeredAlert,
    apply_market_events,
    generate_market_events,
    process_dividend_payments,
    process_price_alerts,
    process_stock_price_fluctuations,
)


@dataclass
class TickCarry:
    """Progress too small to show up in a single envelope, kept across ticks."""

    day_fraction: float = 0.0
    project_progress: Dict[str, float] = field(default_factory=dict)


class TickChanges(BaseModel):
    model_config = ConfigDict(extra="forbid")

    time_update: Optional[GameDate] = None
    project_updates: List[ProjectUpdate] = Field(default_factory=list)
    completed_projects: List[Project] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)
    financial_change: float = 0.0
    # new clamped morale, None when unchanged
    morale: Optional[float] = None
    achievements: List[Achievement] = Field(default_factory=list)
    stock_updates: List[StockUpdate] = Field(default_factory=list)
    dividend_payments: List[DividendPayment] = Field(default_factory=list)
    triggered_alerts: List[TriggeredAlert] = Field(default_factory=list)
    market_events: List[MarketEvent] = Field(default_factory=list)
    # carry to keep once this envelope has been applied
    carry: TickCarry = Field(default_factory=TickCarry, exclude=True)

    def is_empty(self) -> bool:
        return (
            self.time_update is None
            and self.morale is None
            and self.financial_change == 0.0
            and not self.project_updates
            and not self.completed_projects
            and not self.notifications
            and not self.achievements
            and not self.stock_updates
            and not self.dividend_payments
            and not self.triggered_alerts
            and not self.market_events
        )


def _advance_date(state: GameState, day_progress: float, day_fraction: float) -> Tuple[Optional[GameDate], float]:
    total = day_fraction + float(day_progress)
    return calculate_new_game_date(state.current_date, total), total - math.floor(total)


def process_game_tick(
    state: GameState,
    day_progress: float,
    *,
    rng: Random,
    now: float,
    carry: Optional[TickCarry] = None,
) -> TickChanges:
    """Build one envelope. `carry` is only read; the carry for the next tick
    is returned as `TickChanges.carry`.
    """
    carry = carry if carry is not None else TickCarry()
    changes = TickChanges()

    # (a)
    changes.time_update, day_fraction = _advance_date(state, day_progress, carry.day_fraction)

    # (b)
    updates, completed, pending = advance_projects(state, day_progress, rng, now=now, pending=carry.project_progress)
    changes.project_updates = updates
    changes.completed_projects = completed
    for project in completed:
        revenue = int(project.revenue or 0)
        changes.financial_change += revenue
        changes.notifications.append(Notification(
            message=f'Project "{project.name}" completed! Revenue: ${revenue:,}',
            type=NotificationType.SUCCESS,
        ))

    # (c)
    changes.financial_change -= calculate_daily_expenses(state.employees, day_progress)

    # (d)
    morale_delta = calculate_morale_changes(state, day_progress, now=now)
    if morale_delta != 0.0:
        new_morale = apply_morale_bounds(state.morale, morale_delta)
        if new_morale != state.morale:
            changes.morale = new_morale

    # (e)
    projected = state.model_copy(update={
        "money": state.money + changes.financial_change,
        "morale": changes.morale if changes.morale is not None else state.morale,
        "completed_projects": list(state.completed_projects) + completed,
    })
    changes.achievements = check_for_new_achievements(projected, state.achievements, now=now)
    for achievement in changes.achievements:
        changes.notifications.append(Notification(
            message=f"Achievement unlocked: {achievement.title} (+${achievement.reward:,})",
            type=NotificationType.SUCCESS,
        ))

    # (f)
    stock_updates = process_stock_price_fluctuations(state, day_progress, rng) or []

    if state.portfolio.holdings:
        changes.dividend_payments = process_dividend_payments(state)
        changes.financial_change += sum(p.amount for p in changes.dividend_payments)

    changes.triggered_alerts = process_price_alerts(state, now=now)
    for alert in changes.triggered_alerts:
        stock = state.stock_by_id(alert.stock_id)
        if stock is not None:
            changes.notifications.append(Notification(
                message=f"Price alert: {stock.symbol} reached ${alert.actual_price:.2f}",
                type=NotificationType.INFO,
            ))

    changes.market_events = generate_market_events(state, day_progress, rng, now=now)
    for event in changes.market_events:
        changes.notifications.append(Notification(message=event.message, type=NotificationType.WARNING))

    changes.stock_updates = apply_market_events(changes.market_events, state.stocks, stock_updates)
    changes.carry = TickCarry(day_fraction=day_fraction, project_progress=pending)
    return changes
