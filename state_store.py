#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Outbound command interface and an in-memory store.

`apply_tick_changes` replays one `TickChanges` envelope as store commands.
Unknown ids in a command are ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Sequence

from model import Achievement, GameDate, GameState, Notification, Project, ProjectStatus
from morale import apply_morale_bounds
from stock_market import DividendPayment, MarketEvent, StockUpdate
from tick_processor import TickChanges

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    def snapshot(self) -> GameState: ...

    def update_time(self, date: GameDate) -> None: ...

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> None: ...

    def complete_project(self, project: Project) -> None: ...

    def update_finances(self, delta: float) -> None: ...

    def update_morale(self, value: float) -> None: ...

    def unlock_achievement(self, achievement: Achievement) -> None: ...

    def update_stock_prices(self, updates: Sequence[StockUpdate]) -> None: ...

    def process_dividend_payment(self, payment: DividendPayment) -> None: ...

    def trigger_price_alert(self, alert_id: str) -> None: ...

    def add_market_event(self, event: MarketEvent) -> None: ...

    def add_notification(self, notification: Notification) -> None: ...


class InMemoryStateStore:
    """Authoritative state for headless runs and tests."""

    def __init__(self, state: GameState):
        self.state = state
        self.notifications: List[Notification] = []
        self.market_events: List[MarketEvent] = []

    def snapshot(self) -> GameState:
        return self.state

    def _replace(self, **update: Any) -> None:
        self.state = self.state.model_copy(update=update)

    def set_game_speed(self, speed: int) -> None:
        self._replace(game_speed=max(0, int(speed)))

    def update_time(self, date: GameDate) -> None:
        self._replace(current_date=date)

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> None:
        projects = list(self.state.projects)
        for i, project in enumerate(projects):
            if project.id == project_id:
                projects[i] = project.model_copy(update=updates)
                self._replace(projects=projects)
                return
        logger.debug("update_project: unknown project %s", project_id)

    def complete_project(self, project: Project) -> None:
        if not any(p.id == project.id for p in self.state.projects):
            logger.debug("complete_project: unknown project %s", project.id)
            return
        if any(p.id == project.id for p in self.state.completed_projects):
            return
        done = project.model_copy(update={"completed": True, "status": ProjectStatus.COMPLETED, "progress": 100.0})
        employees = [
            e.model_copy(update={"assigned_project_id": None}) if e.assigned_project_id == project.id else e
            for e in self.state.employees
        ]
        self._replace(
            projects=[p for p in self.state.projects if p.id != project.id],
            completed_projects=list(self.state.completed_projects) + [done],
            employees=employees,
        )

    def update_finances(self, delta: float) -> None:
        self._replace(money=self.state.money + float(delta))

    def update_morale(self, value: float) -> None:
        self._replace(morale=apply_morale_bounds(value, 0.0))

    def unlock_achievement(self, achievement: Achievement) -> None:
        if any(a.id == achievement.id for a in self.state.achievements):
            return
        self._replace(
            achievements=list(self.state.achievements) + [achievement],
            money=self.state.money + achievement.reward,
        )

    def update_stock_prices(self, updates: Sequence[StockUpdate]) -> None:
        by_id = {u.id: u for u in updates}
        stocks = []
        for stock in self.state.stocks:
            row = by_id.get(stock.id)
            if row is None:
                stocks.append(stock)
                continue
            fields: Dict[str, Any] = {"current_price": row.current_price, "trend": row.trend}
            if row.historical_prices is not None:
                fields["historical_prices"] = list(row.historical_prices)
            stocks.append(stock.model_copy(update=fields))
        self._replace(stocks=stocks)

    def process_dividend_payment(self, payment: DividendPayment) -> None:
        holdings = list(self.state.portfolio.holdings)
        for i, holding in enumerate(holdings):
            if holding.id == payment.holding_id:
                holdings[i] = holding.model_copy(update={"last_dividend_date": payment.date})
                portfolio = self.state.portfolio.model_copy(update={
                    "holdings": holdings,
                    "total_dividends_received": self.state.portfolio.total_dividends_received + payment.amount,
                })
                self._replace(portfolio=portfolio)
                return
        logger.debug("process_dividend_payment: unknown holding %s", payment.holding_id)

    def trigger_price_alert(self, alert_id: str) -> None:
        alerts = [
            a.model_copy(update={"triggered": True}) if a.id == alert_id else a
            for a in self.state.portfolio.price_alerts
        ]
        self._replace(portfolio=self.state.portfolio.model_copy(update={"price_alerts": alerts}))

    def add_market_event(self, event: MarketEvent) -> None:
        self.market_events.append(event)

    def add_notification(self, notification: Notification) -> None:
        self.notifications.append(notification)


def apply_tick_changes(store: StateStore, changes: TickChanges) -> None:
    if changes.time_update is not None:
        store.update_time(changes.time_update)
    for update in changes.project_updates:
        store.update_project(update.project_id, {"progress": update.progress})
    for project in changes.completed_projects:
        store.complete_project(project)
    if changes.financial_change:
        store.update_finances(changes.financial_change)
    if changes.morale is not None:
        store.update_morale(changes.morale)
    for achievement in changes.achievements:
        store.unlock_achievement(achievement)
    if changes.stock_updates:
        store.update_stock_prices(changes.stock_updates)
    for payment in changes.dividend_payments:
        store.process_dividend_payment(payment)
    for alert in changes.triggered_alerts:
        store.trigger_price_alert(alert.id)
    for event in changes.market_events:
        store.add_market_event(event)
    for notification in changes.notifications:
        store.add_notification(notification)
