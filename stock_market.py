#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Stock market updater.

Per tick, gated by `day_progress * 24` (about hourly at 1x):
random walk with trend carry-over -> momentum -> sector influence -> history.
Dividends, price alerts and market events run every tick and read the
snapshot prices.
"""

from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from config import (
    DAYS_PER_MONTH,
    DEFAULT_REPUTATION,
    DEFAULT_VOLATILITY,
    DIVIDEND_INTERVAL_DAYS,
    GAMING_SECTOR_WINDOW_MONTHS,
    MARKET_EVENTS_PER_DAY,
    MAX_TREND,
    MIN_DIVIDEND_PAYMENT,
    MIN_STOCK_PRICE,
    MIN_TREND,
    PRICE_HISTORY_LIMIT,
    STOCK_UPDATES_PER_DAY,
)
from game_time import calculate_new_game_date, days_between
from model import AlertDirection, GameDate, GameSize, GameState, Holding, PriceAlert, Stock, StockSector


# =============================
# Envelope rows
# =============================
class StockUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    current_price: float
    trend: float
    # None: history unchanged
    historical_prices: Optional[List[float]] = None


class DividendPayment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    holding_id: str
    stock_id: str
    stock_symbol: str
    amount: float
    date: GameDate
    shares_owned: int


class TriggeredAlert(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    stock_id: str
    target_price: float
    direction: AlertDirection
    triggered: bool = True
    triggered_at: float
    actual_price: float


class MarketEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    type: str
    message: str
    affected_sectors: List[StockSector] = Field(default_factory=list)
    impact: float = 0.0
    extra_volatility: float = 0.0
    duration: int = 1
    start_date: GameDate
    end_date: GameDate


@dataclass(frozen=True)
class MarketEventDef:
    type: str
    message: str
    affected_sectors: Tuple[StockSector, ...]
    impact: float
    duration: int
    extra_volatility: float = 0.0


MARKET_EVENTS: Tuple[MarketEventDef, ...] = (
    MarketEventDef("tech_boom", "Tech sector surge! Technology stocks are rising.",
                   (StockSector.TECH,), 0.05, 3),
    MarketEventDef("gaming_crash", "Gaming market correction. Gaming stocks decline.",
                   (StockSector.GAMING,), -0.03, 2),
    MarketEventDef("crypto_volatility", "Cryptocurrency market experiencing high volatility.",
                   (StockSector.CRYPTO,), 0.0, 1, extra_volatility=0.02),
    MarketEventDef("hardware_shortage", "Global chip shortage impacts hardware manufacturers.",
                   (StockSector.HARDWARE,), -0.06, 7),
    MarketEventDef("gaming_growth", "Reports show strong gaming industry growth this quarter.",
                   (StockSector.GAMING,), 0.05, 3),
    MarketEventDef("tech_rally", "Major breakthrough in AI technology drives tech stocks higher.",
                   (StockSector.TECH,), 0.08, 2),
    MarketEventDef("market_volatility", "Global economic uncertainty causes market-wide volatility.",
                   (StockSector.GAMING, StockSector.TECH, StockSector.HARDWARE, StockSector.MEDIA), -0.03, 5),
    MarketEventDef("crypto_surge", "Cryptocurrency market experiences major rally.",
                   (StockSector.CRYPTO,), 0.12, 1),
)


def _clamp_trend(trend: float) -> float:
    return max(MIN_TREND, min(MAX_TREND, trend))


# =============================
# Price walk
# =============================
def calculate_stock_price_change(stock: Stock, rng: Random) -> float:
    volatility = stock.volatility or DEFAULT_VOLATILITY
    random_factor = rng.uniform(-1.0, 1.0)
    trend_factor = (stock.trend - 1.0) * 0.5
    return max(MIN_STOCK_PRICE, stock.current_price * (1.0 + (random_factor + trend_factor) * volatility))


def calculate_new_trend(stock: Stock, price_change_percent: float) -> float:
    momentum = 1.001 if price_change_percent > 0 else 0.999
    return _clamp_trend(stock.trend * momentum)


def calculate_gaming_sector_influence(state: GameState) -> float:
    window = GAMING_SECTOR_WINDOW_MONTHS * DAYS_PER_MONTH
    recent = [
        p for p in state.completed_projects
        if p.completed_date is not None and 0 <= days_between(p.completed_date, state.current_date) <= window
    ]
    if not recent:
        return 0.0
    avg_revenue = sum(p.revenue or 0 for p in recent) / len(recent)
    return 0.002 if avg_revenue > 100_000 else -0.001


def _unlocked_platforms(state: GameState) -> int:
    return sum(1 for p in state.platforms if p.unlocked)


def calculate_tech_sector_influence(state: GameState) -> float:
    return (len(state.employees) / 10.0 + _unlocked_platforms(state)) * 0.0001


def calculate_hardware_sector_influence(state: GameState) -> float:
    aaa = sum(1 for p in state.completed_projects if p.size == GameSize.AAA)
    return _unlocked_platforms(state) * 0.0002 + aaa * 0.0005


def calculate_media_sector_influence(state: GameState) -> float:
    reputation = state.reputation if state.reputation is not None else DEFAULT_REPUTATION
    return (reputation - 50.0) / 100.0 * 0.001


def calculate_crypto_sector_influence(state: GameState, rng: Random) -> float:
    tech = [s for s in state.stocks if s.sector == StockSector.TECH]
    if not tech:
        return 0.0
    avg_trend = sum(s.trend for s in tech) / len(tech)
    return (avg_trend - 1.0) * 0.002 + rng.uniform(-0.005, 0.005)


def calculate_sector_influence(stock: Stock, state: GameState, rng: Random) -> float:
    sector = stock.sector
    if sector == StockSector.GAMING:
        return calculate_gaming_sector_influence(state)
    if sector == StockSector.TECH:
        return calculate_tech_sector_influence(state)
    if sector == StockSector.HARDWARE:
        return calculate_hardware_sector_influence(state)
    if sector == StockSector.MEDIA:
        return calculate_media_sector_influence(state)
    if sector == StockSector.CRYPTO:
        return calculate_crypto_sector_influence(state, rng)
    raise ValueError(f"unknown sector: {sector!r}")


def update_historical_prices(history: Sequence[float], new_price: float, max_history: int = PRICE_HISTORY_LIMIT) -> List[float]:
    """Append `new_price`, keeping only the newest `max_history` samples."""
    out = list(history) + [float(new_price)]
    if len(out) > max_history:
        out = out[len(out) - max_history:]
    return out


def process_stock_price_fluctuations(state: GameState, day_progress: float, rng: Random) -> Optional[List[StockUpdate]]:
    """Walk every stock once, or return None when the hourly gate does not fire."""
    if rng.random() > day_progress * STOCK_UPDATES_PER_DAY:
        return None

    updates: List[StockUpdate] = []
    for stock in state.stocks:
        walked = calculate_stock_price_change(stock, rng)
        change = (walked - stock.current_price) / stock.current_price
        trend = calculate_new_trend(stock, change)
        influence = calculate_sector_influence(stock, state, rng)
        final_price = round(max(MIN_STOCK_PRICE, walked * (1.0 + influence)), 2)
        updates.append(StockUpdate(
            id=stock.id,
            current_price=final_price,
            trend=round(trend, 4),
            historical_prices=update_historical_prices(stock.historical_prices, final_price),
        ))
    return updates


# =============================
# Dividends
# =============================
def calculate_dividend_payment(stock: Stock, holding: Holding) -> float:
    """Quarterly payment: a quarter of the annual yield on the holding's value."""
    if not stock.dividend_yield or stock.dividend_yield <= 0:
        return 0.0
    return stock.current_price * stock.dividend_yield / 4.0 * holding.quantity


def should_pay_dividends(last_dividend_date: Optional[GameDate], current_date: GameDate) -> bool:
    if last_dividend_date is None:
        return True
    return days_between(last_dividend_date, current_date) >= DIVIDEND_INTERVAL_DAYS


def process_dividend_payments(state: GameState) -> List[DividendPayment]:
    payments: List[DividendPayment] = []
    for holding in state.portfolio.holdings:
        stock = state.stock_by_id(holding.stock_id)
        if stock is None or not stock.dividend_yield:
            continue
        if not should_pay_dividends(holding.last_dividend_date, state.current_date):
            continue
        amount = calculate_dividend_payment(stock, holding)
        if amount <= MIN_DIVIDEND_PAYMENT:
            continue
        payments.append(DividendPayment(
            holding_id=holding.id,
            stock_id=stock.id,
            stock_symbol=stock.symbol,
            amount=amount,
            date=state.current_date,
            shares_owned=holding.quantity,
        ))
    return payments


# =============================
# Price alerts
# =============================
def _alert_hit(alert: PriceAlert, price: float) -> bool:
    if alert.direction == AlertDirection.ABOVE:
        return price >= alert.target_price
    return price <= alert.target_price


def check_stock_price_alerts(stock: Stock, alerts: Sequence[PriceAlert], *, now: float) -> List[TriggeredAlert]:
    out: List[TriggeredAlert] = []
    for alert in alerts:
        if alert.stock_id != stock.id or alert.triggered:
            continue
        if _alert_hit(alert, stock.current_price):
            out.append(TriggeredAlert(
                id=alert.id,
                stock_id=alert.stock_id,
                target_price=alert.target_price,
                direction=alert.direction,
                triggered_at=float(now),
                actual_price=stock.current_price,
            ))
    return out


def process_price_alerts(state: GameState, *, now: float) -> List[TriggeredAlert]:
    alerts = state.portfolio.price_alerts
    if not alerts:
        return []
    out: List[TriggeredAlert] = []
    for stock in state.stocks:
        out.extend(check_stock_price_alerts(stock, alerts, now=now))
    return out


# =============================
# Market events
# =============================
def generate_market_events(state: GameState, day_progress: float, rng: Random, *, now: float) -> List[MarketEvent]:
    if rng.random() >= day_progress * MARKET_EVENTS_PER_DAY:
        return []
    chosen = MARKET_EVENTS[rng.randrange(len(MARKET_EVENTS))]
    start = state.current_date
    return [MarketEvent(
        id=f"{chosen.type}_{int(float(now) * 1000)}",
        type=chosen.type,
        message=chosen.message,
        affected_sectors=list(chosen.affected_sectors),
        impact=chosen.impact,
        extra_volatility=chosen.extra_volatility,
        duration=chosen.duration,
        start_date=start,
        end_date=calculate_new_game_date(start, chosen.duration) or start,
    )]


def apply_market_events(
    events: Sequence[MarketEvent],
    stocks: Sequence[Stock],
    stock_updates: Optional[Sequence[StockUpdate]] = None,
) -> List[StockUpdate]:
    """Fold one-shot event impacts into this tick's stock updates.

    Rows already walked this tick are adjusted in place of the walk result;
    other affected stocks get a fresh row with their history unchanged.
    """
    rows: Dict[str, StockUpdate] = {u.id: u for u in (stock_updates or [])}
    order: List[str] = [u.id for u in (stock_updates or [])]

    for event in events:
        if not event.impact:
            continue
        sectors = set(event.affected_sectors)
        for stock in stocks:
            if stock.sector not in sectors:
                continue
            row = rows.get(stock.id)
            if row is None:
                row = StockUpdate(id=stock.id, current_price=stock.current_price, trend=stock.trend)
                order.append(stock.id)
            price = round(max(MIN_STOCK_PRICE, row.current_price * (1.0 + event.impact)), 2)
            history = row.historical_prices
            if history:
                history = history[:-1] + [price]
            rows[stock.id] = row.model_copy(update={
                "current_price": price,
                "trend": round(_clamp_trend(row.trend + event.impact * 0.5), 4),
                "historical_prices": history,
            })

    return [rows[i] for i in order]
