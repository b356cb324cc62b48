#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Payroll, cost formulas and studio performance metrics.

The balance has no floor: payroll keeps debiting into debt.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from config import (
    BASE_EMPLOYEE_COST,
    BASE_PROJECT_COST,
    BASE_RESEARCH_COST,
    DAYS_PER_MONTH,
    EMPLOYEE_COST_MULTIPLIER,
    RESEARCH_COST_MULTIPLIER,
)
from model import Employee, GameState
from projects import calculate_workload_ratio


def calculate_daily_expenses(employees: Sequence[Employee], day_progress: float) -> float:
    """Salary cost for `day_progress` days, pro-rated from monthly salaries."""
    return sum(float(e.salary) / DAYS_PER_MONTH for e in employees) * float(day_progress)


def calculate_employee_cost(current_employee_count: int) -> int:
    return int(math.floor(BASE_EMPLOYEE_COST * math.pow(EMPLOYEE_COST_MULTIPLIER, int(current_employee_count))))


def calculate_project_cost(size: int, platform_count: int = 1) -> int:
    return int(math.floor(BASE_PROJECT_COST * int(size) * int(platform_count)))


def calculate_research_cost(current_research_count: int) -> int:
    return int(math.floor(BASE_RESEARCH_COST * math.pow(RESEARCH_COST_MULTIPLIER, int(current_research_count))))


@dataclass
class PerformanceMetrics:
    total_revenue: float = 0.0
    total_projects: int = 0
    average_project_revenue: float = 0.0
    employee_efficiency: float = 0.0
    portfolio_value: float = 0.0
    portfolio_gain_loss: float = 0.0
    monthly_burn_rate: float = 0.0
    runway_months: float = math.inf


def calculate_performance_metrics(state: GameState) -> PerformanceMetrics:
    metrics = PerformanceMetrics()

    completed = state.completed_projects
    metrics.total_projects = len(completed)
    metrics.total_revenue = float(sum(p.revenue or 0 for p in completed))
    if metrics.total_projects:
        metrics.average_project_revenue = metrics.total_revenue / metrics.total_projects

    employees = state.employees
    if employees:
        avg_productivity = sum(float(e.productivity) for e in employees) / len(employees)
        workload = calculate_workload_ratio(state.active_projects(), employees)
        metrics.employee_efficiency = avg_productivity * max(0.5, 1.0 - max(0.0, workload - 1.0))

    if state.portfolio.holdings:
        value = 0.0
        for holding in state.portfolio.holdings:
            stock = state.stock_by_id(holding.stock_id)
            if stock is not None:
                value += stock.current_price * holding.quantity
        metrics.portfolio_value = value
        metrics.portfolio_gain_loss = value - state.portfolio.total_invested

    burn = float(sum(e.salary for e in employees))
    metrics.monthly_burn_rate = burn
    if burn > 0:
        metrics.runway_months = state.money / burn
    return metrics
