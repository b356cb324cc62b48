from __future__ import annotations

import math

import pytest

from finance import (
    calculate_daily_expenses,
    calculate_employee_cost,
    calculate_performance_metrics,
    calculate_project_cost,
    calculate_research_cost,
)
from model import Employee, GameState, Holding, Portfolio, Project, ProjectStatus, Stock, StockSector


def test_daily_payroll_for_two_employees():
    employees = [Employee(id="a", salary=3000), Employee(id="b", salary=4500)]

    assert calculate_daily_expenses(employees, 1.0) == pytest.approx(250.0)
    assert calculate_daily_expenses(employees, 0.5) == pytest.approx(125.0)


def test_payroll_of_empty_studio_is_zero():
    assert calculate_daily_expenses([], 1.0) == 0.0


def test_cost_formulas():
    assert calculate_employee_cost(0) == 50_000
    assert calculate_employee_cost(1) == 60_000
    assert calculate_project_cost(3, 2) == 60_000
    assert calculate_project_cost(1) == 10_000
    assert calculate_research_cost(0) == 25_000


def test_performance_metrics():
    state = GameState(
        money=15_000,
        employees=[
            Employee(id="a", salary=3000, productivity=1.0),
            Employee(id="b", salary=4500, productivity=1.0),
        ],
        projects=[Project(id="p", status=ProjectStatus.IN_PROGRESS)],
        completed_projects=[
            Project(id="c1", completed=True, revenue=100_000),
            Project(id="c2", completed=True, revenue=50_000),
        ],
        stocks=[Stock(id="s", symbol="S", sector=StockSector.MEDIA, current_price=10.0)],
        portfolio=Portfolio(holdings=[Holding(id="h", stock_id="s", quantity=5)], total_invested=40.0),
    )

    metrics = calculate_performance_metrics(state)

    assert metrics.total_projects == 2
    assert metrics.total_revenue == 150_000
    assert metrics.average_project_revenue == 75_000
    assert metrics.employee_efficiency == pytest.approx(1.0)
    assert metrics.portfolio_value == pytest.approx(50.0)
    assert metrics.portfolio_gain_loss == pytest.approx(10.0)
    assert metrics.monthly_burn_rate == 7_500
    assert metrics.runway_months == pytest.approx(2.0)


def test_overloaded_team_efficiency_has_floor():
    state = GameState(
        employees=[Employee(id="a", productivity=2.0)],
        projects=[Project(id=f"p{i}", status=ProjectStatus.IN_PROGRESS) for i in range(4)],
    )

    metrics = calculate_performance_metrics(state)

    assert metrics.employee_efficiency == pytest.approx(1.0)
    assert math.isinf(metrics.runway_months)
