from __future__ import annotations

from random import Random

import pytest

from model import (
    AlertDirection,
    Employee,
    GameDate,
    GameState,
    Holding,
    NotificationType,
    Portfolio,
    PriceAlert,
    Project,
    ProjectPhase,
    ProjectStatus,
    Stock,
    StockSector,
)
import tick_processor
from tick_processor import TickCarry, process_game_tick


def _tick(state, day_progress=1.0, seed=1, now=0.0, carry=None):
    return process_game_tick(state, day_progress, rng=Random(seed), now=now, carry=carry)


def _finishing_state(**kw):
    project = Project(
        id="p1",
        name="Starlight",
        status=ProjectStatus.IN_PROGRESS,
        phase=ProjectPhase.PRODUCTION,
        progress=99.9,
        estimated_days=10,
    )
    employee = Employee(id="e1", salary=3000, skills={"programming": 90}, assigned_project_id="p1")
    base = dict(morale=80.0, employees=[employee], projects=[project])
    base.update(kw)
    return GameState(**base)


def test_idle_tick_with_no_time_is_empty():
    assert _tick(GameState(), day_progress=0.0).is_empty()


def test_date_advances_across_year_boundary():
    changes = _tick(GameState(current_date=GameDate(day=30, month=12, year=2024)))

    assert changes.time_update == GameDate(day=1, month=1, year=2025)


def test_sub_day_progress_accumulates_into_date_steps():
    state = GameState(current_date=GameDate(day=5, month=3, year=2024))
    first = _tick(state, 0.4, carry=TickCarry())
    second = _tick(state, 0.4, carry=first.carry)
    third = _tick(state, 0.4, carry=second.carry)

    assert first.time_update is None
    assert second.time_update is None
    assert third.time_update == GameDate(day=6, month=3, year=2024)
    assert third.carry.day_fraction == pytest.approx(0.2)


def test_failed_tick_leaves_carry_untouched(monkeypatch):
    state = GameState(current_date=GameDate(day=5, month=3, year=2024))
    carry = TickCarry(day_fraction=0.9, project_progress={"p1": 0.009})

    def boom(*args, **kwargs):
        raise RuntimeError("morale step failed")

    with monkeypatch.context() as m:
        m.setattr(tick_processor, "calculate_morale_changes", boom)
        with pytest.raises(RuntimeError):
            _tick(state, 0.2, carry=carry)

    assert carry.day_fraction == 0.9
    assert carry.project_progress == {"p1": 0.009}

    changes = _tick(state, 0.2, carry=carry)

    assert changes.time_update == GameDate(day=6, month=3, year=2024)
    assert changes.carry.day_fraction == pytest.approx(0.1)


def test_payroll_is_debited():
    state = GameState(money=50_000, employees=[Employee(id="a", salary=3000), Employee(id="b", salary=4500)])

    changes = _tick(state)

    assert changes.financial_change == pytest.approx(-250.0)


def test_completion_credits_revenue_and_unlocks_on_projected_state():
    changes = _tick(_finishing_state(), now=77.0)

    assert len(changes.completed_projects) == 1
    done = changes.completed_projects[0]
    assert done.revenue > 0
    assert changes.financial_change == pytest.approx(done.revenue - 100.0)
    assert [u.progress for u in changes.project_updates] == [100.0]
    assert "first_game" in {a.id for a in changes.achievements}
    messages = [n.message for n in changes.notifications if n.type == NotificationType.SUCCESS]
    assert any('"Starlight" completed' in m for m in messages)


def test_achievements_see_post_payroll_money():
    staff = [Employee(id="a", salary=3000)]

    reached = _tick(GameState(money=100_100, employees=staff))
    missed = _tick(GameState(money=100_050, employees=staff))

    assert "profitable" in {a.id for a in reached.achievements}
    assert "profitable" not in {a.id for a in missed.achievements}


def test_morale_emits_new_clamped_value():
    lowered = _tick(GameState(money=1_000, morale=50.0))
    capped = _tick(GameState(money=50_000, morale=100.0))

    assert lowered.morale == pytest.approx(47.0)
    assert capped.morale is None


def test_dividends_are_added_to_financial_change():
    state = GameState(
        current_date=GameDate(day=1, month=4, year=2024),
        stocks=[Stock(id="s1", symbol="S1", sector=StockSector.MEDIA, current_price=100.0, dividend_yield=0.04)],
        portfolio=Portfolio(holdings=[Holding(id="h1", stock_id="s1", quantity=10)]),
    )

    changes = _tick(state)

    assert [p.holding_id for p in changes.dividend_payments] == ["h1"]
    assert changes.financial_change == pytest.approx(10.0)


def test_triggered_alert_raises_notification():
    state = GameState(
        stocks=[Stock(id="s1", symbol="S1", sector=StockSector.MEDIA, current_price=55.0)],
        portfolio=Portfolio(price_alerts=[
            PriceAlert(id="a1", stock_id="s1", target_price=50.0, direction=AlertDirection.ABOVE),
        ]),
    )

    changes = _tick(state, now=3.0)

    assert [a.id for a in changes.triggered_alerts] == ["a1"]
    assert "Price alert: S1 reached $55.00" in [n.message for n in changes.notifications]


def test_same_seed_same_envelope():
    state = _finishing_state(
        stocks=[Stock(id="s1", symbol="S1", sector=StockSector.TECH, current_price=20.0)],
    )

    a = _tick(state, seed=9, now=1.0)
    b = _tick(state, seed=9, now=1.0)

    assert a.model_dump() == b.model_dump()
