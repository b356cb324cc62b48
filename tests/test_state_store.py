from __future__ import annotations

from random import Random

import pytest

from achievements import ACHIEVEMENTS
from model import (
    Achievement,
    Employee,
    GameDate,
    GameState,
    Holding,
    Portfolio,
    Project,
    ProjectPhase,
    ProjectStatus,
)
from state_store import InMemoryStateStore, apply_tick_changes
from stock_market import DividendPayment
from tick_processor import TickCarry, process_game_tick


def _studio(**kw):
    base = dict(
        money=20_000,
        employees=[
            Employee(id="e1", salary=3000, skills={"programming": 90}, assigned_project_id="p1"),
            Employee(id="e2", salary=3000),
        ],
        projects=[Project(id="p1", name="Starlight", status=ProjectStatus.IN_PROGRESS,
                          phase=ProjectPhase.PRODUCTION, progress=99.5, estimated_days=10)],
    )
    base.update(kw)
    return GameState(**base)


def _run_tick(store, carry, seed, now=0.0):
    changes = process_game_tick(store.snapshot(), 1.0, rng=Random(seed), now=now, carry=carry)
    apply_tick_changes(store, changes)
    return changes


def test_complete_project_moves_project_and_unassigns_staff():
    store = InMemoryStateStore(_studio())
    project = store.snapshot().projects[0]

    store.complete_project(project.model_copy(update={"revenue": 1234}))
    store.complete_project(project)

    state = store.snapshot()
    assert state.projects == []
    assert [p.id for p in state.completed_projects] == ["p1"]
    assert state.completed_projects[0].revenue == 1234
    assert state.completed_projects[0].status == ProjectStatus.COMPLETED
    assert all(e.assigned_project_id is None for e in state.employees)
    assert state.money == 20_000


def test_unknown_ids_are_ignored():
    store = InMemoryStateStore(_studio())
    before = store.snapshot()

    store.update_project("nope", {"progress": 50.0})
    store.complete_project(Project(id="nope"))
    store.process_dividend_payment(DividendPayment(
        holding_id="nope", stock_id="s", stock_symbol="S", amount=5.0, date=GameDate(), shares_owned=1,
    ))

    assert store.snapshot() == before


def test_unlock_credits_reward_once():
    store = InMemoryStateStore(GameState(money=0))
    definition = ACHIEVEMENTS["first_game"]
    achievement = Achievement(id="first_game", title=definition.title, description=definition.description,
                              reward=definition.reward, category=definition.category)

    store.unlock_achievement(achievement)
    store.unlock_achievement(achievement)

    assert store.snapshot().money == 5_000
    assert len(store.snapshot().achievements) == 1


def test_dividend_payment_is_recorded_without_crediting_cash():
    state = GameState(money=100, portfolio=Portfolio(holdings=[Holding(id="h1", stock_id="s1", quantity=3)]))
    store = InMemoryStateStore(state)
    when = GameDate(day=2, month=2, year=2024)

    store.process_dividend_payment(DividendPayment(
        holding_id="h1", stock_id="s1", stock_symbol="S1", amount=7.5, date=when, shares_owned=3,
    ))

    snap = store.snapshot()
    assert snap.money == 100
    assert snap.portfolio.total_dividends_received == pytest.approx(7.5)
    assert snap.portfolio.holdings[0].last_dividend_date == when


def test_update_morale_is_clamped():
    store = InMemoryStateStore(GameState())

    store.update_morale(140.0)

    assert store.snapshot().morale == 100.0


def test_completion_is_applied_exactly_once_across_ticks():
    store = InMemoryStateStore(_studio())
    carry = TickCarry()

    first = _run_tick(store, carry, seed=1)
    money_after_first = store.snapshot().money
    second = _run_tick(store, carry, seed=2)

    state = store.snapshot()
    assert len(first.completed_projects) == 1
    assert second.completed_projects == []
    assert [p.id for p in state.completed_projects] == ["p1"]
    assert money_after_first == pytest.approx(20_000 + first.financial_change + 5_000)
    assert state.money == pytest.approx(money_after_first + second.financial_change)


def test_unlocked_set_only_grows():
    store = InMemoryStateStore(GameState(money=150_000))
    carry = TickCarry()

    _run_tick(store, carry, seed=1)
    assert "profitable" in {a.id for a in store.snapshot().achievements}

    store.update_finances(-149_000)
    second = _run_tick(store, carry, seed=2)

    ids = [a.id for a in store.snapshot().achievements]
    assert "profitable" in ids
    assert ids.count("profitable") == 1
    assert "profitable" not in {a.id for a in second.achievements}


def test_notifications_and_events_are_collected():
    store = InMemoryStateStore(_studio())

    _run_tick(store, TickCarry(), seed=1)

    assert any("Starlight" in n.message for n in store.notifications)
