from __future__ import annotations

import math
from random import Random

import pytest

from model import Employee, GameDate, GameSize, GameState, Project, ProjectPhase, ProjectStatus
from projects import (
    PHASE_SKILL_MULTIPLIERS,
    PHASE_WORKLOAD_MULTIPLIERS,
    SIZE_REVENUE_MULTIPLIERS,
    advance_projects,
    calculate_project_progress,
    calculate_project_revenue,
    calculate_quality_variance,
    calculate_skill_match,
    should_complete_project,
)


class FixedReception(Random):
    def uniform(self, a, b):
        return 1.0


def _staffed_state(progress=0.0, estimated_days=10.0, productivity=1.0, morale=100.0):
    project = Project(
        id="p1",
        name="Starlight",
        status=ProjectStatus.IN_PROGRESS,
        phase=ProjectPhase.PRODUCTION,
        progress=progress,
        estimated_days=estimated_days,
        required_skills=["programming"],
    )
    employee = Employee(
        id="e1",
        skills={"programming": 100},
        productivity=productivity,
        salary=3000,
        assigned_project_id="p1",
    )
    return GameState(
        current_date=GameDate(day=3, month=2, year=2024),
        morale=morale,
        employees=[employee],
        projects=[project],
    )


def test_skill_match_with_innovative_bonus():
    employee = Employee(id="e", skills={"programming": 80}, personality=["Innovative"])
    project = Project(id="p", required_skills=["programming"], phase=ProjectPhase.PRODUCTION)

    assert calculate_skill_match(employee, project) == pytest.approx(0.88)


def test_skill_match_defaults_missing_skill_and_phase():
    employee = Employee(id="e", skills={"programming": 100})
    project = Project(id="p", required_skills=["programming", "design"])

    assert calculate_skill_match(employee, project) == pytest.approx(0.75)


def test_skill_match_is_capped_before_phase_multiplier():
    employee = Employee(id="e", skills={"programming": 100}, personality=["Innovative"])
    project = Project(id="p", required_skills=["programming"], phase=ProjectPhase.BETA)

    assert calculate_skill_match(employee, project) == pytest.approx(1.5)


def test_project_progress_formula():
    state = _staffed_state()
    project = state.projects[0]

    got = calculate_project_progress(project, state.employees, state.morale, 1.0)

    assert got == pytest.approx(15.0)


def test_unstaffed_project_does_not_progress():
    project = Project(id="p", status=ProjectStatus.IN_PROGRESS)

    assert calculate_project_progress(project, [], 80.0, 1.0) == 0.0


def test_progress_is_monotonic_and_capped():
    state = _staffed_state(morale=40.0)
    rng = Random(3)
    last = 0.0

    for _ in range(50):
        updates, completed, _ = advance_projects(state, 0.5, rng, now=0.0)
        if not state.active_projects():
            break
        for row in updates:
            assert row.progress >= last
            assert row.progress <= 100.0
            last = row.progress
        project = state.projects[0].model_copy(update={"progress": last, "completed": bool(completed)})
        state = state.model_copy(update={"projects": [project]})

    assert last == 100.0


def test_completion_is_one_shot():
    state = _staffed_state(progress=99.0)

    updates, completed, _ = advance_projects(state, 1.0, Random(1), now=123.0)

    assert [u.progress for u in updates] == [100.0]
    assert len(completed) == 1
    done = completed[0]
    assert done.completed
    assert done.status == ProjectStatus.COMPLETED
    assert done.completed_date == GameDate(day=3, month=2, year=2024)
    assert done.completed_at == 123.0
    assert done.revenue is not None and done.revenue > 0

    again = state.model_copy(update={"projects": [done]})
    updates, completed, _ = advance_projects(again, 1.0, Random(1), now=124.0)

    assert updates == []
    assert completed == []
    assert not should_complete_project(done, 100.0)


def test_project_left_at_full_progress_completes_once():
    state = _staffed_state(progress=100.0)

    updates, completed, pending = advance_projects(state, 0.001, Random(1), now=5.0)

    assert [u.progress for u in updates] == [100.0]
    assert [p.id for p in completed] == ["p1"]
    assert completed[0].status == ProjectStatus.COMPLETED
    assert pending == {}


def test_small_increments_are_carried_until_they_are_visible():
    state = _staffed_state(estimated_days=100.0, productivity=0.0)
    start = {}

    updates, _, pending = advance_projects(state, 0.006, Random(1), now=0.0, pending=start)
    assert updates == []
    assert pending["p1"] == pytest.approx(0.006)
    assert start == {}

    updates, _, pending = advance_projects(state, 0.006, Random(1), now=0.0, pending=pending)
    assert [u.progress for u in updates] == [pytest.approx(0.012)]
    assert "p1" not in pending


def test_pending_progress_is_dropped_for_idle_or_missing_projects():
    state = _staffed_state(estimated_days=100.0, productivity=0.0)
    unstaffed = state.model_copy(update={"employees": [state.employees[0].model_copy(update={"assigned_project_id": None})]})

    _, _, pending = advance_projects(unstaffed, 0.006, Random(1), now=0.0, pending={"p1": 0.004, "gone": 0.009})

    assert pending == {}


def test_tables_cover_every_enum_member():
    assert set(PHASE_SKILL_MULTIPLIERS) == set(ProjectPhase)
    assert set(PHASE_WORKLOAD_MULTIPLIERS) == set(ProjectPhase)
    assert set(SIZE_REVENUE_MULTIPLIERS) == set(GameSize)


def test_revenue_formula_with_pinned_reception():
    project = Project(
        id="p",
        size=GameSize.A,
        genre="Puzzle",
        platform="PC",
        estimated_revenue=100_000,
        required_skills=["programming", "design"],
    )
    quality = calculate_quality_variance(project, 50.0)

    revenue = calculate_project_revenue(project, 50.0, FixedReception())

    assert quality == pytest.approx(0.55)
    assert revenue == math.floor(100_000 * 1.0 * 0.8 * quality * 1.0 * 1.0)


def test_revenue_uses_defaults_for_unknown_genre_and_platform():
    project = Project(id="p", size=GameSize.AAA, genre="Rhythm", platform="Arcade")

    revenue = calculate_project_revenue(project, 100.0, FixedReception())

    # 50k default * 2.5 size * (0.2 + 0.3 + 0.2 quality)
    assert 87_400 <= revenue <= 87_500
