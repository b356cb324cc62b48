#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Project progress, completion and revenue rules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from random import Random
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from config import (
    DEFAULT_ESTIMATED_REVENUE,
    DEFAULT_REQUIRED_SKILLS,
    DEFAULT_SKILL_LEVEL,
    MIN_MORALE_PRODUCTIVITY,
    PROGRESS_EMIT_THRESHOLD,
)
from model import Employee, GameSize, GameState, Project, ProjectPhase, ProjectStatus


# skill match multiplier per phase
PHASE_SKILL_MULTIPLIERS: Dict[ProjectPhase, float] = {
    ProjectPhase.CONCEPT: 0.5,
    ProjectPhase.PRE_PRODUCTION: 0.7,
    ProjectPhase.PRODUCTION: 1.0,
    ProjectPhase.ALPHA: 1.2,
    ProjectPhase.BETA: 1.5,
    ProjectPhase.RELEASE: 1.0,
}

# workload weight per phase (morale stress)
PHASE_WORKLOAD_MULTIPLIERS: Dict[ProjectPhase, float] = {
    ProjectPhase.CONCEPT: 0.2,
    ProjectPhase.PRE_PRODUCTION: 0.5,
    ProjectPhase.PRODUCTION: 1.0,
    ProjectPhase.ALPHA: 1.5,
    ProjectPhase.BETA: 2.0,
    ProjectPhase.RELEASE: 0.5,
}

SIZE_REVENUE_MULTIPLIERS: Dict[GameSize, float] = {
    GameSize.A: 1.0,
    GameSize.AA: 1.5,
    GameSize.AAA: 2.5,
}

GENRE_REVENUE_MULTIPLIERS: Dict[str, float] = {
    "Action": 1.3,
    "RPG": 1.2,
    "Strategy": 1.1,
    "Simulation": 0.9,
    "Puzzle": 0.8,
}

PLATFORM_REVENUE_MULTIPLIERS: Dict[str, float] = {
    "PC": 1.0,
    "Console": 1.2,
    "Mobile": 0.9,
    "Web": 0.7,
    "VR": 1.5,
}

PERSONALITY_SKILL_BONUS = (("Innovative", 1.1), ("Perfectionist", 1.05))


@dataclass
class ProjectUpdate:
    project_id: str
    progress: float


def _phase_multiplier(table: Dict[ProjectPhase, float], phase: Optional[ProjectPhase]) -> float:
    if phase is None:
        return 1.0
    return table[phase]


def personality_bonus(employee: Employee) -> float:
    for tag, bonus in PERSONALITY_SKILL_BONUS:
        if tag in employee.personality:
            return bonus
    return 1.0


def calculate_skill_match(employee: Employee, project: Project) -> float:
    """How well `employee` fits `project` at its current phase, in [0, 1] before the phase multiplier."""
    relevant = list(project.required_skills or DEFAULT_REQUIRED_SKILLS)
    bonus = personality_bonus(employee)
    skill_sum = sum(float(employee.skills.get(skill, DEFAULT_SKILL_LEVEL)) * bonus for skill in relevant)
    phase_multiplier = _phase_multiplier(PHASE_SKILL_MULTIPLIERS, project.phase)
    return min(1.0, skill_sum / (len(relevant) * 100.0)) * phase_multiplier


def calculate_team_productivity(project: Project, assigned: Sequence[Employee], team_morale: float) -> float:
    morale_factor = max(MIN_MORALE_PRODUCTIVITY, float(team_morale) / 100.0)
    return sum(float(e.productivity) * calculate_skill_match(e, project) * morale_factor for e in assigned)


def calculate_project_progress(project: Project, assigned: Sequence[Employee], team_morale: float, day_progress: float) -> float:
    """Progress increment (percentage points) for `day_progress` days of work."""
    if not assigned:
        return 0.0
    estimated_days = max(1.0, float(project.estimated_days or 0.0))
    total_productivity = calculate_team_productivity(project, assigned, team_morale)
    return (100.0 / estimated_days) * (1.0 + total_productivity * 0.5) * float(day_progress)


def should_complete_project(project: Project, new_progress: float) -> bool:
    return new_progress >= 100.0 and not project.completed


def calculate_quality_variance(project: Project, team_morale: float) -> float:
    complexity = len(project.required_skills) * 0.1 if project.required_skills else 0.2
    return 0.2 + (float(team_morale) / 100.0) * 0.3 + complexity


def calculate_project_revenue(project: Project, team_morale: float, rng: Random) -> int:
    base = float(project.estimated_revenue or DEFAULT_ESTIMATED_REVENUE)
    size_multiplier = SIZE_REVENUE_MULTIPLIERS[project.size]
    genre_multiplier = GENRE_REVENUE_MULTIPLIERS.get(project.genre, 1.0)
    platform_multiplier = PLATFORM_REVENUE_MULTIPLIERS.get(project.platform, 1.0)
    market_reception = rng.uniform(0.8, 1.2)
    return int(math.floor(
        base
        * size_multiplier
        * genre_multiplier
        * calculate_quality_variance(project, team_morale)
        * market_reception
        * platform_multiplier
    ))


def calculate_workload_ratio(active_projects: Sequence[Project], employees: Sequence[Employee]) -> float:
    return len(active_projects) / max(1, len(employees))


def calculate_phase_workload_impact(active_projects: Sequence[Project]) -> float:
    return sum(_phase_multiplier(PHASE_WORKLOAD_MULTIPLIERS, p.phase) for p in active_projects)


def advance_projects(
    state: GameState,
    day_progress: float,
    rng: Random,
    *,
    now: float,
    pending: Optional[Mapping[str, float]] = None,
) -> Tuple[List[ProjectUpdate], List[Project], Dict[str, float]]:
    """Advance every staffed in-progress project.

    `pending` holds progress below the emit threshold from earlier ticks, keyed
    by project id. It is only read. Returns (updates, completed, next_pending);
    next_pending keeps entries for staffed active projects only.
    """
    carry = pending if pending is not None else {}
    next_pending: Dict[str, float] = {}
    updates: List[ProjectUpdate] = []
    completed: List[Project] = []

    for project in state.active_projects():
        assigned = state.employees_on(project.id)
        if not assigned:
            continue

        increment = calculate_project_progress(project, assigned, state.morale, day_progress)
        new_progress = min(100.0, project.progress + carry.get(project.id, 0.0) + increment)
        crossing = should_complete_project(project, new_progress)
        if new_progress - project.progress <= PROGRESS_EMIT_THRESHOLD and not crossing:
            next_pending[project.id] = new_progress - project.progress
            continue

        updates.append(ProjectUpdate(project_id=project.id, progress=new_progress))
        if crossing:
            revenue = calculate_project_revenue(project, state.morale, rng)
            completed.append(project.model_copy(update={
                "progress": 100.0,
                "completed": True,
                "revenue": revenue,
                "status": ProjectStatus.COMPLETED,
                "completed_date": state.current_date,
                "completed_at": float(now),
            }))

    return updates, completed, next_pending
