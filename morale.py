#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Team morale dynamics.

Four independent per-day deltas, each scaled by the tick's day progress:
workload stress, financial stress, completion boost and personality harmony.
Harmony uses the pairwise synergy/conflict table.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Sequence, Tuple

from config import (
    COMPLETION_BOOST_WINDOW_SECONDS,
    HARMONY_CONFLICT,
    HARMONY_SYNERGY,
    MAX_MORALE,
    MIN_MORALE,
)
from model import Employee, GameSize, GameState, Project
from projects import calculate_phase_workload_impact, calculate_workload_ratio


# personality -> (synergies, conflicts)
PERSONALITY_RELATIONS: Dict[str, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    "Creative": (frozenset({"Innovative", "Perfectionist"}), frozenset({"Methodical"})),
    "Innovative": (frozenset({"Creative", "Ambitious"}), frozenset({"Traditional"})),
    "Methodical": (frozenset({"Perfectionist", "Traditional"}), frozenset({"Creative"})),
    "Perfectionist": (frozenset({"Methodical", "Creative"}), frozenset({"Impatient"})),
    "Ambitious": (frozenset({"Innovative"}), frozenset({"Relaxed"})),
    "Traditional": (frozenset({"Methodical"}), frozenset({"Innovative"})),
    "Social": (frozenset({"Friendly"}), frozenset({"Introverted"})),
    "Analytical": (frozenset({"Methodical", "Perfectionist"}), frozenset({"Impulsive"})),
}

# (threshold, impact per day); first match in ascending order wins
FINANCIAL_STRESS_LEVELS: Tuple[Tuple[float, float], ...] = (
    (5_000.0, -5.0),
    (25_000.0, -2.0),
    (100_000.0, 1.0),
)

COMPLETION_SIZE_BONUS: Dict[GameSize, float] = {
    GameSize.AAA: 1.5,
    GameSize.AA: 1.0,
    GameSize.A: 0.5,
}


def apply_morale_bounds(current: float, change: float) -> float:
    return max(MIN_MORALE, min(MAX_MORALE, float(current) + float(change)))


def calculate_team_personality_harmony(personalities: Sequence[str]) -> float:
    """Average pair score in [-0.3, 0.5]; 0 for teams of one or less."""
    if len(personalities) <= 1:
        return 0.0

    total = 0.0
    interactions = 0
    for i in range(len(personalities)):
        for j in range(i + 1, len(personalities)):
            relation = PERSONALITY_RELATIONS.get(personalities[i])
            if relation is not None:
                synergies, conflicts = relation
                if personalities[j] in synergies:
                    total += HARMONY_SYNERGY
                elif personalities[j] in conflicts:
                    total += HARMONY_CONFLICT
            interactions += 1
    return total / interactions


def team_personalities(employees: Sequence[Employee]) -> List[str]:
    # one primary tag per employee
    return [e.personality[0] for e in employees if e.personality]


def calculate_workload_stress(active_projects: Sequence[Project], employees: Sequence[Employee], day_progress: float) -> float:
    if calculate_phase_workload_impact(active_projects) > 3.0:
        return -10.0 * day_progress
    ratio = calculate_workload_ratio(active_projects, employees)
    if ratio > 2.5:
        return -8.0 * day_progress
    if ratio > 1.5:
        return -3.0 * day_progress
    if ratio < 0.5:
        return 2.0 * day_progress
    return 0.0


def calculate_financial_stress(money: float, day_progress: float) -> float:
    for threshold, impact in FINANCIAL_STRESS_LEVELS:
        if money < threshold:
            return impact * day_progress
    return 0.0


def calculate_completion_morale_boost(completed_projects: Sequence[Project], day_progress: float, *, now: float) -> float:
    cutoff = float(now) - COMPLETION_BOOST_WINDOW_SECONDS
    bonus = 0.0
    for project in completed_projects:
        if project.completed_at is None or project.completed_at <= cutoff:
            continue
        quality = 1.2 if project.progress >= 95 else 1.0
        bonus += 0.5 * COMPLETION_SIZE_BONUS[project.size] * quality
    return bonus * day_progress


def calculate_morale_changes(state: GameState, day_progress: float, *, now: float) -> float:
    active = state.active_projects()
    harmony = calculate_team_personality_harmony(team_personalities(state.employees))
    return (
        calculate_workload_stress(active, state.employees, day_progress)
        + calculate_financial_stress(state.money, day_progress)
        + calculate_completion_morale_boost(state.completed_projects, day_progress, now=now)
        + harmony * day_progress
    )
