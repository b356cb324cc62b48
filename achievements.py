#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Achievement catalog and evaluator.

Predicates are pure functions of a `GameState`. Unlocks are append-only:
`check_for_new_achievements` only looks at ids not yet unlocked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from model import Achievement, GameSize, GameState


@dataclass(frozen=True)
class AchievementDef:
    title: str
    description: str
    reward: int
    category: str
    condition: Callable[[GameState], bool]


@dataclass
class AchievementProgress:
    current: float
    target: float
    progress: float


def _completed_count(state: GameState) -> int:
    return len(state.completed_projects)


def _distinct(state: GameState, attr: str) -> int:
    return len({getattr(p, attr) for p in state.completed_projects})


ACHIEVEMENTS: Dict[str, AchievementDef] = {
    "first_game": AchievementDef(
        "First Steps", "Complete your first game", 5_000, "milestone",
        lambda s: _completed_count(s) >= 1,
    ),
    "profitable": AchievementDef(
        "In the Black", "Reach $100,000 in funds", 10_000, "financial",
        lambda s: s.money >= 100_000,
    ),
    "team_player": AchievementDef(
        "Team Player", "Hire 10 employees", 15_000, "team",
        lambda s: len(s.employees) >= 10,
    ),
    "aaa_developer": AchievementDef(
        "AAA Developer", "Complete a AAA game", 50_000, "milestone",
        lambda s: any(p.size == GameSize.AAA for p in s.completed_projects),
    ),
    "millionaire": AchievementDef(
        "Millionaire", "Reach $1,000,000 in funds", 100_000, "financial",
        lambda s: s.money >= 1_000_000,
    ),
    "speed_demon": AchievementDef(
        "Speed Demon", "Complete 5 games", 25_000, "milestone",
        lambda s: _completed_count(s) >= 5,
    ),
    "empire_builder": AchievementDef(
        "Empire Builder", "Hire 25 employees", 75_000, "team",
        lambda s: len(s.employees) >= 25,
    ),
    "perfectionist": AchievementDef(
        "Perfectionist", "Achieve 95+ team morale", 30_000, "performance",
        lambda s: s.morale >= 95,
    ),
    "multi_platform": AchievementDef(
        "Multi-Platform Master", "Release games on 3 different platforms", 20_000, "milestone",
        lambda s: _distinct(s, "platform") >= 3,
    ),
    "genre_explorer": AchievementDef(
        "Genre Explorer", "Complete games in 4 different genres", 18_000, "milestone",
        lambda s: _distinct(s, "genre") >= 4,
    ),
    "high_roller": AchievementDef(
        "High Roller", "Complete a project with revenue over $500k", 35_000, "financial",
        lambda s: any((p.revenue or 0) >= 500_000 for p in s.completed_projects),
    ),
    "veteran_developer": AchievementDef(
        "Veteran Developer", "Complete 15 games", 60_000, "milestone",
        lambda s: _completed_count(s) >= 15,
    ),
}

# id -> (metric, target) for achievements with a numeric goal
_PROGRESS_TARGETS: Dict[str, tuple[Callable[[GameState], float], float]] = {
    "team_player": (lambda s: len(s.employees), 10),
    "empire_builder": (lambda s: len(s.employees), 25),
    "profitable": (lambda s: s.money, 100_000),
    "millionaire": (lambda s: s.money, 1_000_000),
    "speed_demon": (_completed_count, 5),
    "veteran_developer": (_completed_count, 15),
    "perfectionist": (lambda s: s.morale, 95),
}


def check_for_new_achievements(
    state: GameState,
    existing: Optional[Iterable[Achievement]] = None,
    *,
    now: float,
) -> List[Achievement]:
    unlocked_ids = {a.id for a in (state.achievements if existing is None else existing)}
    out: List[Achievement] = []
    for achievement_id, definition in ACHIEVEMENTS.items():
        if achievement_id in unlocked_ids:
            continue
        if definition.condition(state):
            out.append(Achievement(
                id=achievement_id,
                title=definition.title,
                description=definition.description,
                reward=definition.reward,
                category=definition.category,
                unlocked_at=float(now),
            ))
    return out


def calculate_achievement_progress(unlocked: Iterable[Achievement]) -> int:
    """Share of the catalog unlocked, as a rounded percentage."""
    return int(round(len(list(unlocked)) / len(ACHIEVEMENTS) * 100))


def calculate_total_achievement_rewards(unlocked: Iterable[Achievement]) -> int:
    return sum(int(a.reward or 0) for a in unlocked)


def get_achievements_by_category(category: str) -> Dict[str, AchievementDef]:
    return {k: v for k, v in ACHIEVEMENTS.items() if v.category == category}


def is_achievement_unlocked(achievement_id: str, unlocked: Iterable[Achievement]) -> bool:
    return any(a.id == achievement_id for a in unlocked)


def get_achievement_progress(achievement_id: str, state: GameState) -> Optional[AchievementProgress]:
    entry = _PROGRESS_TARGETS.get(achievement_id)
    if entry is None:
        return None
    metric, target = entry
    current = float(metric(state))
    return AchievementProgress(current=current, target=float(target), progress=min(100.0, current / target * 100.0))
