from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from ..schemas.stats import Achievement


@dataclass(frozen=True)
class _Badge:
    title: str
    description: str
    icon: str
    color: str
    target: int
    metric: str


# Order matters: clients render badges in the order they are returned.
BADGES: tuple[_Badge, ...] = (
    _Badge("Getting Started", "Completed your first activity", "🎯", "#4CAF50", 1, "completed"),
    _Badge("Building Momentum", "Completed 5+ activities", "⚡", "#2196F3", 5, "completed"),
    _Badge("Consistent Performer", "Completed 10+ activities", "🌟", "#FF9800", 10, "completed"),
    _Badge("Streak Starter", "3+ day streak", "🔥", "#FF6B35", 3, "streak"),
    _Badge("Week Warrior", "7+ day streak", "💪", "#9C27B0", 7, "streak"),
    _Badge("Halfway There", "50%+ success rate", "📈", "#00BCD4", 50, "success_rate"),
    _Badge("Century Club", "Completed 100+ activities", "🏆", "#FFD700", 100, "completed"),
    _Badge("Month Master", "30+ day streak", "🔥", "#FF6B35", 30, "streak"),
    _Badge("Consistency King", "80%+ success rate", "👑", "#4CAF50", 80, "success_rate"),
)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def generate_achievements(
    total_completed: int,
    longest_streak: int,
    success_rate: float,
    total_flows: int = 0,
) -> list[Achievement]:
    """Derive the badges earned for the given totals.

    Nothing is persisted: the same inputs always produce the same list.
    ``total_flows`` does not drive any threshold yet.
    """

    metrics: dict[str, tuple[float, Callable[[float], int]]] = {
        "completed": (total_completed, int),
        "streak": (longest_streak, int),
        "success_rate": (success_rate, _round_half_up),
    }
    earned: list[Achievement] = []
    for badge in BADGES:
        value, as_progress = metrics[badge.metric]
        if value < badge.target:
            continue
        earned.append(
            Achievement(
                title=badge.title,
                description=badge.description,
                icon=badge.icon,
                color=badge.color,
                progress=as_progress(value),
                target=badge.target,
            )
        )
    return earned


__all__ = ["BADGES", "generate_achievements"]
