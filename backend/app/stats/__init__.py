"""Flow statistics, streaks and achievements."""

from .achievements import generate_achievements
from .engine import StatsEngine, Streaks
from .scheduling import is_scheduled

__all__ = [
    "StatsEngine",
    "Streaks",
    "generate_achievements",
    "is_scheduled",
]
