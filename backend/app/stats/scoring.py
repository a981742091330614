from __future__ import annotations

from ..schemas.flow import Emotion, Symbol

COMPLETED_POINTS = 10
PARTIAL_POINTS = 5
NOTE_POINTS = 2
STREAK_POINTS_PER_DAY = 2

EMOTION_SCORES: dict[Emotion, int] = {
    Emotion.BIG_SMILE: 5,
    Emotion.SLIGHTLY_SMILING: 3,
    Emotion.NEUTRAL: 1,
    Emotion.SLIGHTLY_WORRIED: -1,
    Emotion.SAD: -3,
}

SYMBOL_POINTS: dict[Symbol, int] = {
    Symbol.COMPLETED: COMPLETED_POINTS,
    Symbol.PARTIAL: PARTIAL_POINTS,
}


def emotion_score(emotion: Emotion | None) -> int:
    if emotion is None:
        return 0
    return EMOTION_SCORES.get(emotion, 0)


def symbol_points(symbol: Symbol | None) -> int:
    if symbol is None:
        return 0
    return SYMBOL_POINTS.get(symbol, 0)


def percentage(part: int | float, whole: int | float) -> float:
    if not whole:
        return 0.0
    return part / whole * 100
