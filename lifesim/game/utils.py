"""Вспомогательные функции."""

from __future__ import annotations

import random
from typing import Any, Optional, Sequence, TypeVar

T = TypeVar("T")


def choice_value(choice: Any, default: Optional[str] = None) -> Optional[str]:
    """Безопасно извлечь значение из ``discord.app_commands.Choice``."""

    if choice is None:
        return default
    value = getattr(choice, "value", None)
    if value in (None, ""):
        return default
    return str(value)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_percentile(value: float) -> int:
    return int(clamp(int(value), 0, 100))


def clamp_non_negative(value: float) -> int:
    return max(0, int(value))


def roll(pair: tuple[int, int], rng: random.Random | None = None) -> int:
    """``base + floor(random * spread)`` для пары ``(base, spread)``."""

    base, spread = pair
    return int(base) + int((rng or random).random() * spread)


def weighted_pick(options: Sequence[tuple[T, float]], rng: random.Random | None = None) -> T:
    """Pick an item proportionally to its weight.

    The pivot is drawn from ``[0, total)`` and the first item whose running
    sum reaches it wins, so ties at a boundary go to the earlier item. When
    rounding leaves the walk without a match the first item is returned.
    """
    if not options:
        raise ValueError("Nothing to pick from")
    total = sum(weight for _, weight in options)
    if total <= 0:
        raise ValueError("Total weight must be positive")

    pivot = (rng or random).random() * total
    cumulative = 0.0
    for item, weight in options:
        cumulative += weight
        if pivot <= cumulative:
            return item
    return options[0][0]


__all__ = [
    "choice_value",
    "clamp",
    "clamp_percentile",
    "clamp_non_negative",
    "roll",
    "weighted_pick",
]
