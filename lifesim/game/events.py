"""Random life event selection."""

from __future__ import annotations

import random
from typing import Iterable, List, Optional

from ..models import LifeEventDefinition
from .utils import weighted_pick


def eligible_events(events: Iterable[LifeEventDefinition], age: int) -> List[LifeEventDefinition]:
    return [event for event in events if event.eligible_at(age)]


def pick_event(
    events: Iterable[LifeEventDefinition],
    character_age: int,
    rng: random.Random | None = None,
) -> Optional[LifeEventDefinition]:
    """Weighted pick among the events open to ``character_age``.

    Returns ``None`` when no event is eligible.
    """
    pool = eligible_events(events, character_age)
    if not pool:
        return None
    return weighted_pick([(event, event.probability) for event in pool], rng)


__all__ = ["eligible_events", "pick_event"]
