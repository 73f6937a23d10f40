"""Life progression: creation, age-up and activities.

The functions here work on character snapshots and never touch storage.
Randomness comes from an injected ``random.Random``-compatible object.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..models import (
    GENDERS,
    PERCENTILE_STATS,
    TALENTS,
    ActivityDefinition,
    Character,
    LifeEventDefinition,
)
from .ageing import ageing_delta, merge_deltas
from .balance import BalanceProfile, CreationBalance
from .careers import age_up_salary
from .errors import PreconditionError, ValidationError
from .events import pick_event
from .utils import roll


def _require_alive(character: Character) -> None:
    if not character.is_alive:
        raise PreconditionError("deceased", f"{character.name} is no longer alive.")

# ----------------------------------------------------------------------
# Creation
# ----------------------------------------------------------------------

def _text_field(payload: Mapping[str, Any], name: str) -> str:
    value = str(payload.get(name) or "").strip()
    if not value:
        raise ValidationError("invalid_input", f"{name.capitalize()} is required.")
    return value


def _stat_field(payload: Mapping[str, Any], name: str) -> Optional[int]:
    raw = payload.get(name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("invalid_input", f"{name.capitalize()} must be a number.") from None
    if not 0 <= value <= 100:
        raise ValidationError("invalid_input", f"{name.capitalize()} must be between 0 and 100.")
    return value


def create_character(
    payload: Mapping[str, Any],
    rng: random.Random | None = None,
    balance: CreationBalance | None = None,
) -> Character:
    """Validate creation input and roll whatever stats were not supplied."""
    cfg = balance or CreationBalance()
    name = _text_field(payload, "name")
    country = _text_field(payload, "country")
    gender = str(payload.get("gender") or "").strip().lower()
    if gender not in GENDERS:
        raise ValidationError("invalid_input", f"Gender must be one of: {', '.join(GENDERS)}.")
    talent = str(payload.get("talent") or "normal").strip().lower()
    if talent not in TALENTS:
        raise ValidationError("invalid_input", f"Talent must be one of: {', '.join(TALENTS)}.")

    stats: Dict[str, int] = {}
    for stat in ("happiness", "health", "smarts", "looks"):
        supplied = _stat_field(payload, stat)
        stats[stat] = supplied if supplied is not None else roll(getattr(cfg, stat), rng)

    bank = payload.get("bank_balance")
    try:
        bank_balance = int(bank) if bank is not None else roll(cfg.bank, rng)
        age = max(0, int(payload.get("age") or 0))
    except (TypeError, ValueError):
        raise ValidationError("invalid_input", "Age and bank balance must be numbers.") from None
    if bank_balance < 0:
        raise ValidationError("invalid_input", "Bank balance cannot be negative.")

    character = Character(
        name=name,
        gender=gender,
        country=country,
        talent=talent,
        age=age,
        bank_balance=bank_balance,
        fame=cfg.famous_fame if talent == "famous" else 0,
        save_code=payload.get("save_code"),
        **stats,
    )
    character.ensure_bounds()
    return character

# ----------------------------------------------------------------------
# Age-up
# ----------------------------------------------------------------------

def age_up(
    character: Character,
    events: Iterable[LifeEventDefinition],
    rng: random.Random | None = None,
    balance: BalanceProfile | None = None,
) -> Tuple[Character, Optional[LifeEventDefinition]]:
    """Advance one year: maybe fire an event, drift stats, pay the salary."""
    cfg = balance or BalanceProfile()
    _require_alive(character)

    updated = character.snapshot()
    updated.age = character.age + 1

    event = pick_event(events, updated.age, rng)
    event_delta: Dict[str, float] = {}
    if event is not None:
        updated.life_events.append(event.description)
        event_delta = dict(event.stat_effects)

    payment, experience = age_up_salary(character)
    delta = merge_deltas(event_delta, ageing_delta(updated.age, cfg.ageing))
    if payment:
        delta["bank_balance"] = delta.get("bank_balance", 0) + payment
    updated.apply_delta(delta)
    updated.work_experience = experience
    return updated, event

# ----------------------------------------------------------------------
# Activities
# ----------------------------------------------------------------------

def apply_activity(
    character: Character,
    cost: int,
    effects: Mapping[str, float],
    asset: Optional[str] = None,
    min_age: int = 0,
) -> Character:
    """Charge ``cost`` and apply ``effects``; nothing changes on rejection."""
    _require_alive(character)
    cost = int(cost)
    if cost < 0:
        raise ValidationError("invalid_input", "Cost cannot be negative.")
    if character.age < min_age:
        raise PreconditionError("too_young", f"You must be at least {min_age}.")
    if character.bank_balance < cost:
        raise PreconditionError(
            "insufficient_funds",
            f"You need ${cost:,} but only have ${character.bank_balance:,}.",
        )

    updated = character.snapshot()
    updated.bank_balance -= cost
    updated.apply_delta(effects)
    if asset:
        updated.assets[asset] = updated.assets.get(asset, 0) + 1
    return updated


def perform_activity(character: Character, activity: ActivityDefinition) -> Character:
    return apply_activity(
        character,
        activity.cost,
        activity.stat_effects,
        asset=activity.asset,
        min_age=activity.min_age,
    )


def describe_changes(before: Character, after: Character) -> Dict[str, int]:
    """Non-zero differences for stats and money between two snapshots."""
    changes: Dict[str, int] = {}
    for name in PERCENTILE_STATS + ("bank_balance", "job_reputation", "salary"):
        diff = after.stat(name) - before.stat(name)
        if diff:
            changes[name] = diff
    return changes


__all__ = [
    "create_character",
    "age_up",
    "apply_activity",
    "perform_activity",
    "describe_changes",
]
