"""Centralised balance configuration for gameplay formulas."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class AgeingBalance:
    """Passive yearly stat drift, keyed on the age after incrementing."""

    health_after: int = 50
    health_delta: float = -1.0
    looks_after: int = 40
    looks_delta: float = -0.5
    smarts_after: int = 25
    smarts_delta: float = 0.2


@dataclass(frozen=True)
class CareerBalance:
    """Parameters for the career actions."""

    work_bonus_rate: float = 0.1
    work_happiness: int = 5
    work_hard_min_gain: int = 10
    work_hard_spread: int = 15
    work_hard_happiness: int = 5
    promotion_chance_cap: float = 0.8
    promotion_raise_rate: float = 0.2
    promotion_success_rep_cost: int = 20
    promotion_failure_rep_cost: int = 10
    promotion_success_happiness: int = 15
    promotion_failure_happiness: int = -5
    quit_happiness: int = 10
    military_job: str = "Soldier"
    military_salary: int = 32000
    military_min_age: int = 18
    military_min_health: int = 50
    part_time_min_age: int = 14
    part_time_jobs: tuple[tuple[str, int], ...] = (
        ("Barista", 12000),
        ("Dog Walker", 9000),
        ("Cashier", 14000),
        ("Lifeguard", 11000),
        ("Library Assistant", 10000),
    )
    gig_min_age: int = 12
    gig_pay: tuple[int, int] = (50, 300)
    gig_happiness: int = -2


@dataclass(frozen=True)
class CreationBalance:
    """Ranges used when a new life is rolled."""

    happiness: tuple[int, int] = (50, 40)   # (base, spread)
    health: tuple[int, int] = (50, 40)
    smarts: tuple[int, int] = (40, 40)
    looks: tuple[int, int] = (40, 40)
    bank: tuple[int, int] = (1000, 5000)
    famous_fame: int = 10


@dataclass(frozen=True)
class FamilyBalance:
    """Relationship seeding and relationship actions."""

    parent_bond: tuple[int, int] = (70, 30)
    father_age: tuple[int, int] = (45, 15)
    mother_age: tuple[int, int] = (40, 15)
    sibling_chance: float = 0.5
    sibling_bond: tuple[int, int] = (50, 40)
    sibling_age: tuple[int, int] = (10, 30)
    spend_time_gain: tuple[int, int] = (3, 10)
    spend_time_happiness: int = 3


@dataclass(frozen=True)
class BalanceProfile:
    """Bundle of all tunable balance parameters."""

    ageing: AgeingBalance = field(default_factory=AgeingBalance)
    career: CareerBalance = field(default_factory=CareerBalance)
    creation: CreationBalance = field(default_factory=CreationBalance)
    family: FamilyBalance = field(default_factory=FamilyBalance)


def _coerce_scalar(template: Any, raw: Any) -> Any:
    """Attempt to coerce ``raw`` into the type of ``template``."""

    if isinstance(template, float):
        try:
            return float(raw)
        except (TypeError, ValueError):
            return template
    if isinstance(template, int):
        try:
            return int(raw)
        except (TypeError, ValueError):
            return template
    if isinstance(template, str):
        return str(raw) if raw not in (None, "") else template
    if isinstance(template, tuple) and template and isinstance(template[0], tuple):
        # listings such as part-time jobs: [[name, salary], ...]
        if isinstance(raw, Sequence) and not isinstance(raw, str):
            items = []
            for entry in raw:
                if isinstance(entry, Sequence) and not isinstance(entry, str) and len(entry) == 2:
                    items.append(_coerce_scalar(template[0], entry))
            return tuple(items) if items else template
        return template
    if isinstance(template, tuple) and len(template) == 2:
        if isinstance(raw, Sequence) and not isinstance(raw, str) and len(raw) == 2:
            first = _coerce_scalar(template[0], raw[0])
            second = _coerce_scalar(template[1], raw[1])
            return (first, second)
        return template
    return raw


def _merge_dataclass(instance: Any, overrides: Mapping[str, Any]) -> Any:
    if not is_dataclass(instance) or not isinstance(overrides, Mapping):
        return instance

    updates: dict[str, Any] = {}
    for field_info in fields(instance):
        name = field_info.name
        if name not in overrides:
            continue
        current_value = getattr(instance, name)
        override_value = overrides[name]
        if is_dataclass(current_value):
            updates[name] = _merge_dataclass(current_value, override_value)
        else:
            updates[name] = _coerce_scalar(current_value, override_value)
    if not updates:
        return instance
    return replace(instance, **updates)


def load_balance_profile(raw: Mapping[str, Any] | None) -> BalanceProfile:
    """Return a :class:`BalanceProfile` with optional overrides applied."""

    profile = BalanceProfile()
    if not isinstance(raw, Mapping):
        return profile
    return _merge_dataclass(profile, raw)
