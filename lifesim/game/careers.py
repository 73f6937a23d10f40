"""Career actions and the employment state machine.

Every action takes a character snapshot and returns a new one; the input is
never modified. Preconditions are checked up front and reported with
:class:`PreconditionError`, so a rejected action leaves no trace.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..models import CareerDefinition, Character
from .balance import CareerBalance
from .catalog import find_career
from .errors import NotFoundError, PreconditionError, ValidationError
from .utils import clamp_non_negative, weighted_pick


class EmploymentState(str, Enum):
    UNEMPLOYED = "unemployed"
    EMPLOYED = "employed"


def employment_state(character: Character) -> EmploymentState:
    return EmploymentState.EMPLOYED if character.current_job else EmploymentState.UNEMPLOYED


_EMPLOYED = frozenset({EmploymentState.EMPLOYED})
_UNEMPLOYED = frozenset({EmploymentState.UNEMPLOYED})
_ANY = frozenset(EmploymentState)

ACTION_STATES: Dict[str, FrozenSet[EmploymentState]] = {
    "work": _EMPLOYED,
    "work_hard": _EMPLOYED,
    "promotion": _EMPLOYED,
    "quit": _EMPLOYED,
    "apply": _UNEMPLOYED,
    "military": _UNEMPLOYED,
    "part_time": _UNEMPLOYED,
    "recruiter": _UNEMPLOYED,
    "gig": _ANY,
}


def allowed_actions(character: Character) -> List[str]:
    state = employment_state(character)
    return [name for name, states in ACTION_STATES.items() if state in states]


def _require_state(character: Character, action: str) -> None:
    states = ACTION_STATES.get(action)
    if states is None:
        raise ValidationError("unknown_action", f"Unknown career action: {action}")
    if not character.is_alive:
        raise PreconditionError("deceased", f"{character.name} is no longer alive.")
    state = employment_state(character)
    if state in states:
        return
    if state is EmploymentState.UNEMPLOYED:
        raise PreconditionError("not_employed", "You need a job first.")
    raise PreconditionError("already_employed", f"You already work as {character.current_job}.")


def _hire(character: Character, job: str, salary: int) -> Character:
    updated = character.snapshot()
    updated.current_job = job
    updated.salary = clamp_non_negative(salary)
    updated.job_reputation = 0
    updated.work_experience = 0
    updated.ensure_bounds()
    return updated

# ----------------------------------------------------------------------
# Eligibility
# ----------------------------------------------------------------------

def missing_requirements(character: Character, career: CareerDefinition) -> Dict[str, int]:
    """Requirements the character falls short of, as ``stat -> required``."""
    return {
        stat: required
        for stat, required in (career.requirements or {}).items()
        if character.stat(stat) < required
    }


def is_eligible(character: Character, career: CareerDefinition) -> bool:
    return character.age >= career.min_age and not missing_requirements(character, career)

# ----------------------------------------------------------------------
# Employed actions
# ----------------------------------------------------------------------

def work(character: Character, balance: CareerBalance | None = None) -> Character:
    cfg = balance or CareerBalance()
    _require_state(character, "work")
    updated = character.snapshot()
    bonus = int(updated.salary * cfg.work_bonus_rate)
    updated.apply_delta({
        "bank_balance": bonus,
        "work_experience": 1,
        "happiness": cfg.work_happiness,
    })
    return updated


def work_hard(
    character: Character,
    rng: random.Random | None = None,
    balance: CareerBalance | None = None,
) -> Character:
    cfg = balance or CareerBalance()
    _require_state(character, "work_hard")
    roll = (rng or random).random()
    gain = int(roll * cfg.work_hard_spread) + cfg.work_hard_min_gain
    updated = character.snapshot()
    updated.apply_delta({"job_reputation": gain, "happiness": cfg.work_hard_happiness})
    return updated


def promotion_chance(character: Character, balance: CareerBalance | None = None) -> float:
    cfg = balance or CareerBalance()
    return min(cfg.promotion_chance_cap, character.job_reputation / 100)


def ask_for_promotion(
    character: Character,
    rng: random.Random | None = None,
    balance: CareerBalance | None = None,
) -> Tuple[Character, bool]:
    cfg = balance or CareerBalance()
    _require_state(character, "promotion")
    success = (rng or random).random() < promotion_chance(character, cfg)
    updated = character.snapshot()
    if success:
        raise_amount = int(updated.salary * cfg.promotion_raise_rate)
        updated.salary += raise_amount
        updated.job_reputation = clamp_non_negative(updated.job_reputation - cfg.promotion_success_rep_cost)
        updated.apply_delta({"happiness": cfg.promotion_success_happiness})
    else:
        updated.job_reputation = clamp_non_negative(updated.job_reputation - cfg.promotion_failure_rep_cost)
        updated.apply_delta({"happiness": cfg.promotion_failure_happiness})
    return updated, success


def quit_job(character: Character, balance: CareerBalance | None = None) -> Character:
    cfg = balance or CareerBalance()
    _require_state(character, "quit")
    updated = character.snapshot()
    updated.current_job = None
    updated.salary = 0
    updated.job_reputation = 0
    updated.apply_delta({"happiness": cfg.quit_happiness})
    return updated

# ----------------------------------------------------------------------
# Getting a job
# ----------------------------------------------------------------------

def apply_for(character: Character, career: CareerDefinition) -> Character:
    _require_state(character, "apply")
    if character.age < career.min_age:
        raise PreconditionError(
            "too_young", f"{career.name} requires age {career.min_age}."
        )
    missing = missing_requirements(character, career)
    if missing:
        needs = ", ".join(f"{stat} {value}" for stat, value in sorted(missing.items()))
        raise PreconditionError("requirements_unmet", f"{career.name} requires {needs}.")
    return _hire(character, career.name, career.base_salary)


def join_military(character: Character, balance: CareerBalance | None = None) -> Character:
    cfg = balance or CareerBalance()
    _require_state(character, "military")
    if character.age < cfg.military_min_age:
        raise PreconditionError("too_young", f"The military requires age {cfg.military_min_age}.")
    if character.health < cfg.military_min_health:
        raise PreconditionError(
            "requirements_unmet", f"The military requires health {cfg.military_min_health}."
        )
    return _hire(character, cfg.military_job, cfg.military_salary)


def take_part_time(
    character: Character,
    rng: random.Random | None = None,
    balance: CareerBalance | None = None,
) -> Character:
    cfg = balance or CareerBalance()
    _require_state(character, "part_time")
    if character.age < cfg.part_time_min_age:
        raise PreconditionError("too_young", f"Part-time jobs require age {cfg.part_time_min_age}.")
    if not cfg.part_time_jobs:
        raise PreconditionError("no_offers", "There are no part-time listings right now.")
    title, salary = weighted_pick([(entry, 1) for entry in cfg.part_time_jobs], rng)
    return _hire(character, f"{title} (Part-Time)", salary)


def visit_recruiter(
    character: Character,
    careers: Iterable[CareerDefinition],
    rng: random.Random | None = None,
) -> Tuple[Character, CareerDefinition]:
    _require_state(character, "recruiter")
    offers = [career for career in careers if is_eligible(character, career)]
    if not offers:
        raise PreconditionError("no_offers", "The recruiter has nothing for you yet.")
    career = weighted_pick([(career, 1) for career in offers], rng)
    return _hire(character, career.name, career.base_salary), career


def freelance_gig(
    character: Character,
    rng: random.Random | None = None,
    balance: CareerBalance | None = None,
) -> Tuple[Character, int]:
    cfg = balance or CareerBalance()
    _require_state(character, "gig")
    if character.age < cfg.gig_min_age:
        raise PreconditionError("too_young", f"Gigs require age {cfg.gig_min_age}.")
    low, high = cfg.gig_pay
    pay = (rng or random).randint(low, max(low, high))
    updated = character.snapshot()
    updated.apply_delta({"bank_balance": pay, "happiness": cfg.gig_happiness})
    return updated, pay

# ----------------------------------------------------------------------
# Age-up payroll
# ----------------------------------------------------------------------

def age_up_salary(character: Character) -> Tuple[int, int]:
    """Salary paid on age-up and the resulting work experience."""
    payment = character.salary if character.current_job and character.salary > 0 else 0
    experience = character.work_experience + 1 if character.current_job else character.work_experience
    return payment, experience


ActionResult = Tuple[Character, Dict[str, object]]


def perform(
    character: Character,
    action: str,
    *,
    careers: Iterable[CareerDefinition] = (),
    params: Optional[Mapping[str, object]] = None,
    rng: random.Random | None = None,
    balance: CareerBalance | None = None,
) -> ActionResult:
    """Dispatch ``action`` and describe what happened for the caller."""
    cfg = balance or CareerBalance()
    params = params or {}
    name = (action or "").strip().lower().replace("-", "_")
    _require_state(character, name)

    if name == "work":
        updated = work(character, cfg)
        return updated, {"bonus": updated.bank_balance - character.bank_balance}
    if name == "work_hard":
        updated = work_hard(character, rng, cfg)
        return updated, {"reputation_gain": updated.job_reputation - character.job_reputation}
    if name == "promotion":
        updated, success = ask_for_promotion(character, rng, cfg)
        return updated, {"promoted": success, "raise": updated.salary - character.salary}
    if name == "quit":
        return quit_job(character, cfg), {"left": character.current_job}
    if name == "apply":
        career = find_career(careers, params.get("career"))  # type: ignore[arg-type]
        if career is None:
            raise NotFoundError("career_not_found", f"No such career: {params.get('career')}")
        return apply_for(character, career), {"job": career.name}
    if name == "military":
        updated = join_military(character, cfg)
        return updated, {"job": updated.current_job}
    if name == "part_time":
        updated = take_part_time(character, rng, cfg)
        return updated, {"job": updated.current_job}
    if name == "recruiter":
        updated, career = visit_recruiter(character, careers, rng)
        return updated, {"job": career.name}
    updated, pay = freelance_gig(character, rng, cfg)
    return updated, {"pay": pay}


__all__ = [
    "EmploymentState",
    "ACTION_STATES",
    "employment_state",
    "allowed_actions",
    "missing_requirements",
    "is_eligible",
    "work",
    "work_hard",
    "promotion_chance",
    "ask_for_promotion",
    "quit_job",
    "apply_for",
    "join_military",
    "take_part_time",
    "visit_recruiter",
    "freelance_gig",
    "age_up_salary",
    "perform",
]
