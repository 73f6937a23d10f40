"""Family members and relationship actions."""

from __future__ import annotations

import random
from typing import Iterable, List, Tuple

from ..models import Character, Relationship
from .balance import FamilyBalance
from .errors import PreconditionError
from .utils import clamp_percentile, roll

FAMILY_NAMES: Tuple[Tuple[str, str], ...] = (
    ("John", "Smith"),
    ("Mary", "Johnson"),
    ("Michael", "Williams"),
    ("Patricia", "Brown"),
    ("Robert", "Jones"),
    ("Jennifer", "Garcia"),
)


def _random_name(rng: random.Random) -> str:
    first, last = FAMILY_NAMES[int(rng.random() * len(FAMILY_NAMES))]
    return f"{first} {last}"


def seed_family(
    character_id: int,
    rng: random.Random | None = None,
    balance: FamilyBalance | None = None,
    start_id: int = 1,
) -> List[Relationship]:
    """Two parents and, sometimes, a sibling for a freshly created character."""
    cfg = balance or FamilyBalance()
    rng = rng or random.Random()
    family: List[Relationship] = []
    plan = [("parent", cfg.parent_bond, cfg.father_age), ("parent", cfg.parent_bond, cfg.mother_age)]
    for kind, bond, age in plan:
        family.append(
            Relationship(
                id=start_id + len(family),
                character_id=character_id,
                name=_random_name(rng),
                type=kind,
                relationship=clamp_percentile(roll(bond, rng)),
                age=roll(age, rng),
            )
        )
    if rng.random() < cfg.sibling_chance:
        family.append(
            Relationship(
                id=start_id + len(family),
                character_id=character_id,
                name=_random_name(rng),
                type="sibling",
                relationship=clamp_percentile(roll(cfg.sibling_bond, rng)),
                age=roll(cfg.sibling_age, rng),
            )
        )
    return family


def spend_time(
    character: Character,
    relationship: Relationship,
    rng: random.Random | None = None,
    balance: FamilyBalance | None = None,
) -> Tuple[Character, Relationship, int]:
    """Returns the updated character, the updated relative and the bond gain."""
    cfg = balance or FamilyBalance()
    if not character.is_alive:
        raise PreconditionError("deceased", f"{character.name} is no longer alive.")
    if not relationship.is_alive:
        raise PreconditionError("relative_deceased", f"{relationship.name} has passed away.")
    low, high = cfg.spend_time_gain
    gain = (rng or random).randint(low, max(low, high))

    relative = relationship.model_copy(deep=True)
    relative.relationship = clamp_percentile(relative.relationship + gain)
    updated = character.snapshot()
    updated.apply_delta({"happiness": cfg.spend_time_happiness})
    return updated, relative, relative.relationship - relationship.relationship


def spend_time_with_all(
    character: Character,
    relationships: Iterable[Relationship],
    rng: random.Random | None = None,
    balance: FamilyBalance | None = None,
) -> Tuple[Character, List[Relationship]]:
    """Visit every living relative once; happiness is granted once."""
    cfg = balance or FamilyBalance()
    if not character.is_alive:
        raise PreconditionError("deceased", f"{character.name} is no longer alive.")
    living = [rel for rel in relationships if rel.is_alive]
    if not living:
        raise PreconditionError("no_family", "There is nobody to spend time with.")
    low, high = cfg.spend_time_gain
    updated_relatives: List[Relationship] = []
    for rel in living:
        relative = rel.model_copy(deep=True)
        relative.relationship = clamp_percentile(
            relative.relationship + (rng or random).randint(low, max(low, high))
        )
        updated_relatives.append(relative)
    updated = character.snapshot()
    updated.apply_delta({"happiness": cfg.spend_time_happiness})
    return updated, updated_relatives


__all__ = ["FAMILY_NAMES", "seed_family", "spend_time", "spend_time_with_all"]
