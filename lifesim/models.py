from __future__ import annotations
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Dict, List, Mapping, Optional, Tuple
import time

# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------

PERCENTILE_STATS: Tuple[str, ...] = ("happiness", "health", "smarts", "looks", "fame")
COUNTER_FIELDS: Tuple[str, ...] = (
    "bank_balance",
    "salary",
    "work_experience",
    "youtube_followers",
    "tiktok_followers",
)

TALENTS = ("normal", "famous")
GENDERS = ("male", "female")
RELATIONSHIP_TYPES = ("parent", "sibling", "spouse", "child", "friend")

# -----------------------------------------------------------------------------
# Time / display helpers
# -----------------------------------------------------------------------------

def now_ts() -> int:
    return int(time.time())

def make_bar(current: int, need: int, length: int = 10) -> str:
    """Monospace progress bar."""
    if need <= 0:
        return "■" * length
    filled = max(0, min(length, (current * length) // need))
    return "■" * filled + "□" * (length - filled)

# -----------------------------------------------------------------------------
# Reference data
# -----------------------------------------------------------------------------

class AgeRange(BaseModel):
    min: int = 0
    max: int = 200

    def contains(self, age: int) -> bool:
        return self.min <= age <= self.max


class LifeEventDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    type: str
    title: str
    description: str
    age_range: Optional[AgeRange] = None     # None -> any age
    stat_effects: Dict[str, int] = Field(default_factory=dict)
    probability: int = 50                     # relative weight, not 0..1

    @field_validator("probability")
    @classmethod
    def _positive_weight(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("probability must be a positive weight")
        return value

    def eligible_at(self, age: int) -> bool:
        return self.age_range is None or self.age_range.contains(age)


class CareerDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: str
    min_age: int = 16
    min_education: Optional[str] = None
    base_salary: int = Field(default=0, ge=0)
    requirements: Dict[str, int] = Field(default_factory=dict)


class ActivityDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    description: str = ""
    cost: int = Field(default=0, ge=0)
    min_age: int = 0
    stat_effects: Dict[str, int] = Field(default_factory=dict)
    asset: Optional[str] = None

# -----------------------------------------------------------------------------
# Player data
# -----------------------------------------------------------------------------

class SaveCode(BaseModel):
    code: str
    created_ts: int = Field(default_factory=now_ts)


class Session(BaseModel):
    user_id: int
    save_code: str
    character_id: Optional[int] = None


class Relationship(BaseModel):
    id: int
    character_id: int
    name: str
    type: str                 # parent, sibling, spouse, child, friend
    relationship: int = 50    # 0..100
    age: Optional[int] = None
    is_alive: bool = True

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in RELATIONSHIP_TYPES:
            raise ValueError(f"unknown relationship type: {value}")
        return value


class Character(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    save_code: Optional[str] = None
    name: str
    age: int = 0
    gender: str
    country: str
    talent: str = "normal"
    bank_balance: int = 0

    # Percentile stats
    happiness: int = 50
    health: int = 50
    smarts: int = 50
    looks: int = 50
    fame: int = 0

    # Employment
    current_job: Optional[str] = None
    job_reputation: int = 0
    salary: int = 0
    work_experience: int = 0

    # Social
    youtube_followers: int = 0
    tiktok_followers: int = 0

    is_alive: bool = True
    life_events: List[str] = Field(default_factory=list)
    assets: Dict[str, int] = Field(default_factory=dict)

    # Fractional remainders of stat deltas carried between age-ups
    stat_residuals: Dict[str, float] = Field(default_factory=dict)

    revision: int = 0
    created_ts: int = Field(default_factory=now_ts)

    @property
    def employed(self) -> bool:
        return bool(self.current_job)

    def stat(self, name: str) -> int:
        return int(getattr(self, name, 0) or 0)

    def snapshot(self) -> "Character":
        """Independent copy to mutate; the original stays untouched."""
        return self.model_copy(deep=True)

    def apply_delta(self, delta: Mapping[str, float]) -> Dict[str, int]:
        """Add deltas to stats and counters, clamped. Returns the applied changes.

        Percentile stats keep fractional remainders in ``stat_residuals``: the
        residual is added to the delta, the whole part (truncated toward zero)
        is applied and the rest is carried to the next call.
        """
        applied: Dict[str, int] = {}
        for name, raw in (delta or {}).items():
            if name in PERCENTILE_STATS:
                before = self.stat(name)
                total = round(float(raw) + float(self.stat_residuals.get(name, 0.0)), 6)
                whole = int(total)
                remainder = round(total - whole, 6)
                if remainder:
                    self.stat_residuals[name] = remainder
                else:
                    self.stat_residuals.pop(name, None)
                setattr(self, name, min(100, max(0, before + whole)))
            elif name == "job_reputation":
                before = self.job_reputation
                self.job_reputation = min(100, max(0, before + int(raw)))
            elif name == "bank_balance":
                before = self.bank_balance
                self.bank_balance = before + int(raw)
            elif name in COUNTER_FIELDS:
                before = self.stat(name)
                setattr(self, name, max(0, before + int(raw)))
            else:
                continue
            change = self.stat(name) - before
            if change:
                applied[name] = change
        return applied

    def ensure_bounds(self):
        """Clamp stats and counters and restore the employment invariants."""
        for name in PERCENTILE_STATS:
            setattr(self, name, min(100, max(0, int(getattr(self, name)))))
        for name in COUNTER_FIELDS:
            if name == "bank_balance":
                continue
            setattr(self, name, max(0, int(getattr(self, name))))
        self.age = max(0, int(self.age))
        self.job_reputation = min(100, max(0, int(self.job_reputation)))
        if not self.current_job:
            self.current_job = None
            self.salary = 0
            self.job_reputation = 0
        self.assets = {k: int(v) for k, v in (self.assets or {}).items() if int(v) > 0}
        cleaned: Dict[str, float] = {}
        for name, value in (self.stat_residuals or {}).items():
            residual = float(value or 0.0)
            if name in PERCENTILE_STATS and abs(residual) < 1.0 and residual != 0.0:
                cleaned[name] = residual
        self.stat_residuals = cleaned
