"""Static reference data: life events, careers and activities.

The literal tables below are the defaults. Events and careers are also seeded
into the data store on first read so they can be tuned on disk; seeding is
idempotent.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..models import ActivityDefinition, CareerDefinition, LifeEventDefinition

_DEFAULT_EVENTS: tuple[dict, ...] = (
    {
        "id": 1,
        "type": "family",
        "title": "New Family Member",
        "description": "A new family member was born!",
        "age_range": {"min": 16, "max": 80},
        "stat_effects": {"happiness": 10},
        "probability": 30,
    },
    {
        "id": 2,
        "type": "health",
        "title": "Minor Illness",
        "description": "You caught a cold and felt unwell.",
        "age_range": {"min": 5, "max": 100},
        "stat_effects": {"health": -10, "happiness": -5},
        "probability": 40,
    },
    {
        "id": 3,
        "type": "financial",
        "title": "Found Money",
        "description": "You found some money on the street!",
        "age_range": {"min": 10, "max": 100},
        "stat_effects": {"happiness": 5},
        "probability": 20,
    },
    {
        "id": 4,
        "type": "education",
        "title": "Academic Achievement",
        "description": "You excelled in your studies!",
        "age_range": {"min": 6, "max": 25},
        "stat_effects": {"smarts": 10, "happiness": 5},
        "probability": 25,
    },
    {
        "id": 5,
        "type": "social",
        "title": "Made a Friend",
        "description": "You made a new friend at school/work.",
        "age_range": {"min": 5, "max": 100},
        "stat_effects": {"happiness": 8},
        "probability": 35,
    },
)

_DEFAULT_CAREERS: tuple[dict, ...] = (
    {"id": 1, "name": "TV Actor", "category": "Entertainment", "min_age": 18,
     "base_salary": 50000, "requirements": {"looks": 70, "fame": 20}},
    {"id": 2, "name": "Software Engineer", "category": "Technology", "min_age": 22,
     "min_education": "Bachelor's", "base_salary": 80000, "requirements": {"smarts": 80}},
    {"id": 3, "name": "Doctor", "category": "Medical", "min_age": 26,
     "min_education": "Medical Degree", "base_salary": 120000, "requirements": {"smarts": 90}},
    {"id": 4, "name": "Teacher", "category": "Education", "min_age": 22,
     "min_education": "Bachelor's", "base_salary": 40000, "requirements": {"smarts": 60}},
    {"id": 5, "name": "Police Officer", "category": "Public Service", "min_age": 21,
     "base_salary": 50000, "requirements": {"health": 70}},
    {"id": 6, "name": "Restaurant Worker", "category": "Service", "min_age": 16,
     "base_salary": 25000, "requirements": {}},
)

_DEFAULT_ACTIVITIES: tuple[dict, ...] = (
    {"id": "salon", "name": "Salon & Bath", "category": "favorites",
     "description": "Take time for yourself", "cost": 150,
     "stat_effects": {"looks": 3, "happiness": 4}},
    {"id": "gym", "name": "Gym Session", "category": "mind_body",
     "description": "Work on self-improvement", "cost": 50, "min_age": 12,
     "stat_effects": {"health": 4, "looks": 1}},
    {"id": "meditation", "name": "Meditation Retreat", "category": "mind_body",
     "description": "Clear your head", "cost": 300, "min_age": 16,
     "stat_effects": {"happiness": 6, "smarts": 2}},
    {"id": "pet", "name": "Adopt a Pet", "category": "pets",
     "description": "Get a pet", "cost": 250, "min_age": 8,
     "stat_effects": {"happiness": 8}, "asset": "pet"},
    {"id": "youtube", "name": "Post a YouTube Video", "category": "fame",
     "description": "Grow your channel", "cost": 0, "min_age": 13,
     "stat_effects": {"youtube_followers": 120, "fame": 1}},
    {"id": "tiktok", "name": "Post a TikTok", "category": "fame",
     "description": "Go viral, maybe", "cost": 0, "min_age": 13,
     "stat_effects": {"tiktok_followers": 250, "fame": 1, "smarts": -1}},
    {"id": "luxury", "name": "Luxury Vacation", "category": "premium",
     "description": "Enjoy the perks of being a VIP", "cost": 20000, "min_age": 18,
     "stat_effects": {"happiness": 15, "health": 2}},
    {"id": "casino", "name": "Casino Night", "category": "premium",
     "description": "Try your luck at the tables", "cost": 500, "min_age": 21,
     "stat_effects": {"happiness": 5, "smarts": -1}},
    {"id": "black_market", "name": "Black Market Deal", "category": "premium",
     "description": "Shop for contraband", "cost": 1500, "min_age": 18,
     "stat_effects": {"happiness": 4, "health": -3, "fame": 2}},
    {"id": "car", "name": "Buy a Car", "category": "belongings",
     "description": "Subaru Impreza (Sedan)", "cost": 18000, "min_age": 16,
     "stat_effects": {"happiness": 10}, "asset": "car"},
)


def all_events() -> List[LifeEventDefinition]:
    return [LifeEventDefinition(**entry) for entry in _DEFAULT_EVENTS]


def all_careers() -> List[CareerDefinition]:
    return [CareerDefinition(**entry) for entry in _DEFAULT_CAREERS]


def all_activities() -> List[ActivityDefinition]:
    return [ActivityDefinition(**entry) for entry in _DEFAULT_ACTIVITIES]


def default_event_rows() -> list[dict]:
    return [dict(entry) for entry in _DEFAULT_EVENTS]


def default_career_rows() -> list[dict]:
    return [dict(entry) for entry in _DEFAULT_CAREERS]


def find_career(careers: Iterable[CareerDefinition], key: str | int | None) -> Optional[CareerDefinition]:
    """Look a career up by id or (case-insensitive) name."""
    if key is None:
        return None
    text = str(key).strip().casefold()
    if not text:
        return None
    for career in careers:
        if str(career.id) == text or career.name.casefold() == text:
            return career
    return None


def find_activity(activities: Iterable[ActivityDefinition], key: str | None) -> Optional[ActivityDefinition]:
    text = (key or "").strip().casefold()
    if not text:
        return None
    for activity in activities:
        if activity.id.casefold() == text or activity.name.casefold() == text:
            return activity
    return None


__all__ = [
    "all_events",
    "all_careers",
    "all_activities",
    "default_event_rows",
    "default_career_rows",
    "find_career",
    "find_activity",
]
