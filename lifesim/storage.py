"""Фасад для доступа к игровому сервису из когов."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from .game import DataStore, GameService
from .models import (
    ActivityDefinition,
    CareerDefinition,
    Character,
    LifeEventDefinition,
    Relationship,
    SaveCode,
    Session,
)

__all__ = [
    "get_service",
    "get_config",
    "create_save_code",
    "get_save_code",
    "characters_by_code",
    "create_character",
    "load_character",
    "save_character",
    "delete_character",
    "age_up",
    "perform_career_action",
    "perform_activity",
    "apply_activity",
    "list_relationships",
    "spend_time",
    "all_careers",
    "careers_by_category",
    "all_life_events",
    "life_events_by_type",
    "all_activities",
    "link_session",
    "load_session",
    "active_character",
]

_STORE = DataStore()
_SERVICE = GameService(_STORE)


def get_service() -> GameService:
    return _SERVICE


def get_config() -> dict:
    return _SERVICE.config


def create_save_code(code: str) -> dict:
    return _SERVICE.create_save_code(code)


def get_save_code(code: str) -> Optional[SaveCode]:
    return _SERVICE.get_save_code(code)


def characters_by_code(code: str) -> List[Character]:
    return _SERVICE.characters_by_code(code)


def create_character(save_code: str, payload: Mapping[str, Any]) -> dict:
    return _SERVICE.create_character(save_code, payload)


def load_character(character_id: int) -> Optional[Character]:
    return _SERVICE.load_character(character_id)


def save_character(character: Character, expected_revision: int | None = None) -> Character:
    return _SERVICE.save_character(character, expected_revision)


def delete_character(character_id: int) -> bool:
    return _SERVICE.delete_character(character_id)


def age_up(character_id: int) -> dict:
    return _SERVICE.age_up(character_id)


def perform_career_action(character_id: int, action: str, params: Optional[Mapping[str, Any]] = None) -> dict:
    return _SERVICE.perform_career_action(character_id, action, params)


def perform_activity(character_id: int, activity_id: str) -> dict:
    return _SERVICE.perform_activity(character_id, activity_id)


def apply_activity(character_id: int, effects: Mapping[str, float], cost: int = 0) -> dict:
    return _SERVICE.apply_activity(character_id, effects, cost)


def list_relationships(character_id: int) -> List[Relationship]:
    return _SERVICE.list_relationships(character_id)


def spend_time(character_id: int, relationship_id: int | None = None) -> dict:
    return _SERVICE.spend_time(character_id, relationship_id)


def all_careers() -> List[CareerDefinition]:
    return _SERVICE.all_careers()


def careers_by_category(category: str) -> List[CareerDefinition]:
    return _SERVICE.careers_by_category(category)


def all_life_events() -> List[LifeEventDefinition]:
    return _SERVICE.all_life_events()


def life_events_by_type(event_type: str) -> List[LifeEventDefinition]:
    return _SERVICE.life_events_by_type(event_type)


def all_activities() -> List[ActivityDefinition]:
    return _SERVICE.all_activities()


def link_session(user_id: int, code: str, character_id: int | None = None) -> Session:
    return _SERVICE.link_session(user_id, code, character_id)


def load_session(user_id: int) -> Optional[Session]:
    return _SERVICE.load_session(user_id)


def active_character(user_id: int) -> Optional[Character]:
    return _SERVICE.active_character(user_id)
