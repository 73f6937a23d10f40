"""High level game logic built on top of the data store."""

from __future__ import annotations

import json
import logging
import random
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from . import careers as career_rules
from . import engine
from . import family
from .balance import BalanceProfile, load_balance_profile
from .catalog import all_activities, find_activity
from .errors import ConflictError, GameError, NotFoundError, PreconditionError, ValidationError
from .repository import DataStore
from ..models import (
    ActivityDefinition,
    CareerDefinition,
    Character,
    LifeEventDefinition,
    Relationship,
    SaveCode,
    Session,
)

log = logging.getLogger("lifesim")

SAVE_CODE_PATTERN = re.compile(r"^[0-9]{4}$")

Mutation = Callable[[Character], Tuple[Character, Dict[str, Any]]]


class GameService:
    """Encapsulates the gameplay rules and persistence helpers."""

    def __init__(self, store: DataStore | None = None, rng: random.Random | None = None):
        self.store = store or DataStore()
        self.rng = rng or random.Random()
        self._config_cache: dict | None = None
        self._config_cache_key: tuple[str, int | None] | None = None
        self._config_path: Path | None = None
        self._config_default_base = self.store.base_dir
        self._balance_cache: BalanceProfile | None = None
        self._events: List[LifeEventDefinition] | None = None
        self._careers: List[CareerDefinition] | None = None
        self._activities: List[ActivityDefinition] = all_activities()

    def _load_config(self) -> dict:
        candidates: list[Path] = []
        if self._config_path is not None:
            candidates.append(self._config_path)

        default_path = (self._config_default_base / "config.json").resolve()
        if default_path not in candidates:
            candidates.append(default_path)

        current_path = (self.store.base_dir / "config.json").resolve()
        if current_path not in candidates:
            candidates.append(current_path)

        path = candidates[0]
        mtime: int | None = None
        for candidate in candidates:
            try:
                current_mtime = candidate.stat().st_mtime_ns
            except FileNotFoundError:
                continue

            path = candidate
            mtime = current_mtime
            if self._config_path != candidate:
                self._config_path = candidate
            break

        cache_key = (str(path), mtime)

        if self._config_cache is not None and self._config_cache_key == cache_key:
            return self._config_cache

        if mtime is None:
            data = {}
        else:
            try:
                with path.open("r", encoding="utf-8") as handle:
                    data = json.load(handle)
            except (FileNotFoundError, json.JSONDecodeError):
                log.warning("Ignoring unreadable config file %s", path)
                data = {}

        if not isinstance(data, dict):
            data = {}

        paths_cfg = data.get("paths")
        self.store.configure_paths(paths_cfg if isinstance(paths_cfg, dict) else None)

        self._config_cache = data
        self._config_cache_key = cache_key
        self._balance_cache = None
        self._events = None
        self._careers = None
        return self._config_cache

    def get_config(self) -> dict:
        return self._load_config()

    @property
    def config(self) -> dict:
        return self._load_config()

    def get_balance_profile(self) -> BalanceProfile:
        config = self._load_config()
        if self._balance_cache is None:
            balance_cfg = config.get("balance") if isinstance(config, dict) else None
            mapping = balance_cfg if isinstance(balance_cfg, dict) else None
            self._balance_cache = load_balance_profile(mapping)
        return self._balance_cache

    # ------------------------------------------------------------------
    # Catalogs
    # ------------------------------------------------------------------
    def _catalogs(self) -> Tuple[List[LifeEventDefinition], List[CareerDefinition]]:
        self._load_config()
        if self._events is None:
            self._events = self.store.load_or_seed_events()
        if self._careers is None:
            self._careers = self.store.load_or_seed_careers()
        return self._events, self._careers

    def all_life_events(self) -> List[LifeEventDefinition]:
        return list(self._catalogs()[0])

    def life_events_by_type(self, event_type: str) -> List[LifeEventDefinition]:
        wanted = (event_type or "").strip().lower()
        return [event for event in self.all_life_events() if event.type.lower() == wanted]

    def all_careers(self) -> List[CareerDefinition]:
        return list(self._catalogs()[1])

    def careers_by_category(self, category: str) -> List[CareerDefinition]:
        wanted = (category or "").strip().lower()
        return [career for career in self.all_careers() if career.category.lower() == wanted]

    def all_activities(self) -> List[ActivityDefinition]:
        return list(self._activities)

    # ------------------------------------------------------------------
    # Save codes
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_save_code(code: str | int | None) -> str:
        text = str(code if code is not None else "").strip()
        if not SAVE_CODE_PATTERN.match(text):
            raise ValidationError("invalid_save_code", "Save code must be a 4-digit number")
        return text

    def get_save_code(self, code: str | int | None) -> Optional[SaveCode]:
        try:
            text = self.normalize_save_code(code)
        except ValidationError:
            return None
        raw = self.store.read_json(self.store.save_code_path(text))
        if not isinstance(raw, dict):
            return None
        return SaveCode(**raw)

    def create_save_code(self, code: str | int | None) -> dict:
        try:
            text = self.normalize_save_code(code)
            if self.store.save_code_path(text).exists():
                raise PreconditionError("save_code_exists", f"Save code {text} is already taken")
        except GameError as exc:
            return {"ok": False, "reason": exc.message, "code": exc.code, "save_code": None}
        save_code = SaveCode(code=text)
        self.store.write_json(self.store.save_code_path(text), save_code.model_dump(mode="json"))
        log.info("Created save code %s", text)
        return {"ok": True, "reason": "", "code": "ok", "save_code": save_code}

    def characters_by_code(self, code: str | int | None) -> List[Character]:
        try:
            text = self.normalize_save_code(code)
        except ValidationError:
            return []
        found = [character for character in self.all_characters() if character.save_code == text]
        return sorted(found, key=lambda character: character.id)

    # ------------------------------------------------------------------
    # Character persistence
    # ------------------------------------------------------------------
    def all_characters(self) -> List[Character]:
        characters = []
        for character_id in sorted(self.store.iter_character_ids()):
            character = self.load_character(character_id)
            if character is not None:
                characters.append(character)
        return characters

    def load_character(self, character_id: int) -> Optional[Character]:
        raw = self.store.read_json(self.store.character_path(character_id))
        if not raw:
            return None
        character = Character(**raw)
        character.ensure_bounds()
        return character

    def save_character(self, character: Character, expected_revision: int | None = None) -> Character:
        """Write ``character``; with ``expected_revision`` refuse stale snapshots."""
        path = self.store.character_path(character.id)
        stored = self.store.read_json(path)
        stored_revision = int(stored.get("revision", 0)) if isinstance(stored, dict) else 0
        if expected_revision is not None and stored_revision != expected_revision:
            log.warning(
                "Revision conflict for character %s: expected %s, stored %s",
                character.id,
                expected_revision,
                stored_revision,
            )
            raise ConflictError(
                "conflict", "The character was changed elsewhere, try again."
            )
        saved = character.snapshot()
        saved.ensure_bounds()
        saved.revision = stored_revision + 1
        self.store.write_json(path, saved.model_dump(mode="json"))
        return saved

    def delete_character(self, character_id: int) -> bool:
        removed = self.store.delete_character_files(character_id)
        if not removed:
            return False
        for user_id in list(self.store.iter_session_user_ids()):
            session = self.load_session(user_id)
            if session and session.character_id == character_id:
                session.character_id = None
                self.store.write_json(self.store.session_path(user_id), session.model_dump(mode="json"))
        log.info("Deleted character %s", character_id)
        return True

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------
    def _failure(self, exc: GameError, character: Optional[Character], **extra: Any) -> dict:
        outcome = {"ok": False, "reason": exc.message, "code": exc.code, "character": character}
        outcome.update(extra)
        return outcome

    def _mutate(self, character_id: int, mutation: Mutation) -> dict:
        """Load, apply ``mutation`` and save with a revision check.

        Any :class:`GameError` becomes a failed outcome carrying the stored,
        unchanged snapshot.
        """
        character = self.load_character(character_id)
        if character is None:
            return self._failure(NotFoundError("character_not_found", "Character not found"), None)
        try:
            updated, extra = mutation(character)
            saved = self.save_character(updated, expected_revision=character.revision)
        except GameError as exc:
            return self._failure(exc, character)
        outcome = {"ok": True, "reason": "", "code": "ok", "character": saved}
        outcome.update(extra)
        return outcome

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_character(self, save_code: str | int | None, payload: Mapping[str, Any]) -> dict:
        balance = self.get_balance_profile()
        try:
            code = self.normalize_save_code(save_code)
            if self.get_save_code(code) is None:
                raise NotFoundError("save_code_not_found", "Save code not found")
            character = engine.create_character(
                {**dict(payload), "save_code": code}, self.rng, balance.creation
            )
        except GameError as exc:
            return self._failure(exc, None, relationships=[])

        character.id = self.store.next_character_id()
        saved = self.save_character(character)
        relatives = family.seed_family(saved.id, self.rng, balance.family)
        self._write_relationships(saved.id, relatives)
        log.info("Created character %s (%s) for save code %s", saved.id, saved.name, code)
        return {"ok": True, "reason": "", "code": "ok", "character": saved, "relationships": relatives}

    # ------------------------------------------------------------------
    # Life progression
    # ------------------------------------------------------------------
    def age_up(self, character_id: int) -> dict:
        events, _ = self._catalogs()
        balance = self.get_balance_profile()

        def mutation(character: Character):
            updated, event = engine.age_up(character, events, self.rng, balance)
            changes = engine.describe_changes(character, updated)
            return updated, {"event": event, "changes": changes}

        outcome = self._mutate(character_id, mutation)
        outcome.setdefault("event", None)
        if outcome["ok"]:
            event = outcome["event"]
            log.info(
                "Character %s aged to %s (%s)",
                character_id,
                outcome["character"].age,
                event.title if event else "no event",
            )
        return outcome

    def perform_career_action(
        self,
        character_id: int,
        action: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> dict:
        _, careers = self._catalogs()
        balance = self.get_balance_profile()

        def mutation(character: Character):
            updated, details = career_rules.perform(
                character,
                action,
                careers=careers,
                params=params,
                rng=self.rng,
                balance=balance.career,
            )
            return updated, {"action": action, "details": details}

        return self._mutate(character_id, mutation)

    def perform_activity(self, character_id: int, activity_id: str) -> dict:
        activity = find_activity(self._activities, activity_id)
        if activity is None:
            character = self.load_character(character_id)
            return self._failure(
                NotFoundError("activity_not_found", f"Unknown activity: {activity_id}"), character
            )

        def mutation(character: Character):
            updated = engine.perform_activity(character, activity)
            return updated, {"activity": activity, "changes": engine.describe_changes(character, updated)}

        return self._mutate(character_id, mutation)

    def apply_activity(
        self,
        character_id: int,
        effects: Mapping[str, float],
        cost: int = 0,
        asset: Optional[str] = None,
    ) -> dict:
        def mutation(character: Character):
            updated = engine.apply_activity(character, cost, effects, asset=asset)
            return updated, {"changes": engine.describe_changes(character, updated)}

        return self._mutate(character_id, mutation)

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------
    def _write_relationships(self, character_id: int, relationships: List[Relationship]) -> None:
        payload = [rel.model_dump(mode="json") for rel in relationships]
        self.store.write_json(self.store.relationships_path(character_id), payload)

    def list_relationships(self, character_id: int) -> List[Relationship]:
        raw = self.store.read_json(self.store.relationships_path(character_id))
        if not isinstance(raw, list):
            return []
        return [Relationship(**row) for row in raw if isinstance(row, dict)]

    def spend_time(self, character_id: int, relationship_id: int | None = None) -> dict:
        relationships = self.list_relationships(character_id)
        balance = self.get_balance_profile()
        touched: List[Relationship] = []

        def mutation(character: Character):
            if relationship_id is None:
                updated, relatives = family.spend_time_with_all(
                    character, relationships, self.rng, balance.family
                )
            else:
                target = next((rel for rel in relationships if rel.id == relationship_id), None)
                if target is None:
                    raise NotFoundError("relationship_not_found", "Relationship not found")
                updated, relative, _ = family.spend_time(character, target, self.rng, balance.family)
                relatives = [relative]
            touched.extend(relatives)
            return updated, {}

        outcome = self._mutate(character_id, mutation)
        if outcome["ok"]:
            by_id = {rel.id: rel for rel in touched}
            merged = [by_id.get(rel.id, rel) for rel in relationships]
            self._write_relationships(character_id, merged)
            outcome["relationships"] = merged
        else:
            outcome["relationships"] = relationships
        return outcome

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def link_session(self, user_id: int, code: str | int | None, character_id: int | None = None) -> Session:
        text = self.normalize_save_code(code)
        if self.get_save_code(text) is None:
            raise NotFoundError("save_code_not_found", "Save code not found")
        if character_id is not None:
            character = self.load_character(character_id)
            if character is None or character.save_code != text:
                raise NotFoundError("character_not_found", "Character not found for this save code")
        session = Session(user_id=user_id, save_code=text, character_id=character_id)
        self.store.write_json(self.store.session_path(user_id), session.model_dump(mode="json"))
        return session

    def load_session(self, user_id: int) -> Optional[Session]:
        raw = self.store.read_session(user_id)
        if raw is None:
            return None
        return Session(**raw)

    def active_character(self, user_id: int) -> Optional[Character]:
        session = self.load_session(user_id)
        if session is None or session.character_id is None:
            return None
        return self.load_character(session.character_id)


__all__ = ["GameService", "SAVE_CODE_PATTERN"]
