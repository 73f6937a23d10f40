"""Filesystem-backed persistence for save codes, characters and catalogs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..models import CareerDefinition, LifeEventDefinition
from .catalog import default_career_rows, default_event_rows

_SUBDIRS = ("saves", "characters", "relationships", "sessions")


class DataStore:
    """Utility wrapper around the project's data directories."""

    def __init__(self, base_dir: Path | str | None = None):
        default_base = Path(__file__).resolve().parents[2]
        if base_dir is None:
            resolved_base = default_base
        else:
            resolved_base = Path(base_dir).expanduser()
            if not resolved_base.is_absolute():
                resolved_base = default_base / resolved_base
        resolved_base = resolved_base.resolve()
        self.base_dir = resolved_base
        self._base_anchor = resolved_base
        self._set_data_dir(self.base_dir / "data")
        self._ensure_dirs()

    def _set_data_dir(self, data_dir: Path, catalog_dir: Path | None = None) -> None:
        self.data_dir = data_dir
        self.saves_dir = data_dir / "saves"
        self.characters_dir = data_dir / "characters"
        self.relationships_dir = data_dir / "relationships"
        self.sessions_dir = data_dir / "sessions"
        self.catalog_dir = catalog_dir or data_dir / "catalog"

    def _coerce_path(self, value: Path | str, relative_to: Path) -> Path:
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = relative_to / path
        return path.resolve()

    def _ensure_dirs(self) -> None:
        for name in _SUBDIRS:
            getattr(self, f"{name}_dir").mkdir(parents=True, exist_ok=True)
        self.catalog_dir.mkdir(parents=True, exist_ok=True)

    def configure_paths(self, paths: dict | None) -> None:
        """Apply path overrides from configuration."""

        if not isinstance(paths, dict):
            self._ensure_dirs()
            return

        base_override = paths.get("base_dir")
        if base_override is not None:
            base_dir = self._coerce_path(base_override, self._base_anchor)
        else:
            base_dir = self._base_anchor
        self.base_dir = base_dir

        data_dir_value = paths.get("data_dir")
        catalog_value = paths.get("catalog_dir") or paths.get("catalog")

        data_dir = base_dir / "data"
        if data_dir_value is not None:
            data_dir = self._coerce_path(data_dir_value, base_dir)
        catalog_dir = None
        if catalog_value is not None:
            catalog_dir = self._coerce_path(catalog_value, base_dir)

        self._set_data_dir(data_dir, catalog_dir)
        self._ensure_dirs()

    # ------------------------------------------------------------------
    # Generic JSON helpers
    # ------------------------------------------------------------------
    def read_json(self, path: Path):
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def write_json(self, path: Path, data) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=2)

    # ------------------------------------------------------------------
    # Domain specific helpers
    # ------------------------------------------------------------------
    def save_code_path(self, code: str) -> Path:
        return self.saves_dir / f"{code}.json"

    def character_path(self, character_id: int) -> Path:
        return self.characters_dir / f"{character_id}.json"

    def relationships_path(self, character_id: int) -> Path:
        return self.relationships_dir / f"{character_id}.json"

    def session_path(self, user_id: int) -> Path:
        return self.sessions_dir / f"{user_id}.json"

    @property
    def events_path(self) -> Path:
        return self.catalog_dir / "life_events.json"

    @property
    def careers_path(self) -> Path:
        return self.catalog_dir / "careers.json"

    def iter_character_ids(self) -> Iterable[int]:
        for entry in self.characters_dir.glob("*.json"):
            try:
                yield int(entry.stem)
            except ValueError:
                continue

    def next_character_id(self) -> int:
        return max(self.iter_character_ids(), default=0) + 1

    def delete_character_files(self, character_id: int) -> bool:
        removed = False
        for path in (self.character_path(character_id), self.relationships_path(character_id)):
            if path.exists():
                path.unlink()
                removed = True
        return removed

    # ------------------------------------------------------------------
    # Catalog seeding
    # ------------------------------------------------------------------
    def _load_or_seed(self, path: Path, defaults: Callable[[], list]) -> list:
        try:
            rows = self.read_json(path)
        except json.JSONDecodeError:
            rows = None
        if not isinstance(rows, list) or not rows:
            rows = defaults()
            self.write_json(path, rows)
        return rows

    def load_or_seed_events(self) -> List[LifeEventDefinition]:
        rows = self._load_or_seed(self.events_path, default_event_rows)
        return [LifeEventDefinition(**row) for row in rows]

    def load_or_seed_careers(self) -> List[CareerDefinition]:
        rows = self._load_or_seed(self.careers_path, default_career_rows)
        return [CareerDefinition(**row) for row in rows]

    def iter_session_user_ids(self) -> Iterable[int]:
        for entry in self.sessions_dir.glob("*.json"):
            try:
                yield int(entry.stem)
            except ValueError:
                continue

    def read_session(self, user_id: int) -> Optional[dict]:
        raw = self.read_json(self.session_path(user_id))
        return raw if isinstance(raw, dict) else None
