"""Exercise catalog loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .const import DEFAULT_WEIGHT_TYPE, DISTANCE_M
from .models import Exercise, IdFactory, new_id, new_set

_CATEGORY_DEFAULTS: dict[str, dict[str, str]] = {
    "cardio": {"rep_type": "time", "weight_type": DISTANCE_M, "intensity_type": "absolute"},
    "bodyweight": {"rep_type": "range", "weight_type": DEFAULT_WEIGHT_TYPE, "intensity_type": "rpe"},
}
_FALLBACK_DEFAULTS = {"rep_type": "fixed", "weight_type": DEFAULT_WEIGHT_TYPE, "intensity_type": "rpe"}


def defaults_for_category(category: str | None) -> dict[str, str]:
    return dict(_CATEGORY_DEFAULTS.get(str(category or "").lower(), _FALLBACK_DEFAULTS))


class ExerciseCatalog:
    """Loads bundled exercise definitions from JSON and caches them."""

    def __init__(self, data_path: Path | None = None) -> None:
        self._data_path = data_path or Path(__file__).parent / "data" / "exercises.json"
        self._cache: dict[str, Any] | None = None
        self._by_id: dict[str, dict[str, Any]] = {}

    async def async_load(self) -> dict[str, Any]:
        if self._cache is not None:
            return self._cache

        raw = json.loads(self._data_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raw = {}
        raw.setdefault("exercises", [])
        exercises = raw["exercises"] if isinstance(raw["exercises"], list) else []
        self._by_id = {
            str(ex["id"]): ex for ex in exercises if isinstance(ex, dict) and str(ex.get("id") or "").strip()
        }
        self._cache = raw
        return self._cache

    @property
    def loaded(self) -> bool:
        return self._cache is not None

    def exercises(self) -> list[dict[str, Any]]:
        return list(self._by_id.values())

    def get(self, exercise_id: str) -> dict[str, Any] | None:
        return self._by_id.get(str(exercise_id or ""))

    def search(self, text: str) -> list[dict[str, Any]]:
        needle = str(text or "").strip().lower()
        if not needle:
            return sorted(self._by_id.values(), key=lambda ex: str(ex.get("name") or "").lower())
        hits = [
            ex
            for ex in self._by_id.values()
            if needle in str(ex.get("name") or "").lower()
            or needle in str(ex.get("primary_muscle") or "").lower()
            or needle in str(ex.get("category") or "").lower()
        ]
        hits.sort(key=lambda ex: str(ex.get("name") or "").lower())
        return hits

    def to_exercise(self, entry: dict[str, Any], id_factory: IdFactory = new_id) -> Exercise:
        """Seed a workout exercise from a catalog entry."""
        defaults = defaults_for_category(entry.get("category"))
        return Exercise(
            id=id_factory(),
            name=str(entry.get("name") or "New Exercise"),
            notes=str(entry.get("description") or ""),
            sets=[new_set(id_factory)],
            library_exercise_id=str(entry.get("id") or "") or None,
            **defaults,
        )
