"""Per-exercise max-weight registry and percentage math."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from .const import ALL_WEIGHT_TYPES, DEFAULT_WEIGHT_TYPE
from .units import (
    calculate_percentage_from_weight,
    calculate_weight_from_percentage,
    convert_max_weight,
    convert_weight,
    detect_weight_type,
    extract_numeric_weight,
)

_LOGGER = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _key(exercise_name: str) -> str:
    return str(exercise_name or "").lower()


@dataclass(frozen=True, slots=True)
class MaxWeightRecord:
    exercise_name: str
    max_weight: str
    weight_type: str
    date: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "exercise_name": self.exercise_name,
            "max_weight": self.max_weight,
            "weight_type": self.weight_type,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MaxWeightRecord:
        weight_type = str(data.get("weight_type") or DEFAULT_WEIGHT_TYPE)
        if weight_type not in ALL_WEIGHT_TYPES:
            weight_type = DEFAULT_WEIGHT_TYPE
        return cls(
            exercise_name=str(data.get("exercise_name") or ""),
            max_weight=str(data.get("max_weight") or ""),
            weight_type=weight_type,
            date=str(data.get("date") or ""),
        )


class MaxWeightRegistry:
    """User's best known performance per exercise, keyed case-insensitively."""

    def __init__(self, records: dict[str, MaxWeightRecord] | None = None) -> None:
        self._records: dict[str, MaxWeightRecord] = dict(records or {})
        self._listeners: list[Callable[[], None]] = []

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def records(self) -> dict[str, MaxWeightRecord]:
        return dict(self._records)

    def get(self, exercise_name: str) -> MaxWeightRecord | None:
        return self._records.get(_key(exercise_name))

    def set(self, exercise_name: str, max_weight: str, weight_type: str = DEFAULT_WEIGHT_TYPE) -> MaxWeightRecord:
        """Create or overwrite the record for an exercise."""
        if weight_type not in ALL_WEIGHT_TYPES:
            _LOGGER.debug("Unknown weight type %s for %s, using %s", weight_type, exercise_name, DEFAULT_WEIGHT_TYPE)
            weight_type = DEFAULT_WEIGHT_TYPE
        record = MaxWeightRecord(
            exercise_name=str(exercise_name),
            max_weight=str(max_weight),
            weight_type=weight_type,
            date=_now_iso(),
        )
        self._records[_key(exercise_name)] = record
        self._notify()
        return record

    def remove(self, exercise_name: str) -> bool:
        if self._records.pop(_key(exercise_name), None) is None:
            return False
        self._notify()
        return True

    def converted_max(self, exercise_name: str, target_type: str) -> str:
        record = self.get(exercise_name)
        if record is None:
            return ""
        return convert_max_weight(record.max_weight, record.weight_type, target_type)

    def weight_to_percentage(self, weight: str, exercise_name: str) -> str:
        """Express a set weight as a percentage of the recorded max ("75%")."""
        record = self.get(exercise_name)
        if record is None:
            return ""
        current = extract_numeric_weight(weight)
        maximum = extract_numeric_weight(record.max_weight)
        if current <= 0 or maximum <= 0:
            return ""
        current_type = detect_weight_type(weight, default=record.weight_type)
        if current_type != record.weight_type:
            current = convert_weight(current, current_type, record.weight_type)
        percentage = calculate_percentage_from_weight(current, maximum)
        if percentage <= 0:
            return ""
        return f"{percentage}%"

    def percentage_to_weight(self, percentage: str, exercise_name: str, target_type: str) -> str:
        """Turn "75%" into a rounded weight string in ``target_type``."""
        record = self.get(exercise_name)
        if record is None:
            return ""
        percent = extract_numeric_weight(str(percentage or "").replace("%", ""))
        maximum = extract_numeric_weight(record.max_weight)
        if percent <= 0 or maximum <= 0:
            return ""
        if record.weight_type != target_type:
            maximum = convert_weight(maximum, record.weight_type, target_type)
        return calculate_weight_from_percentage(maximum, percent, target_type)

    def as_dict(self) -> dict[str, Any]:
        return {"records": {key: rec.as_dict() for key, rec in self._records.items()}}

    def load(self, data: Any) -> None:
        """Replace all records from a stored blob without notifying."""
        records = data.get("records") if isinstance(data, dict) else None
        self._records = {}
        if not isinstance(records, dict):
            return
        for raw in records.values():
            if not isinstance(raw, dict):
                continue
            record = MaxWeightRecord.from_dict(raw)
            if record.exercise_name:
                self._records[_key(record.exercise_name)] = record

    @classmethod
    def from_dict(cls, data: Any) -> MaxWeightRegistry:
        registry = cls()
        registry.load(data)
        return registry
