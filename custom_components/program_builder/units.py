"""Weight and distance unit conversion.

Inputs are free-form strings typed by the user ("135 lbs", "60kg", "400m"),
so parsing is forgiving and every helper returns a sentinel (0 or "") instead
of raising when a value is not computable.
"""

from __future__ import annotations

import re

from .const import (
    DISTANCE_FT,
    DISTANCE_M,
    DISTANCE_MI,
    DISTANCE_TYPES,
    DISTANCE_YD,
    KG_PER_LB,
    METERS_PER_UNIT,
    WEIGHT_KILOS,
    WEIGHT_POUNDS,
    WEIGHT_TYPES,
)

_NON_NUMERIC = re.compile(r"[^\d.]")
_NUMBER_PREFIX = re.compile(r"^\d*\.?\d+")

_SUFFIXES = {
    WEIGHT_POUNDS: " lbs",
    WEIGHT_KILOS: " kg",
    DISTANCE_M: "m",
    DISTANCE_FT: "ft",
    DISTANCE_YD: "yd",
    DISTANCE_MI: "mi",
}


def extract_numeric_weight(text: str | None) -> float:
    """Strip everything but digits and dots, then parse; 0 on failure.

    Mirrors a lenient float parse: the longest leading numeric prefix wins,
    so "1.2.3" reads as 1.2.
    """
    if not text:
        return 0.0
    cleaned = _NON_NUMERIC.sub("", str(text))
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_weight(value: float, weight_type: str) -> str:
    if value <= 0:
        return ""
    suffix = _SUFFIXES.get(weight_type, "")
    return f"{_format_number(value)}{suffix}"


def detect_weight_type(text: str, default: str = WEIGHT_POUNDS) -> str:
    """Guess the unit family of a free-form value from its suffix."""
    raw = str(text or "").lower()
    if "kg" in raw:
        return WEIGHT_KILOS
    if "lb" in raw:
        return WEIGHT_POUNDS
    if "mi" in raw:
        return DISTANCE_MI
    if "ft" in raw:
        return DISTANCE_FT
    if "yd" in raw:
        return DISTANCE_YD
    if "m" in raw:
        return DISTANCE_M
    return default


def convert_weight(value: float, from_type: str, to_type: str) -> float:
    """Convert within a unit family; 0 signals incompatible units."""
    if from_type == to_type and (from_type in WEIGHT_TYPES or from_type in DISTANCE_TYPES):
        return value
    if from_type in WEIGHT_TYPES and to_type in WEIGHT_TYPES:
        in_kg = value * KG_PER_LB if from_type == WEIGHT_POUNDS else value
        return in_kg / KG_PER_LB if to_type == WEIGHT_POUNDS else in_kg
    if from_type in DISTANCE_TYPES and to_type in DISTANCE_TYPES:
        in_meters = value * METERS_PER_UNIT[from_type]
        return in_meters / METERS_PER_UNIT[to_type]
    return 0.0


def calculate_weight_from_percentage(max_weight: float, percentage: float, weight_type: str) -> str:
    """Percentage of a max, rounded to plate increments (2.5 lb, 1 kg)."""
    if max_weight <= 0 or percentage <= 0:
        return ""
    raw = max_weight * percentage / 100
    if weight_type == WEIGHT_POUNDS:
        rounded = _round_half_up(raw / 2.5) * 2.5
    else:
        rounded = float(_round_half_up(raw))
    return format_weight(rounded, weight_type)


def calculate_percentage_from_weight(current_weight: float, max_weight: float) -> int:
    if current_weight <= 0 or max_weight <= 0:
        return 0
    return _round_half_up(current_weight / max_weight * 100)


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; gym math rounds .5 up.
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def convert_max_weight(max_weight: str, from_type: str, to_type: str) -> str:
    """Render a stored max in another unit; the stored text if incompatible."""
    if from_type == to_type:
        return max_weight
    value = extract_numeric_weight(max_weight)
    converted = convert_weight(value, from_type, to_type)
    if converted <= 0:
        return max_weight
    if to_type == DISTANCE_MI:
        return f"{converted:.2f}mi"
    return format_weight(_round_half_up(converted), to_type)
