"""Constants for Program Builder integration."""

from __future__ import annotations

from homeassistant.const import Platform

DOMAIN = "program_builder"

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
]

CONF_NAME = "name"
CONF_WEIGHT_TYPE = "weight_type"

DEFAULT_NAME = "Program Builder"
DEFAULT_PROGRAM_NAME = "My Workout Program"

# Storage keys, one whole-collection blob each.
KEY_PROGRAM = "program"
KEY_WORKOUT_LIBRARY = "workout-library"
KEY_WEEK_LIBRARY = "week-library"
KEY_PROGRAM_LIBRARY = "program-library"
KEY_MAX_WEIGHTS = "user-max-weights"
LIBRARY_KEYS = (KEY_WORKOUT_LIBRARY, KEY_WEEK_LIBRARY, KEY_PROGRAM_LIBRARY)
STORAGE_KEYS = (KEY_PROGRAM, *LIBRARY_KEYS, KEY_MAX_WEIGHTS)

SAVE_DELAY_SECONDS = 1

WEIGHT_POUNDS = "pounds"
WEIGHT_KILOS = "kilos"
DISTANCE_M = "distance-m"
DISTANCE_FT = "distance-ft"
DISTANCE_YD = "distance-yd"
DISTANCE_MI = "distance-mi"

WEIGHT_TYPES = [WEIGHT_POUNDS, WEIGHT_KILOS]
DISTANCE_TYPES = [DISTANCE_M, DISTANCE_FT, DISTANCE_YD, DISTANCE_MI]
ALL_WEIGHT_TYPES = [*WEIGHT_TYPES, *DISTANCE_TYPES]
DEFAULT_WEIGHT_TYPE = WEIGHT_POUNDS

KG_PER_LB = 0.453592
# Meters per unit; meters are the pivot for distance conversions.
METERS_PER_UNIT = {
    DISTANCE_M: 1.0,
    DISTANCE_FT: 0.3048,
    DISTANCE_YD: 0.9144,
    DISTANCE_MI: 1609.34,
}

REP_TYPES = ["fixed", "range", "time"]
INTENSITY_TYPES = ["rpe", "percent", "absolute"]

SIGNAL_PROGRAM_UPDATED = f"{DOMAIN}_program_updated"
