from __future__ import annotations

import asyncio
import json
from itertools import count

from custom_components.program_builder.catalog import ExerciseCatalog, defaults_for_category
from custom_components.program_builder.document import ProgramDocument


def _loaded_catalog() -> ExerciseCatalog:
    catalog = ExerciseCatalog()
    asyncio.run(catalog.async_load())
    return catalog


def test_bundled_catalog_loads() -> None:
    catalog = _loaded_catalog()
    assert catalog.loaded
    assert catalog.get("bb-squat")["name"] == "Barbell Back Squat"
    assert catalog.get("missing") is None
    assert len(catalog.exercises()) >= 10


def test_search_matches_name_and_sorts() -> None:
    catalog = _loaded_catalog()
    names = [ex["name"] for ex in catalog.search("squat")]
    assert names == sorted(names, key=str.lower)
    assert "Barbell Back Squat" in names
    assert [ex["name"] for ex in catalog.search("cardio")] == ["Stationary Bike", "Treadmill Run"]


def test_category_defaults() -> None:
    assert defaults_for_category("cardio") == {
        "rep_type": "time",
        "weight_type": "distance-m",
        "intensity_type": "absolute",
    }
    assert defaults_for_category("Bodyweight")["rep_type"] == "range"
    assert defaults_for_category("barbell")["rep_type"] == "fixed"
    assert defaults_for_category(None)["weight_type"] == "pounds"


def test_add_exercise_from_catalog_seeds_one_set(tmp_path) -> None:
    path = tmp_path / "exercises.json"
    path.write_text(
        json.dumps(
            {
                "exercises": [
                    {"id": "row", "name": "Rower", "category": "cardio", "description": "Easy pace"},
                ]
            }
        ),
        encoding="utf-8",
    )
    catalog = ExerciseCatalog(path)
    asyncio.run(catalog.async_load())
    ids = count(1)
    doc = ProgramDocument(id_factory=lambda: f"id{next(ids)}", catalog=catalog)
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]

    exercise_id = doc.add_exercise(workout.id, "row")

    exercise = workout.find_exercise(exercise_id)
    assert exercise.name == "Rower"
    assert exercise.notes == "Easy pace"
    assert exercise.rep_type == "time"
    assert exercise.library_exercise_id == "row"
    assert len(exercise.sets) == 1

    found, entry = doc.get_exercise_details(exercise_id)
    assert found is exercise
    assert entry["name"] == "Rower"


def test_unknown_catalog_id_falls_back_to_blank_exercise() -> None:
    doc = ProgramDocument(catalog=_loaded_catalog())
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]

    exercise_id = doc.add_exercise(workout.id, "does-not-exist")

    assert workout.find_exercise(exercise_id).name == "New Exercise"
