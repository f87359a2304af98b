from __future__ import annotations

import pytest

from custom_components.program_builder.units import (
    calculate_percentage_from_weight,
    calculate_weight_from_percentage,
    convert_max_weight,
    convert_weight,
    detect_weight_type,
    extract_numeric_weight,
    format_weight,
)


def test_extract_numeric_weight_is_forgiving() -> None:
    assert extract_numeric_weight("135 lbs") == 135.0
    assert extract_numeric_weight("62.5kg") == 62.5
    assert extract_numeric_weight("1.2.3") == 1.2
    assert extract_numeric_weight("BW") == 0.0
    assert extract_numeric_weight("") == 0.0
    assert extract_numeric_weight(None) == 0.0


def test_incompatible_units_convert_to_zero() -> None:
    assert convert_weight(10, "pounds", "distance-m") == 0
    assert convert_weight(10, "distance-mi", "kilos") == 0
    assert convert_weight(10, "stones", "stones") == 0


def test_weight_conversion_round_trips() -> None:
    for value in (1.0, 45.0, 137.5, 500.0):
        there = convert_weight(value, "pounds", "kilos")
        assert convert_weight(there, "kilos", "pounds") == pytest.approx(value)
    assert convert_weight(100, "kilos", "pounds") == pytest.approx(220.462, rel=1e-4)


def test_distance_conversion_round_trips() -> None:
    units = ["distance-m", "distance-ft", "distance-yd", "distance-mi"]
    for a in units:
        for b in units:
            assert convert_weight(convert_weight(400.0, a, b), b, a) == pytest.approx(400.0)
    assert convert_weight(1, "distance-mi", "distance-m") == pytest.approx(1609.34)
    assert convert_weight(3, "distance-ft", "distance-yd") == pytest.approx(1.0)


def test_format_weight_suffixes() -> None:
    assert format_weight(150, "pounds") == "150 lbs"
    assert format_weight(147.5, "pounds") == "147.5 lbs"
    assert format_weight(60, "kilos") == "60 kg"
    assert format_weight(400, "distance-m") == "400m"
    assert format_weight(0, "pounds") == ""


def test_detect_weight_type() -> None:
    assert detect_weight_type("60kg") == "kilos"
    assert detect_weight_type("135 lbs") == "pounds"
    assert detect_weight_type("1 mi") == "distance-mi"
    assert detect_weight_type("100 yd") == "distance-yd"
    assert detect_weight_type("400m") == "distance-m"
    assert detect_weight_type("135", default="kilos") == "kilos"


def test_percentage_of_max_rounds_to_plates() -> None:
    assert calculate_weight_from_percentage(200, 75, "pounds") == "150 lbs"
    # 146 lbs rounds to the nearest 2.5
    assert calculate_weight_from_percentage(200, 73, "pounds") == "145 lbs"
    assert calculate_weight_from_percentage(100, 72.5, "kilos") == "73 kg"
    assert calculate_weight_from_percentage(0, 75, "pounds") == ""


def test_percentage_from_weight() -> None:
    assert calculate_percentage_from_weight(150, 200) == 75
    assert calculate_percentage_from_weight(0, 200) == 0
    assert calculate_percentage_from_weight(150, 0) == 0


def test_convert_max_weight_display() -> None:
    assert convert_max_weight("100", "kilos", "pounds") == "220 lbs"
    assert convert_max_weight("225", "pounds", "pounds") == "225"
    assert convert_max_weight("5000", "distance-m", "distance-mi") == "3.11mi"
    assert convert_max_weight("10", "pounds", "distance-m") == "10"
