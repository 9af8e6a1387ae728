from __future__ import annotations

import pytest

from citypulse.core.classify.classifier import (
    METRIC_REGISTRY,
    classify,
    classify_metric,
    display_name,
    severity,
)
from citypulse.core.types import DEFAULT_ICON, SeverityColor


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("31", SeverityColor.CRITICAL),
        ("25", SeverityColor.WARNING),
        ("10", SeverityColor.NOMINAL),
        ("abc", SeverityColor.NEUTRAL),
        # 경계값은 다음 밴드로 내려간다
        ("30", SeverityColor.WARNING),
        ("20", SeverityColor.NOMINAL),
    ],
)
def test_temperature_severity(value: str, expected: SeverityColor) -> None:
    assert severity("temperature", value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("81", SeverityColor.INFO),
        ("80", SeverityColor.NOMINAL),
        ("65", SeverityColor.NOMINAL),
        ("50", SeverityColor.CAUTION),
        ("12", SeverityColor.CAUTION),
    ],
)
def test_humidity_severity(value: str, expected: SeverityColor) -> None:
    assert severity("humidity", value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("151", SeverityColor.CRITICAL),
        ("150", SeverityColor.WARNING),
        ("101", SeverityColor.WARNING),
        ("100", SeverityColor.NOMINAL),
    ],
)
def test_air_quality_severity(value: str, expected: SeverityColor) -> None:
    assert severity("air_quality", value) is expected


@pytest.mark.parametrize(
    ("metric", "value", "expected"),
    [
        ("unknown_metric", "60", SeverityColor.CRITICAL),
        ("unknown_metric", "40", SeverityColor.WARNING),
        ("unknown_metric", "10", SeverityColor.NOMINAL),
        ("unknown_metric", "50", SeverityColor.WARNING),
        # 레지스트리에 있어도 전용 규칙이 없으면 기본 규칙
        ("noise_level", "72", SeverityColor.CRITICAL),
        ("waste_level", "31", SeverityColor.WARNING),
    ],
)
def test_default_rule_severity(metric: str, value: str, expected: SeverityColor) -> None:
    assert severity(metric, value) is expected


@pytest.mark.parametrize("value", ["", "  ", "n/a", "nan", "12,5"])
def test_non_numeric_values_are_neutral(value: str) -> None:
    assert severity("temperature", value) is SeverityColor.NEUTRAL


def test_numeric_parse_accepts_whitespace_and_exponent() -> None:
    assert severity("temperature", " 31.5 ") is SeverityColor.CRITICAL
    assert severity("air_quality", "2e2") is SeverityColor.CRITICAL


def test_classify_known_metrics_use_registry() -> None:
    for metric_name, expected in METRIC_REGISTRY.items():
        assert classify(metric_name, "1") == expected
    assert classify("temperature", "22.5").unit == "°C"


def test_classify_unknown_metric_returns_default_entry() -> None:
    result = classify("pollen_count", "7")
    assert result.icon == DEFAULT_ICON == "generic"
    assert result.unit == ""


@pytest.mark.parametrize(
    ("metric", "label"),
    [
        ("air_quality", "Air Quality"),
        ("temperature", "Temperature"),
        ("energy_consumption", "Energy Consumption"),
        ("noise__level", "Noise Level"),
        ("", ""),
    ],
)
def test_display_name(metric: str, label: str) -> None:
    assert display_name(metric) == label


def test_classify_metric_keeps_raw_value_verbatim() -> None:
    metric = classify_metric("mystery", "not-a-number")

    assert metric.raw_value == "not-a-number"
    assert metric.icon == "generic"
    assert metric.unit == ""
    assert metric.severity_color is SeverityColor.NEUTRAL
    assert metric.display_name == "Mystery"


def test_severity_color_exposes_hex_palette() -> None:
    assert SeverityColor.CRITICAL.hex.startswith("#")
    assert len({color.hex for color in SeverityColor}) == len(SeverityColor)
