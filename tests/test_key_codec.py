from __future__ import annotations

import pytest

from citypulse.core.codec.key_codec import parse
from tests.factory_builders import build_metric_key


@pytest.mark.parametrize(
    ("key", "metric", "city"),
    [
        ("smartcity:temperature:NewYork", "temperature", "NewYork"),
        ("smartcity:air_quality:London", "air_quality", "London"),
        ("other-ns:custom_metric:São Paulo", "custom_metric", "São Paulo"),
    ],
)
def test_parse_valid_key_returns_metric_and_city(key: str, metric: str, city: str) -> None:
    parts = parse(key)

    assert parts is not None
    assert parts.metric_name == metric
    assert parts.city_name == city


def test_parse_keeps_namespace() -> None:
    parts = parse(build_metric_key(namespace="lab"))
    assert parts is not None
    assert parts.namespace == "lab"


@pytest.mark.parametrize(
    "key",
    [
        "",
        "temperature",
        "smartcity:temperature",
        "smartcity:temperature:NewYork:extra",
        ":temperature:NewYork",
        "smartcity::NewYork",
        "smartcity:temperature:",
    ],
)
def test_parse_invalid_shape_returns_none(key: str) -> None:
    assert parse(key) is None


@pytest.mark.parametrize("key", [None, 42, b"smartcity:temperature:NewYork"])
def test_parse_non_string_returns_none(key: object) -> None:
    assert parse(key) is None
