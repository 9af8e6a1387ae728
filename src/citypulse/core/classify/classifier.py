"""지표 분류 레지스트리 (단위, 아이콘, 심각도 색상).

지표 이름별 동작은 아래 테이블로만 정의합니다. 새 지표는 METRIC_REGISTRY /
SEVERITY_RULES에 항목을 추가하면 되고, 조회 실패 시 기본 항목을 사용합니다.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from citypulse.core.dto.internal.dashboard import ClassifiedMetric, MetricClassification
from citypulse.core.types import DEFAULT_ICON, SeverityColor


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class SeverityRule:
    """임계값 규칙. bands는 위에서부터 평가하며 `value > threshold`인 첫 항목이 적용됩니다."""

    bands: tuple[tuple[float, SeverityColor], ...]
    otherwise: SeverityColor = SeverityColor.NOMINAL

    def evaluate(self, value: float) -> SeverityColor:
        for threshold, color in self.bands:
            if value > threshold:
                return color
        return self.otherwise


METRIC_REGISTRY: Final[dict[str, MetricClassification]] = {
    "temperature": MetricClassification(unit="°C", icon="thermometer"),
    "humidity": MetricClassification(unit="%", icon="droplet"),
    "air_quality": MetricClassification(unit="AQI", icon="wind"),
    "energy_consumption": MetricClassification(unit="kWh", icon="zap"),
    "traffic_density": MetricClassification(unit="%", icon="car"),
    "waste_level": MetricClassification(unit="%", icon="trash"),
    "water_quality": MetricClassification(unit="pH", icon="water"),
    "noise_level": MetricClassification(unit="dB", icon="volume"),
}

DEFAULT_CLASSIFICATION: Final[MetricClassification] = MetricClassification(
    unit="", icon=DEFAULT_ICON
)

SEVERITY_RULES: Final[dict[str, SeverityRule]] = {
    "temperature": SeverityRule(
        bands=((30.0, SeverityColor.CRITICAL), (20.0, SeverityColor.WARNING)),
    ),
    "humidity": SeverityRule(
        bands=((80.0, SeverityColor.INFO), (50.0, SeverityColor.NOMINAL)),
        otherwise=SeverityColor.CAUTION,
    ),
    "air_quality": SeverityRule(
        bands=((150.0, SeverityColor.CRITICAL), (100.0, SeverityColor.WARNING)),
    ),
}

# 위 테이블에 없는 모든 지표 (레지스트리에 있는 지표 포함)
DEFAULT_SEVERITY_RULE: Final[SeverityRule] = SeverityRule(
    bands=((50.0, SeverityColor.CRITICAL), (30.0, SeverityColor.WARNING)),
)


def classify(metric_name: str, raw_value: str) -> MetricClassification:
    """지표 이름으로 단위/아이콘을 조회합니다. 값은 현재 조회에 쓰이지 않습니다."""
    return METRIC_REGISTRY.get(metric_name, DEFAULT_CLASSIFICATION)


def parse_numeric(raw_value: str) -> float | None:
    """원본 값을 float으로 해석합니다. 숫자가 아니거나 NaN이면 None."""
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def severity(metric_name: str, raw_value: str) -> SeverityColor:
    """지표 값의 심각도 밴드를 계산합니다. 숫자가 아닌 값은 NEUTRAL."""
    value = parse_numeric(raw_value)
    if value is None:
        return SeverityColor.NEUTRAL
    rule = SEVERITY_RULES.get(metric_name, DEFAULT_SEVERITY_RULE)
    return rule.evaluate(value)


def display_name(metric_name: str) -> str:
    """snake_case 지표 이름을 표시용 라벨로 변환합니다 ("air_quality" → "Air Quality")."""
    words = [word for word in metric_name.split("_") if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def classify_metric(metric_name: str, raw_value: str) -> ClassifiedMetric:
    """단위/아이콘/심각도/라벨을 한 번에 계산한 ClassifiedMetric을 반환합니다."""
    classification = classify(metric_name, raw_value)
    return ClassifiedMetric(
        metric_name=metric_name,
        display_name=display_name(metric_name),
        raw_value=raw_value,
        unit=classification.unit,
        icon=classification.icon,
        severity_color=severity(metric_name, raw_value),
    )
