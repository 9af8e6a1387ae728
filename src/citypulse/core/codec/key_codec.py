from __future__ import annotations

from typing import Any, Final

from citypulse.core.dto.internal.dashboard import MetricKeyParts

KEY_SEPARATOR: Final[str] = ":"
KEY_SEGMENT_COUNT: Final[int] = 3


def parse(key: Any) -> MetricKeyParts | None:
    """지표 키("<namespace>:<metric>:<city>")를 분해합니다.

    세그먼트 수가 3이 아니거나 빈 세그먼트가 있으면 None을 반환합니다.
    예외를 발생시키지 않는 전함수입니다.
    """
    if not isinstance(key, str):
        return None

    segments = key.split(KEY_SEPARATOR)
    if len(segments) != KEY_SEGMENT_COUNT:
        return None

    namespace, metric_name, city_name = segments
    if not (namespace and metric_name and city_name):
        return None

    return MetricKeyParts(namespace=namespace, metric_name=metric_name, city_name=city_name)
