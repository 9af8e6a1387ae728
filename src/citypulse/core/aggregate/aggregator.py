"""RawSnapshot → 도시별 CityGroup 집계

출력 순서(도시 순서, 도시 내 지표 순서)는 입력 매핑의 순회 순서를 그대로 따릅니다.
dict는 삽입 순서를 보존하므로 같은 dict에 대해 결과는 결정적이며, 순회 순서가
정의되지 않은 매핑을 넘기면 그룹 구성은 같지만 그룹 내 순서는 순회 순서에 따릅니다.
"""

from __future__ import annotations

from citypulse.common.logger import PipelineLogger
from citypulse.core.classify.classifier import classify_metric
from citypulse.core.codec.key_codec import parse
from citypulse.core.dto.internal.dashboard import CityGroup, ClassifiedMetric
from citypulse.core.types import RawSnapshot

logger = PipelineLogger.get_logger("aggregator", "core")


def aggregate(snapshot: RawSnapshot) -> dict[str, CityGroup]:
    """스냅샷을 도시별로 묶고 각 지표를 분류합니다. 파싱 불가 키는 건너뜁니다."""
    grouped: dict[str, list[ClassifiedMetric]] = {}
    skipped = 0

    for key, value in snapshot.items():
        parts = parse(key)
        if parts is None:
            skipped += 1
            logger.debug(f"파싱할 수 없는 지표 키 건너뜀: {key!r}")
            continue

        grouped.setdefault(parts.city_name, []).append(
            classify_metric(parts.metric_name, value)
        )

    if skipped:
        logger.debug(f"집계 완료: cities={len(grouped)}, skipped_keys={skipped}")

    return {
        city_name: CityGroup(city_name=city_name, metrics=tuple(metrics))
        for city_name, metrics in grouped.items()
    }
