"""최초 스냅샷 조회 실패 시 표시하는 내장 샘플 데이터 (데모 모드)

빈 화면보다 오래된 예시 화면이 낫다는 운영 정책에 따른 정적 데이터입니다.
값은 빌드 시점에 고정되며 계산하지 않습니다. 표시 중에는
DashboardState.is_fallback이 True입니다.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

from citypulse.core.types import RawSnapshot

FALLBACK_CITIES: Final[tuple[str, ...]] = ("NewYork", "London", "Tokyo")

FALLBACK_SNAPSHOT: Final[RawSnapshot] = MappingProxyType(
    {
        "smartcity:temperature:NewYork": "22.5",
        "smartcity:humidity:NewYork": "65",
        "smartcity:air_quality:NewYork": "42",
        "smartcity:temperature:London": "15.2",
        "smartcity:humidity:London": "78",
        "smartcity:air_quality:London": "35",
        "smartcity:temperature:Tokyo": "26.8",
        "smartcity:humidity:Tokyo": "70",
        "smartcity:air_quality:Tokyo": "55",
    }
)
