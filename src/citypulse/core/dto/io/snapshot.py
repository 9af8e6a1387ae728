"""GET /data/all 응답 본문 검증 모듈

백엔드는 "지표 키 → 문자열 값" JSON 객체를 반환합니다. 숫자/불리언 스칼라는
문자열로 정규화하고, null 또는 중첩 값이 섞이면 ValidationError를 발생시킵니다.
"""

from __future__ import annotations

import orjson
from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr, TypeAdapter

SnapshotValue = StrictStr | StrictBool | StrictInt | StrictFloat

_SNAPSHOT_ADAPTER: TypeAdapter[dict[str, SnapshotValue]] = TypeAdapter(
    dict[str, SnapshotValue]
)


def _to_text(value: str | bool | int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        # 1.0 → "1" (JSON 숫자 표기와 동일하게 소수부 .0 제거)
        return str(int(value))
    return value if isinstance(value, str) else str(value)


def parse_snapshot_payload(body: bytes | str) -> dict[str, str]:
    """응답 본문을 RawSnapshot(dict[str, str])으로 변환합니다.

    Raises:
        orjson.JSONDecodeError: JSON이 아닌 본문
        pydantic.ValidationError: 객체가 아니거나 허용되지 않는 값 포함
    """
    decoded = orjson.loads(body)
    validated = _SNAPSHOT_ADAPTER.validate_python(decoded)
    return {key: _to_text(value) for key, value in validated.items()}
