from __future__ import annotations

from dataclasses import dataclass
from typing import Final

# 스냅샷 재조회를 유발하는 이벤트 이름 (event 필드가 없으면 "message")
REFRESH_EVENT_TYPES: Final[frozenset[str]] = frozenset({"update", "message"})


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class LiveEvent:
    """text/event-stream 프레임 하나. data 내용은 해석하지 않습니다."""

    event: str = "message"
    data: str = ""
    event_id: str | None = None

    @property
    def triggers_refresh(self) -> bool:
        return self.event in REFRESH_EVENT_TYPES
