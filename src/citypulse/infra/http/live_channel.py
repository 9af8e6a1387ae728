"""변경 알림 스트림 클라이언트 (GET /data/live, text/event-stream)

이벤트 payload는 해석하지 않으며 수신 자체가 재조회 신호입니다.
재연결은 하지 않습니다. 전송 오류, 비 2xx 응답, 스트림 종료는 모두
PushChannelError로 상위에 전달되고, 재구독 여부는 호출자가 결정합니다.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import aiohttp

from citypulse.common.exceptions import TRANSPORT_EXCEPTIONS, PushChannelError
from citypulse.common.logger import PipelineLogger
from citypulse.config.settings import join_url
from citypulse.core.dto.internal.live import LiveEvent

logger = PipelineLogger.get_logger("live_channel", "infra")


class EventStreamParser:
    """text/event-stream 라인 파서

    빈 줄에서 누적된 필드를 LiveEvent 하나로 내보냅니다.
    event/data 필드가 하나도 없는 블록(주석만 있는 keep-alive 등)은 무시합니다.
    """

    def __init__(self) -> None:
        self._last_event_id: str | None = None
        self._reset()

    def _reset(self) -> None:
        self._event_type = ""
        self._data: list[str] = []
        self._has_fields = False

    def feed_line(self, line: str) -> LiveEvent | None:
        if line == "":
            return self._dispatch()
        if line.startswith(":"):
            return None

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event_type = value
            self._has_fields = True
        elif name == "data":
            self._data.append(value)
            self._has_fields = True
        elif name == "id" and "\0" not in value:
            self._last_event_id = value
        # retry 등 나머지 필드는 재연결을 하지 않으므로 무시
        return None

    def _dispatch(self) -> LiveEvent | None:
        if not self._has_fields:
            self._reset()
            return None
        event = LiveEvent(
            event=self._event_type or "message",
            data="\n".join(self._data),
            event_id=self._last_event_id,
        )
        self._reset()
        return event


class LiveChannel:
    """변경 알림 스트림 구독 클라이언트

    events()를 호출할 때마다 새 요청을 엽니다.
    close()는 진행 중인 응답을 끊고, 직접 생성한 세션을 정리합니다.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        live_path: str = "/data/live",
        connect_timeout: float = 10.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = base_url
        self.url = join_url(base_url, live_path)
        self.connect_timeout = connect_timeout
        self._session = session
        self._owns_session = session is None
        self._response: aiohttp.ClientResponse | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    @property
    def is_open(self) -> bool:
        return self._response is not None and not self._response.closed

    async def events(self) -> AsyncIterator[LiveEvent]:
        """스트림 이벤트를 순서대로 내보냅니다.

        Raises:
            PushChannelError: 연결 실패, 비 2xx 응답, 전송 오류, 스트림 종료
        """
        session = await self._ensure_session()
        parser = EventStreamParser()
        timeout = aiohttp.ClientTimeout(
            total=None, sock_connect=self.connect_timeout, sock_read=None
        )

        try:
            async with session.get(
                self.url,
                timeout=timeout,
                headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
            ) as response:
                if not 200 <= response.status < 300:
                    raise PushChannelError(
                        f"live channel rejected: HTTP {response.status}",
                        status=response.status,
                        url=self.url,
                    )

                self._response = response
                logger.info(f"변경 알림 스트림 연결: {self.url}")

                async for raw_line in response.content:
                    line = raw_line.decode("utf-8", errors="replace").rstrip("\r\n")
                    event = parser.feed_line(line)
                    if event is not None:
                        yield event
        except TRANSPORT_EXCEPTIONS as e:
            raise PushChannelError(
                f"live channel transport error: {type(e).__name__}: {e}", url=self.url
            ) from e
        finally:
            self._response = None

        raise PushChannelError("live channel closed by server", url=self.url)

    async def close(self) -> None:
        """진행 중인 스트림과 직접 생성한 세션을 종료합니다."""
        response = self._response
        self._response = None
        if response is not None and not response.closed:
            response.close()

        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
