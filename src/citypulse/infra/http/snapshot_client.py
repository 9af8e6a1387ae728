from __future__ import annotations

import aiohttp

from citypulse.common.exceptions import FETCH_EXCEPTIONS, SnapshotFetchError
from citypulse.common.logger import PipelineLogger
from citypulse.config.settings import join_url
from citypulse.core.dto.io.snapshot import parse_snapshot_payload

logger = PipelineLogger.get_logger("snapshot_client", "infra")


class SnapshotClient:
    """
    전체 스냅샷 조회 클라이언트 (GET /data/all)

    외부에서 세션을 주입하면 그 세션을 사용하고 닫지 않습니다.
    주입하지 않으면 최초 요청 시 세션을 만들고 close()에서 정리합니다.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        snapshot_path: str = "/data/all",
        timeout: float = 5.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = base_url
        self.url = join_url(base_url, snapshot_path)
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> SnapshotClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """HTTP 세션을 생성하거나 재사용합니다."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """직접 생성한 HTTP 세션만 종료합니다."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def fetch_all(self) -> dict[str, str]:
        """전체 스냅샷을 조회합니다.

        Returns:
            지표 키 → 문자열 값 (응답 JSON의 키 순서 유지)

        Raises:
            SnapshotFetchError: 네트워크 실패, 비 2xx 응답, 타임아웃, 잘못된 본문
        """
        session = await self._ensure_session()

        try:
            async with session.get(
                self.url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if not 200 <= response.status < 300:
                    raise SnapshotFetchError(
                        f"snapshot request failed: HTTP {response.status}",
                        status=response.status,
                        url=self.url,
                    )
                body = await response.read()
            snapshot = parse_snapshot_payload(body)
        except FETCH_EXCEPTIONS as e:
            raise SnapshotFetchError(
                f"snapshot request failed: {type(e).__name__}: {e}", url=self.url
            ) from e

        logger.debug(f"스냅샷 수신: keys={len(snapshot)}", url=self.url)
        return snapshot
