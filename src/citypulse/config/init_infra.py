from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiohttp

from citypulse.common.logger import PipelineLogger

logger = PipelineLogger.get_logger("init_infra", "config")


@asynccontextmanager
async def init_http_session(connect_timeout: float) -> AsyncIterator[aiohttp.ClientSession]:
    """스냅샷 클라이언트와 알림 스트림이 공유하는 aiohttp 세션 초기화 및 정리

    요청별 타임아웃은 각 클라이언트가 지정하므로 세션에는 연결 타임아웃만 둡니다.
    """
    connector = aiohttp.TCPConnector(limit=10, limit_per_host=4)
    timeout = aiohttp.ClientTimeout(total=None, sock_connect=connect_timeout)
    session = aiohttp.ClientSession(connector=connector, timeout=timeout)
    logger.info("HTTP 세션 생성")
    try:
        yield session
    finally:
        await session.close()
        logger.info("HTTP 세션 종료")
