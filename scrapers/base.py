"""
Base Scraper
所有抓取器的抽象基类
"""
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar
import asyncio
import logging
import time


logger = logging.getLogger(__name__)

T = TypeVar("T")  # 泛型返回类型


class BaseScraper(ABC, Generic[T]):
    """
    抓取器抽象基类
    所有具体抓取器都需要继承此类并实现抽象方法
    """

    def __init__(self):
        self._session = None

    @property
    @abstractmethod
    def name(self) -> str:
        """返回抓取器名称"""
        pass

    @abstractmethod
    async def get_details(self, item_id: str) -> Optional[T]:
        """
        获取单个项目的详细信息

        Args:
            item_id: 项目ID

        Returns:
            项目详情, 获取失败返回 None
        """
        pass

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()

    async def close(self):
        """清理资源"""
        if self._session is not None:
            await self._session.aclose()
            self._session = None

    def _log_error(self, message: str, error: Exception):
        """记录错误日志"""
        logger.error(f"[{self.name}] {message}: {error}")


class RateLimitedScraper(BaseScraper[T]):
    """
    带速率限制的抓取器基类
    """

    def __init__(self, requests_per_second: float = 1.0):
        super().__init__()
        self._rate_limit = requests_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()

    async def _wait_for_rate_limit(self):
        """等待满足速率限制"""
        async with self._lock:
            current_time = time.monotonic()
            time_since_last = current_time - self._last_request_time
            min_interval = 1.0 / self._rate_limit

            if time_since_last < min_interval:
                await asyncio.sleep(min_interval - time_since_last)

            self._last_request_time = time.monotonic()
