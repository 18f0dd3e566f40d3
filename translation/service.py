"""Translation service boundary: prompts, truncation, timeout and soft-fail.

Everything the pipeline sends to the model goes through
``TranslationService.translate``. It never raises for call-level problems;
a failed call comes back as a readable sentinel string
(``"translation failed: <reason>"``) that is stored in place of the
translation so the rest of the item and the batch keep going.

Inputs longer than ``input_char_limit`` are cut before sending. That is a
deliberate cost/latency trade-off: the tail of very long posts is never
translated.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from intelligence.llm import BaseLLM, Message
from utils.exceptions import (
    MalformedResponseError,
    ServiceUnavailableError,
    TranslationServiceError,
)


logger = logging.getLogger(__name__)

SOFT_FAIL_PREFIX = "translation failed"


class TranslationMode(str, Enum):
    """Prompt intent for one call."""

    TITLE = "title"
    CONTENT = "content"
    SUMMARY = "summary"


PROMPTS: Dict[TranslationMode, str] = {
    TranslationMode.TITLE: (
        "你是一位专业的中英翻译专家，负责翻译 Reddit 社区的帖子标题。\n\n"
        "要求：\n"
        "1. 只输出一个最简洁、最自然的翻译结果\n"
        "2. 不要提供多个版本、选项或解释\n"
        "3. 不要添加任何说明文字，不要加引号\n"
        "4. 技术术语使用中文技术圈常用表达\n\n"
        "标题："
    ),
    TranslationMode.CONTENT: (
        "将以下内容翻译成流畅自然的中文，保持原意和语气。\n\n"
        "要求：\n"
        "1. 直接输出翻译结果，不要添加说明\n"
        "2. 技术术语使用中文技术圈常用表达\n\n"
        "内容："
    ),
    TranslationMode.SUMMARY: (
        "用中文总结以下内容的 3-5 个核心要点。\n\n"
        "要求：\n"
        "1. 使用简洁的 bullet points，每个要点一行\n"
        "2. 直接输出总结，不要添加说明\n\n"
        "内容："
    ),
}


def soft_fail_text(reason: Any) -> str:
    return f"{SOFT_FAIL_PREFIX}: {reason}"


def is_soft_fail(text: Optional[str]) -> bool:
    return str(text or "").startswith(SOFT_FAIL_PREFIX)


def truncate(text: str, limit: int) -> str:
    """Hard character cap; the remainder is dropped, not summarized."""
    if limit <= 0:
        return text
    return text[:limit]


def build_prompt(mode: TranslationMode, text: str) -> str:
    return f"{PROMPTS[TranslationMode(mode)]}\n\n{text}"


class TranslationService:
    """Policy wrapper around a ``BaseLLM`` used for every translation call."""

    def __init__(
        self,
        llm: BaseLLM,
        *,
        input_char_limit: int = 3000,
        timeout: float = 120.0,
        max_attempts: int = 1,
        retry_wait: Optional[wait_base] = None,
    ) -> None:
        self.llm = llm
        self.input_char_limit = int(input_char_limit)
        self.timeout = float(timeout)
        self.max_attempts = max(1, int(max_attempts))
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self.calls = 0
        self.failures = 0

    @classmethod
    def from_settings(cls, llm: Optional[BaseLLM] = None, settings: Any = None) -> "TranslationService":
        from config import get_translator_settings
        from intelligence.llm import get_llm

        settings = settings or get_translator_settings()
        llm = llm or get_llm(timeout=settings.request_timeout)
        return cls(
            llm,
            input_char_limit=settings.input_char_limit,
            timeout=settings.request_timeout,
            max_attempts=settings.max_attempts,
        )

    async def translate(self, text: Optional[str], mode: TranslationMode = TranslationMode.CONTENT) -> str:
        """Translate ``text`` in ``mode``; returns ``""`` for empty input and a sentinel on failure."""
        if not text or not str(text).strip():
            return ""

        prompt = build_prompt(mode, truncate(str(text), self.input_char_limit))
        try:
            return await self._call_with_retry(prompt)
        except TranslationServiceError as exc:
            self.failures += 1
            logger.warning(f"[Translate] {TranslationMode(mode).value} call failed: {exc.message}")
            return soft_fail_text(exc.message)

    async def _call_with_retry(self, prompt: str) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception_type(ServiceUnavailableError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._call(prompt)
        raise ServiceUnavailableError("no attempt was made", provider=self.llm.provider)

    async def _call(self, prompt: str) -> str:
        self.calls += 1
        provider = self.llm.provider
        try:
            response = await asyncio.wait_for(
                self.llm.acomplete([Message.user(prompt)]),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ServiceUnavailableError(f"timed out after {self.timeout:g}s", provider=provider) from exc
        except (httpx.HTTPError, OSError) as exc:
            raise ServiceUnavailableError(f"{type(exc).__name__}: {exc}", provider=provider) from exc
        except (ValueError, KeyError, IndexError, AttributeError, TypeError) as exc:
            raise MalformedResponseError(f"unreadable response ({type(exc).__name__}: {exc})", provider=provider) from exc
        except Exception as exc:
            # SDK-specific API errors (status, connection, auth)
            raise ServiceUnavailableError(f"{type(exc).__name__}: {exc}", provider=provider) from exc

        content = getattr(response, "content", None)
        if not isinstance(content, str):
            raise MalformedResponseError("response has no text content", provider=provider)
        content = content.strip()
        if not content:
            raise MalformedResponseError("empty response", provider=provider)
        return content
