from __future__ import annotations

import httpx
import pytest
from tenacity import wait_none

from translation.service import (
    PROMPTS,
    TranslationMode,
    TranslationService,
    build_prompt,
    is_soft_fail,
    soft_fail_text,
    truncate,
)


def test_truncate_cuts_at_limit() -> None:
    assert truncate("a" * 10, 4) == "aaaa"
    assert truncate("short", 100) == "short"
    assert truncate("keep", 0) == "keep"


def test_prompt_carries_mode_instructions() -> None:
    prompt = build_prompt(TranslationMode.TITLE, "Hello World")
    assert prompt.startswith(PROMPTS[TranslationMode.TITLE])
    assert prompt.endswith("Hello World")


def test_soft_fail_sentinel_is_recognizable() -> None:
    text = soft_fail_text("timed out")
    assert text == "translation failed: timed out"
    assert is_soft_fail(text)
    assert not is_soft_fail("我爱我的狗")
    assert not is_soft_fail(None)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", None, "   "])
async def test_empty_input_skips_the_call(text, make_llm) -> None:
    llm = make_llm()
    service = TranslationService(llm)

    assert await service.translate(text, TranslationMode.CONTENT) == ""
    assert llm.prompts == []
    assert service.calls == 0


@pytest.mark.asyncio
async def test_input_is_truncated_before_sending(make_llm) -> None:
    llm = make_llm(lambda prompt: "译文")
    service = TranslationService(llm, input_char_limit=3000)

    result = await service.translate("a" * 5000, TranslationMode.CONTENT)

    assert result == "译文"
    assert len(llm.prompts) == 1
    sent = llm.prompts[0]
    assert sent.endswith("a" * 3000)
    assert "a" * 3001 not in sent


@pytest.mark.asyncio
async def test_reply_is_stripped(make_llm) -> None:
    service = TranslationService(make_llm(lambda prompt: "  他很棒\n"))
    assert await service.translate("He is great", TranslationMode.CONTENT) == "他很棒"


@pytest.mark.asyncio
async def test_timeout_becomes_sentinel(make_llm) -> None:
    service = TranslationService(make_llm(delay=1.0), timeout=0.01)

    result = await service.translate("Hello", TranslationMode.CONTENT)

    assert is_soft_fail(result)
    assert "timed out" in result
    assert service.failures == 1


@pytest.mark.asyncio
async def test_transport_error_becomes_sentinel(make_llm) -> None:
    service = TranslationService(make_llm(lambda prompt: httpx.ConnectError("connection refused")))

    result = await service.translate("Hello", TranslationMode.SUMMARY)

    assert result.startswith("translation failed: ")
    assert "connection refused" in result


@pytest.mark.asyncio
async def test_empty_reply_is_malformed(make_llm) -> None:
    service = TranslationService(make_llm(lambda prompt: "   "))

    result = await service.translate("Hello", TranslationMode.TITLE)

    assert result == "translation failed: empty response"


@pytest.mark.asyncio
async def test_unreadable_reply_is_malformed(make_llm) -> None:
    service = TranslationService(make_llm(lambda prompt: KeyError("choices")))

    result = await service.translate("Hello", TranslationMode.TITLE)

    assert is_soft_fail(result)
    assert "unreadable response" in result


@pytest.mark.asyncio
async def test_no_retry_by_default(make_llm) -> None:
    llm = make_llm(lambda prompt: httpx.ConnectError("down"))
    service = TranslationService(llm)

    await service.translate("Hello", TranslationMode.CONTENT)

    assert service.calls == 1
    assert len(llm.prompts) == 1


@pytest.mark.asyncio
async def test_retry_recovers_from_transient_failure(make_llm) -> None:
    replies = [httpx.ConnectError("blip"), "你好"]
    llm = make_llm(lambda prompt: replies.pop(0))
    service = TranslationService(llm, max_attempts=3, retry_wait=wait_none())

    assert await service.translate("Hello", TranslationMode.CONTENT) == "你好"
    assert service.calls == 2
    assert service.failures == 0


@pytest.mark.asyncio
async def test_malformed_reply_is_not_retried(make_llm) -> None:
    llm = make_llm(lambda prompt: "")
    service = TranslationService(llm, max_attempts=3, retry_wait=wait_none())

    result = await service.translate("Hello", TranslationMode.CONTENT)

    assert is_soft_fail(result)
    assert service.calls == 1
