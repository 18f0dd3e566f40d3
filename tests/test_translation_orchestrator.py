from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from models import Reply, SourceItem
from translation import (
    Pacer,
    TranslationMode,
    TranslationOrchestrator,
    TranslationService,
    build_excerpt,
    is_soft_fail,
)
from translation.service import PROMPTS


FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _mode_of(prompt: str) -> TranslationMode:
    for mode, header in PROMPTS.items():
        if prompt.startswith(header):
            return mode
    raise AssertionError(f"unexpected prompt: {prompt[:40]}")


def _by_mode(title="我爱我的狗", content="他很棒", summary="- 狗很棒"):
    replies = {
        TranslationMode.TITLE: title,
        TranslationMode.CONTENT: content,
        TranslationMode.SUMMARY: summary,
    }
    return lambda prompt: replies[_mode_of(prompt)]


def _item(reply_count: int = 0, body: str = "He is great") -> SourceItem:
    return SourceItem(
        id="abc123",
        title="I love my dog",
        author="op",
        url="https://www.reddit.com/r/dogs/comments/abc123/i_love_my_dog/",
        created=1700000000,
        body=body,
        replies=[
            Reply(index=100 + i, content=f"reply {i}", score=i, depth=i % 3)
            for i in range(reply_count)
        ],
    )


def _orchestrator(llm, clock, **kwargs) -> TranslationOrchestrator:
    return TranslationOrchestrator(
        TranslationService(llm),
        pacer=Pacer(clock=clock, sleep=clock.sleep),
        clock=lambda: FIXED_NOW,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_translate_item_assembles_result(make_llm, manual_clock) -> None:
    orchestrator = _orchestrator(make_llm(_by_mode()), manual_clock)

    result = await orchestrator.translate_item(_item(reply_count=1))

    assert result.id == "abc123"
    assert result.title == "I love my dog"
    assert result.title_zh == "我爱我的狗"
    assert result.author == "op"
    assert result.created == 1700000000
    assert result.reddit_url.endswith("/i_love_my_dog/")
    assert result.original.post_body == "He is great"
    assert result.translation.post_body_zh == "他很棒"
    assert result.translation.op_replies_zh[0].content_zh == "他很棒"
    assert result.summary_zh == "- 狗很棒"
    assert result.translated_at == FIXED_NOW.isoformat()


@pytest.mark.asyncio
async def test_replies_are_capped_and_keep_order(make_llm, manual_clock) -> None:
    llm = make_llm(_by_mode())
    orchestrator = _orchestrator(llm, manual_clock)

    result = await orchestrator.translate_item(_item(reply_count=15))

    translated = result.translation.op_replies_zh
    assert len(translated) == 10
    assert [reply.index for reply in translated] == list(range(100, 110))
    assert [reply.score for reply in translated] == list(range(10))
    assert [reply.depth for reply in translated] == [i % 3 for i in range(10)]
    assert len(result.original.op_replies) == 15
    # title + body + 10 replies + summary
    assert len(llm.prompts) == 13


@pytest.mark.asyncio
async def test_calls_are_paced(make_llm, manual_clock) -> None:
    orchestrator = _orchestrator(make_llm(_by_mode()), manual_clock, call_delay=0.5, reply_delay=0.3)

    await orchestrator.translate_item(_item(reply_count=2))

    # before body, first reply, second reply, summary
    assert orchestrator.pacer.waits == [
        pytest.approx(0.5),
        pytest.approx(0.5),
        pytest.approx(0.3),
        pytest.approx(0.3),
    ]


@pytest.mark.asyncio
async def test_missing_body_is_not_sent(make_llm, manual_clock) -> None:
    llm = make_llm(_by_mode())
    orchestrator = _orchestrator(llm, manual_clock)

    result = await orchestrator.translate_item(_item(body=None))

    assert result.translation.post_body_zh == ""
    assert result.original.post_body is None
    assert [_mode_of(prompt) for prompt in llm.prompts] == [TranslationMode.TITLE, TranslationMode.SUMMARY]


@pytest.mark.asyncio
async def test_missing_body_still_waits_both_delays(make_llm, manual_clock) -> None:
    orchestrator = _orchestrator(make_llm(_by_mode()), manual_clock, call_delay=0.5, reply_delay=0.3)

    await orchestrator.translate_item(_item(body=None))

    assert orchestrator.pacer.waits == [pytest.approx(0.5), pytest.approx(0.5)]
    assert orchestrator.pacer.total_waited == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_failed_call_lands_as_sentinel(make_llm, manual_clock) -> None:
    def responder(prompt: str):
        if _mode_of(prompt) == TranslationMode.SUMMARY:
            return httpx.ReadTimeout("slow")
        return _by_mode()(prompt)

    orchestrator = _orchestrator(make_llm(responder), manual_clock)

    result = await orchestrator.translate_item(_item(reply_count=1))

    assert result.title_zh == "我爱我的狗"
    assert is_soft_fail(result.summary_zh)


@pytest.mark.asyncio
async def test_multi_candidate_title_is_normalized(make_llm, manual_clock) -> None:
    llm = make_llm(_by_mode(title="以下是几种翻译方式：\n- 我爱我的狗\n- 我超爱我的狗"))
    orchestrator = _orchestrator(llm, manual_clock)

    assert await orchestrator.translate_title("I love my dog") == "我爱我的狗"


@pytest.mark.asyncio
async def test_title_falls_back_to_original_when_empty(make_llm, manual_clock) -> None:
    orchestrator = _orchestrator(make_llm(), manual_clock)

    assert await orchestrator.translate_title("   ") == ""
    assert await orchestrator.translate_title("") == ""


def test_excerpt_joins_and_truncates() -> None:
    item = _item(reply_count=2)

    excerpt = build_excerpt(item, 2000)
    assert excerpt == "I love my dog\n\nHe is great\n\nreply 0\n\nreply 1"

    assert build_excerpt(item, 5) == "I lov"
    assert build_excerpt(_item(body=None), 2000) == "I love my dog\n\n\n\n"
