"""Per-item translation sequence: title, body, replies, summary."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from models import (
    OriginalContent,
    Reply,
    SourceItem,
    TranslatedContent,
    TranslatedReply,
    TranslationResult,
)

from .pacing import Pacer
from .service import TranslationMode, TranslationService, truncate
from .title_normalizer import TitleNormalizer


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_excerpt(item: SourceItem, limit: int) -> str:
    """Title, body and every reply joined by blank lines, cut to ``limit`` chars."""
    head = f"{item.title}\n\n{item.body or ''}\n\n"
    tail = "\n\n".join(reply.content for reply in item.replies)
    return truncate(head + tail, limit)


class TranslationOrchestrator:
    """
    Drives the calls for one ``SourceItem`` and assembles a ``TranslationResult``.

    Call failures never surface here: ``TranslationService`` already turned
    them into sentinel text, which lands in the corresponding field.
    """

    def __init__(
        self,
        service: TranslationService,
        *,
        normalizer: Optional[TitleNormalizer] = None,
        pacer: Optional[Pacer] = None,
        max_replies: int = 10,
        call_delay: float = 0.5,
        reply_delay: float = 0.3,
        summary_char_limit: int = 2000,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.service = service
        self.normalizer = normalizer or TitleNormalizer()
        self.pacer = pacer or Pacer()
        self.max_replies = max(0, int(max_replies))
        self.call_delay = float(call_delay)
        self.reply_delay = float(reply_delay)
        self.summary_char_limit = int(summary_char_limit)
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls, service: TranslationService, settings=None, **kwargs) -> "TranslationOrchestrator":
        from config import get_translator_settings

        settings = settings or get_translator_settings()
        return cls(
            service,
            max_replies=settings.max_replies,
            call_delay=settings.call_delay,
            reply_delay=settings.reply_delay,
            summary_char_limit=settings.summary_char_limit,
            **kwargs,
        )

    async def _translate(self, text: Optional[str], mode: TranslationMode) -> str:
        await self.pacer.wait()
        return await self.service.translate(text, mode)

    async def translate_title(self, title: str) -> str:
        raw = await self._translate(title, TranslationMode.TITLE)
        canonical = self.normalizer.normalize(raw)
        return canonical or str(title or "").strip()

    async def translate_replies(self, replies: List[Reply]) -> List[TranslatedReply]:
        translated: List[TranslatedReply] = []
        for reply in replies[: self.max_replies]:
            content_zh = await self._translate(reply.content, TranslationMode.CONTENT)
            translated.append(
                TranslatedReply(
                    index=reply.index,
                    content_zh=content_zh,
                    score=reply.score,
                    depth=reply.depth,
                )
            )
            self.pacer.defer(self.reply_delay)
        return translated

    async def translate_item(self, item: SourceItem) -> TranslationResult:
        logger.info(f"  Translating: {item.title[:50]}...")

        title_zh = await self.translate_title(item.title)
        self.pacer.defer(self.call_delay)

        if item.body:
            body_zh = await self._translate(item.body, TranslationMode.CONTENT)
        else:
            # no call, but the delay after the title still applies
            await self.pacer.wait()
            body_zh = ""
        self.pacer.defer(self.call_delay)

        replies_zh = await self.translate_replies(item.replies)

        summary_zh = await self._translate(
            build_excerpt(item, self.summary_char_limit),
            TranslationMode.SUMMARY,
        )

        return TranslationResult(
            id=item.id,
            title=item.title,
            title_zh=title_zh,
            author=item.author,
            reddit_url=item.url,
            created=item.created,
            original=OriginalContent(
                post_body=item.body,
                op_replies=[reply.model_copy() for reply in item.replies],
            ),
            translation=TranslatedContent(post_body_zh=body_zh, op_replies_zh=replies_zh),
            summary_zh=summary_zh,
            translated_at=self._clock().isoformat(),
        )
