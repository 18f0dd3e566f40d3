"""Sequential, resumable batch translation over a list of source items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from models import SourceItem, TranslationResult
from storage import ArtifactStore, Ledger
from utils.exceptions import StorageError


logger = logging.getLogger(__name__)


class ItemTranslator(Protocol):
    async def translate_item(self, item: SourceItem) -> TranslationResult: ...


ProgressCallback = Callable[[int, int, TranslationResult], None]


class ItemState(str, Enum):
    """Outcome of one item within a run."""

    PENDING = "pending"
    SKIPPED = "skipped"
    TRANSLATED = "translated"
    FAILED = "failed"


@dataclass
class RunStats:
    """Aggregated outcome of a batch run."""

    translated: int = 0
    skipped: int = 0
    failed: int = 0
    results: List[TranslationResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.translated + self.skipped + self.failed

    def summary(self) -> Dict[str, int]:
        return {
            "translated": self.translated,
            "skipped": self.skipped,
            "failed": self.failed,
            "total": self.total,
        }


class BatchRunner:
    """
    Translate items one at a time, skipping ids already in the ledger.

    A failing item is logged and counted, never raised; the ledger grows in
    memory as items finish and is written back through the artifact store.
    """

    def __init__(
        self,
        translator: ItemTranslator,
        store: ArtifactStore,
        ledger: Optional[Ledger] = None,
        *,
        persist_each: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.translator = translator
        self.store = store
        self._ledger = ledger if ledger is not None else Ledger.empty()
        self.persist_each = persist_each
        self.on_progress = on_progress

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    async def process_item(self, item: SourceItem, stats: RunStats) -> ItemState:
        if self._ledger.contains(item.id):
            logger.info(f"  Skipping already translated: {(item.title or item.id)[:50]}")
            stats.skipped += 1
            return ItemState.SKIPPED

        try:
            result = await self.translator.translate_item(item)
            self.store.save(result)
        except Exception as exc:
            logger.error(f"  Translation failed for {item.id}: {exc}")
            stats.failed += 1
            stats.failures[item.id] = str(exc) or type(exc).__name__
            return ItemState.FAILED

        stats.results.append(result)
        stats.translated += 1
        self._ledger = self._ledger.merge([self.store.entry_for(result)])

        if self.persist_each:
            try:
                self.store.ledger_store.persist(self._ledger)
            except (OSError, StorageError) as exc:
                # artifact is on disk; startup reconciliation picks it up
                logger.warning(f"  Index update failed after {item.id}: {exc}")

        return ItemState.TRANSLATED

    async def run(self, items: Sequence[SourceItem], regenerate_index: bool = True) -> RunStats:
        stats = RunStats()
        total = len(items)

        for position, item in enumerate(items, start=1):
            logger.info(f"[{position}/{total}] {item.id}")
            state = await self.process_item(item, stats)
            if state is ItemState.TRANSLATED and self.on_progress:
                self.on_progress(position, total, stats.results[-1])

        logger.info(
            f"Run stats: translated {stats.translated}, skipped {stats.skipped}, failed {stats.failed}"
        )

        if regenerate_index:
            self.store.regenerate_index(stats.results, ledger=self._ledger)

        return stats
