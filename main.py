"""CLI entrypoint: fetch qualified threads, translate them, write artifacts and the index."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from config import Settings, get_settings
from intelligence.llm import BaseLLM, get_llm
from models import Candidate, CandidateList, SourceItem
from orchestrator import BatchRunner, RunStats
from scrapers import RedditScraper
from storage import ArtifactStore, Ledger, read_json
from translation import Pacer, TranslationOrchestrator, TranslationService
from utils import setup_logger
from utils.exceptions import CandidateListNotFoundError, ThreadTranslatorError


logger = logging.getLogger(__name__)


def find_latest_candidate_file(data_dir: Path, prefix: str = "filtered_posts_") -> Path:
    """Pick the lexicographically last ``<prefix>*.json`` in ``data_dir``."""
    directory = Path(data_dir)
    files = sorted(path for path in directory.glob(f"{prefix}*.json") if path.is_file()) if directory.is_dir() else []
    if not files:
        raise CandidateListNotFoundError(
            f"No candidate list ({prefix}*.json) found in {data_dir}; run the filter step first",
            directory=str(data_dir),
        )
    return files[-1]


def load_candidates(path: Path) -> CandidateList:
    try:
        return CandidateList.model_validate(read_json(path))
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise CandidateListNotFoundError(f"Candidate list {path.name} is unreadable: {exc}", directory=str(path.parent)) from exc


def _placeholder_item(candidate: Candidate) -> SourceItem:
    extra = candidate.model_extra or {}
    return SourceItem(id=candidate.id, title=str(extra.get("title") or ""), url=candidate.permalink)


async def fetch_source_items(
    candidates: List[Candidate],
    scraper: RedditScraper,
    ledger: Ledger,
    *,
    pacer: Optional[Pacer] = None,
    fetch_delay: float = 1.0,
) -> List[SourceItem]:
    """Fetch details for each candidate; ids already in the ledger are not fetched again."""
    pacer = pacer or Pacer()
    items: List[SourceItem] = []
    for candidate in candidates:
        if ledger.contains(candidate.id):
            items.append(_placeholder_item(candidate))
            continue

        await pacer.wait()
        logger.info(f"Fetching detail: {candidate.id}")
        item = await scraper.get_details(candidate.id, candidate.permalink)
        pacer.defer(fetch_delay)
        if item is None:
            logger.warning(f"No detail returned for {candidate.id}, skipping")
            continue
        items.append(item)
    return items


async def run_pipeline(
    settings: Settings,
    *,
    limit: Optional[int] = None,
    dry_run: bool = False,
    llm: Optional[BaseLLM] = None,
    scraper: Optional[RedditScraper] = None,
) -> Optional[RunStats]:
    data_dir = Path(settings.storage.data_dir)
    candidate_path = find_latest_candidate_file(data_dir, settings.storage.candidate_prefix)
    candidates = load_candidates(candidate_path).qualified
    if limit is not None:
        candidates = candidates[: max(0, limit)]

    logger.info(f"Loaded candidate list: {candidate_path.name}")
    logger.info(f"Posts to translate: {len(candidates)}")

    store = ArtifactStore.from_settings(settings.storage)
    ledger = store.load_ledger(reconcile=settings.translator.reconcile_artifacts)

    async with (scraper or RedditScraper(settings=settings.reddit)) as source:
        items = await fetch_source_items(
            candidates,
            source,
            ledger,
            fetch_delay=settings.reddit.fetch_delay,
        )

    pending = [item for item in items if not ledger.contains(item.id)]
    logger.info(f"Fetched {len(items)} posts, {len(pending)} not yet translated")
    if dry_run:
        for item in pending:
            logger.info(f"  would translate {item.id}: {item.title[:60]}")
        return None

    llm = llm or get_llm(settings=settings.llm, timeout=settings.translator.request_timeout)
    service = TranslationService.from_settings(llm=llm, settings=settings.translator)
    orchestrator = TranslationOrchestrator.from_settings(service, settings=settings.translator)
    runner = BatchRunner(
        orchestrator,
        store,
        ledger,
        persist_each=settings.translator.persist_each,
    )
    try:
        stats = await runner.run(items)
    finally:
        await service.llm.aclose()

    logger.info(f"Done. Artifacts in {store.root}")
    return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Translate qualified Reddit threads into Chinese artifacts")
    parser.add_argument("--data-dir", default=None, help="directory holding filtered_posts_*.json")
    parser.add_argument("--translations-dir", default=None, help="output directory for artifacts and _index.json")
    parser.add_argument("--limit", type=int, default=None, help="only process the first N candidates")
    parser.add_argument("--dry-run", action="store_true", help="fetch and report, do not translate")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(level=args.log_level)

    settings = get_settings().model_copy(deep=True)
    if args.data_dir:
        settings.storage.data_dir = args.data_dir
    if args.translations_dir:
        settings.storage.translations_dir = args.translations_dir

    try:
        stats = asyncio.run(run_pipeline(settings, limit=args.limit, dry_run=args.dry_run))
    except CandidateListNotFoundError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    except ThreadTranslatorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if stats is not None:
        print(json.dumps(stats.summary(), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
