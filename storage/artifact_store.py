"""
Artifact Store
每个帖子一个 JSON 译文文件, 外加 _index.json 索引
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from models import LedgerEntry, TranslationResult
from utils.exceptions import StorageError

from .files import atomic_write_json, read_json
from .ledger import CompletionLedger, Ledger


logger = logging.getLogger(__name__)

# 保留 ASCII 字母数字和常用汉字, 其余替换为下划线
_UNSAFE_TITLE_RE = re.compile(r"[^a-zA-Z0-9一-龥]")
_UNSAFE_ID_RE = re.compile(r"[^\w-]")
MAX_TITLE_SLUG = 50


def sanitize_filename(title: Optional[str], max_length: int = MAX_TITLE_SLUG) -> str:
    return _UNSAFE_TITLE_RE.sub("_", str(title or ""))[:max_length]


def artifact_filename(item_id: str, title: Optional[str]) -> str:
    safe_id = _UNSAFE_ID_RE.sub("_", str(item_id or "unknown"))
    return f"{safe_id}_{sanitize_filename(title)}.json"


class ArtifactStore:
    """Translation artifacts plus the index that the ledger is rebuilt from."""

    def __init__(self, root: Union[str, Path], index_filename: str = "_index.json") -> None:
        self.root = Path(root)
        self.index_filename = index_filename
        self.ledger_store = CompletionLedger(self.root / index_filename)

    @classmethod
    def from_settings(cls, settings=None) -> "ArtifactStore":
        from config import get_storage_settings

        settings = settings or get_storage_settings()
        return cls(settings.translations_dir, index_filename=settings.index_filename)

    @property
    def index_path(self) -> Path:
        return self.ledger_store.index_path

    def path_for(self, result: TranslationResult) -> Path:
        return self.root / artifact_filename(result.id, result.title)

    @staticmethod
    def entry_for(result: TranslationResult) -> LedgerEntry:
        return LedgerEntry(
            id=result.id,
            title=result.title,
            title_zh=result.title_zh,
            author=result.author,
            reddit_url=result.reddit_url,
            translated_at=result.translated_at,
            file=artifact_filename(result.id, result.title),
        )

    def save(self, result: TranslationResult) -> Path:
        """写入单个译文文件, 同名文件直接覆盖"""
        path = self.path_for(result)
        try:
            atomic_write_json(path, result.model_dump(mode="json"))
        except OSError as exc:
            raise StorageError(f"Failed to write artifact {path.name}", {"id": result.id, "error": str(exc)}) from exc
        logger.info(f"  Saved: {path}")
        return path

    def load_artifact(self, path: Union[str, Path]) -> TranslationResult:
        try:
            return TranslationResult.model_validate(read_json(path))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            raise StorageError(f"Unreadable artifact {Path(path).name}", {"error": str(exc)}) from exc

    def iter_artifact_paths(self) -> List[Path]:
        if not self.root.exists():
            return []
        return sorted(
            path
            for path in self.root.glob("*.json")
            if path.name != self.index_filename and not path.name.startswith(".")
        )

    def recover_entries(self) -> List[LedgerEntry]:
        """从磁盘上的译文文件重建索引条目 (跳过无法读取的文件)"""
        entries: List[LedgerEntry] = []
        for path in self.iter_artifact_paths():
            try:
                result = self.load_artifact(path)
            except StorageError as exc:
                logger.warning(f"[Store] Skipping {exc}")
                continue
            entry = self.entry_for(result)
            if entry.file != path.name:
                entry = entry.model_copy(update={"file": path.name})
            entries.append(entry)
        return entries

    def load_ledger(self, reconcile: bool = False) -> Ledger:
        """
        读取索引得到 Ledger

        Args:
            reconcile: 同时扫描译文文件, 补上索引里缺失的条目
        """
        ledger = self.ledger_store.load()
        if not reconcile:
            return ledger

        missing = [entry for entry in self.recover_entries() if not ledger.contains(entry.id)]
        if missing:
            logger.info(f"[Store] Recovered {len(missing)} artifacts missing from the index")
            ledger = ledger.merge(missing)
        return ledger

    def regenerate_index(
        self,
        results: Iterable[TranslationResult],
        ledger: Optional[Ledger] = None,
        merge: bool = True,
    ) -> Path:
        """
        重写 _index.json

        Args:
            results: 本次运行新翻译的结果
            ledger: 作为合并基础的 Ledger (不传则读取现有索引)
            merge: False 时只保留 results 中的条目
        """
        new_entries = [self.entry_for(result) for result in results]
        if merge:
            base = ledger if ledger is not None else self.ledger_store.load()
            combined = base.merge(new_entries)
        else:
            combined = Ledger(new_entries)

        path = self.ledger_store.persist(combined, generated_at=datetime.now(timezone.utc).isoformat())
        logger.info(f"[Store] Index saved: {path} ({len(combined)} posts)")
        return path
