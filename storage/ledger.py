"""
Completion Ledger
记录哪些帖子已经翻译过, 支持跨进程重启的断点续跑
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError

from models import LedgerEntry, LedgerIndex
from utils.exceptions import LedgerCorruptError, StorageError

from .files import atomic_write_json, read_json


logger = logging.getLogger(__name__)


class Ledger:
    """已翻译帖子的不可变集合, 按加入顺序保存索引条目"""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Iterable[LedgerEntry]] = None) -> None:
        merged: Dict[str, LedgerEntry] = {}
        for entry in entries or ():
            merged[entry.id] = entry
        self._entries = merged

    @classmethod
    def empty(cls) -> "Ledger":
        return cls()

    def contains(self, item_id: str) -> bool:
        return item_id in self._entries

    __contains__ = contains

    def get(self, item_id: str) -> Optional[LedgerEntry]:
        return self._entries.get(item_id)

    def merge(self, entries: Iterable[LedgerEntry]) -> "Ledger":
        """返回新的 Ledger; 同 id 的新条目覆盖旧条目, 位置保持不变"""
        return Ledger([*self._entries.values(), *entries])

    @property
    def ids(self) -> frozenset:
        return frozenset(self._entries)

    def entries(self) -> List[LedgerEntry]:
        return list(self._entries.values())

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Ledger(size={len(self)})"


def parse_index(payload: object) -> LedgerIndex:
    """把 _index.json 的内容解析为 LedgerIndex, 格式不对抛 LedgerCorruptError"""
    if not isinstance(payload, dict):
        raise LedgerCorruptError("index root is not an object", {"type": type(payload).__name__})
    try:
        return LedgerIndex.model_validate(payload)
    except ValidationError as exc:
        raise LedgerCorruptError("index does not match schema", {"errors": exc.error_count()}) from exc


class CompletionLedger:
    """
    翻译索引的读写入口

    load() 只在启动时调用一次; 索引缺失或损坏时返回空 Ledger 并继续运行。
    """

    def __init__(self, index_path: Union[str, Path]) -> None:
        self.index_path = Path(index_path)

    def load(self) -> Ledger:
        if not self.index_path.exists():
            logger.info(f"[Ledger] No index at {self.index_path}, translating everything")
            return Ledger.empty()

        try:
            index = parse_index(read_json(self.index_path))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError, LedgerCorruptError) as exc:
            logger.warning(f"[Ledger] Index unreadable, starting empty: {exc}")
            return Ledger.empty()

        ledger = Ledger(index.posts)
        logger.info(f"[Ledger] Loaded {len(ledger)} translated post ids")
        return ledger

    def persist(self, ledger: Ledger, generated_at: Optional[str] = None) -> Path:
        entries = ledger.entries()
        index = LedgerIndex(total=len(entries), posts=entries)
        if generated_at:
            index.generated_at = generated_at
        try:
            return atomic_write_json(self.index_path, index.model_dump(mode="json"))
        except OSError as exc:
            raise StorageError(f"Failed to write index {self.index_path.name}", {"error": str(exc)}) from exc
