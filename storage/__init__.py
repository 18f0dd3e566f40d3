"""
Storage Module
存储模块 - 译文文件与翻译索引
"""
from .files import atomic_write_json, read_json
from .ledger import Ledger, CompletionLedger, parse_index
from .artifact_store import ArtifactStore, artifact_filename, sanitize_filename

__all__ = [
    "atomic_write_json",
    "read_json",
    "Ledger",
    "CompletionLedger",
    "parse_index",
    "ArtifactStore",
    "artifact_filename",
    "sanitize_filename",
]
