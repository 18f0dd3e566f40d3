"""
Utils Module
通用工具函数
"""
from .logger import setup_logger
from .exceptions import (
    ThreadTranslatorError,
    ConfigurationError,
    CandidateListNotFoundError,
    ScraperError,
    StorageError,
    LedgerCorruptError,
    TranslationServiceError,
    ServiceUnavailableError,
    MalformedResponseError,
)

__all__ = [
    "setup_logger",
    "ThreadTranslatorError",
    "ConfigurationError",
    "CandidateListNotFoundError",
    "ScraperError",
    "StorageError",
    "LedgerCorruptError",
    "TranslationServiceError",
    "ServiceUnavailableError",
    "MalformedResponseError",
]
