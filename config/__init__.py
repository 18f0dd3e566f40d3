"""
Configuration Management Module
统一配置管理
"""
from .settings import (
    Settings,
    RedditSettings,
    LLMSettings,
    TranslatorSettings,
    StorageSettings,
    get_settings,
    get_reddit_settings,
    get_llm_settings,
    get_translator_settings,
    get_storage_settings,
)

__all__ = [
    "Settings",
    "RedditSettings",
    "LLMSettings",
    "TranslatorSettings",
    "StorageSettings",
    "get_settings",
    "get_reddit_settings",
    "get_llm_settings",
    "get_translator_settings",
    "get_storage_settings",
]
