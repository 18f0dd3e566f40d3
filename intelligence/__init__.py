"""
Intelligence Module
智能层 - 翻译所用的 LLM 抽象
"""
from .llm import (
    BaseLLM,
    OpenAILLM,
    AnthropicLLM,
    get_llm,
)

__all__ = [
    "BaseLLM",
    "OpenAILLM",
    "AnthropicLLM",
    "get_llm",
]
