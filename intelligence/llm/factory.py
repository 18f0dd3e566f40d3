"""
LLM Factory
工厂函数 - 根据配置自动创建 LLM 实例
"""
from typing import Optional
import logging

from config import LLMSettings
from utils.exceptions import ConfigurationError

from .base import BaseLLM
from .openai_llm import OpenAILLM
from .anthropic_llm import AnthropicLLM


logger = logging.getLogger(__name__)


# 默认模型配置
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
    "deepseek": "deepseek-chat",
}

DEFAULT_BASE_URLS = {
    "deepseek": "https://api.deepseek.com",
}


def get_llm(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    settings: Optional[LLMSettings] = None,
    **kwargs,
) -> BaseLLM:
    """
    获取 LLM 实例

    自动从 .env 读取配置，也可手动指定

    Args:
        provider: LLM 供应商 (anthropic, openai, deepseek)
        model: 模型名称 (不传则使用默认)
        settings: LLM 配置 (不传则读取全局配置)
        **kwargs: 额外参数 (temperature, max_tokens, timeout, base_url 等)

    Returns:
        BaseLLM 实例

    Example:
        llm = get_llm()
        llm = get_llm(provider="deepseek")
        llm = get_llm(provider="anthropic", base_url="https://api.kimi.com/coding")
    """
    from config import get_llm_settings

    settings = settings or get_llm_settings()

    provider = (provider or settings.provider or "").strip().lower()
    model = model or settings.model_name or DEFAULT_MODELS.get(provider)

    api_keys = {
        "openai": settings.openai_api_key,
        "anthropic": settings.anthropic_api_key,
        "deepseek": settings.deepseek_api_key,
    }

    api_key = kwargs.pop("api_key", None) or api_keys.get(provider)
    base_url = kwargs.pop("base_url", None) or settings.base_url or DEFAULT_BASE_URLS.get(provider)

    # 合并默认参数
    default_params = {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
    for key, value in default_params.items():
        if key not in kwargs:
            kwargs[key] = value

    if provider == "anthropic":
        llm: BaseLLM = AnthropicLLM(model=model, api_key=api_key, base_url=base_url, **kwargs)
    elif provider in ("openai", "deepseek"):
        llm = OpenAILLM(
            model=model,
            api_key=api_key,
            base_url=base_url,
            provider_name=provider,
            **kwargs,
        )
    else:
        raise ConfigurationError(f"Unsupported LLM provider: {provider}", {"provider": provider})

    if not api_key:
        logger.warning(f"[LLM] No API key configured for provider '{provider}'")

    return llm
