"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class RedditSettings(BaseSettings):
    """Reddit 抓取配置 (公开 JSON 接口, 无需 OAuth)"""
    base_url: str = Field(default="https://www.reddit.com", description="Reddit 站点地址")
    user_agent: str = Field(default="ThreadTranslator/1.0", description="User Agent")
    requests_per_second: float = Field(default=1.0, description="请求速率上限")
    comment_limit: int = Field(default=500, description="单帖最多拉取的评论数")
    fetch_delay: float = Field(default=1.0, description="两次详情抓取之间的间隔(秒)")

    class Config:
        env_prefix = "REDDIT_"


class LLMSettings(BaseSettings):
    """LLM 配置"""
    provider: str = Field(default="anthropic", description="LLM提供商: anthropic, openai, deepseek")
    model_name: Optional[str] = Field(default=None, description="模型名称(不填则使用默认)")
    base_url: Optional[str] = Field(default=None, description="兼容接口地址 (如 Kimi / 自建网关)")
    temperature: float = Field(default=0.3, description="生成温度")
    max_tokens: int = Field(default=2000, description="最大生成token数")

    # API Keys
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API Key")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API Key")

    class Config:
        env_prefix = "LLM_"


class TranslatorSettings(BaseSettings):
    """翻译流水线配置"""
    input_char_limit: int = Field(default=3000, description="单次翻译输入的最大字符数 (超出部分不发送)")
    summary_char_limit: int = Field(default=2000, description="摘要输入的最大字符数")
    max_replies: int = Field(default=10, description="每个帖子最多翻译的回复数")
    call_delay: float = Field(default=0.5, description="标题/正文调用之后的间隔(秒)")
    reply_delay: float = Field(default=0.3, description="回复调用之间的间隔(秒)")
    request_timeout: float = Field(default=120.0, description="单次调用超时(秒)")
    max_attempts: int = Field(default=1, description="单次调用最多尝试次数 (1 = 不重试)")
    persist_each: bool = Field(default=True, description="每翻译完一个帖子就写入索引")
    reconcile_artifacts: bool = Field(default=True, description="启动时用已有译文文件补全索引")

    class Config:
        env_prefix = "TRANSLATOR_"


class StorageSettings(BaseSettings):
    """存储配置"""
    data_dir: str = Field(default="./data", description="候选列表所在目录")
    translations_dir: str = Field(default="./translations", description="译文输出目录")
    index_filename: str = Field(default="_index.json", description="翻译索引文件名")
    candidate_prefix: str = Field(default="filtered_posts_", description="候选列表文件名前缀")

    class Config:
        env_prefix = "STORAGE_"


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    reddit: RedditSettings = Field(default_factory=RedditSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    translator: TranslatorSettings = Field(default_factory=TranslatorSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            # 默认查找 config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            reddit=RedditSettings(),
            llm=LLMSettings(),
            translator=TranslatorSettings(),
            storage=StorageSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


# 便捷访问
def get_reddit_settings() -> RedditSettings:
    return get_settings().reddit


def get_llm_settings() -> LLMSettings:
    return get_settings().llm


def get_translator_settings() -> TranslatorSettings:
    return get_settings().translator


def get_storage_settings() -> StorageSettings:
    return get_settings().storage
