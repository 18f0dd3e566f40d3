"""
Data Models / Schemas
定义翻译流水线的统一数据结构
"""
import re
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


_COMMENTS_ID_RE = re.compile(r"comments/(\w+)")

Timestamp = Union[float, int, str, None]


def extract_id_from_url(url: Optional[str]) -> str:
    """从 Reddit 链接中提取帖子ID, 提取不到返回 'unknown'"""
    match = _COMMENTS_ID_RE.search(str(url or ""))
    return match.group(1) if match else "unknown"


class Reply(BaseModel):
    """原帖中的一条回复"""
    index: int = Field(..., description="在原帖回复序列中的位置")
    content: str = Field(default="", description="回复内容")
    score: int = Field(default=0, description="得分")
    depth: int = Field(default=0, description="嵌套层级")


class SourceItem(BaseModel):
    """待翻译的讨论帖"""
    id: str = Field(..., description="帖子ID (缺失时从链接推导)")
    title: str = Field(default="", description="标题")
    author: Optional[str] = Field(None, description="作者")
    url: str = Field(default="", description="帖子链接")
    created: Timestamp = Field(None, description="发布时间 (原样保留)")
    body: Optional[str] = Field(None, description="正文")
    replies: List[Reply] = Field(default_factory=list, description="作者回复, 原始顺序")

    @model_validator(mode="before")
    @classmethod
    def _derive_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("id") or "").strip():
            data = dict(data)
            data["id"] = extract_id_from_url(data.get("url"))
        return data


class TranslatedReply(BaseModel):
    """翻译后的回复, 只替换内容"""
    index: int
    content_zh: str = ""
    score: int = 0
    depth: int = 0


class OriginalContent(BaseModel):
    """原文副本 (审计用)"""
    post_body: Optional[str] = None
    op_replies: List[Reply] = Field(default_factory=list)


class TranslatedContent(BaseModel):
    """译文"""
    post_body_zh: str = ""
    op_replies_zh: List[TranslatedReply] = Field(default_factory=list)


class TranslationResult(BaseModel):
    """单个帖子的翻译结果, 创建后不再修改"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    title_zh: str = Field(..., description="规范化后的中文标题")
    author: Optional[str] = None
    reddit_url: str = ""
    created: Timestamp = None
    original: OriginalContent = Field(default_factory=OriginalContent)
    translation: TranslatedContent = Field(default_factory=TranslatedContent)
    summary_zh: str = ""
    translated_at: str = Field(..., description="翻译时间 (ISO-8601)")


class LedgerEntry(BaseModel):
    """翻译索引中的一条记录"""
    id: str
    title: str = ""
    title_zh: str = ""
    author: Optional[str] = None
    reddit_url: str = ""
    translated_at: str = ""
    file: str = ""


class LedgerIndex(BaseModel):
    """持久化的翻译索引 (_index.json)"""
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    total: int = 0
    posts: List[LedgerEntry] = Field(default_factory=list)


class Candidate(BaseModel):
    """筛选步骤产出的候选帖子"""
    model_config = ConfigDict(extra="allow")

    id: str
    permalink: str = ""


class CandidateList(BaseModel):
    """候选列表文件 (filtered_posts_*.json)"""
    model_config = ConfigDict(extra="allow")

    qualified: List[Candidate] = Field(default_factory=list)
