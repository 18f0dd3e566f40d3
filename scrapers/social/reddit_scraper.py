"""
Reddit Scraper
通过 Reddit 公开 JSON 接口获取帖子详情和楼主回复
"""
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from scrapers.base import RateLimitedScraper
from models import Reply, SourceItem, extract_id_from_url
from config import RedditSettings, get_settings
from utils.exceptions import ScraperError


logger = logging.getLogger(__name__)

DELETED_AUTHOR = "[deleted]"


def _listing_children(listing: Any) -> List[Dict[str, Any]]:
    if not isinstance(listing, dict):
        return []
    return list((listing.get("data") or {}).get("children") or [])


def walk_comments(children: List[Dict[str, Any]], depth: int = 0) -> Iterator[Tuple[int, Dict[str, Any]]]:
    """深度优先遍历评论树, 产出 (depth, comment_data); 跳过 'more' 占位节点"""
    for child in children:
        if child.get("kind") != "t1":
            continue
        data = child.get("data") or {}
        yield depth, data
        yield from walk_comments(_listing_children(data.get("replies")), depth + 1)


class RedditScraper(RateLimitedScraper[SourceItem]):
    """
    Reddit 抓取器

    只负责把一个候选帖子变成 SourceItem; 帖子筛选在上游完成。
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, settings: Optional[RedditSettings] = None):
        settings = settings or get_settings().reddit
        super().__init__(requests_per_second=settings.requests_per_second)
        self._reddit_settings = settings
        self._session = client

    @property
    def name(self) -> str:
        return "Reddit"

    def _get_session(self) -> httpx.AsyncClient:
        """获取或创建 HTTP 会话"""
        if self._session is None:
            self._session = httpx.AsyncClient(
                base_url=self._reddit_settings.base_url,
                headers={"User-Agent": self._reddit_settings.user_agent},
                timeout=httpx.Timeout(30.0),
                follow_redirects=True,
            )
        return self._session

    def _detail_path(self, post_id: str, permalink: Optional[str]) -> str:
        path = str(permalink or "").strip()
        if path.startswith("http"):
            path = httpx.URL(path).path
        if not path:
            path = f"/comments/{post_id}"
        return path.rstrip("/") + ".json"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get_json(self, path: str) -> Any:
        await self._wait_for_rate_limit()
        response = await self._get_session().get(
            path,
            params={"limit": self._reddit_settings.comment_limit, "raw_json": 1},
        )
        response.raise_for_status()
        return response.json()

    async def fetch_post_detail(self, post_id: str, permalink: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        获取帖子详情

        Returns:
            {"post": 帖子数据, "replies": 评论树} ; 失败返回 None
        """
        try:
            payload = await self._get_json(self._detail_path(post_id, permalink))
        except (httpx.HTTPError, ValueError) as exc:
            self._log_error(f"Failed to fetch post {post_id}", exc)
            return None

        if not isinstance(payload, list) or not payload:
            self._log_error(f"Unexpected payload for post {post_id}", ScraperError("not a listing pair", source="reddit"))
            return None

        posts = _listing_children(payload[0])
        if not posts:
            return None

        return {
            "post": posts[0].get("data") or {},
            "replies": _listing_children(payload[1]) if len(payload) > 1 else [],
        }

    def summarize_author_content(self, detail: Dict[str, Any]) -> SourceItem:
        """把帖子详情整理成 SourceItem, 只保留楼主本人的回复"""
        post = detail.get("post") or {}
        author = post.get("author") or DELETED_AUTHOR
        permalink = str(post.get("permalink") or "")
        url = permalink if permalink.startswith("http") else f"https://www.reddit.com{permalink}" if permalink else ""

        replies: List[Reply] = []
        for position, (depth, comment) in enumerate(walk_comments(detail.get("replies") or [])):
            if author == DELETED_AUTHOR or comment.get("author") != author:
                continue
            body = str(comment.get("body") or "").strip()
            if not body or body in ("[deleted]", "[removed]"):
                continue
            replies.append(
                Reply(
                    index=position,
                    content=body,
                    score=int(comment.get("score") or 0),
                    depth=depth,
                )
            )

        return SourceItem(
            id=str(post.get("id") or extract_id_from_url(url)),
            title=str(post.get("title") or ""),
            author=author,
            url=url,
            created=post.get("created_utc"),
            body=str(post.get("selftext") or "") or None,
            replies=replies,
        )

    async def get_details(self, post_id: str, permalink: Optional[str] = None) -> Optional[SourceItem]:
        detail = await self.fetch_post_detail(post_id, permalink)
        if not detail:
            return None
        return self.summarize_author_content(detail)
