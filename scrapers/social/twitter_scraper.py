"""
Twitter/X Scraper
按话题标签搜索带图片的推文
"""
from typing import List, Optional
import logging

from config import Settings
from models import SocialPost, SourceType
from scrapers.base import RateLimitedScraper
from utils.exceptions import ScraperError


logger = logging.getLogger(__name__)

# Twitter API v2 recent search 的 max_results 取值范围
MIN_SEARCH_RESULTS = 10
MAX_SEARCH_RESULTS = 100


class TwitterScraper(RateLimitedScraper[SocialPost]):
    """
    Twitter/X 抓取器
    使用 Twitter API v2 (需要 Bearer Token)

    search 先做 recent search，再逐条查询媒体信息，只保留带图片的推文。
    """

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(requests_per_second=0.5, settings=settings)  # Twitter API 有严格限制
        self._twitter_settings = self.settings.twitter
        self._client = None

    @property
    def source_type(self) -> SourceType:
        return SourceType.TWITTER

    @property
    def name(self) -> str:
        return "Twitter/X"

    def is_configured(self) -> bool:
        return bool(self._twitter_settings.bearer_token)

    def _get_client(self):
        """获取 Twitter 客户端"""
        if self._client is None:
            import tweepy
            self._client = tweepy.Client(
                bearer_token=self._twitter_settings.bearer_token,
                wait_on_rate_limit=True,
            )
        return self._client

    async def search(
        self,
        query: str,
        max_results: Optional[int] = None,
    ) -> List[SocialPost]:
        """
        搜索带图片的推文

        Args:
            query: 搜索关键词 (如 "#legodiver")
            max_results: 最大返回结果数 (Twitter API 限制 10-100)

        Returns:
            推文列表，保持 API 返回顺序
        """
        if not self.is_configured():
            logger.warning("[Twitter] API not configured, skipping...")
            return []

        if max_results is None:
            max_results = self._twitter_settings.max_results
        max_results = max(MIN_SEARCH_RESULTS, min(int(max_results), MAX_SEARCH_RESULTS))

        logger.info(f"[Twitter] Searching: {query}")

        await self._wait_for_rate_limit()
        try:
            tweets = await self._run_blocking(self._sync_search, query, max_results)
        except Exception as e:
            self._log_error(f"Search failed for '{query}'", e)
            raise ScraperError(f"Twitter search failed for '{query}': {e}", source="twitter") from e

        posts: List[SocialPost] = []
        for tweet in tweets:
            post = await self.get_details(str(tweet.id))
            if post is not None and post.image_url:
                posts.append(post)

        self._log_search(query, len(posts))
        return posts

    def _sync_search(self, query: str, max_results: int) -> list:
        """同步搜索"""
        client = self._get_client()

        response = client.search_recent_tweets(
            query=f"{query} -is:retweet",
            max_results=max_results,
        )
        return list(response.data or [])

    async def get_details(self, tweet_id: str) -> Optional[SocialPost]:
        """
        获取单条推文详情 (含媒体链接)

        Args:
            tweet_id: 推文ID

        Returns:
            推文详情，不存在时返回 None
        """
        if not self.is_configured():
            return None

        await self._wait_for_rate_limit()
        try:
            response = await self._run_blocking(self._sync_get_tweet, tweet_id)
        except Exception as e:
            self._log_error(f"Failed to get tweet {tweet_id}", e)
            raise ScraperError(f"Twitter lookup failed for {tweet_id}: {e}", source="twitter") from e

        if response is None or not response.data:
            return None
        return self._convert_to_post(response.data, self._image_url(response))

    def _sync_get_tweet(self, tweet_id: str):
        """同步获取推文"""
        client = self._get_client()

        return client.get_tweet(
            tweet_id,
            tweet_fields=["created_at", "author_id"],
            media_fields=["url", "type"],
            expansions=["attachments.media_keys"],
        )

    @staticmethod
    def _image_url(response) -> Optional[str]:
        """第一张带 url 的媒体"""
        includes = response.includes or {}
        for media in includes.get("media") or []:
            url = getattr(media, "url", None)
            if url:
                return str(url)
        return None

    def _convert_to_post(self, tweet, image_url: Optional[str]) -> SocialPost:
        """将 Tweet 转换为 SocialPost"""
        return SocialPost(
            id=str(tweet.id),
            content=tweet.text,
            author=str(getattr(tweet, "author_id", None) or "Unknown"),
            created_at=getattr(tweet, "created_at", None),
            url=f"https://twitter.com/i/web/status/{tweet.id}",
            image_url=image_url,
            source=SourceType.TWITTER,
        )


# 便捷函数
async def search_twitter(query: str, max_results: Optional[int] = None) -> List[SocialPost]:
    """便捷函数：搜索 Twitter"""
    async with TwitterScraper() as scraper:
        return await scraper.search(query, max_results)
