"""ニュースフィードエンドポイント"""
import time
from fastapi import APIRouter

from ..schemas import NewsOut
from ..services.feed import fetch_news, FeedResult

router = APIRouter(prefix="/api/v1", tags=["news"])

# リモート結果は5分、フォールバックは30秒キャッシュ
_cache = {}
CACHE_TTL = 300          # 5分
FALLBACK_CACHE_TTL = 30  # 30秒


def _ttl(result: FeedResult) -> int:
    return CACHE_TTL if result.source == "remote" else FALLBACK_CACHE_TTL


def _cached_news() -> FeedResult:
    now = time.time()
    if "news" in _cache:
        result, fetched_at = _cache["news"]
        if now - fetched_at < _ttl(result):
            return result
    result = fetch_news()
    _cache["news"] = (result, now)
    return result


@router.get("/news", response_model=NewsOut)
def news_feed():
    return _cached_news().to_dict()
