"""ニュースフィード取得

リモートのJSON配列を取得する。失敗時は例外を投げず、
組み込みの記事一覧を source="fallback" として返す。
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import NEWS_FEED_URL, NEWS_RETRIES, NEWS_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Article:
    title: str
    summary: str
    source: str
    date: str
    icon: str = "newspaper.fill"


@dataclass
class FeedResult:
    articles: List[Article] = field(default_factory=list)
    source: str = "remote"  # "remote" / "fallback"
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "articles": [asdict(a) for a in self.articles],
            "source": self.source,
            "error": self.error,
        }


FALLBACK_ARTICLES = [
    Article(
        title="City Council Approves New Budget",
        summary="The city council has approved a new budget for the upcoming fiscal year "
                "with increased funding for education and infrastructure.",
        source="Local News",
        date="April 5, 2023",
        icon="building.columns.fill",
    ),
    Article(
        title="Election Day Polling Locations Announced",
        summary="The election commission has released the list of polling locations for the "
                "upcoming election. Check if your polling place has changed.",
        source="Election Commission",
        date="April 3, 2023",
        icon="mappin.circle.fill",
    ),
    Article(
        title="Candidate Smith Unveils Education Plan",
        summary="Mayoral candidate Jane Smith has unveiled her comprehensive education plan "
                "focusing on teacher retention and school infrastructure.",
        source="Campaign News",
        date="April 1, 2023",
        icon="book.fill",
    ),
    Article(
        title="Voter Registration Deadline Approaching",
        summary="The deadline to register to vote in the upcoming election is April 15. "
                "Make sure you're registered to have your voice heard.",
        source="Voter Information",
        date="March 28, 2023",
        icon="calendar.badge.exclamationmark",
    ),
]


def build_session(retries: int = NEWS_RETRIES) -> requests.Session:
    session = requests.Session()
    retry_strategy = Retry(
        total=retries,
        backoff_factor=0.5,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"Accept": "application/json"})
    return session


def parse_articles(payload) -> List[Article]:
    """JSON配列→Article。必須項目（title）が無い要素は捨てる"""
    if isinstance(payload, dict):
        payload = payload.get("articles")
    if not isinstance(payload, list):
        raise ValueError("news feed must be a JSON array of articles")

    articles = []
    for item in payload:
        if not isinstance(item, dict) or not item.get("title"):
            logger.debug(f"News: skipping malformed item {item!r}")
            continue
        articles.append(Article(
            title=str(item["title"]),
            summary=str(item.get("summary") or ""),
            source=str(item.get("source") or ""),
            date=str(item.get("date") or ""),
            icon=str(item.get("icon") or "newspaper.fill"),
        ))
    return articles


def _fallback(error: Optional[str]) -> FeedResult:
    return FeedResult(articles=list(FALLBACK_ARTICLES), source="fallback", error=error)


def fetch_news(
    url: Optional[str] = None,
    timeout: float = NEWS_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> FeedResult:
    """ニュース取得。URL未設定・通信失敗・不正JSONのときはフォールバック"""
    url = url if url is not None else NEWS_FEED_URL
    if not url:
        return _fallback(None)

    # 渡されたセッションは呼び出し側が閉じる。自前で作ったものはここで閉じる
    owned = session is None
    if owned:
        session = build_session()
    try:
        r = session.get(url, timeout=timeout)
        r.raise_for_status()
        articles = parse_articles(r.json())
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"News feed fetch failed, using fallback: {e}")
        return _fallback(str(e))
    finally:
        if owned:
            session.close()

    logger.info(f"News: fetched {len(articles)} articles from {url}")
    return FeedResult(articles=articles, source="remote")
