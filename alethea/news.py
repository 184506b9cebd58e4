import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from .config import settings
from .errors import NewsFetchError, NoArticlesFound
from .models import ArticleRecord, Category

logger = logging.getLogger(__name__)

UNTITLED = "Sem título"
UNKNOWN_SOURCE = "Fonte desconhecida"
UNKNOWN_TIME = "Horário desconhecido"
NO_CONTENT = "Clique para ver detalhes"
PLACEHOLDER_IMAGE = "assets/images/placeholder.jpg"

TIME_FORMAT = "%H:%M - %d/%m/%Y"


def fetch_top_news(category: Category = Category.GENERAL, country: Optional[str] = None) -> List[ArticleRecord]:
    """Fetch one page of top headlines for a category.

    An empty page for any category other than general is retried once
    with general; an empty general page raises NoArticlesFound.
    """
    category = Category(category)
    country = country or settings.NEWS_COUNTRY
    logger.debug("Fetching news for %s in %s", category.value, country)

    params = {
        "country": country,
        "category": category.value,
        "apiKey": settings.NEWS_API_KEY,
        "pageSize": settings.NEWS_PAGE_SIZE,
        "language": settings.NEWS_LANGUAGE,
    }
    try:
        resp = requests.get(f"{settings.NEWS_API_URL}top-headlines", params=params, timeout=settings.HTTP_TIMEOUT)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        logger.error("News API request failed: %s", e)
        raise NewsFetchError(f"News API error: {e}") from e
    except ValueError as e:
        logger.error("News API returned invalid JSON: %s", e)
        raise NewsFetchError("News API returned an unreadable response") from e

    if data.get("status") != "ok":
        message = data.get("message") or data.get("code") or "unknown error"
        logger.error("News API error response: %s", data)
        raise NewsFetchError(f"News API error: {message}")

    raw_articles = data.get("articles") or []
    logger.info("Received %d articles", len(raw_articles))

    if not raw_articles:
        if category is not Category.GENERAL:
            logger.warning("No articles found for %s - trying without category filter", category.value)
            return fetch_top_news(Category.GENERAL, country=country)
        raise NoArticlesFound("No news found")

    return [normalize_article(a, category) for a in raw_articles]


def normalize_article(raw: Dict[str, Any], category: Category = Category.GENERAL) -> ArticleRecord:
    source = raw.get("source") or {}
    published_at = parse_published_at(raw.get("publishedAt"))
    return ArticleRecord(
        title=raw.get("title") or UNTITLED,
        source=source.get("name") or UNKNOWN_SOURCE,
        published_at=published_at,
        time=published_at.strftime(TIME_FORMAT) if published_at else UNKNOWN_TIME,
        content=raw.get("description") or NO_CONTENT,
        image=raw.get("urlToImage") or PLACEHOLDER_IMAGE,
        url=raw.get("url") or "",
        category=category,
        tag=category.tag,
    )


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        # fromisoformat only accepts a trailing "Z" from 3.11 on
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Failed to parse date: %s", value)
        return None
