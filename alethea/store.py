# alethea/store.py
import logging
import threading
from typing import Dict, List, Optional

from .errors import ArticleNotFound, VerificationInProgress
from .models import ArticleRecord, Category, VerificationState, VerificationVerdict

logger = logging.getLogger(__name__)

_FEED = None


class NewsFeed:
    """In-memory headline list for the current session.

    The article mapping is swapped wholesale on every load and never
    mutated in place, so readers holding the old mapping keep a
    consistent view while a new page comes in.
    """

    def __init__(self):
        self.category: Category = Category.GENERAL
        self._articles: Dict[str, ArticleRecord] = {}
        self._lock = threading.Lock()

    def replace(self, articles: List[ArticleRecord], category: Category = Category.GENERAL) -> None:
        self._articles = {a.id: a for a in articles}
        self.category = category

    def articles(self) -> List[ArticleRecord]:
        return list(self._articles.values())

    def get(self, article_id: str) -> Optional[ArticleRecord]:
        return self._articles.get(article_id)

    def search(self, query: str) -> List[ArticleRecord]:
        q = (query or "").strip().lower()
        if not q:
            return self.articles()
        return [
            a for a in self._articles.values()
            if q in a.title.lower() or q in (a.content or "").lower()
        ]

    def begin_verification(self, article_id: str) -> ArticleRecord:
        article = self.get(article_id)
        if article is None:
            raise ArticleNotFound(f"No article with id {article_id}")
        # request threads race on the same record; check and mark together
        with self._lock:
            if article.verification is VerificationState.PENDING:
                raise VerificationInProgress(f"Article {article_id} is already being verified")
            if not article.is_confirmed:
                article.mark_pending()
        return article

    def complete_verification(self, article: ArticleRecord, verdict: VerificationVerdict) -> bool:
        """Apply a verdict unless the article was replaced while it was verified."""
        if self._articles.get(article.id) is not article:
            logger.warning("Discarding stale verdict for article %s", article.id)
            return False
        with self._lock:
            article.apply_verdict(verdict)
        return True

    def fail_verification(self, article: ArticleRecord) -> None:
        with self._lock:
            article.reset_verification()


def get_feed() -> NewsFeed:
    global _FEED
    if _FEED is None:
        _FEED = NewsFeed()
    return _FEED
