# alethea/main.py
import logging
from typing import List

import uvicorn
from fastapi import FastAPI, Body, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .errors import ArticleNotFound, NewsFetchError, NoArticlesFound, VerificationInProgress
from .models import ArticleIn, ArticleRecord, Category, NewsOut, VerificationVerdict
from .news import fetch_top_news
from .store import NewsFeed, get_feed
from .verifier import verify

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Alethea News Verification Backend")

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Routes ---

@app.get("/health")
def health():
    return {
        "ok": True,
        "news_api": bool(settings.NEWS_API_KEY),
        "fact_check_api": bool(settings.GOOGLE_FACT_CHECK_API_KEY),
    }


@app.get("/news", response_model=NewsOut)
def load_news(category: Category = Category.GENERAL, feed: NewsFeed = Depends(get_feed)):
    try:
        articles = fetch_top_news(category)
    except NoArticlesFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NewsFetchError as e:
        logger.error("Load news error: %s", e)
        raise HTTPException(status_code=502, detail=str(e))

    feed.replace(articles, category)
    return {"category": category, "articles": articles}


@app.get("/news/search", response_model=List[ArticleRecord])
def search_news(q: str = Query(""), feed: NewsFeed = Depends(get_feed)):
    return feed.search(q)


@app.get("/news/{article_id}", response_model=ArticleRecord)
def get_article(article_id: str, feed: NewsFeed = Depends(get_feed)):
    article = feed.get(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail=f"No article with id {article_id}")
    return article


@app.post("/news/{article_id}/verify", response_model=ArticleRecord)
def verify_article(article_id: str, feed: NewsFeed = Depends(get_feed)):
    """
    Run the verification engine on one article of the current feed:
    - the article is marked pending while the engine runs
    - the verdict is applied only if the feed still holds the same article
    - articles that are already confirmed are returned untouched
    """
    try:
        article = feed.begin_verification(article_id)
    except ArticleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VerificationInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))

    if article.is_confirmed:
        return article

    try:
        verdict = verify(article)
    except Exception as e:
        logger.exception("Verify news error for %s", article_id)
        feed.fail_verification(article)
        raise HTTPException(status_code=500, detail=f"Verification error: {e}")

    if not feed.complete_verification(article, verdict):
        raise HTTPException(status_code=409, detail="The news list changed while this article was being verified")
    return article


@app.post("/verify", response_model=VerificationVerdict)
def verify_adhoc(payload: ArticleIn = Body(...)):
    return verify(payload.to_record())


def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
